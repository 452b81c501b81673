import copy
from typing import Any, Callable, Dict, List, Optional

import pytest

from kcas._cogs.clients.errors import ConflictError, NotFoundError


class RecordStore:
    """
    A scripted store of one flat versioned record, e.g. ``{'id': ..., 'version': 1}``.

    The concurrent writers are simulated with ``interferences``: one callback
    is taken and applied to the stored record before every write (while any left),
    and the record's version is bumped -- so that the write conflicts.
    """

    def __init__(self, record: Optional[Dict[str, Any]]) -> None:
        super().__init__()
        self.record = record
        self.interferences: List[Callable[[Dict[str, Any]], None]] = []
        self.get_error: Optional[BaseException] = None
        self.write_error: Optional[BaseException] = None
        self.gets: List[str] = []
        self.writes: List[Dict[str, Any]] = []

    async def get(self, identity: str) -> Dict[str, Any]:
        self.gets.append(identity)
        if self.get_error is not None:
            raise self.get_error
        if self.record is None or self.record['id'] != identity:
            raise NotFoundError(identity)
        return copy.deepcopy(self.record)

    async def write(self, body: Dict[str, Any]) -> Dict[str, Any]:
        self.writes.append(copy.deepcopy(body))
        if self.interferences and self.record is not None:
            interference = self.interferences.pop(0)
            interference(self.record)
            self.record['version'] += 1
        if self.write_error is not None:
            raise self.write_error
        if self.record is None:
            raise NotFoundError(body['id'])
        if body['version'] != self.record['version']:
            raise ConflictError(body['id'])
        self.record = dict(copy.deepcopy(body), version=body['version'] + 1)
        return copy.deepcopy(self.record)


@pytest.fixture()
def record():
    return {'id': 'rs-1', 'version': 1, 'replicas': 3}


@pytest.fixture()
def store(record):
    return RecordStore(copy.deepcopy(record))


@pytest.fixture()
def settings(settings):
    settings.updating.poll_interval = 0
    return settings
