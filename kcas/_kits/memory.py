import copy
import itertools
from typing import Callable, Dict, Iterable, Iterator, Optional

from kcas._cogs.clients import errors
from kcas._cogs.structs import bodies, references


class MemoryStore:
    """
    An in-memory versioned store of K8s-like objects, for tests and dry-runs.

    It behaves the same way as K8s API does for the object replacements:
    every write must carry the ``metadata.resourceVersion`` as fetched,
    and every successful write assigns a new one. The bodies are copied
    on the way in and out, so the callers never share them with the store.

    The concurrent actors can be simulated with `modify`, which changes
    the stored object out of band (as if someone else has updated it)::

        store = MemoryStore([{'metadata': {'name': 'rs-1', 'namespace': 'ns'}}])
        store.modify(Identity('rs-1', 'ns'), lambda body: body.setdefault('spec', {}))
    """

    def __init__(self, objects: Iterable[bodies.RawBody] = ()) -> None:
        super().__init__()
        self._objects: Dict[references.Identity, bodies.RawBody] = {}
        self._versions: Iterator[int] = itertools.count(1)
        for body in objects:
            self.create(body)

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, identity: object) -> bool:
        return identity in self._objects

    def create(self, body: bodies.RawBody) -> bodies.RawBody:
        identity = bodies.build_identity(body)
        if identity in self._objects:
            raise errors.ConflictError(f"The object already exists: {identity}")
        return self._store(identity, body)

    def delete(self, identity: references.Identity) -> None:
        try:
            del self._objects[identity]
        except KeyError:
            raise errors.NotFoundError(f"The object is not found: {identity}") from None

    def peek(self, identity: references.Identity) -> Optional[bodies.RawBody]:
        body = self._objects.get(identity)
        return copy.deepcopy(body) if body is not None else None

    def modify(
            self,
            identity: references.Identity,
            fn: Callable[[bodies.RawBody], None],
    ) -> bodies.RawBody:
        """ Change the object out of band, as if by another actor; bump its version. """
        if identity not in self._objects:
            raise errors.NotFoundError(f"The object is not found: {identity}")
        body = copy.deepcopy(self._objects[identity])
        fn(body)
        return self._store(identity, body)

    async def get(self, identity: references.Identity) -> bodies.RawBody:
        if identity not in self._objects:
            raise errors.NotFoundError(f"The object is not found: {identity}")
        return copy.deepcopy(self._objects[identity])

    async def write(self, body: bodies.RawBody) -> bodies.RawBody:
        identity = bodies.build_identity(body)
        if identity not in self._objects:
            raise errors.NotFoundError(f"The object is not found: {identity}")
        stored_version = bodies.get_resource_version(self._objects[identity])
        written_version = bodies.get_resource_version(body)
        if written_version != stored_version:
            raise errors.ConflictError(f"The object has been modified: {identity} "
                                       f"has version {stored_version}, not {written_version}")
        return self._store(identity, body)

    def _store(self, identity: references.Identity, body: bodies.RawBody) -> bodies.RawBody:
        stored = copy.deepcopy(body)
        stored.setdefault('metadata', {})['resourceVersion'] = str(next(self._versions))
        self._objects[identity] = stored
        return copy.deepcopy(stored)
