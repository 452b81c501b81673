import collections
import dataclasses
import json
import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Tuple, Union

import aiohttp.web
import pytest

from kcas._cogs.clients.auth import APIContext
from kcas._cogs.configs.configuration import Settings
from kcas._cogs.structs.credentials import ConnectionInfo
from kcas._cogs.structs.references import Resource


@pytest.fixture(params=[True, False], ids=['namespaced', 'cluster'])
def resource(request):
    """ The resource used in the tests. Usually mocked, so it does not matter. """
    return Resource('kcas.dev', 'v1', 'kcasexamples', kind='KcasExample', namespaced=request.param)


@pytest.fixture()
def namespaced_resource():
    return Resource('kcas.dev', 'v1', 'kcasexamples', kind='KcasExample', namespaced=True)


@pytest.fixture()
def namespace(resource):
    return 'ns' if resource.namespaced else None


@pytest.fixture()
def settings():
    return Settings()


@pytest.fixture()
def logger():
    return logging.getLogger('kcas.test')


#
# A fake K8s API server. No external calls must be made under any circumstances.
# The unit-tests must be fully isolated from the environment.
#

@dataclasses.dataclass(frozen=True)
class ServedRequest:
    method: str
    path: str
    query: Mapping[str, str]
    headers: Mapping[str, str]
    data: Any


Responder = Union[Tuple[Any, int], Callable[[ServedRequest], Tuple[Any, int]]]


class FakeAPI:
    """
    A registry of server-side responses for the fake API server.

    Responses are registered per HTTP method & path (without the query).
    Several responses for the same route are served in order; the last one
    is served for all the requests after that. A response is either
    a pre-defined tuple of a JSON-serializable payload & HTTP status,
    or a callback that returns such a tuple for the served request.

    All served requests are remembered for the later assertions,
    with the request's payload parsed (as JSON if possible, as text if not).

    Sample usage::

        def test_me(fake_api):
            fake_api.add('get', '/path', {'a': 'b'})
            fake_api.add('put', '/path', {'kind': 'Status', 'code': 409}, status=409)
            do_something()
            assert len(fake_api.requests) == 2
    """

    def __init__(self) -> None:
        super().__init__()
        self.responders: Dict[Tuple[str, str], List[Responder]] = collections.defaultdict(list)
        self.requests: List[ServedRequest] = []

    def add(self, method: str, url: str, payload: Any = None, *, status: int = 200) -> None:
        path = url.split('?', 1)[0]
        responder = payload if callable(payload) else (payload, status)
        self.responders[method.upper(), path].append(responder)

    def filter(self, method: str, url: str) -> List[ServedRequest]:
        return [r for r in self.requests if r.method == method.upper() and r.path == url]

    async def serve(self, request: aiohttp.web.Request) -> aiohttp.web.StreamResponse:
        text = await request.text()
        try:
            data = json.loads(text) if text else None
        except json.JSONDecodeError:
            data = text
        served = ServedRequest(
            method=request.method,
            path=request.path,
            query=dict(request.query),
            headers=dict(request.headers),
            data=data,
        )
        self.requests.append(served)

        responders = self.responders.get((request.method, request.path))
        if not responders:
            return aiohttp.web.Response(status=501, text=f"Not mocked: {request.method} {request.path}")

        responder = responders.pop(0) if len(responders) > 1 else responders[0]
        payload, status = responder(served) if callable(responder) else responder
        if isinstance(payload, (bytes, str)):
            return aiohttp.web.Response(body=payload, status=status)
        else:
            return aiohttp.web.json_response(payload, status=status)


@pytest.fixture()
def fake_api():
    return FakeAPI()


@pytest.fixture()
async def fake_server(aiohttp_server, fake_api):
    app = aiohttp.web.Application()
    app.router.add_route('*', '/{tail:.*}', fake_api.serve)
    return await aiohttp_server(app)


@pytest.fixture()
def hostname(fake_server):
    return f'{fake_server.host}:{fake_server.port}'


@pytest.fixture()
async def context(hostname):
    """ A fresh API context for every test, pointed to the fake API server. """
    info = ConnectionInfo(server=f'http://{hostname}', default_namespace='default-ns')
    async with APIContext(info) as context:
        yield context


#
# Helpers for the logging checks.
#

@pytest.fixture()
def assert_logs(caplog):
    """
    A function to assert the logs are present (by pattern).

    The listed message patterns MUST be present, in the order specified.
    Some other log messages can also be present, but they are ignored.
    """
    caplog.set_level(logging.DEBUG)

    def assert_logs_fn(patterns, prohibited=[], strict=False):
        __traceback_hide__ = True
        remaining_patterns = list(patterns)
        for message in caplog.messages:
            # The expected pattern is at position 0.
            # Looking-ahead: if one of the following patterns matches, while the
            # 0th does not, then the log message is missing, and we fail the test.
            for idx, pattern in enumerate(remaining_patterns):
                m = re.search(pattern, message)
                if m:
                    if idx == 0:
                        remaining_patterns[:1] = []
                        break  # out of `remaining_patterns` cycle
                    else:
                        skipped_patterns = remaining_patterns[:idx]
                        raise AssertionError(f"Few patterns were skipped: {skipped_patterns!r}")
                elif strict:
                    raise AssertionError(f"Unexpected log message: {message!r}")

            # Check that the prohibited patterns do not appear in any message.
            for pattern in prohibited:
                m = re.search(pattern, message)
                if m:
                    raise AssertionError(f"Prohibited log pattern found: {message!r} ~ {pattern!r}")

        # If all patterns have been matched in order, we are done.
        # if some are left, but the messages are over, then we fail.
        if remaining_patterns:
            raise AssertionError(f"Few patterns were missed: {remaining_patterns!r}")

    return assert_logs_fn
