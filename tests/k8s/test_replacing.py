import pytest

from kcas._cogs.clients.errors import APIConflictError, APIForbiddenError, APINotFoundError, \
                                      ConflictError, NotFoundError
from kcas._cogs.clients.replacing import replace_obj


@pytest.fixture()
def body():
    return {'metadata': {'name': 'name1', 'resourceVersion': '123'}, 'spec': {'x': 'y'}}


def bump_version(served):
    metadata = dict(served.data['metadata'], resourceVersion='124')
    return dict(served.data, metadata=metadata), 200


async def test_replacing_sends_the_whole_body(
        context, fake_api, resource, namespace, settings, logger, body):
    url = resource.get_url(namespace=namespace, name='name1')
    fake_api.add('put', url, bump_version)

    replaced = await replace_obj(resource=resource, namespace=namespace, name='name1', body=body,
                                 context=context, settings=settings, logger=logger)

    assert replaced == {'metadata': {'name': 'name1', 'resourceVersion': '124'}, 'spec': {'x': 'y'}}
    assert len(fake_api.requests) == 1
    assert fake_api.requests[0].method == 'PUT'
    assert fake_api.requests[0].path == url
    assert fake_api.requests[0].data == body
    assert fake_api.requests[0].headers['Content-Type'].startswith('application/json')


async def test_replacing_does_not_modify_the_body(
        context, fake_api, resource, namespace, settings, logger, body):
    fake_api.add('put', resource.get_url(namespace=namespace, name='name1'), bump_version)

    await replace_obj(resource=resource, namespace=namespace, name='name1', body=body,
                      context=context, settings=settings, logger=logger)

    assert body['metadata']['resourceVersion'] == '123'


async def test_replacing_requires_a_resource_version(
        context, fake_api, resource, namespace, settings, logger):
    body = {'metadata': {'name': 'name1'}}

    with pytest.raises(ValueError, match=r"resourceVersion"):
        await replace_obj(resource=resource, namespace=namespace, name='name1', body=body,
                          context=context, settings=settings, logger=logger)

    assert not fake_api.requests


async def test_conflicts(context, fake_api, resource, namespace, settings, logger, body):
    url = resource.get_url(namespace=namespace, name='name1')
    fake_api.add('put', url, {'kind': 'Status', 'code': 409, 'reason': 'Conflict'}, status=409)

    with pytest.raises(APIConflictError) as err:
        await replace_obj(resource=resource, namespace=namespace, name='name1', body=body,
                          context=context, settings=settings, logger=logger)

    assert isinstance(err.value, ConflictError)
    assert err.value.status == 409


async def test_absence(context, fake_api, resource, namespace, settings, logger, body):
    url = resource.get_url(namespace=namespace, name='name1')
    fake_api.add('put', url, {'kind': 'Status', 'code': 404, 'reason': 'NotFound'}, status=404)

    with pytest.raises(APINotFoundError) as err:
        await replace_obj(resource=resource, namespace=namespace, name='name1', body=body,
                          context=context, settings=settings, logger=logger)

    assert isinstance(err.value, NotFoundError)


async def test_other_errors_are_escalated(
        context, fake_api, resource, namespace, settings, logger, body):
    url = resource.get_url(namespace=namespace, name='name1')
    fake_api.add('put', url, {'kind': 'Status', 'code': 403}, status=403)

    with pytest.raises(APIForbiddenError):
        await replace_obj(resource=resource, namespace=namespace, name='name1', body=body,
                          context=context, settings=settings, logger=logger)
