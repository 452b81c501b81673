from typing import Optional

from kcas._cogs.clients import api, auth
from kcas._cogs.configs import configuration
from kcas._cogs.helpers import typedefs
from kcas._cogs.structs import bodies, references


async def replace_obj(
        *,
        resource: references.Resource,
        namespace: references.Namespace,
        name: Optional[str],
        body: bodies.RawBody,
        context: auth.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
) -> bodies.RawBody:
    """
    Replace the whole object of a specific kind with the new body.

    Unlike patching, the replacement is version-checked by K8s API:
    if the body's ``metadata.resourceVersion`` does not match the current one
    (i.e. the object was modified by someone else since it was read),
    the request fails with HTTP 409 and `errors.APIConflictError` is raised.
    If the object is absent, `errors.APINotFoundError` is raised.

    Returns the object's body as stored by the server, with the new
    ``metadata.resourceVersion`` and other server-assigned fields.
    """
    if bodies.get_resource_version(body) is None:
        raise ValueError("Replacing an object requires its metadata.resourceVersion.")

    replaced: bodies.RawBody = await api.put(
        url=resource.get_url(namespace=namespace, name=name),
        headers={'Content-Type': 'application/json'},
        payload=body,
        context=context,
        settings=settings,
        logger=logger,
    )
    return replaced
