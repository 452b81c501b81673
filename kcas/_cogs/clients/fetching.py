from typing import Optional

from kcas._cogs.clients import api, auth
from kcas._cogs.configs import configuration
from kcas._cogs.helpers import typedefs
from kcas._cogs.structs import bodies, references


async def read_obj(
        *,
        resource: references.Resource,
        namespace: references.Namespace,
        name: Optional[str],
        context: auth.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
) -> bodies.RawBody:
    """
    Read the object of a specific kind by its name.

    Raises `errors.APINotFoundError` if the object is absent.
    The object's kind & API version are restored if the API omits them
    (as it does for some built-in resources).
    """
    body: bodies.RawBody = await api.get(
        url=resource.get_url(namespace=namespace, name=name),
        context=context,
        settings=settings,
        logger=logger,
    )
    if resource.kind is not None:
        body.setdefault('kind', resource.kind)
    body.setdefault('apiVersion', resource.api_version)
    return body
