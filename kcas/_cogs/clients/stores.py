"""
Versioned stores: where the objects are fetched from and written back to.

A store is anything that can fetch an object by its identity, and write
a modified object back if, and only if, the object was not changed
since it was fetched (a compare-and-swap by the object's version).

The stores signal the two special situations with the store-agnostic errors:

* `errors.NotFoundError` when the object is absent (on fetching or writing).
* `errors.ConflictError` when the written object's version is outdated.

All other errors are considered as the faults and are escalated as is.
"""
import logging
from typing import Optional, TypeVar

from typing_extensions import Protocol

from kcas._cogs.clients import auth, fetching, replacing
from kcas._cogs.configs import configuration
from kcas._cogs.helpers import typedefs
from kcas._cogs.structs import bodies, references

_IdentityT = TypeVar('_IdentityT', contravariant=True)
_BodyT = TypeVar('_BodyT')

_logger = logging.getLogger('kcas.clients')


class VersionedStore(Protocol[_IdentityT, _BodyT]):

    async def get(self, __identity: _IdentityT) -> _BodyT:
        """ Fetch the latest version of the object; fail if it is absent. """
        ...

    async def write(self, __body: _BodyT) -> _BodyT:
        """ Write the object back; fail if it was changed since fetched. """
        ...


class KubernetesStore:
    """
    A store of the objects of one specific resource kind in K8s API.

    The objects are fetched with ``GET`` and are replaced with ``PUT``.
    The version check is done by K8s API itself: the written body carries
    the ``metadata.resourceVersion`` it was fetched with, so any concurrent
    modification leads to HTTP 409 Conflict.

    The namespaced objects without a namespace in their identities
    are looked up in the context's default namespace (if there is one).
    """

    def __init__(
            self,
            resource: references.Resource,
            *,
            context: auth.APIContext,
            settings: Optional[configuration.Settings] = None,
            logger: Optional[typedefs.Logger] = None,
    ) -> None:
        super().__init__()
        self.resource = resource
        self.context = context
        self.settings = settings if settings is not None else configuration.Settings()
        self.logger = logger if logger is not None else _logger

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.resource!r} @ {self.context.server}>'

    async def get(self, identity: references.Identity) -> bodies.RawBody:
        return await fetching.read_obj(
            resource=self.resource,
            namespace=self._get_namespace(identity),
            name=identity.name,
            context=self.context,
            settings=self.settings,
            logger=self.logger,
        )

    async def write(self, body: bodies.RawBody) -> bodies.RawBody:
        identity = bodies.build_identity(body)
        return await replacing.replace_obj(
            resource=self.resource,
            namespace=self._get_namespace(identity),
            name=identity.name,
            body=body,
            context=self.context,
            settings=self.settings,
            logger=self.logger,
        )

    def _get_namespace(self, identity: references.Identity) -> references.Namespace:
        if not self.resource.namespaced:
            return None
        elif identity.namespace is not None:
            return identity.namespace
        elif self.context.default_namespace is not None:
            return references.NamespaceName(self.context.default_namespace)
        else:
            raise ValueError(f"The namespace is not known for a namespaced object: {identity}")
