"""
The main kcas module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the library's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from kcas._cogs.clients.auth import (
    APIContext,
)
from kcas._cogs.clients.errors import (
    NotFoundError,
    ConflictError,
    APIError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
    APIServerError,
)
from kcas._cogs.clients.stores import (
    VersionedStore,
    KubernetesStore,
)
from kcas._cogs.configs.configuration import (
    Settings,
    UpdatingSettings,
    NetworkingSettings,
)
from kcas._cogs.helpers.typedefs import (
    Logger,
)
from kcas._cogs.helpers.versions import (
    version as __version__,
)
from kcas._cogs.structs.bodies import (
    RawBody,
    RawMeta,
    ObjectReference,
    build_object_reference,
    build_identity,
)
from kcas._cogs.structs.credentials import (
    ConnectionInfo,
)
from kcas._cogs.structs.references import (
    Resource,
    Identity,
)
from kcas._core.actions.loggers import (
    ObjectLogger,
    ObjectTextFormatter,
    ObjectJsonFormatter,
    ObjectPrefixingTextFormatter,
    ObjectPrefixingJsonFormatter,
)
from kcas._core.actions.updating import (
    Precondition,
    Mutation,
    UpdateState,
    UpdateOutcome,
    UpdateError,
    UpdateTimeoutError,
    UpdateCancelledError,
    update_with_retries,
)
from kcas._kits.objects import (
    REPLICASETS,
    update_obj_with_retries,
    update_rs_with_retries,
)

__all__ = [
    'APIContext',
    'NotFoundError',
    'ConflictError',
    'APIError',
    'APIUnauthorizedError',
    'APIForbiddenError',
    'APINotFoundError',
    'APIConflictError',
    'APIServerError',
    'VersionedStore',
    'KubernetesStore',
    'Settings',
    'UpdatingSettings',
    'NetworkingSettings',
    'Logger',
    'RawBody',
    'RawMeta',
    'ObjectReference',
    'build_object_reference',
    'build_identity',
    'ConnectionInfo',
    'Resource',
    'Identity',
    'ObjectLogger',
    'ObjectTextFormatter',
    'ObjectJsonFormatter',
    'ObjectPrefixingTextFormatter',
    'ObjectPrefixingJsonFormatter',
    'Precondition',
    'Mutation',
    'UpdateState',
    'UpdateOutcome',
    'UpdateError',
    'UpdateTimeoutError',
    'UpdateCancelledError',
    'update_with_retries',
    'REPLICASETS',
    'update_obj_with_retries',
    'update_rs_with_retries',
]
