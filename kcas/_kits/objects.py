"""
The conditional updates bound to the K8s resources: ready to use with the bodies.

The generic updates (`update_with_retries`) work with any store and identity.
These ones take the caller's last known body of a K8s object instead:
the object's identity is derived from it, and the store is made for the given
resource kind -- so that the callers only decide on what to change.

Usage::

    outcome = await kcas.update_rs_with_retries(
        rs,
        precondition=lambda rs: rs['spec']['replicas'] < 5,
        mutation=lambda rs: rs['spec'].update(replicas=rs['spec']['replicas'] + 1),
        context=context,
    )
    if outcome.updated:
        rs = outcome.body
"""
import asyncio
from typing import Optional

from kcas._cogs.clients import auth, stores
from kcas._cogs.configs import configuration
from kcas._cogs.helpers import typedefs
from kcas._cogs.structs import bodies, references
from kcas._core.actions import updating

REPLICASETS = references.Resource('apps', 'v1', 'replicasets', kind='ReplicaSet', namespaced=True)


async def update_obj_with_retries(
        resource: references.Resource,
        body: bodies.RawBody,
        *,
        precondition: updating.Precondition[bodies.RawBody],
        mutation: updating.Mutation[bodies.RawBody],
        context: auth.APIContext,
        settings: Optional[configuration.Settings] = None,
        logger: Optional[typedefs.Logger] = None,
        stopper: Optional[asyncio.Event] = None,
) -> updating.UpdateOutcome:
    """
    Update a K8s object of a resource kind when the precondition holds.

    Note that the absent objects are not errors: the outcome is not updated.
    """
    store = stores.KubernetesStore(resource, context=context, settings=settings, logger=logger)
    return await updating.update_with_retries(
        store,
        bodies.build_identity(body),
        precondition=precondition,
        mutation=mutation,
        body=body,
        settings=settings,
        logger=logger,
        stopper=stopper,
    )


async def update_rs_with_retries(
        rs: bodies.RawBody,
        *,
        precondition: updating.Precondition[bodies.RawBody],
        mutation: updating.Mutation[bodies.RawBody],
        context: auth.APIContext,
        settings: Optional[configuration.Settings] = None,
        logger: Optional[typedefs.Logger] = None,
        stopper: Optional[asyncio.Event] = None,
) -> updating.UpdateOutcome:
    """
    Update a ReplicaSet when the precondition holds. See `update_obj_with_retries`.
    """
    return await update_obj_with_retries(
        REPLICASETS, rs,
        precondition=precondition,
        mutation=mutation,
        context=context,
        settings=settings,
        logger=logger,
        stopper=stopper,
    )
