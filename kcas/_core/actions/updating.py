"""
Conditional updates of the versioned objects with retries on conflicts.

Multiple actors can update the same object concurrently: e.g. several operators,
controllers, or several tasks of the same application. With no locks available,
the optimistic concurrency is used: every write carries the object's version
as it was fetched, and the store rejects the write if the version has changed.

The update is then repeated from the beginning: the object is re-fetched,
the precondition is re-checked on the fresh object, the mutation is re-applied
to the fresh object, and the write is re-attempted -- until it succeeds,
the precondition stops holding, the object disappears, or the time is over.

Only the conflicts are retried. All other errors (e.g. permissions, networking)
are escalated to the caller on the first occurrence, with no retries here
(though the API requests can retry the transient errors on their own level;
see :attr:`NetworkingSettings.error_backoffs`).

The absent objects are not treated as errors: the update reports that nothing
was updated, the same way as when the precondition does not hold. The callers
can distinguish these cases by the outcome's `UpdateState` if they need to.
"""
import asyncio
import enum
import math
from typing import Any, NamedTuple, Optional, TypeVar

from typing_extensions import Protocol

from kcas._cogs.aiokits import aiotime
from kcas._cogs.clients import errors, stores
from kcas._cogs.configs import configuration
from kcas._cogs.helpers import typedefs
from kcas._core.actions import loggers

_IdentityT = TypeVar('_IdentityT')
_BodyT = TypeVar('_BodyT')
_BodyT_contra = TypeVar('_BodyT_contra', contravariant=True)


class Precondition(Protocol[_BodyT_contra]):
    """ Decides if the update is still applicable to the freshly fetched object. """
    def __call__(self, __body: _BodyT_contra) -> bool: ...


class Mutation(Protocol[_BodyT]):
    """
    Modifies the freshly fetched object in place.

    The result is ignored (e.g. of ``body.pop(...)`` in a lambda):
    the fetched object, as modified, is what gets written.
    """
    def __call__(self, __body: _BodyT) -> Any: ...


class UpdateState(str, enum.Enum):
    UPDATED = 'updated'  # the mutated object is written.
    SKIPPED = 'skipped'  # the precondition did not hold; nothing is written.
    ABSENT = 'absent'    # the object was not found; nothing is written.


class UpdateOutcome(NamedTuple):
    body: Any
    """
    For the updated objects: the body as written, with the new version.
    For the skipped objects: the last fetched body, which was not modified.
    For the absent objects: the last known body as passed by the caller.
    """

    updated: bool
    """ Whether the object was actually written. """

    state: UpdateState
    """ Why the update has finished: for the cases when ``updated`` is not enough. """


class UpdateError(Exception):
    """
    An update has failed due to reasons other than the store's own errors.

    The identity of the updated object is kept for diagnostics, as well as
    the last known body of it. The body must not be trusted as the actual one.
    """

    def __init__(self, message: str, *, identity: Any, body: Any = None) -> None:
        super().__init__(message)
        self.identity = identity
        self.body = body


class UpdateTimeoutError(UpdateError):
    """ The conflicts continued for longer than allowed. """


class UpdateCancelledError(UpdateError):
    """ The update was stopped by the caller's request (not by the timeout). """


async def update_with_retries(
        store: "stores.VersionedStore[_IdentityT, _BodyT]",
        identity: _IdentityT,
        *,
        precondition: Precondition[_BodyT],
        mutation: Mutation[_BodyT],
        body: Optional[_BodyT] = None,
        settings: Optional[configuration.Settings] = None,
        logger: Optional[typedefs.Logger] = None,
        stopper: Optional[asyncio.Event] = None,
) -> UpdateOutcome:
    """
    Update an object with a mutation if the precondition holds; retry on conflicts.

    The caller's ``body`` (if passed) is only used as the last known state of
    the object for logging and for the outcome of the absent objects.
    It is never mutated and never written: a fresh object is fetched every time.

    The ``stopper`` (if passed) stops the retrying once it is set: the update
    then fails with `UpdateCancelledError`. The stopper is checked before every
    attempt and wakes up the pauses between the attempts.

    Returns the outcome if the object was updated, skipped, or is absent.
    Raises `UpdateTimeoutError` if the conflicts continue for too long,
    `UpdateCancelledError` if stopped, or the store's errors as they are.
    """
    settings = settings if settings is not None else configuration.Settings()
    logger = logger if logger is not None else loggers.ObjectLogger(body=body, identity=identity)
    poll_interval = settings.updating.poll_interval
    timeout = settings.updating.timeout
    if timeout is None or not math.isfinite(timeout) or timeout < 0:
        raise ValueError(f"The update timeout must be finite and non-negative; got {timeout!r}.")

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    last_known = body
    attempt = 0
    while True:
        attempt += 1

        if stopper is not None and stopper.is_set():
            raise UpdateCancelledError(f"Stopped trying to update {identity}.",
                                       identity=identity, body=last_known)

        try:
            fetched = await store.get(identity)
        except errors.NotFoundError:
            logger.debug(f"Object {identity} is not found, skip updating it.")
            return UpdateOutcome(body=body, updated=False, state=UpdateState.ABSENT)

        last_known = fetched
        if not precondition(fetched):
            logger.debug(f"Precondition does not hold for {identity}, skip updating it.")
            return UpdateOutcome(body=fetched, updated=False, state=UpdateState.SKIPPED)

        mutation(fetched)

        try:
            written = await store.write(fetched)
        except errors.NotFoundError:
            logger.debug(f"Object {identity} is gone while updating, skip updating it.")
            return UpdateOutcome(body=body, updated=False, state=UpdateState.ABSENT)
        except errors.ConflictError as e:
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise UpdateTimeoutError(f"Timed out trying to update {identity}.",
                                         identity=identity, body=last_known) from e

            logger.debug(f"Update attempt #{attempt} of {identity} has conflicted; "
                         f"retrying in {poll_interval}s.")
            await aiotime.sleep(min(poll_interval, remaining), wakeup=stopper)
            if loop.time() >= deadline and not (stopper is not None and stopper.is_set()):
                raise UpdateTimeoutError(f"Timed out trying to update {identity}.",
                                         identity=identity, body=last_known) from e
        else:
            if attempt > 1:
                logger.debug(f"Update attempt #{attempt} of {identity} has succeeded.")
            return UpdateOutcome(body=written, updated=True, state=UpdateState.UPDATED)
