"""
All configuration flags, options, settings to fine-tune the updates.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

Some of the settings are flags, some are scalars, some are optional,
some are not (but all of them have reasonable defaults).

The settings are never global: they are passed explicitly as ``settings=``
to every routine that needs them. If not passed, the defaults are used.
"""
import dataclasses
from typing import Iterable, Optional


@dataclasses.dataclass
class UpdatingSettings:
    """
    Settings for the retry-on-conflict updates of the versioned objects.
    """

    poll_interval: float = 0.01
    """
    How long (in seconds) to wait after a conflicting write before re-fetching
    the object and trying again. The default is 10 milliseconds.
    """

    timeout: float = 60
    """
    For how long (in seconds) to keep retrying the conflicting writes in total.

    Once exceeded, the update fails with `UpdateTimeoutError`. The timeout
    must be finite: the updates are never retried indefinitely.
    The default is 1 minute.

    The deadline is checked between the attempts only: the requests in flight
    are limited by :attr:`NetworkingSettings.request_timeout` instead.
    """


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60  # == aiohttp.client.DEFAULT_TIMEOUT
    """
    A timeout for each individual API request (in seconds).
    ``None`` means no limit.
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for the TCP connection establishing (in seconds).
    ``None`` means the limit of the :attr:`request_timeout` is used.
    """

    error_backoffs: Iterable[float] = ()
    """
    Backoff intervals in case of transient API errors: the connection errors,
    the client-side timeouts, HTTP 5xx responses.

    Every next error leads to the next delay in the sequence. Once the sequence
    is exhausted, the error is escalated to the caller. By default, the sequence
    is empty, and all errors are escalated on the first occurrence.

    Only the transport errors are retried here. The conflicts are never retried
    by the requests, but only by the updates (see :class:`UpdatingSettings`).
    """


@dataclasses.dataclass
class Settings:
    updating: UpdatingSettings = dataclasses.field(default_factory=UpdatingSettings)
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
