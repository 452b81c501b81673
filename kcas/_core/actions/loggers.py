"""
Per-object logging: the log records carry the references to the objects.

Every update logs via an object logger, which attaches the updated object's
reference (name, namespace, kind, etc.) to every log record. The formatters
then either prefix the messages with ``[namespace/name]`` (for the plain text),
or put the reference into a separate field (for the JSON logs).
"""
import copy
import logging
from typing import Any, Mapping, MutableMapping, Optional, Tuple

import pythonjsonlogger.core
import pythonjsonlogger.json

from kcas._cogs.structs import bodies, references

DEFAULT_JSON_REFKEY = 'object'
""" A key for object references in JSON logs, as seen by the log parsers. """


class ObjectFormatter(logging.Formatter):
    pass


class ObjectTextFormatter(ObjectFormatter, logging.Formatter):
    pass


class ObjectJsonFormatter(ObjectFormatter, pythonjsonlogger.json.JsonFormatter):
    def __init__(
            self,
            *args: Any,
            refkey: Optional[str] = None,
            **kwargs: Any,
    ) -> None:
        # Avoid type checking, as the args are not in the parent consructor.
        reserved_attrs = kwargs.pop('reserved_attrs', pythonjsonlogger.core.RESERVED_ATTRS)
        reserved_attrs = set(reserved_attrs)
        reserved_attrs |= {'k8s_ref'}
        kwargs.update(reserved_attrs=reserved_attrs)
        kwargs.setdefault('timestamp', True)
        super().__init__(*args, **kwargs)
        self._refkey: str = refkey or DEFAULT_JSON_REFKEY

    def add_fields(
            self,
            log_record: MutableMapping[str, Any],
            record: logging.LogRecord,
            message_dict: Mapping[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        if self._refkey and hasattr(record, 'k8s_ref'):
            ref = getattr(record, 'k8s_ref')
            log_record[self._refkey] = ref

        if 'severity' not in log_record:
            log_record['severity'] = (
                "debug" if record.levelno <= logging.DEBUG else
                "info" if record.levelno <= logging.INFO else
                "warn" if record.levelno <= logging.WARNING else
                "error" if record.levelno <= logging.ERROR else
                "fatal")


class ObjectPrefixingMixin(ObjectFormatter):
    def format(self, record: logging.LogRecord) -> str:
        if hasattr(record, 'k8s_ref'):
            ref = getattr(record, 'k8s_ref')
            namespace = ref.get('namespace', '')
            name = ref.get('name', '')
            prefix = f"[{namespace}/{name}]" if namespace else f"[{name}]"
            record = copy.copy(record)  # shallow
            record.msg = f"{prefix} {record.msg}"
        return super().format(record)


class ObjectPrefixingTextFormatter(ObjectPrefixingMixin, ObjectTextFormatter):
    pass


class ObjectPrefixingJsonFormatter(ObjectPrefixingMixin, ObjectJsonFormatter):
    pass


class ObjectLogger(logging.LoggerAdapter):  # type: ignore
    """
    A logger/adapter to carry the object identifiers for formatting.

    The identifiers are then used for formatting the per-object messages
    in `ObjectPrefixingMixin` and in `ObjectJsonFormatter`.

    The object can be referred either by its body (e.g. as provided by
    the caller of an update), or by its identity only (if there is no body).
    For non-K8s stores, the identity is rendered as a name.

    The internal structure is made the same as an object reference in K8s API,
    but as little information should be carried as possible, and it should be
    protected against the object's modification during the update.
    """

    def __init__(
            self,
            *,
            body: Optional[Mapping[str, Any]] = None,
            identity: Optional[object] = None,
    ) -> None:
        ref: Mapping[str, Any]
        if body is not None:
            ref = bodies.build_object_reference(body)
        elif isinstance(identity, references.Identity):
            ref = {'name': identity.name, 'namespace': identity.namespace}
            ref = {key: val for key, val in ref.items() if val}
        elif identity is not None:
            ref = {'name': str(identity)}
        else:
            ref = {}
        super().__init__(logger, dict(k8s_ref=ref))

    def process(
            self,
            msg: str,
            kwargs: MutableMapping[str, Any],
    ) -> Tuple[str, MutableMapping[str, Any]]:
        # Native logging overwrites the message's extra with the adapter's extra.
        # We merge them, so that both message's & adapter's extras are available.
        kwargs["extra"] = dict(self.extra or {}, **kwargs.get('extra', {}))
        return msg, kwargs


logger = logging.getLogger('kcas.objects')
