"""
All the structures coming from/to the Kubernetes API.

For strict type-checking, they are detailed to the per-field level
(e.g. `TypedDict` instead of just ``Mapping[Any, Any]``) --
as used by the library. The callers can use arbitrary fields at runtime,
which are not declared in the type definitions at type-checking time.

Everything marked "raw" is a plain unwrapped unprocessed data as JSON-decoded
from Kubernetes API, usually as retrieved in the fetching API calls.
All non-used payload falls into `Any`, and is not type-checked.
"""
from typing import Any, Dict, List, Mapping, Optional, cast

from typing_extensions import TypedDict

from kcas._cogs.structs import references

Labels = Mapping[str, str]
Annotations = Mapping[str, str]


class RawMeta(TypedDict, total=False):
    uid: str
    name: str
    namespace: str
    labels: Labels
    annotations: Annotations
    finalizers: List[str]
    resourceVersion: str
    generation: int
    deletionTimestamp: str
    creationTimestamp: str


class RawBody(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawMeta
    spec: Dict[str, Any]
    status: Dict[str, Any]


class ObjectReference(TypedDict, total=False):
    apiVersion: str
    kind: str
    namespace: Optional[str]
    name: str
    uid: str


def build_object_reference(
        body: Mapping[str, Any],
) -> ObjectReference:
    """
    Construct an object reference for the logs.

    Keep in mind that some fields can be absent: e.g. ``namespace``
    for cluster resources, or e.g. ``apiVersion`` for ``kind: Node``, etc.
    """
    ref = dict(
        apiVersion=body.get('apiVersion'),
        kind=body.get('kind'),
        name=body.get('metadata', {}).get('name'),
        uid=body.get('metadata', {}).get('uid'),
        namespace=body.get('metadata', {}).get('namespace'),
    )
    return cast(ObjectReference, {key: val for key, val in ref.items() if val})


def build_identity(
        body: Mapping[str, Any],
) -> references.Identity:
    """
    Extract the object's identity: the name & namespace, but not the version.
    """
    name = body.get('metadata', {}).get('name')
    namespace = body.get('metadata', {}).get('namespace')
    if not name:
        raise ValueError(f"The object has no name, so it cannot be identified: {body!r}")
    return references.Identity(name=name, namespace=references.NamespaceName(namespace) if namespace else None)


def get_resource_version(
        body: Mapping[str, Any],
) -> Optional[str]:
    return body.get('metadata', {}).get('resourceVersion')
