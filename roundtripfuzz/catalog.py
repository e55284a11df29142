"""The default catalog of kinds under test."""

from typing import List

from .api import (
    APIGroup, GetOptions, ListOptions, Service, Status, Table, TableOptions, WatchEvent,
)
from .scheme import GroupVersion, GroupVersionKind, Scheme

META_V1 = GroupVersion("meta.k8s.io", "v1")
SERVING_V1 = GroupVersion("serving.example.dev", "v1")

NON_ROUND_TRIPPABLE_KINDS = frozenset([
    "ExportOptions",
    "GetOptions",
    # WatchEvent does not include kind and version and can only be decoded
    # implicitly, when the caller already knows the expected object.
    "WatchEvent",
    "ListOptions",
    "DeleteOptions",
])


def build_scheme() -> Scheme:
    scheme = Scheme()
    scheme.add_known_type(META_V1, Status)
    scheme.add_known_type(META_V1, APIGroup)
    scheme.add_known_type(META_V1, Table, internal=True)
    scheme.add_known_type(META_V1, TableOptions, internal=True)
    scheme.add_known_type(META_V1, WatchEvent)
    scheme.add_known_type(META_V1, GetOptions)
    scheme.add_known_type(META_V1, ListOptions)
    scheme.add_known_type(SERVING_V1, Service)
    return scheme


def round_trippable_kinds(scheme: Scheme) -> List[GroupVersionKind]:
    """Kinds eligible for selection, in registration order."""
    return [gvk for gvk in scheme.all_known_kinds()
            if gvk.kind not in NON_ROUND_TRIPPABLE_KINDS]
