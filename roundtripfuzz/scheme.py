"""Type catalog: maps group/version/kind to the classes that implement them."""

from typing import Any, Dict, List, NamedTuple, Optional, Sequence

from .api import TypeMeta
from .errors import EmptyCatalogError, NotRegisteredError


class GroupVersion(NamedTuple):
    group: str
    version: str

    def string(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    def with_kind(self, kind: str) -> 'GroupVersionKind':
        return GroupVersionKind(self.group, self.version, kind)


class GroupVersionKind(NamedTuple):
    group: str
    version: str
    kind: str

    @property
    def group_version(self) -> GroupVersion:
        return GroupVersion(self.group, self.version)

    @property
    def api_version(self) -> str:
        return self.group_version.string()


class Scheme:
    """Registry of known kinds.

    Kinds keep registration order so that selection by index is
    reproducible. A class registered with ``internal=True`` also exists as an
    internal, untagged form: its objects may legitimately carry no type tag.
    """

    def __init__(self):
        self._kinds: Dict[GroupVersionKind, type] = {}
        self._by_class: Dict[type, GroupVersionKind] = {}
        self._by_api_version: Dict[tuple, GroupVersionKind] = {}
        self._internal: set = set()

    def add_known_type(self, gv: GroupVersion, cls: type, kind: Optional[str] = None,
                       internal: bool = False) -> GroupVersionKind:
        gvk = gv.with_kind(kind or cls.__name__)
        self._kinds[gvk] = cls
        self._by_class.setdefault(cls, gvk)
        self._by_api_version[(gvk.api_version, gvk.kind)] = gvk
        if internal:
            self._internal.add(cls)
        return gvk

    def all_known_kinds(self) -> List[GroupVersionKind]:
        return list(self._kinds)

    def class_for(self, gvk: GroupVersionKind) -> type:
        cls = self._kinds.get(gvk)
        if cls is None:
            raise NotRegisteredError(f"no kind {gvk.kind!r} is registered for version {gvk.api_version!r}")
        return cls

    def new(self, gvk: GroupVersionKind) -> Any:
        """A zero-value instance of the kind."""
        return self.class_for(gvk)()

    def kind_for(self, obj: Any) -> GroupVersionKind:
        cls = obj if isinstance(obj, type) else type(obj)
        gvk = self._by_class.get(cls)
        if gvk is None:
            raise NotRegisteredError(f"type {cls.__name__} is not registered in the scheme")
        return gvk

    def lookup(self, kind: str, api_version: str = "") -> GroupVersionKind:
        """Resolve a kind; an empty api_version matches an internal form."""
        if api_version:
            gvk = self._by_api_version.get((api_version, kind))
            if gvk is not None:
                return gvk
        else:
            for gvk, cls in self._kinds.items():
                if gvk.kind == kind and cls in self._internal:
                    return gvk
        raise NotRegisteredError(f"no kind {kind!r} is registered for version {api_version!r}")

    def is_internal_and_external(self, obj: Any) -> bool:
        cls = obj if isinstance(obj, type) else type(obj)
        return cls in self._internal and cls in self._by_class


def type_accessor(obj: Any) -> TypeMeta:
    """The TypeMeta carried by an object."""
    type_meta = getattr(obj, 'type_meta', None)
    if not isinstance(type_meta, TypeMeta):
        raise TypeError(f"{type(obj).__name__} has no TypeMeta and cannot be tested")
    return type_meta


def select(index: int, kinds: Sequence[GroupVersionKind]) -> GroupVersionKind:
    """Pick one kind by modulo index."""
    if not kinds:
        raise EmptyCatalogError("cannot select a type from an empty catalog")
    return kinds[index % len(kinds)]
