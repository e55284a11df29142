"""Serializable object types exercised by the round-trip verifier.

Field names map to camelCase wire names unless ``metadata={'json': ...}``
overrides them; ``inline`` flattens a nested struct into its parent and
``skip`` keeps a field in memory only.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit, urlunsplit


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

INLINE = {'inline': True}


@dataclass
class TypeMeta:
    kind: str = ""
    api_version: str = ""


@dataclass
class Quantity:
    """Decimal quantity ``value * 10**scale`` with a canonical text form."""
    value: int = 0
    scale: int = 0

    def string(self) -> str:
        if self.scale == 0:
            return str(self.value)
        return f"{self.value}e{self.scale}"

    @classmethod
    def parse(cls, text: str) -> 'Quantity':
        mantissa, sep, exponent = text.partition('e')
        try:
            return cls(int(mantissa), int(exponent) if sep else 0)
        except ValueError:
            raise ValueError(f"invalid quantity {text!r}") from None

    def normalized(self):
        value, scale = self.value, self.scale
        if value == 0:
            return 0, 0
        while value % 10 == 0:
            value //= 10
            scale += 1
        return value, scale

    def equivalent(self, other: 'Quantity') -> bool:
        return self.normalized() == other.normalized()


@dataclass
class URL:
    """URL whose path and query are stored in escaped form."""
    scheme: str = ""
    user: str = ""
    password: str = ""
    host: str = ""
    path: str = ""
    query: str = ""

    def string(self) -> str:
        netloc = self.host
        if self.user or self.password:
            netloc = f"{self.user}:{self.password}@{self.host}"
        return urlunsplit((self.scheme, netloc, self.path, self.query, ""))

    @classmethod
    def parse(cls, text: str) -> 'URL':
        parts = urlsplit(text)
        userinfo, sep, host = parts.netloc.rpartition('@')
        user, _, password = userinfo.partition(':')
        if not sep:
            user, password, host = "", "", parts.netloc
        return cls(scheme=parts.scheme, user=user, password=password, host=host,
                   path=parts.path, query=parts.query)


# --- meta types ---

@dataclass
class ListMeta:
    self_link: str = ""
    resource_version: str = ""
    continue_: str = field(default="", metadata={'json': 'continue'})
    remaining_item_count: Optional[int] = None


@dataclass
class OwnerReference:
    api_version: str = ""
    kind: str = ""
    name: str = ""
    uid: str = ""
    controller: Optional[bool] = None
    block_owner_deletion: Optional[bool] = None


@dataclass
class FieldsV1:
    """Raw JSON describing a field set; must hold valid JSON on the wire."""
    raw: bytes = b""


@dataclass
class ManagedFieldsEntry:
    manager: str = ""
    operation: str = ""
    api_version: str = ""
    time: Optional[datetime] = None
    fields_type: str = ""
    fields_v1: Optional[FieldsV1] = field(default=None, metadata={'json': 'fieldsV1'})
    subresource: str = ""


@dataclass
class ObjectMeta:
    name: str = ""
    generate_name: str = ""
    namespace: str = ""
    self_link: str = ""
    uid: str = ""
    resource_version: str = ""
    generation: int = 0
    creation_timestamp: Optional[datetime] = None
    deletion_timestamp: Optional[datetime] = None
    deletion_grace_period_seconds: Optional[int] = None
    labels: Optional[Dict[str, str]] = None
    annotations: Optional[Dict[str, str]] = None
    owner_references: Optional[List[OwnerReference]] = None
    finalizers: Optional[List[str]] = None
    managed_fields: Optional[List[ManagedFieldsEntry]] = None


class LabelSelectorOperator(Enum):
    IN = "In"
    NOT_IN = "NotIn"
    EXISTS = "Exists"
    DOES_NOT_EXIST = "DoesNotExist"


@dataclass
class LabelSelectorRequirement:
    key: str = ""
    operator: LabelSelectorOperator = LabelSelectorOperator.IN
    values: Optional[List[str]] = None


@dataclass
class LabelSelector:
    match_labels: Optional[Dict[str, str]] = None
    match_expressions: Optional[List[LabelSelectorRequirement]] = None


class ResourceVersionMatch(Enum):
    UNSET = ""
    EXACT = "Exact"
    NOT_OLDER_THAN = "NotOlderThan"


# --- embedded objects ---

@dataclass
class RawExtension:
    """An embedded object carried as its serialized JSON bytes."""
    raw: bytes = b""


@dataclass
class Unknown:
    """An arbitrary embedded object the scheme does not know."""
    raw: bytes = b""
    content_type: str = ""


# --- meta.k8s.io/v1 kinds ---

@dataclass
class StatusCause:
    type: str = field(default="", metadata={'json': 'reason'})
    message: str = ""
    field_path: str = field(default="", metadata={'json': 'field'})


@dataclass
class StatusDetails:
    name: str = ""
    group: str = ""
    kind: str = ""
    uid: str = ""
    causes: Optional[List[StatusCause]] = None
    retry_after_seconds: int = 0


@dataclass
class Status:
    type_meta: TypeMeta = field(default_factory=TypeMeta, metadata=INLINE)
    metadata: ListMeta = field(default_factory=ListMeta)
    status: str = ""
    message: str = ""
    reason: str = ""
    details: Optional[StatusDetails] = None
    code: int = 0


@dataclass
class GroupVersionForDiscovery:
    group_version: str = ""
    version: str = ""


@dataclass
class ServerAddressByClientCIDR:
    client_cidr: str = field(default="", metadata={'json': 'clientCIDR'})
    server_address: str = ""


@dataclass
class APIGroup:
    type_meta: TypeMeta = field(default_factory=TypeMeta, metadata=INLINE)
    name: str = ""
    versions: List[GroupVersionForDiscovery] = field(default_factory=list)
    preferred_version: Optional[GroupVersionForDiscovery] = None
    server_address_by_client_cidrs: Optional[List[ServerAddressByClientCIDR]] = field(
        default=None, metadata={'json': 'serverAddressByClientCIDRs'})


@dataclass
class TableColumnDefinition:
    name: str = ""
    type: str = ""
    format: str = ""
    description: str = ""
    priority: int = 0


@dataclass
class TableRowCondition:
    type: str = ""
    status: str = ""
    reason: str = ""
    message: str = ""


@dataclass
class TableRow:
    cells: List[Any] = field(default_factory=list)
    conditions: Optional[List[TableRowCondition]] = None
    object: RawExtension = field(default_factory=RawExtension)


@dataclass
class Table:
    type_meta: TypeMeta = field(default_factory=TypeMeta, metadata=INLINE)
    metadata: ListMeta = field(default_factory=ListMeta)
    column_definitions: List[TableColumnDefinition] = field(default_factory=list)
    rows: List[TableRow] = field(default_factory=list)


@dataclass
class TableOptions:
    type_meta: TypeMeta = field(default_factory=TypeMeta, metadata=INLINE)
    # In memory only; never written to the wire.
    no_headers: bool = field(default=False, metadata={'skip': True})
    include_object: str = ""


@dataclass
class WatchEvent:
    type: str = ""
    object: RawExtension = field(default_factory=RawExtension)


@dataclass
class GetOptions:
    type_meta: TypeMeta = field(default_factory=TypeMeta, metadata=INLINE)
    resource_version: str = ""


@dataclass
class ListOptions:
    type_meta: TypeMeta = field(default_factory=TypeMeta, metadata=INLINE)
    label_selector: str = ""
    field_selector: str = ""
    watch: bool = False
    resource_version: str = ""
    resource_version_match: ResourceVersionMatch = ResourceVersionMatch.UNSET
    timeout_seconds: Optional[int] = None
    limit: int = 0
    continue_: str = field(default="", metadata={'json': 'continue'})


# --- serving.example.dev/v1 kinds ---

CONDITION_READY = "Ready"
CONDITION_CONFIGURATIONS_READY = "ConfigurationsReady"
CONDITION_ROUTES_READY = "RoutesReady"


@dataclass
class Condition:
    type: str = ""
    status: str = ""
    severity: str = ""
    last_transition_time: Optional[datetime] = None
    reason: str = ""
    message: str = ""


@dataclass
class ServiceSpec:
    selector: Optional[LabelSelector] = None
    replicas: Optional[int] = None
    resources: Optional[Dict[str, Quantity]] = None
    template: Optional[Unknown] = None


@dataclass
class ServiceStatus:
    observed_generation: int = 0
    conditions: Optional[List[Condition]] = None
    url: Optional[URL] = None
    annotations: Optional[Dict[str, str]] = None

    def initialize_conditions(self) -> None:
        self.conditions = [Condition(type=t) for t in (
            CONDITION_READY, CONDITION_CONFIGURATIONS_READY, CONDITION_ROUTES_READY)]


@dataclass
class Service:
    type_meta: TypeMeta = field(default_factory=TypeMeta, metadata=INLINE)
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ServiceSpec = field(default_factory=ServiceSpec)
    status: ServiceStatus = field(default_factory=ServiceStatus)
