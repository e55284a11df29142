"""Default customizers: domain constraints that structural generation misses.

Each group is returned as a ``{type: function}`` mapping so callers can
compose them into a registry and add their own.
"""

from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote, quote_plus

from .api import (
    EPOCH, APIGroup, Condition, LabelSelector, LabelSelectorOperator,
    LabelSelectorRequirement, ListMeta, ManagedFieldsEntry, ObjectMeta, Quantity,
    RawExtension, ServiceStatus, Status, TableOptions, TableRow, TableRowCondition,
    TypeMeta, Unknown, URL,
)
from .codec import Codec
from .config import EmptyMapPolicy
from .convert import CONTENT_TYPE_JSON
from .labels import random_label_key, random_label_part
from .registry import CustomizerRegistry

# ~1000 years of seconds: always a representable calendar date
MAX_TIME_SECONDS = 1000 * 365 * 24 * 60 * 60

UID_CHARS = "abcdefghijklmnopqrstuvwxyz-1234567890"
LETTERS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
LOWER_LETTERS = "abcdefghijklmnopqrstuvwxyz"

SENTINEL_KEY = "roundtrip.fuzz/sentinel"
SENTINEL_VALUE = "true"

UNKNOWN_RAW = b'{"apiVersion":"unknown.group/unknown","kind":"Something","someKey":"someValue"}'

Customizers = Dict[Any, Callable]


def bounded_time(gen) -> datetime:
    return EPOCH + timedelta(seconds=gen.get_uint64() % MAX_TIME_SECONDS)


def second_precision_time(gen) -> datetime:
    # 32-bit seconds and nanoseconds keep the result inside the RFC 3339
    # range; the fraction is dropped because the wire form has none.
    sec = gen.get_uint32()
    nsec = gen.get_uint32()
    t = EPOCH + timedelta(seconds=sec, microseconds=nsec // 1000)
    return t.replace(microsecond=0)


def blank_type_meta(t: TypeMeta, gen) -> TypeMeta:
    # APIVersion and Kind must remain blank in memory; codecs stamp them.
    return TypeMeta()


def generic_customizers(codec: Codec) -> Customizers:
    """Customizers for quantities, ints, type tags and embedded objects.

    ``codec`` serializes the objects embedded in a RawExtension.
    """

    def fuzz_quantity(q: Quantity, gen) -> Quantity:
        return Quantity(gen.get_int() % 1000)

    def fuzz_int(i: int, gen) -> int:
        return gen.get_int()

    def fuzz_unknown(u: Unknown, gen) -> Unknown:
        # TypeMeta is not set: it is not carried through a round trip
        return Unknown(raw=UNKNOWN_RAW, content_type=CONTENT_TYPE_JSON)

    def fuzz_raw_extension(r: RawExtension, gen) -> RawExtension:
        # Pick an arbitrary type and fuzz it
        types = [Status, APIGroup]
        obj = types[gen.get_int() % len(types)]()
        obj = gen.fill(obj)
        data = codec.encode(obj)
        # trailing newlines do not survive a round trip
        return RawExtension(raw=data.rstrip(b"\n"))

    return {
        Quantity: fuzz_quantity,
        int: fuzz_int,
        TypeMeta: blank_type_meta,
        Unknown: fuzz_unknown,
        RawExtension: fuzz_raw_extension,
    }


def normalize_map(m: Optional[Dict[str, str]], policy: EmptyMapPolicy) -> Optional[Dict[str, str]]:
    """Drop the blank key; an empty result becomes absent or a sentinel."""
    if m is not None:
        m.pop("", None)
    if m:
        return m
    if policy is EmptyMapPolicy.SENTINEL:
        return {SENTINEL_KEY: SENTINEL_VALUE}
    return None


def meta_customizers(empty_maps: EmptyMapPolicy = EmptyMapPolicy.ABSENT) -> Customizers:
    """Customizers for object metadata, list metadata and selectors."""

    def fuzz_time(t: datetime, gen) -> datetime:
        return bounded_time(gen)

    def fuzz_object_meta(j: ObjectMeta, gen) -> ObjectMeta:
        gen.generate_struct(j)

        j.resource_version = str(gen.get_int())
        j.uid = gen.get_string_from(UID_CHARS, 63)
        j.name = gen.get_string_from(UID_CHARS, 20)

        j.creation_timestamp = second_precision_time(gen)
        if j.deletion_timestamp is not None:
            j.deletion_timestamp = second_precision_time(gen)

        j.labels = normalize_map(j.labels, empty_maps)
        j.annotations = normalize_map(j.annotations, empty_maps)
        if not j.owner_references:
            j.owner_references = None
        if not j.finalizers:
            j.finalizers = None
        if not j.managed_fields:
            j.managed_fields = None
        return j

    def fuzz_list_meta(j: ListMeta, gen) -> ListMeta:
        j.resource_version = str(gen.get_uint64())
        j.self_link = gen.get_string()
        return j

    def fuzz_label_selector(j: LabelSelector, gen) -> LabelSelector:
        gen.generate_struct(j)
        # an entirely empty selector is distinct from an unset one, so force
        # at least one expression
        if not j.match_labels and not j.match_expressions:
            j.match_expressions = [LabelSelectorRequirement()
                                   for _ in range(gen.get_int() % 3 + 1)]

        if j.match_labels:
            labels = {}
            for _ in range(len(j.match_labels)):
                value = random_label_part(gen, True)
                labels[random_label_key(gen)] = value
            j.match_labels = labels
        else:
            j.match_labels = None

        if j.match_expressions:
            # the selector parser sorts expressions by key and their values,
            # so generate them in that normal form
            j.match_expressions = sorted(
                (fuzz_requirement(gen) for _ in j.match_expressions),
                key=lambda req: req.key)
        else:
            j.match_expressions = None
        return j

    def fuzz_managed_fields_entry(j: ManagedFieldsEntry, gen) -> ManagedFieldsEntry:
        gen.generate_struct(j)
        j.fields_v1 = None
        return j

    return {
        datetime: fuzz_time,
        TypeMeta: blank_type_meta,
        ObjectMeta: fuzz_object_meta,
        ListMeta: fuzz_list_meta,
        LabelSelector: fuzz_label_selector,
        ManagedFieldsEntry: fuzz_managed_fields_entry,
    }


VALID_OPERATORS = list(LabelSelectorOperator)


def fuzz_requirement(gen) -> LabelSelectorRequirement:
    req = LabelSelectorRequirement(key=random_label_key(gen))
    req.operator = VALID_OPERATORS[gen.get_int() % len(VALID_OPERATORS)]
    if req.operator in (LabelSelectorOperator.IN, LabelSelectorOperator.NOT_IN):
        # these operators need at least one value
        values = [random_label_part(gen, True) for _ in range(gen.get_int() % 3 + 1)]
        req.values = sorted(values)
    else:
        req.values = None
    return req


def table_customizers() -> Customizers:
    """Customizers for table options and table rows."""

    def fuzz_table_options(r: TableOptions, gen) -> TableOptions:
        gen.generate_struct(r)
        # NoHeaders is never written to the wire
        r.no_headers = False
        return r

    def fuzz_table_row(r: TableRow, gen) -> TableRow:
        r.object = gen.generate(RawExtension)
        r.conditions = gen.generate(Optional[List[TableRowCondition]]) or None
        n = gen.get_int()
        r.cells = [fuzz_cell(gen) for _ in range(n % 10)] if n > 0 else []
        return r

    return {
        TableOptions: fuzz_table_options,
        TableRow: fuzz_table_row,
    }


def fuzz_cell(gen) -> Any:
    kind = gen.get_int() % 5
    if kind == 0:
        return gen.get_string()
    if kind == 1:
        return gen.get_int()
    if kind == 2:
        return gen.get_bool()
    if kind == 3:
        cell = {}
        for _ in range(gen.get_int() % 10 + 2):
            key = gen.get_string()
            cell[key] = gen.get_string()
        return cell
    return [gen.get_int() for _ in range(gen.get_int() % 10)]


def serving_customizers() -> Customizers:
    """Customizers for URLs and service status conditions."""

    def fuzz_url(u: URL, gen) -> URL:
        u.scheme = gen.get_string_from(LOWER_LETTERS, 50)
        u.host = gen.get_string_from(LETTERS, 50)
        u.user = gen.get_string_from(LETTERS, 50)
        u.password = gen.get_string_from(LETTERS, 50)
        raw_path = gen.get_string()
        raw_query = gen.get_string()
        # escape so separators inside the components keep their meaning
        u.path = "/" + quote(raw_path, safe="") if raw_path else ""
        u.query = quote_plus(raw_query)
        return u

    def fuzz_service_status(s: ServiceStatus, gen) -> ServiceStatus:
        gen.generate_struct(s)
        # replace random conditions with the known ones, then fuzz all but
        # their types
        s.initialize_conditions()
        fuzz_conditions(s.conditions, gen)
        return s

    return {
        URL: fuzz_url,
        ServiceStatus: fuzz_service_status,
    }


def fuzz_conditions(conditions: List[Condition], gen) -> List[Condition]:
    """Regenerate every field of each condition except its type, in place."""
    for cond in conditions:
        cond.status = gen.get_string_from(LETTERS, 50)
        cond.severity = gen.get_string_from(LETTERS, 20)
        cond.message = gen.get_string_from(LETTERS, 50)
        cond.reason = gen.get_string_from(LETTERS, 50)
        cond.last_transition_time = bounded_time(gen)
    return conditions


def default_registry(codec: Codec, empty_maps: EmptyMapPolicy = EmptyMapPolicy.ABSENT,
                     freeze: bool = True) -> CustomizerRegistry:
    """Registry holding every default customizer group."""
    registry = CustomizerRegistry()
    registry.update(generic_customizers(codec))
    registry.update(meta_customizers(empty_maps))
    registry.update(table_customizers())
    registry.update(serving_customizers())
    return registry.freeze() if freeze else registry
