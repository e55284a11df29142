"""Tests for the type catalog and kind selection."""

import pytest

from roundtripfuzz.api import Service, Status, Table, TableOptions, WatchEvent
from roundtripfuzz.catalog import META_V1, SERVING_V1, round_trippable_kinds
from roundtripfuzz.errors import EmptyCatalogError, NotRegisteredError
from roundtripfuzz.scheme import GroupVersion, Scheme, select, type_accessor


class TestGroupVersion:
    def test_api_version_string(self):
        assert META_V1.string() == "meta.k8s.io/v1"
        assert GroupVersion("", "v1").string() == "v1"
        assert META_V1.with_kind("Status").api_version == "meta.k8s.io/v1"


class TestScheme:
    def test_round_trippable_kinds_in_registration_order(self, scheme):
        kinds = [gvk.kind for gvk in round_trippable_kinds(scheme)]
        assert kinds == ["Status", "APIGroup", "Table", "TableOptions", "Service"]

    def test_kind_for_and_new(self, scheme):
        gvk = scheme.kind_for(Service())
        assert gvk == SERVING_V1.with_kind("Service")
        assert scheme.new(gvk) == Service()

    def test_unregistered_class(self, scheme):
        with pytest.raises(NotRegisteredError):
            scheme.kind_for(object())
        with pytest.raises(NotRegisteredError):
            scheme.class_for(META_V1.with_kind("Nope"))

    def test_lookup_without_version_only_finds_internal_forms(self, scheme):
        assert scheme.lookup("Table").kind == "Table"
        with pytest.raises(NotRegisteredError):
            scheme.lookup("Status")
        assert scheme.lookup("Status", "meta.k8s.io/v1").kind == "Status"

    def test_dual_representation(self, scheme):
        assert scheme.is_internal_and_external(Table)
        assert scheme.is_internal_and_external(TableOptions())
        assert not scheme.is_internal_and_external(Status())

    def test_type_accessor(self):
        assert type_accessor(Status()) is not None
        with pytest.raises(TypeError):
            type_accessor(WatchEvent())


class TestSelect:
    def test_select_by_modulo(self, scheme):
        kinds = round_trippable_kinds(scheme)
        assert select(0, kinds) == kinds[0]
        assert select(len(kinds) + 2, kinds) == kinds[2]
        assert select(255, kinds) == kinds[255 % len(kinds)]

    def test_empty_catalog(self):
        with pytest.raises(EmptyCatalogError):
            select(3, round_trippable_kinds(Scheme()))
