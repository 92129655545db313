"""Tests for type resolution through the loader."""

from __future__ import annotations

import pytest

from specreg.domain.errors import InvalidInterfaceType, NotExportedType, TypeNotFound
from specreg.domain.types import TypeCategory, TypeModel
from specreg.loaders.loader import Loader
from specreg.loaders.resolver import type_name_of


class TestTypeNameOf:
    def test_accepts_names_and_models(self) -> None:
        assert type_name_of("/a") == "/a"
        assert type_name_of(TypeModel(name="/b", category="numeric")) == "/b"

    def test_rejects_other_objects(self) -> None:
        with pytest.raises(TypeError):
            type_name_of(42)


class TestResolveType:
    def test_known_type(self, loader: Loader) -> None:
        loader.load_typekit("base")
        assert loader.resolve_type("/base/Time").category == TypeCategory.COMPOUND

    def test_accepts_type_model(self, loader: Loader) -> None:
        loader.load_typekit("base")
        t = loader.resolve_type("/base/Time")
        assert loader.resolve_type(t) is t

    def test_unknown_type_raises(self, loader: Loader) -> None:
        with pytest.raises(TypeNotFound):
            loader.resolve_type("/unknown/T")
        assert "/unknown/T" not in loader.registry

    def test_dummy_type_created(self, dummy_loader: Loader) -> None:
        t = dummy_loader.resolve_type("/unknown/T")
        assert t.is_null
        assert dummy_loader.registry.get("/unknown/T") is t
        assert "/unknown/T" in dummy_loader.interface_typelist
        assert dummy_loader.resolve_interface_type("/unknown/T") is t
        with pytest.raises(ValueError, match="not an imported type"):
            dummy_loader.typekits_declaring("/unknown/T")

    def test_dummy_policy_can_be_toggled(self, loader: Loader) -> None:
        loader.define_dummy_types = True
        assert loader.resolve_type("/late/T").is_null


class TestResolveInterfaceType:
    def test_exported_type(self, loader: Loader) -> None:
        loader.load_typekit("base")
        assert loader.resolve_interface_type("/base/Time").name == "/base/Time"
        assert loader.is_interface_type("/base/Time")

    def test_array_rejected(self, loader: Loader) -> None:
        loader.load_typekit("base")
        with pytest.raises(InvalidInterfaceType, match="static arrays") as exc_info:
            loader.resolve_interface_type("/base/Samples")
        assert exc_info.value.type_model.name == "/base/Samples"

    def test_not_exported_cites_declaring_typekit(self, loader: Loader) -> None:
        base = loader.load_typekit("base")
        with pytest.raises(NotExportedType) as exc_info:
            loader.resolve_interface_type("/base/Internal")
        assert exc_info.value.typekits == (base,)
        assert "base" in str(exc_info.value)

    def test_ad_hoc_non_interface_type(self, loader: Loader) -> None:
        adhoc = TypeModel(name="/adhoc", category="numeric")
        loader.register_type_model(adhoc, interface=False)
        with pytest.raises(NotExportedType) as exc_info:
            loader.resolve_interface_type("/adhoc")
        assert exc_info.value.typekits == ()

    def test_export_from_any_typekit_counts(self, loader: Loader) -> None:
        loader.load_typekit("extra")
        assert not loader.is_interface_type("/base/Time")
        loader.load_typekit("base")
        assert loader.is_interface_type("/base/Time")


class TestProvenance:
    def test_typekits_declaring_in_registration_order(self, loader: Loader) -> None:
        extra = loader.load_typekit("extra")
        base = loader.load_typekit("base")
        assert loader.typekits_declaring("/base/Time") == (extra, base)
        assert loader.typekits_declaring("/base/Angle") == (base,)

    def test_never_declared_raises_value_error(self, loader: Loader) -> None:
        with pytest.raises(ValueError, match="/nope is not an imported type"):
            loader.typekits_declaring("/nope")

    def test_opaque_queries(self, loader: Loader) -> None:
        loader.load_typekit("base")
        assert loader.intermediate_type_for("/base/Angle").name == "/base/AngleM"
        assert loader.opaque_type_for("/base/AngleM").name == "/base/Angle"
        assert loader.opaque_type_for("/base/Time").name == "/base/Time"
        assert loader.is_m_type("/base/AngleM")
        assert not loader.is_m_type("/base/Angle")

    def test_opaque_query_on_undeclared_type(self, dummy_loader: Loader) -> None:
        dummy_loader.resolve_type("/unknown/T")
        with pytest.raises(ValueError):
            dummy_loader.opaque_type_for("/unknown/T")

    def test_tie_break_uses_first_declaring_typekit(self, loader: Loader) -> None:
        extra = loader.load_typekit("extra")
        loader.load_typekit("base")
        # Both declare /base/Time; only the earlier one is consulted.
        assert loader.typekits_declaring("/base/Time")[0] is extra
        assert loader.intermediate_type_for("/base/Time").name == "/base/Time"
