"""Tests for routeline.di.registry — identifier lookup and on-demand imports."""

from collections import OrderedDict

from routeline.di.registry import TypeRegistry


class Widget:
    def __init__(self, size: int = 1) -> None:
        self.size = size


class Outer:
    class Inner:
        pass


class TestRegister:
    def test_qualified_name(self) -> None:
        types = TypeRegistry()
        types.register(Widget)
        assert types.lookup(f"{__name__}.Widget") is Widget

    def test_alias(self) -> None:
        types = TypeRegistry()
        types.register(Widget, "Widget", "widget")
        assert types.lookup("Widget") is Widget
        assert types.lookup("widget") is Widget

    def test_returns_class(self) -> None:
        types = TypeRegistry()
        assert types.register(Widget) is Widget

    def test_spec_computed_at_registration(self) -> None:
        types = TypeRegistry()
        types.register(Widget)
        (dep,) = types.spec(Widget).dependencies
        assert dep.name == "size"

    def test_names(self) -> None:
        types = TypeRegistry()
        types.register(Widget, "Widget")
        assert types.names == sorted(["Widget", f"{__name__}.Widget"])
        assert len(types) == 1


class TestLookup:
    def test_class_passes_through(self) -> None:
        assert TypeRegistry().lookup(Widget) is Widget

    def test_unknown_bare_name(self) -> None:
        assert TypeRegistry().lookup("Widget") is None

    def test_dotted_import(self) -> None:
        assert TypeRegistry().lookup("collections.OrderedDict") is OrderedDict

    def test_colon_import(self) -> None:
        assert TypeRegistry().lookup("collections:OrderedDict") is OrderedDict

    def test_imported_type_is_cached(self) -> None:
        types = TypeRegistry()
        types.lookup("collections.OrderedDict")
        assert "collections.OrderedDict" in types.names

    def test_nested_class_import(self) -> None:
        assert TypeRegistry().lookup(f"{__name__}.Outer.Inner") is Outer.Inner

    def test_missing_module(self) -> None:
        assert TypeRegistry().lookup("nonexistent_module_xyz.Thing") is None

    def test_missing_attribute(self) -> None:
        assert TypeRegistry().lookup("collections.NoSuchThing") is None

    def test_non_class_attribute(self) -> None:
        assert TypeRegistry().lookup("collections.namedtuple") is None

    def test_imports_disabled(self) -> None:
        assert TypeRegistry(import_types=False).lookup("collections.OrderedDict") is None

    def test_contains(self) -> None:
        types = TypeRegistry()
        types.register(Widget, "Widget")
        assert "Widget" in types
        assert "Gadget" not in types
        assert 42 not in types


class TestSpec:
    def test_spec_cached(self) -> None:
        types = TypeRegistry()
        assert types.spec(Widget) is types.spec(Widget)
