import abc
from typing import Protocol

import pytest

from fieldwire.keys import (
    binding_key,
    interface_id,
    is_interface,
    is_reference_type,
    is_reference_value,
    type_kind,
)


class Greeter(Protocol):
    def greet(self) -> str: ...


class Store(abc.ABC):
    @abc.abstractmethod
    def save(self, item) -> None: ...


class MemoryStore(Store):
    def save(self, item) -> None:
        pass


class Plain:
    pass


def test_key_for_concrete_class():
    assert binding_key(Plain) == f"{__name__}-Plain-ptr"


def test_key_includes_name_when_given():
    assert binding_key(Plain, "x") == f"{__name__}-Plain-ptr-x"
    assert binding_key(Plain, "x") != binding_key(Plain, "y")


def test_key_for_interface():
    assert binding_key(Greeter) == f"{__name__}-Greeter-interface"


def test_nested_classes_use_qualified_name():
    class Inner:
        pass

    assert binding_key(Inner).endswith(
        "test_nested_classes_use_qualified_name.<locals>.Inner-ptr"
    )


@pytest.mark.parametrize("t", [Greeter, Store])
def test_protocols_and_abstract_classes_are_interfaces(t):
    assert is_interface(t)
    assert type_kind(t) == "interface"


@pytest.mark.parametrize("t", [Plain, MemoryStore, dict])
def test_concrete_classes_are_not_interfaces(t):
    assert not is_interface(t)
    assert type_kind(t) == "ptr"


@pytest.mark.parametrize("t", [Plain, Greeter, Store, dict, list])
def test_reference_types(t):
    assert is_reference_type(t)


@pytest.mark.parametrize("t", [int, str, bool, bytes, tuple, type(None), list[int], "Plain"])
def test_value_and_non_class_types_are_not_references(t):
    assert not is_reference_type(t)


@pytest.mark.parametrize("value", [Plain(), MemoryStore(), {}, []])
def test_reference_values(value):
    assert is_reference_value(value)


@pytest.mark.parametrize("value", [None, 1, 1.5, "s", b"b", (1,), frozenset(), Plain])
def test_non_reference_values(value):
    assert not is_reference_value(value)


def test_interface_id_is_qualified():
    assert interface_id(Greeter) == f"{__name__}.Greeter"
