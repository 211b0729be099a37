"""Binding key derivation and classification of types and values."""

import inspect
from typing import Any

__all__ = [
    "POINTER",
    "INTERFACE",
    "binding_key",
    "type_kind",
    "type_name",
    "interface_id",
    "is_interface",
    "is_reference_type",
    "is_reference_value",
]

POINTER = "ptr"
INTERFACE = "interface"

# Values of these types are copied around rather than shared, so they cannot
# act as singletons or injection targets.
_VALUE_TYPES = (bool, int, float, complex, str, bytes, tuple, frozenset)


def is_interface(t: Any) -> bool:
    """Return True if ``t`` is a capability set rather than a concrete class.

    Protocol classes and abstract base classes with unimplemented abstract
    methods count as interfaces.
    """
    if not inspect.isclass(t):
        return False
    return bool(getattr(t, "_is_protocol", False)) or inspect.isabstract(t)


def is_reference_type(t: Any) -> bool:
    """Return True if a field declared as ``t`` can hold a shared object reference."""
    if not inspect.isclass(t):
        return False
    try:
        return not issubclass(t, _VALUE_TYPES) and t is not type(None)
    except TypeError:
        return False


def is_reference_value(value: Any) -> bool:
    """Return True if ``value`` is an object instance that can be registered or resolved into."""
    if value is None or inspect.isclass(value):
        return False
    return not isinstance(value, _VALUE_TYPES)


def type_kind(t: type) -> str:
    return INTERFACE if is_interface(t) else POINTER


def type_name(t: Any) -> str:
    """Short display name used in error breadcrumbs."""
    return getattr(t, "__name__", None) or repr(t)


def interface_id(t: type) -> str:
    """Identifier of an interface in the per-binding satisfaction cache."""
    return f"{t.__module__}.{t.__qualname__}"


def binding_key(t: type, name: str = "") -> str:
    """Derive the registry key for a type and an optional name.

    Args:
        t: The concrete class or interface.
        name: Optional disambiguating name; omitted from the key when empty.

    Returns:
        ``"<module>-<qualname>-<kind>"`` with ``"-<name>"`` appended for named bindings.

    Example:
        >>> binding_key(Leaf)          # "app.models-Leaf-ptr"
        >>> binding_key(Leaf, "x")     # "app.models-Leaf-ptr-x"
    """
    key = f"{t.__module__}-{t.__qualname__}-{type_kind(t)}"
    if name:
        return f"{key}-{name}"
    return key
