"""Matching interface-typed injection points to registered bindings."""

import inspect
import logging
from typing import Any, Iterable, Optional

from fieldwire.keys import interface_id
from fieldwire.registry import Binding

__all__ = ["InterfaceMatcher", "satisfies", "protocol_members"]

logger = logging.getLogger(__name__)

_IGNORED_MEMBERS = frozenset(
    {
        "__abstractmethods__",
        "__annotations__",
        "__dict__",
        "__doc__",
        "__init__",
        "__module__",
        "__new__",
        "__slots__",
        "__subclasshook__",
        "__weakref__",
        "__class_getitem__",
        "__protocol_attrs__",
        "__non_callable_proto_members__",
        "__type_params__",
        "__parameters__",
        "__orig_bases__",
        "__static_attributes__",
        "__firstlineno__",
        "__annotate__",
        "__annotate_func__",
        "__annotations_cache__",
        "__qualname__",
    }
)


def protocol_members(protocol: type) -> frozenset[str]:
    """Names of the methods and attributes a ``typing.Protocol`` requires."""
    members = set()
    for base in protocol.__mro__[:-1]:
        if base.__name__ in ("Protocol", "Generic"):
            continue
        names = set(base.__dict__) | set(inspect.get_annotations(base))
        members.update(
            name
            for name in names
            if not name.startswith(("_abc_", "_is_"))
            and name not in _IGNORED_MEMBERS
            and (not _is_dunder(name) or callable(base.__dict__.get(name)))
        )
    return frozenset(members)


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def satisfies(value: Any, interface: type) -> bool:
    """Return True if ``value`` structurally implements ``interface``.

    Protocols are checked member by member against the value; abstract base
    classes through ``issubclass``, which honours virtual subclasses.
    Introspection failures count as not satisfying.
    """
    try:
        if getattr(interface, "_is_protocol", False):
            return all(hasattr(value, m) for m in protocol_members(interface))
        return inspect.isclass(interface) and issubclass(type(value), interface)
    except (TypeError, AttributeError, NameError):
        return False


class InterfaceMatcher:
    """Finds the first binding whose value implements a given interface."""

    def find(
        self, bindings: Iterable[Binding], interface: type, name: str = ""
    ) -> Optional[Binding]:
        """Scan ``bindings`` for an implementation of ``interface``.

        Args:
            bindings: Candidate bindings, scanned in iteration order.
            interface: The Protocol or abstract class required.
            name: If non-empty, only bindings registered under this name are considered.

        Returns:
            The first satisfying binding, or None if there is none.
        """
        iface = interface_id(interface)
        for binding in bindings:
            if name and binding.name != name:
                continue

            if iface not in binding.implements:
                logger.debug("Checking %s against interface %s", binding.key, iface)
                binding.implements[iface] = satisfies(binding.value, interface)

            if binding.implements[iface]:
                return binding

        return None
