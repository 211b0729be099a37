"""Depth-first population of injection points across registered bindings."""

import dataclasses
import logging
from typing import Any, Optional

from fieldwire.errors import (
    DependencyError,
    InvalidValueKindError,
    UnexportedFieldError,
    UnresolvedDependencyError,
)
from fieldwire.injection import InjectionPoint, injection_points
from fieldwire.keys import is_interface, is_reference_type, type_name
from fieldwire.matcher import InterfaceMatcher
from fieldwire.registry import Binding, BindingRegistry, BindingState

__all__ = ["Resolver"]

logger = logging.getLogger(__name__)


class Resolver:
    """Walks a binding's injection points, resolving and assigning each dependency.

    A binding is marked in progress before its fields are visited, so a cycle
    that leads back to it terminates there and the back-reference receives
    the instance still being populated. On failure the binding is reset to
    not started, leaving any fields assigned so far in place; resolving again
    walks all fields and reassigns them.
    """

    def __init__(self, registry: BindingRegistry, matcher: InterfaceMatcher):
        self._registry = registry
        self._matcher = matcher

    def find(self, t: type, name: str = "") -> Optional[Binding]:
        """Locate the binding for a concrete class by key, or for an interface by matching."""
        if is_interface(t):
            return self._matcher.find(self._registry, t, name)
        return self._registry.lookup(t, name)

    def resolve(self, binding: Binding) -> None:
        """Populate every injection point reachable from ``binding``.

        Raises:
            DependencyError: If any injection point on the path cannot be
                satisfied. The message is prefixed with the names of the
                enclosing classes, outermost first.
        """
        if binding.state is BindingState.IN_PROGRESS:
            logger.debug("Cycle back to %s, reusing in-progress instance", binding.key)
            return
        if binding.state is BindingState.DONE:
            return

        binding.state = BindingState.IN_PROGRESS
        owner = type_name(binding.value_type)
        try:
            for point in injection_points(binding.value_type):
                self._inject(binding, point, owner)
        except DependencyError:
            binding.state = BindingState.NOT_STARTED
            raise

        binding.state = BindingState.DONE

    def _inject(self, binding: Binding, point: InjectionPoint, owner: str) -> None:
        try:
            options = point.options
        except DependencyError as e:
            raise e.within(owner) from e

        if not _is_assignable(binding.value, point.field):
            raise UnexportedFieldError(f"cannot set field {point.field}", (owner,))
        if not is_reference_type(point.declared_type):
            raise InvalidValueKindError(f"cannot set field {point.field}", (owner,))

        dependency = self.find(point.declared_type, options.name)
        if dependency is None:
            raise UnresolvedDependencyError(
                f"unable to find registered dependency: {point.field}", (owner,)
            )

        try:
            self.resolve(dependency)
        except DependencyError as e:
            raise e.within(owner) from e

        try:
            setattr(binding.value, point.field, dependency.value)
        except AttributeError as e:
            raise UnexportedFieldError(
                f"cannot set field {point.field}", (owner,)
            ) from e


def _is_assignable(target: Any, field: str) -> bool:
    if field.startswith("_"):
        return False
    if dataclasses.is_dataclass(target) and target.__dataclass_params__.frozen:
        return False
    return True
