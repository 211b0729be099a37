"""The public entry point: register singletons and resolve object graphs."""

import inspect
import logging
import types
from typing import Any, Iterator, Union, get_type_hints

from fieldwire.errors import InvalidValueKindError, UnresolvedDependencyError
from fieldwire.keys import is_interface, is_reference_value, type_name
from fieldwire.matcher import InterfaceMatcher
from fieldwire.registry import Binding, BindingRegistry, Dependency
from fieldwire.resolver import Resolver

__all__ = ["Container"]

logger = logging.getLogger(__name__)


class Container:
    """A dependency-injection container holding singleton bindings.

    Values are registered once and shared: resolving assigns their injection
    points in place, and every consumer receives the same instance.
    Containers are independent of each other and are not safe for concurrent
    use; serialize access from multiple threads externally.

    Example:
        >>> container = Container()
        >>> container.register(Dependency(Database()), Dependency(Service()))
        >>> service = container.resolve(Service)
        >>> service.db  # the registered Database
    """

    def __init__(self):
        self._registry = BindingRegistry()
        self._resolver = Resolver(self._registry, InterfaceMatcher())

    def register(self, *deps: Union[Dependency, Any]) -> None:
        """Add dependencies to the container.

        Args:
            *deps: ``Dependency`` instances, or bare objects to register unnamed.

        Raises:
            InvalidValueKindError: If a value is not an object reference.
            DuplicateRegistrationError: If a value's class and name are already registered.
        """
        for dep in deps:
            if not isinstance(dep, Dependency):
                dep = Dependency(dep)
            binding = self._registry.register(dep)
            logger.debug("Registered %s", binding.key)

    def resolve(self, target: Any) -> Any:
        """Resolve the unnamed binding for ``target``.

        See :meth:`resolve_by_name`.
        """
        return self.resolve_by_name("", target)

    def resolve_by_name(self, name: str, target: Any) -> Any:
        """Resolve the binding registered under ``name`` for ``target``.

        Args:
            name: The registration name; empty for the unnamed binding.
            target: A class or interface to look up, or an instance whose
                state is replaced with that of the resolved singleton.

        Returns:
            The resolved singleton when ``target`` is a class, otherwise ``target`` itself.

        Raises:
            InvalidValueKindError: If ``target`` is neither a class nor an object reference.
            UnresolvedDependencyError: If no binding matches, or a dependency
                anywhere in the graph is missing.
            DependencyError: For any other failure while populating the graph.
        """
        target_type = _target_type(target)
        binding = self._resolver.find(target_type, name)
        if binding is None:
            raise UnresolvedDependencyError(
                f"unable to find registered dependency: {type_name(target_type)}"
            )

        logger.debug("Resolving %s", binding.key)
        self._resolver.resolve(binding)

        if inspect.isclass(target):
            return binding.value
        return _copy_state(binding.value, target)

    def resolve_all(self) -> None:
        """Populate the injection points of every registered binding.

        Raises:
            DependencyError: The first failure encountered.
        """
        for binding in self._registry:
            self._resolver.resolve(binding)

    def resolve_new(self, target: Any) -> Any:
        """Return a blank instance shaped like the binding ``target`` resolves to.

        The instance is created without running its constructor and none of
        the registered values are copied into it: every annotated attribute
        without a class-level default is set to None. If nothing is registered
        for a concrete ``target``, its own class is used.

        Raises:
            InvalidValueKindError: If ``target`` is neither a class nor an object reference.
            UnresolvedDependencyError: If ``target`` is an interface with no registered implementation.
        """
        target_type = _target_type(target)
        binding = self._resolver.find(target_type, "")
        if binding is not None:
            blank_type = binding.value_type
        elif not is_interface(target_type):
            blank_type = target_type
        else:
            raise UnresolvedDependencyError(
                f"unable to find registered dependency: {type_name(target_type)}"
            )

        blank = _blank_instance(blank_type)
        if inspect.isclass(target):
            return blank
        return _copy_state(blank, target)

    def bindings(self) -> Iterator[Binding]:
        """Iterate over the registered bindings in registration order."""
        return iter(self._registry)

    def __len__(self) -> int:
        return len(self._registry)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(bindings={len(self._registry)})"


def _target_type(target: Any) -> type:
    if inspect.isclass(target):
        return target
    if is_reference_value(target):
        return type(target)
    raise InvalidValueKindError(
        "the resolution target must be a class or an object reference"
    )


def _blank_instance(cls: type) -> Any:
    instance = cls.__new__(cls)
    try:
        hints = get_type_hints(cls)
    except (NameError, TypeError):
        hints = getattr(cls, "__annotations__", {})

    for field in hints:
        default = inspect.getattr_static(cls, field, None)
        if default is not None and not isinstance(default, types.MemberDescriptorType):
            continue
        object.__setattr__(instance, field, None)
    return instance


def _copy_state(source: Any, target: Any) -> Any:
    if source is target:
        return target

    if hasattr(target, "__dict__"):
        state = dict(source.__dict__)
        target.__dict__.clear()
        target.__dict__.update(state)
    for slot in _slots(type(target)):
        if hasattr(source, slot):
            object.__setattr__(target, slot, getattr(source, slot))
    return target


def _slots(cls: type) -> list[str]:
    return [
        slot
        for klass in cls.__mro__
        for slot in _as_tuple(getattr(klass, "__slots__", ()))
        if slot not in ("__dict__", "__weakref__")
    ]


def _as_tuple(slots: Any) -> tuple:
    return (slots,) if isinstance(slots, str) else tuple(slots)
