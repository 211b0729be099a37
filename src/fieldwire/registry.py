"""Registration of singleton dependencies and the bindings derived from them."""

import enum
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from fieldwire.errors import DuplicateRegistrationError, InvalidValueKindError
from fieldwire.keys import binding_key, is_reference_value, type_name

__all__ = [
    "Dependency",
    "Binding",
    "BindingState",
    "BindingRegistry",
]


@dataclass(frozen=True)
class Dependency:
    """A value supplied to the container.

    Attributes:
        value: The object to share. The container keeps a reference to it for
            its whole lifetime and assigns its injection points in place.
        name: Optional name used to disambiguate several registrations of the same type.
    """

    value: Any
    name: str = ""


class BindingState(enum.Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    DONE = "done"


@dataclass(eq=False)
class Binding:
    """A registered dependency with its derived identity and resolution state.

    Attributes:
        dependency: The dependency this binding was created from.
        key: The registry key derived from the value's class and the dependency name.
        state: Progress of resolving the value's injection points.
        implements: Cache of interface identifiers to whether the value satisfies them.
    """

    dependency: Dependency
    key: str
    state: BindingState = BindingState.NOT_STARTED
    implements: dict[str, bool] = field(default_factory=dict)

    @property
    def value(self) -> Any:
        return self.dependency.value

    @property
    def name(self) -> str:
        return self.dependency.name

    @property
    def value_type(self) -> type:
        return type(self.dependency.value)


class BindingRegistry:
    """Mapping from binding key to binding, enforcing key uniqueness."""

    def __init__(self):
        self._bindings: dict[str, Binding] = {}

    def register(self, dependency: Dependency) -> Binding:
        """Create a binding for ``dependency`` and store it under its derived key.

        Args:
            dependency: The dependency to register.

        Returns:
            The newly created binding.

        Raises:
            InvalidValueKindError: If the value is not an object reference.
            DuplicateRegistrationError: If a binding with the same key already exists.
        """
        value = dependency.value
        if not is_reference_value(value):
            raise InvalidValueKindError(
                f"{_describe(value)} should be an object reference"
            )

        key = binding_key(type(value), dependency.name)
        if key in self._bindings:
            raise DuplicateRegistrationError(f"duplicate dependency: {key}")

        binding = Binding(dependency, key)
        self._bindings[key] = binding
        return binding

    def lookup(self, t: type, name: str = "") -> Optional[Binding]:
        return self._bindings.get(binding_key(t, name))

    def __iter__(self) -> Iterator[Binding]:
        return iter(list(self._bindings.values()))

    def __len__(self) -> int:
        return len(self._bindings)

    def __contains__(self, key: str) -> bool:
        return key in self._bindings


def _describe(value: Any) -> str:
    if value is None:
        return "None"
    if isinstance(value, type):
        return f"class {type_name(value)}"
    t = type(value)
    return f"{t.__module__}.{t.__qualname__}"
