"""Exceptions raised by the container."""

from typing import Optional

__all__ = [
    "DependencyError",
    "InvalidValueKindError",
    "DuplicateRegistrationError",
    "UnresolvedDependencyError",
    "UnexportedFieldError",
    "InvalidAnnotationError",
]


class DependencyError(Exception):
    """Raised when a dependency cannot be registered, resolved or is misannotated.

    Attributes:
        message: The bare description of the failure.
        path: Names of the enclosing classes the failure occurred under, outermost first.
    """

    def __init__(self, message: str, path: tuple[str, ...] = ()):
        super().__init__(" ".join([f"[{owner}]" for owner in path] + [message]))
        self.message = message
        self.path = path

    def within(self, owner: str) -> "DependencyError":
        """Return a copy of this error with ``owner`` prepended to its path."""
        return self.__class__(self.message, (owner,) + self.path)


class InvalidValueKindError(DependencyError):
    """Raised when a value, resolution target or field type is not an object reference."""

    pass


class DuplicateRegistrationError(DependencyError):
    """Raised when two dependencies derive the same binding key."""

    pass


class UnresolvedDependencyError(DependencyError):
    """Raised when no registered binding matches a requested type and name."""

    pass


class UnexportedFieldError(DependencyError):
    """Raised when an injection point cannot be assigned from outside its class."""

    pass


class InvalidAnnotationError(DependencyError):
    """Raised when an ``Inject`` marker carries malformed configuration.

    Attributes:
        fragment: The offending ``key=value`` fragment, verbatim.
    """

    def __init__(
        self,
        message: str,
        path: tuple[str, ...] = (),
        fragment: Optional[str] = None,
    ):
        super().__init__(message, path)
        self.fragment = fragment

    @classmethod
    def for_fragment(cls, fragment: str) -> "InvalidAnnotationError":
        return cls(
            f"invalid annotation configuration '{fragment}', expecting <key>=<value>",
            fragment=fragment,
        )

    def within(self, owner: str) -> "InvalidAnnotationError":
        return self.__class__(self.message, (owner,) + self.path, self.fragment)
