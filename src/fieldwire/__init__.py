"""Fieldwire dependency injection container.

Fieldwire wires object graphs made of shared singletons. Callers register
ready-made instances; classes declare which of their attributes should be
populated with ``typing.Annotated`` markers; the container walks the graph
depth-first and assigns every marked attribute the registered value that
matches its type, or the first registered value implementing it when the
type is a Protocol or abstract class.

Key Features:
    - Singleton registration with optional names for disambiguation
    - Attribute injection declared with standard type hints
    - Protocol and abstract base class matching, cached per binding
    - Cyclic graphs resolve to the shared in-progress instance
    - Errors carry the path of enclosing classes to the failing attribute

Basic Usage:
    >>> from typing import Annotated
    >>> from fieldwire import Container, Dependency, Inject
    >>>
    >>> class Service:
    ...     db: Annotated[Database, Inject()]
    ...     cache: Annotated[Cache, Inject("name=redis")]
    >>>
    >>> container = Container()
    >>> container.register(
    ...     Dependency(Service()),
    ...     Dependency(Database()),
    ...     Dependency(RedisCache(), name="redis"),
    ... )
    >>> service = container.resolve(Service)

The package consists of several modules:
    - container: The public ``Container`` operations
    - registry: Dependencies, bindings and key uniqueness
    - injection: The ``Inject`` marker and its annotation grammar
    - matcher: Interface satisfaction with per-binding caching
    - resolver: Recursive, cycle-safe population of injection points
    - keys: Binding key derivation and type classification
    - errors: Framework-specific exceptions
"""

from fieldwire.container import Container
from fieldwire.errors import (
    DependencyError,
    DuplicateRegistrationError,
    InvalidAnnotationError,
    InvalidValueKindError,
    UnexportedFieldError,
    UnresolvedDependencyError,
)
from fieldwire.injection import Inject
from fieldwire.registry import Dependency

__all__ = [
    "Container",
    "Dependency",
    "Inject",
    "DependencyError",
    "DuplicateRegistrationError",
    "InvalidAnnotationError",
    "InvalidValueKindError",
    "UnexportedFieldError",
    "UnresolvedDependencyError",
]
