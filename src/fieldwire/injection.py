"""Declaration and parsing of injection points on class attributes.

Classes declare injection points with ``typing.Annotated`` and an ``Inject``
marker::

    class Service:
        db: Annotated[Database, Inject()]
        cache: Annotated[Cache, Inject("name=redis")]

Attributes annotated without an ``Inject`` marker are never touched by the
container, even when a binding of their exact type is registered.
"""

import functools
import inspect
import sys
import weakref
from dataclasses import dataclass
from typing import Annotated, Any, ForwardRef, Optional, get_args, get_origin

from fieldwire.errors import InvalidAnnotationError, InvalidValueKindError

__all__ = [
    "Inject",
    "InjectionOptions",
    "InjectionPoint",
    "parse_annotation",
    "injection_points",
]

NAME_KEY = "name"
RECOGNIZED_KEYS = frozenset({NAME_KEY})

_EVALUATION_ERRORS = (NameError, AttributeError, SyntaxError, TypeError)

_injection_tables = weakref.WeakKeyDictionary()


@dataclass(frozen=True)
class Inject:
    """Marks an annotated attribute as an injection point.

    Attributes:
        config: Comma-separated ``key=value`` pairs; empty for a default, unnamed injection.
    """

    config: str = ""


@dataclass(frozen=True)
class InjectionOptions:
    """Parsed form of an ``Inject`` marker.

    Attributes:
        name: Name the matching binding must be registered under; empty for unnamed.
    """

    name: str = ""


@dataclass(frozen=True)
class InjectionPoint:
    """An attribute of a class that the container populates.

    Attributes:
        field: The attribute name.
        declared_type: The type the attribute is annotated with.
        marker: The ``Inject`` marker found in the annotation.
    """

    field: str
    declared_type: Any
    marker: Inject

    @property
    def options(self) -> InjectionOptions:
        return parse_annotation(self.marker.config)


@functools.lru_cache(maxsize=None)
def parse_annotation(raw: str) -> InjectionOptions:
    """Parse the configuration string of an ``Inject`` marker.

    Args:
        raw: The marker configuration, e.g. ``""`` or ``"name=primary"``.

    Returns:
        The parsed options.

    Raises:
        InvalidAnnotationError: If a fragment is not ``key=value``, has an empty
            key or value, or uses an unrecognized key. The fragment is quoted
            verbatim in the error.
    """
    if raw == "":
        return InjectionOptions()

    values = {}
    for fragment in raw.split(","):
        parts = fragment.split("=")
        if len(parts) != 2:
            raise InvalidAnnotationError.for_fragment(fragment)

        key, value = parts
        if not key or not value or key not in RECOGNIZED_KEYS:
            raise InvalidAnnotationError.for_fragment(fragment)
        values[key] = value

    return InjectionOptions(name=values.get(NAME_KEY, ""))


def injection_points(cls: type) -> tuple[InjectionPoint, ...]:
    """Collect the injection points declared on ``cls`` and its base classes.

    The table is computed once per class and held only as long as the class
    is alive. Points are returned in declaration order, base class attributes
    first. Only annotations that can carry an ``Inject`` marker are
    evaluated: a string annotation that cannot be evaluated is treated as
    unmarked unless it mentions ``Inject``.

    Raises:
        InvalidValueKindError: If a marked annotation cannot be evaluated,
            e.g. because of a forward reference to an undefined name.
    """
    try:
        return _injection_tables[cls]
    except KeyError:
        pass

    points: dict[str, InjectionPoint] = {}
    for klass in reversed(cls.__mro__):
        try:
            annotations = inspect.get_annotations(klass)
        except NameError as e:
            raise _unreadable(cls, e) from e

        for field, annotation in annotations.items():
            point = _injection_point(cls, klass, field, annotation)
            if point is None:
                points.pop(field, None)
            else:
                points[field] = point

    result = tuple(points.values())
    _injection_tables[cls] = result
    return result


def _injection_point(
    cls: type, klass: type, field: str, annotation: Any
) -> Optional[InjectionPoint]:
    if isinstance(annotation, str):
        try:
            annotation = _evaluate(annotation, klass)
        except _EVALUATION_ERRORS as e:
            if Inject.__name__ in annotation:
                raise _unreadable(cls, e) from e
            return None

    marker = _find_marker(annotation)
    if marker is None:
        return None

    declared_type, *_ = get_args(annotation)
    if isinstance(declared_type, ForwardRef):
        try:
            declared_type = _evaluate(declared_type.__forward_arg__, klass)
        except _EVALUATION_ERRORS as e:
            raise _unreadable(cls, e) from e

    return InjectionPoint(field, declared_type, marker)


def _evaluate(expression: str, klass: type) -> Any:
    module = sys.modules.get(klass.__module__)
    globalns = vars(module) if module else {}
    return eval(expression, globalns, dict(vars(klass)))


def _unreadable(cls: type, e: Exception) -> InvalidValueKindError:
    return InvalidValueKindError(f"cannot read annotations of {cls.__name__}: {e}")


def _find_marker(annotation: Any) -> Optional[Inject]:
    if get_origin(annotation) is not Annotated:
        return None
    _, *metadata = get_args(annotation)
    return next((m for m in metadata if isinstance(m, Inject)), None)
