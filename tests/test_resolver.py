from dataclasses import dataclass
from typing import Annotated

import pytest

from fieldwire.errors import UnexportedFieldError, UnresolvedDependencyError
from fieldwire.injection import Inject
from fieldwire.matcher import InterfaceMatcher
from fieldwire.registry import BindingRegistry, BindingState, Dependency
from fieldwire.resolver import Resolver


class Leaf:
    def __init__(self, value: int = 0):
        self.value = value


class Missing:
    pass


class Partial:
    leaf: Annotated[Leaf, Inject()]
    missing: Annotated[Missing, Inject()]


class Holder:
    leaf: Annotated[Leaf, Inject()]


class Outer:
    holder: Annotated[Holder, Inject()]


class Loop:
    me: Annotated["Loop", Inject()]


@dataclass(frozen=True)
class FrozenHolder:
    leaf: Annotated[Leaf, Inject()] = None


class ReadOnly:
    leaf: Annotated[Leaf, Inject()]

    @property
    def leaf(self) -> Leaf:
        return None


@pytest.fixture
def registry() -> BindingRegistry:
    return BindingRegistry()


@pytest.fixture
def resolver(registry) -> Resolver:
    return Resolver(registry, InterfaceMatcher())


def test_successful_resolution_marks_binding_done(registry, resolver):
    holder = registry.register(Dependency(Holder()))
    leaf = registry.register(Dependency(Leaf(3)))

    resolver.resolve(holder)

    assert holder.state is BindingState.DONE
    assert leaf.state is BindingState.DONE
    assert holder.value.leaf is leaf.value


def test_done_binding_is_not_walked_again(registry, resolver):
    holder = registry.register(Dependency(Holder()))
    registry.register(Dependency(Leaf()))
    resolver.resolve(holder)

    holder.value.leaf = None
    resolver.resolve(holder)

    assert holder.value.leaf is None


def test_self_reference_receives_the_in_progress_instance(registry, resolver):
    loop = registry.register(Dependency(Loop()))

    resolver.resolve(loop)

    assert loop.value.me is loop.value
    assert loop.state is BindingState.DONE


def test_failure_resets_state_and_keeps_earlier_assignments(registry, resolver):
    partial = registry.register(Dependency(Partial()))
    leaf = registry.register(Dependency(Leaf()))

    with pytest.raises(UnresolvedDependencyError, match=r"\[Partial\] .*: missing"):
        resolver.resolve(partial)

    assert partial.state is BindingState.NOT_STARTED
    assert partial.value.leaf is leaf.value


def test_failure_resets_every_enclosing_binding(registry, resolver):
    outer = registry.register(Dependency(Outer()))
    holder = registry.register(Dependency(Holder()))

    with pytest.raises(UnresolvedDependencyError) as excinfo:
        resolver.resolve(outer)

    assert str(excinfo.value) == "[Outer] [Holder] unable to find registered dependency: leaf"
    assert outer.state is BindingState.NOT_STARTED
    assert holder.state is BindingState.NOT_STARTED


def test_retry_after_failure_reassigns_fields(registry, resolver):
    partial = registry.register(Dependency(Partial()))
    leaf = registry.register(Dependency(Leaf()))
    with pytest.raises(UnresolvedDependencyError):
        resolver.resolve(partial)

    partial.value.leaf = None
    registry.register(Dependency(Missing()))
    resolver.resolve(partial)

    assert partial.state is BindingState.DONE
    assert partial.value.leaf is leaf.value
    assert isinstance(partial.value.missing, Missing)


def test_frozen_dataclass_fields_cannot_be_set(registry, resolver):
    frozen = registry.register(Dependency(FrozenHolder()))
    registry.register(Dependency(Leaf()))

    with pytest.raises(UnexportedFieldError, match=r"\[FrozenHolder\] cannot set field leaf"):
        resolver.resolve(frozen)

    assert frozen.value.leaf is None


def test_read_only_attribute_is_reported_as_unexported(registry, resolver):
    read_only = registry.register(Dependency(ReadOnly()))
    registry.register(Dependency(Leaf()))

    with pytest.raises(UnexportedFieldError, match=r"\[ReadOnly\] cannot set field leaf"):
        resolver.resolve(read_only)

    assert read_only.state is BindingState.NOT_STARTED


def test_find_uses_exact_key_for_concrete_types(registry, resolver):
    unnamed = registry.register(Dependency(Leaf()))
    named = registry.register(Dependency(Leaf(), name="x"))

    assert resolver.find(Leaf) is unnamed
    assert resolver.find(Leaf, "x") is named
    assert resolver.find(Holder) is None
