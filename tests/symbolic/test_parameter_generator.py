"""Unit tests for the ParameterGenerator class."""

from pddl_semantics import Pddl
from pddl_semantics.pddl.syntax import TypedName
from pddl_semantics.symbolic import ParameterGenerator


def test_generator_enumerates_cartesian_product(blocksworld: Pddl) -> None:
    """Verify that argument tuples follow the Cartesian product order over the parameters."""
    # Arrange - Create a generator over two block-typed parameters
    parameters = [TypedName("?x", ("block",)), TypedName("?y", ("block",))]
    generator = ParameterGenerator(blocksworld.objects, parameters)

    # Act - Enumerate all argument tuples
    groundings = [tuple(obj.name for obj in args) for args in generator]

    # Assert - Expect all 9 pairs (including repeated objects) in lexicographic order
    assert len(generator) == 9
    assert groundings[:4] == [("a", "a"), ("a", "b"), ("a", "c"), ("b", "a")]
    assert len(set(groundings)) == 9


def test_generator_is_restartable(blocksworld: Pddl) -> None:
    """Verify that each iteration over a generator starts a new pass."""
    # Arrange - Create a generator over one parameter
    generator = ParameterGenerator(blocksworld.objects, [TypedName("?x", ("block",))])

    # Act - Iterate over the generator twice
    first_pass = list(generator)
    second_pass = list(generator)

    # Assert - Expect both passes to produce the same tuples
    assert first_pass == second_pass
    assert len(first_pass) == 3


def test_generator_without_parameters(blocksworld: Pddl) -> None:
    """Verify that a generator over zero parameters produces exactly one empty tuple."""
    # Arrange - Create a generator with no parameters
    generator = ParameterGenerator(blocksworld.objects, [])

    # Act - Enumerate all argument tuples
    groundings = list(generator)

    # Assert - Expect a single empty grounding
    assert groundings == [()]
    assert len(generator) == 1


def test_generator_over_empty_type(no_grippers: Pddl) -> None:
    """Verify that a parameter whose type has no members produces no groundings."""
    # Arrange - Create a generator over a block and a gripper
    parameters = [TypedName("?b", ("block",)), TypedName("?g", ("gripper",))]
    generator = ParameterGenerator(no_grippers.objects, parameters)

    # Act/Assert - Expect nothing to be generated
    assert list(generator) == []
    assert len(generator) == 0


def test_generator_deduplicates_overlapping_types(transport: Pddl) -> None:
    """Verify that objects satisfying several allowed types are generated once."""
    # Arrange - Create a generator over a parameter that is either a vehicle or a boat
    generator = ParameterGenerator(transport.objects, [TypedName("?v", ("vehicle", "boat"))])

    # Act - Enumerate all argument tuples
    names = [args[0].name for args in generator]

    # Assert - Expect the amphibian to appear only once
    assert names == ["t1", "duck", "ferry"]
