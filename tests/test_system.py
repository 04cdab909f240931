"""Tests for System base class."""

import pytest

from hpdec_ecs.components.image import Component
from hpdec_ecs.core.system import System
from hpdec_ecs.core.world import World


class MockInput(Component):
    """Mock input component."""

    value: int


class MockOutput(Component):
    """Mock output component."""

    result: int


class MockSystem(System):
    """Mock system doubling MockInput.value into MockOutput.result."""

    def required_components(self) -> list[type]:
        return [MockInput]

    def produced_components(self) -> list[type]:
        return [MockOutput]

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            input_comp = world.get_component(eid, MockInput)
            world.add_component(eid, MockOutput(result=input_comp.value * 2))


class TestSystemBase:
    """Tests for System base class."""

    def test_abstract(self) -> None:
        """Test that System cannot be instantiated directly."""
        with pytest.raises(TypeError):
            System()  # type: ignore[abstract]

    def test_can_run(self) -> None:
        """Test dependency check."""
        world = World()
        eid = world.new_entity()
        system = MockSystem()

        assert not system.can_run(world, eid)
        world.add_component(eid, MockInput(value=3))
        assert system.can_run(world, eid)

    def test_run(self) -> None:
        """Test running the system."""
        world = World()
        eids = [world.new_entity() for _ in range(3)]
        for i, eid in enumerate(eids):
            world.add_component(eid, MockInput(value=i))

        MockSystem().run(world, eids)

        assert [world.get_component(eid, MockOutput).result for eid in eids] == [0, 2, 4]

    def test_repr(self) -> None:
        """Test default representation."""
        assert repr(MockSystem()) == "MockSystem()"
