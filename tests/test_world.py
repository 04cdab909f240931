"""Tests for World and entity management."""

import pytest

from hpdec_ecs.components.image import RGB, Component
from hpdec_ecs.core.buffer import PixelBuffer
from hpdec_ecs.core.pipeline import Pipe
from hpdec_ecs.core.world import World


# Mock component for testing
class MockComponent(Component):
    """Mock component for testing."""

    value: int


class TestWorld:
    """Tests for World ECS manager."""

    def test_creation(self) -> None:
        """Test World creation."""
        world = World()
        assert len(world.metadata) == 0
        assert world.metadata == {}
        assert not world.has_component(0, RGB)

    def test_new_entity(self) -> None:
        """Test entity creation."""
        world = World()
        eid1 = world.new_entity()
        eid2 = world.new_entity()

        assert eid1 == 0
        assert eid2 == 1
        assert eid1 in world.metadata
        assert eid2 in world.metadata

    def test_add_component(self) -> None:
        """Test adding component to entity."""
        world = World()
        eid = world.new_entity()

        world.add_component(eid, MockComponent(value=42))

        assert world.has_component(eid, MockComponent)
        assert world.get_component(eid, MockComponent).value == 42

    def test_add_component_replaces(self) -> None:
        """Test that adding a component of the same type replaces it."""
        world = World()
        eid = world.new_entity()

        world.add_component(eid, MockComponent(value=1))
        world.add_component(eid, MockComponent(value=2))

        assert world.get_component(eid, MockComponent).value == 2

    def test_add_component_nonexistent_entity(self) -> None:
        """Test adding component to non-existent entity raises error."""
        world = World()
        with pytest.raises(ValueError, match="does not exist"):
            world.add_component(999, MockComponent(value=1))

    def test_get_missing_component(self) -> None:
        """Test that missing components raise KeyError."""
        world = World()
        eid = world.new_entity()
        with pytest.raises(KeyError, match="No entities have component type"):
            world.get_component(eid, MockComponent)

        other = world.new_entity()
        world.add_component(other, MockComponent(value=1))
        with pytest.raises(KeyError, match="does not have component"):
            world.get_component(eid, MockComponent)

    def test_spawn_image(self) -> None:
        """Test spawning an image entity."""
        world = World()
        buf = PixelBuffer(width=4, height=2)

        eid = world.spawn_image(buf, path="in.hpdec")

        rgb = world.get_component(eid, RGB)
        assert rgb.buf is buf
        assert rgb.path == "in.hpdec"
        assert world.metadata[eid] == {"width": 4, "height": 2}

    def test_spawn_image_invalid(self) -> None:
        """Test that spawn_image rejects non-buffers."""
        world = World()
        with pytest.raises(TypeError, match="Expected PixelBuffer"):
            world.spawn_image([[0, 0, 0]])  # type: ignore[arg-type]

    def test_component_rejects_wrong_buffer_type(self) -> None:
        """Test that image components validate their buffer."""
        with pytest.raises(ValueError):
            RGB(buf="not a buffer")  # type: ignore[arg-type]

    def test_clear(self) -> None:
        """Test clearing the world."""
        world = World()
        world.spawn_image(PixelBuffer(width=1, height=1))
        world.spawn_image(PixelBuffer(width=1, height=1))

        world.clear()

        assert world.metadata == {}
        assert not world.has_component(0, RGB)
        assert world.new_entity() == 0

    def test_pipe(self) -> None:
        """Test pipe() returns a Pipe bound to the entity."""
        world = World()
        eid = world.new_entity()
        pipe = world.pipe(eid)

        assert isinstance(pipe, Pipe)
        assert pipe.entities == [eid]

    def test_repr(self) -> None:
        """Test string representation."""
        world = World()
        world.spawn_image(PixelBuffer(width=1, height=1))
        assert repr(world) == "World(entities=1, component_types=1)"
