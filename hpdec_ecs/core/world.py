"""World: Entity-Component-System manager.

The World is the central ECS registry that manages:
- Entity creation (integer IDs)
- Component storage (type -> entity -> component mapping)
- Per-entity metadata (results such as comparison counts)

Example:
    >>> world = World()
    >>> eid = world.spawn_image(buf)
    >>> world.add_component(eid, RefRGB(buf=ref))
    >>> world.has_component(eid, RefRGB)
    True
    >>> world.clear()  # Release everything
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel

from hpdec_ecs.core.buffer import PixelBuffer

Component = BaseModel

T = TypeVar("T", bound=Component)


class World:
    """Central ECS registry managing entities, components and metadata.

    Each component owns its PixelBuffer, and the World owns the components:
    clearing the world releases every buffer.

    Attributes:
        metadata: Per-entity metadata dict

    Example:
        >>> world = World()
        >>> eid = world.spawn_image(codec.load("in.hpdec"), path="in.hpdec")
        >>> world.has_component(eid, RGB)
        True
    """

    def __init__(self) -> None:
        self._next_eid = 0
        self._components: dict[type[Component], dict[int, Component]] = {}
        self.metadata: dict[int, dict[str, Any]] = {}

    def new_entity(self) -> int:
        """Create a new entity and return its ID.

        Returns:
            Entity ID (monotonically increasing integer)
        """
        eid = self._next_eid
        self._next_eid += 1
        self.metadata[eid] = {}
        return eid

    def spawn_image(self, buf: PixelBuffer, path: str | None = None) -> int:
        """Create an entity holding buf as its RGB component.

        Args:
            buf: Decoded image, ownership passes to the world
            path: File the image came from, if any

        Returns:
            Entity ID with RGB component attached
        """
        # Import here to avoid circular dependency
        from hpdec_ecs.components.image import RGB

        if not isinstance(buf, PixelBuffer):
            raise TypeError(f"Expected PixelBuffer, got {type(buf)}")

        eid = self.new_entity()
        self.add_component(eid, RGB(buf=buf, path=path))

        self.metadata[eid]["width"] = buf.width
        self.metadata[eid]["height"] = buf.height

        return eid

    def clear(self) -> None:
        """Drop all entities and components.

        Example:
            >>> world = World()
            >>> eid = world.spawn_image(buf)
            >>> world.clear()
            >>> world.metadata
            {}
        """
        self._next_eid = 0
        self._components.clear()
        self.metadata.clear()

    def add_component(self, eid: int, component: Component) -> None:
        """Attach a component to an entity, replacing one of the same type.

        Raises:
            ValueError: If entity does not exist
        """
        if eid not in self.metadata:
            raise ValueError(f"Entity {eid} does not exist")

        comp_type = type(component)
        if comp_type not in self._components:
            self._components[comp_type] = {}

        self._components[comp_type][eid] = component

    def get_component(self, eid: int, comp_type: type[T]) -> T:
        """Retrieve a component from an entity.

        Raises:
            KeyError: If entity does not have the component
        """
        if comp_type not in self._components:
            raise KeyError(f"No entities have component type {comp_type.__name__}")
        if eid not in self._components[comp_type]:
            raise KeyError(f"Entity {eid} does not have component {comp_type.__name__}")

        return self._components[comp_type][eid]  # type: ignore

    def has_component(self, eid: int, comp_type: type[Component]) -> bool:
        return (
            comp_type in self._components
            and eid in self._components[comp_type]
        )

    def pipe(self, entity: int) -> Any:
        """Create a pipeline for the given entity.

        Systems are executed in order when `.out()` or `.execute()` is called.

        Example:
            >>> blurred = (
            ...     world.pipe(entity)
            ...     .to(Duplicate())
            ...     .to(BoxBlur3x3())
            ...     .out(BlurRGB)
            ... )
        """
        from hpdec_ecs.core.pipeline import Pipe

        return Pipe(world=self, entity=entity)

    def __repr__(self) -> str:
        num_entities = len(self.metadata)
        num_comp_types = len(self._components)
        return f"World(entities={num_entities}, component_types={num_comp_types})"
