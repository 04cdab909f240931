"""System base class for ECS transformations.

Systems are the "logic" layer of the ECS architecture. They operate on
components attached to entities, reading required components and producing
new components (or results in world metadata).

Example:
    >>> class MySystem(System):
    ...     def required_components(self):
    ...         return [RGB]
    ...     def produced_components(self):
    ...         return [BlurRGB]
    ...     def run(self, world, eids):
    ...         for eid in eids:
    ...             rgb = world.get_component(eid, RGB)
    ...             world.add_component(eid, BlurRGB(buf=box_blur(rgb.buf)))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hpdec_ecs.core.world import World


class System(ABC):
    """Base class for all ECS systems.

    Systems transform components attached to entities. They declare:
    - required_components(): What inputs they need
    - produced_components(): What outputs they create
    - run(): The actual transformation logic
    """

    @abstractmethod
    def required_components(self) -> list[type]:
        """Return list of component types this system requires as input."""

    @abstractmethod
    def produced_components(self) -> list[type]:
        """Return list of component types this system produces as output."""

    @abstractmethod
    def run(self, world: World, eids: list[int]) -> None:
        """Execute system on given entities.

        Args:
            world: World instance with entities and components
            eids: List of entity IDs to process
        """

    def can_run(self, world: World, eid: int) -> bool:
        """Check if entity has all required components.

        Example:
            >>> if system.can_run(world, eid):
            ...     system.run(world, [eid])
        """
        return all(world.has_component(eid, ct) for ct in self.required_components())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
