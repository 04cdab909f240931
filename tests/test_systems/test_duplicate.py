"""Tests for duplication and red-channel perturbation."""

import numpy as np
import pytest

from hpdec_ecs.components.image import RGB, CopyRGB
from hpdec_ecs.core.buffer import Pixel, PixelBuffer
from hpdec_ecs.core.world import World
from hpdec_ecs.errors import AllocationError
from hpdec_ecs.systems.duplicate import Duplicate, PerturbRed, duplicate, perturb_red


@pytest.fixture
def random_buffer() -> PixelBuffer:
    """Create a random 4x3 buffer."""
    rng = np.random.default_rng(3)
    return PixelBuffer.from_array(rng.integers(0, 256, (3, 4, 3), dtype=np.uint8))


class TestDuplicate:
    """Tests for duplicate."""

    def test_equal(self, random_buffer: PixelBuffer) -> None:
        """Test the copy equals the source."""
        copy = duplicate(random_buffer)
        assert copy == random_buffer
        assert copy is not random_buffer

    def test_independent(self, random_buffer: PixelBuffer) -> None:
        """Test mutations do not cross between source and copy."""
        original = random_buffer.view().copy()
        copy = duplicate(random_buffer)

        copy.set(0, 0, Pixel(1, 2, 3))
        copy.view()[2] = 0
        assert np.array_equal(random_buffer.view(), original)

        random_buffer.set(3, 2, Pixel(9, 9, 9))
        assert copy.get(3, 2) == Pixel(0, 0, 0)

    def test_no_shared_memory(self, random_buffer: PixelBuffer) -> None:
        """Test the storages do not overlap."""
        copy = duplicate(random_buffer)
        assert not np.shares_memory(copy.view(), random_buffer.view())

    def test_allocation_failure(
        self,
        random_buffer: PixelBuffer,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test AllocationError leaves the source untouched."""
        original = random_buffer.view().copy()

        def fail(*args: object, **kwargs: object) -> None:
            raise MemoryError

        monkeypatch.setattr(np, "zeros", fail)
        with pytest.raises(AllocationError):
            duplicate(random_buffer)
        monkeypatch.undo()

        assert np.array_equal(random_buffer.view(), original)


class TestPerturbRed:
    """Tests for perturb_red."""

    def test_first_pixels(self) -> None:
        """Test red is shifted modulo 255 for the first pixels only."""
        buf = PixelBuffer.from_array(
            np.array([[[0, 1, 2], [100, 1, 2], [205, 1, 2], [254, 1, 2]]], dtype=np.uint8)
        )

        n = perturb_red(buf, count=3, delta=50)

        assert n == 3
        assert [buf.get(x, 0).red for x in range(4)] == [50, 150, 0, 254]
        assert [buf.get(x, 0).green for x in range(4)] == [1, 1, 1, 1]

    def test_small_image(self) -> None:
        """Test count is capped at the number of pixels."""
        buf = PixelBuffer(width=2, height=1)
        assert perturb_red(buf, count=5) == 2
        assert buf.get(1, 0) == Pixel(50, 0, 0)

    def test_wraps_255(self) -> None:
        """Test a full red channel becomes (255 + delta) % 255."""
        buf = PixelBuffer.from_array(np.full((1, 1, 3), 255, dtype=np.uint8))
        perturb_red(buf, count=1, delta=50)
        assert buf.get(0, 0) == Pixel(50, 255, 255)


class TestSystems:
    """Tests for the Duplicate and PerturbRed systems."""

    def test_duplicate_components(self) -> None:
        """Test required and produced components."""
        assert Duplicate().required_components() == [RGB]
        assert Duplicate().produced_components() == [CopyRGB]

    def test_perturb_components(self) -> None:
        """Test required and produced components."""
        assert PerturbRed().required_components() == [CopyRGB]
        assert PerturbRed().produced_components() == []

    def test_perturb_invalid_count(self) -> None:
        """Test negative counts are rejected."""
        with pytest.raises(ValueError):
            PerturbRed(count=-1)

    def test_run(self, random_buffer: PixelBuffer) -> None:
        """Test the systems together leave RGB untouched."""
        world = World()
        eid = world.spawn_image(random_buffer)
        original = random_buffer.view().copy()

        Duplicate().run(world, [eid])
        PerturbRed(count=5, delta=50).run(world, [eid])

        copy = world.get_component(eid, CopyRGB)
        assert copy.modified == 5
        assert np.array_equal(world.get_component(eid, RGB).buf.view(), original)
        expected = (original.reshape(-1, 3)[:5, 0].astype(int) + 50) % 255
        assert copy.buf.flat[:5, 0].tolist() == expected.tolist()

    def test_repr(self) -> None:
        """Test string representation."""
        assert repr(PerturbRed(count=2, delta=7)) == "PerturbRed(count=2, delta=7)"
