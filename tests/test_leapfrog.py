"""
Tests for splitting Sobol sequences across workers.
"""

import numpy as np
import pytest

from sobol_qmc.errors import ConfigurationError, RangeError
from sobol_qmc.rng.direction_numbers import DirectionVectorTable
from sobol_qmc.rng.leapfrog import LeapfrogStream, block_ranges, generate_block, leapfrog_indices
from sobol_qmc.rng.sobol import SobolSequenceGenerator


class TestLeapfrogIndices:
    """Test leapfrog_indices helper."""

    def test_indices(self):
        """Test residue-class indices."""
        np.testing.assert_array_equal(leapfrog_indices(1, 4, 3), [1, 5, 9])
        np.testing.assert_array_equal(leapfrog_indices(0, 1, 5), [0, 1, 2, 3, 4])
        assert leapfrog_indices(3, 2, 0).shape == (0,)

    def test_validation(self):
        """Test that invalid arguments raise ValueError."""
        with pytest.raises(ValueError, match="offset"):
            leapfrog_indices(-1, 2, 3)
        with pytest.raises(ValueError, match="stride"):
            leapfrog_indices(0, 0, 3)


class TestLeapfrogStream:
    """Test LeapfrogStream."""

    def test_stride_one_is_sequence(self):
        """Test that a single worker reproduces the plain sequence."""
        stream = LeapfrogStream(dimension=5)
        expected = SobolSequenceGenerator(dimension=5).generate(64)
        np.testing.assert_array_equal(stream.take(64), expected)

    def test_offset_stride_one(self):
        """Test that an offset shifts the start of the sequence."""
        stream = LeapfrogStream(dimension=3, offset=10)
        expected = SobolSequenceGenerator(dimension=3).generate(30)[10:]
        np.testing.assert_array_equal(stream.take(20), expected)

    @pytest.mark.parametrize("n_workers", [2, 3, 4, 7])
    def test_workers_interleave_to_sequence(self, n_workers):
        """Test that interleaving all worker streams reproduces the sequence."""
        n_each = 16
        streams = [
            LeapfrogStream(dimension=4, offset=r, stride=n_workers) for r in range(n_workers)
        ]
        chunks = [s.take(n_each) for s in streams]

        merged = np.empty((n_each * n_workers, 4))
        for r, chunk in enumerate(chunks):
            merged[r::n_workers] = chunk

        expected = SobolSequenceGenerator(dimension=4).generate(n_each * n_workers)
        np.testing.assert_array_equal(merged, expected)

    def test_points_match_indices(self):
        """Test that each emitted point is the point at its index."""
        stream = LeapfrogStream(dimension=6, offset=5, stride=8)
        reference = SobolSequenceGenerator(dimension=6)
        for i in leapfrog_indices(5, 8, 10):
            assert stream.next_index == i
            np.testing.assert_array_equal(stream.next(), reference.point_at(int(i)))

    @pytest.mark.parametrize("stride", [2, 29, 30, 31, 40, 1000])
    def test_strides_around_bit_width(self, stride):
        """Test walked and jumped strides against random access."""
        stream = LeapfrogStream(dimension=4, offset=3, stride=stride)
        reference = SobolSequenceGenerator(dimension=4)
        points = stream.take(12)
        for k in range(12):
            np.testing.assert_array_equal(points[k], reference.point_at(3 + k * stride))

    def test_short_stride_walks_recursively(self, monkeypatch):
        """Test that a stride below the bit width never repositions the generator."""
        stream = LeapfrogStream(dimension=3, offset=2, stride=5)
        stream.next()

        def fail(i):
            raise AssertionError(f"unexpected jump to {i}")

        monkeypatch.setattr(stream._generator, "skip_to", fail)
        expected = SobolSequenceGenerator(dimension=3).generate(53)[7::5]
        np.testing.assert_array_equal(stream.take(10), expected)

    def test_numpy_settings(self):
        """Test offset and stride taken from numpy index arrays."""
        indices = leapfrog_indices(1, 4, 3)
        stream = LeapfrogStream(dimension=2, offset=indices[2], stride=np.int64(4))
        reference = SobolSequenceGenerator(dimension=2)
        np.testing.assert_array_equal(stream.next(), reference.point_at(9))
        np.testing.assert_array_equal(stream.next(), reference.point_at(13))

    def test_range_end(self):
        """Test that a stream stops at the last representable index."""
        table = DirectionVectorTable.from_rows([[8, 4, 2, 1]], bit_width=4)
        stream = LeapfrogStream(dimension=1, offset=3, stride=4, table=table, bit_width=4)

        with pytest.raises(RangeError):
            stream.take(5)
        assert stream.next_index == 3

        points = list(stream)
        assert len(points) == 4
        with pytest.raises(RangeError):
            stream.next()

    def test_validation(self):
        """Test that invalid stream settings raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="offset"):
            LeapfrogStream(dimension=2, offset=-1)
        with pytest.raises(ConfigurationError, match="stride"):
            LeapfrogStream(dimension=2, stride=0)
        with pytest.raises(ConfigurationError, match="exceeds"):
            LeapfrogStream(dimension=20)


class TestBlocks:
    """Test contiguous block decomposition."""

    def test_block_ranges(self):
        """Test that blocks cover all indices with balanced sizes."""
        assert block_ranges(10, 3) == [(0, 4), (4, 7), (7, 10)]
        assert block_ranges(4, 4) == [(0, 1), (1, 2), (2, 3), (3, 4)]
        assert block_ranges(2, 3) == [(0, 1), (1, 2), (2, 2)]

    def test_block_ranges_validation(self):
        """Test that invalid arguments raise ValueError."""
        with pytest.raises(ValueError, match="n_workers"):
            block_ranges(10, 0)

    def test_blocks_concatenate_to_sequence(self):
        """Test that generated blocks join into the plain sequence."""
        n_points = 1000
        blocks = [
            generate_block(start, stop, dimension=5) for start, stop in block_ranges(n_points, 6)
        ]
        expected = SobolSequenceGenerator(dimension=5).generate(n_points)
        np.testing.assert_array_equal(np.vstack(blocks), expected)

    def test_empty_block(self):
        """Test that an empty block has the right shape."""
        assert generate_block(5, 5, dimension=3).shape == (0, 3)
