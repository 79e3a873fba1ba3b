# Tests for element types and the type grid
"""
Test the (depth x channels) grid used for parameterized coverage.
"""

import cv2
import numpy as np
import pytest

from gputest import (
    ALL_DEPTHS,
    DEPTH_PAIRS,
    Depth,
    MatType,
    Size,
    all_types,
    mat_type_of,
    types,
)


class TestTypeGrid:
    """Tests for types() and all_types()."""

    def test_full_grid_has_28_unique_entries(self):
        """7 depths x 4 channel counts, no duplicates."""
        grid = all_types()
        assert len(grid) == 28
        assert len(set(grid)) == 28

    def test_full_grid_is_depth_major(self):
        """Channels vary fastest, depth slowest."""
        grid = all_types()
        assert grid[:4] == [MatType(Depth.U8, cn) for cn in (1, 2, 3, 4)]
        assert grid[4] == MatType(Depth.S8, 1)
        assert grid[-1] == MatType(Depth.F64, 4)

    def test_full_grid_is_stable(self):
        """Repeated calls return equal lists that callers cannot corrupt."""
        first = all_types()
        first.clear()
        assert all_types() == types(Depth.U8, Depth.F64, 1, 4)

    def test_sub_range(self):
        """Inclusive ranges on both axes."""
        subset = types(Depth.U8, Depth.S8, 1, 3)
        assert subset == [
            MatType(Depth.U8, 1), MatType(Depth.U8, 2), MatType(Depth.U8, 3),
            MatType(Depth.S8, 1), MatType(Depth.S8, 2), MatType(Depth.S8, 3),
        ]

    def test_single_entry_range(self):
        assert types(Depth.F32, Depth.F32, 4, 4) == [MatType(Depth.F32, 4)]

    def test_all_depths(self):
        assert len(ALL_DEPTHS) == 7
        assert ALL_DEPTHS[0] == Depth.U8
        assert ALL_DEPTHS[-1] == Depth.F64

    def test_depth_pairs_never_narrow(self):
        """Conversion pairs only go to the same or a wider kind."""
        assert len(DEPTH_PAIRS) == 20
        assert all(dst >= src for src, dst in DEPTH_PAIRS)
        assert (Depth.U8, Depth.S8) not in DEPTH_PAIRS
        assert (Depth.U16, Depth.S16) not in DEPTH_PAIRS


class TestMatType:
    """Tests for MatType codes and names."""

    @pytest.mark.parametrize("mat_type,code", [
        (MatType(Depth.U8, 1), cv2.CV_8UC1),
        (MatType(Depth.U8, 3), cv2.CV_8UC3),
        (MatType(Depth.S16, 2), cv2.CV_16SC2),
        (MatType(Depth.F32, 4), cv2.CV_32FC4),
        (MatType(Depth.F64, 1), cv2.CV_64FC1),
    ])
    def test_code_matches_opencv(self, mat_type, code):
        """Packed codes equal OpenCV's constants."""
        assert mat_type.code == code
        assert MatType.from_code(code) == mat_type

    def test_from_code_round_trip(self):
        for mat_type in all_types():
            assert MatType.from_code(mat_type.code) == mat_type

    def test_str(self):
        assert str(MatType(Depth.F32, 1)) == "CV_32FC1"
        assert str(MatType(Depth.U16, 3)) == "CV_16UC3"
        assert str(Depth.S8) == "CV_8S"

    def test_int_depth_is_converted(self):
        assert MatType(5, 2) == MatType(Depth.F32, 2)
        assert MatType(5, 2).depth is Depth.F32

    @pytest.mark.parametrize("cn", [0, 5])
    def test_invalid_channels(self, cn):
        with pytest.raises(ValueError):
            MatType(Depth.U8, cn)

    def test_shape_and_dtype(self):
        """Single channel buffers are 2D, others carry a channel axis."""
        assert MatType(Depth.U8, 1).shape(4, 3) == (3, 4)
        assert MatType(Depth.U8, 3).shape(4, 3) == (3, 4, 3)
        assert MatType(Depth.S32, 2).dtype == np.int32
        assert MatType(Depth.F64, 4).elem_size == 32


class TestMatTypeOf:
    """Tests for reading the type of a buffer."""

    def test_single_channel(self):
        assert mat_type_of(np.zeros((3, 4), np.uint16)) == MatType(Depth.U16, 1)

    def test_multi_channel(self):
        assert mat_type_of(np.zeros((3, 4, 3), np.float32)) == MatType(Depth.F32, 3)

    def test_unsupported_dtype(self):
        with pytest.raises(ValueError):
            mat_type_of(np.zeros((3, 4), np.int64))

    def test_unsupported_rank(self):
        with pytest.raises(ValueError):
            mat_type_of(np.zeros(5, np.uint8))

    def test_size_str(self):
        assert str(Size(128, 113)) == "128x113"
