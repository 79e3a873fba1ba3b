# Tests for test parameter helpers
"""
Test labelled parameter wrappers, code families and parameter combination.
"""

import cv2
import pytest

from gputest import (
    ALL_BORDER_TYPES,
    ALL_CHANNELS,
    DIFFERENT_SIZES,
    DIRECT_INVERSE,
    IMAGE_CHANNELS,
    WHOLE_SUBMAT,
    BorderType,
    CodeFamily,
    Depth,
    Interpolation,
    MatType,
    NormCode,
    ParamTuple,
    Size,
    WarpFlags,
    combine,
    named,
    param_id,
    use_roi,
)


class TestNamedValue:
    """Tests for labelled primitive parameters."""

    def test_labels(self):
        assert [str(v) for v in WHOLE_SUBMAT] == ["whole matrix", "sub matrix"]
        assert [str(v) for v in DIRECT_INVERSE] == ["direct", "inverse"]
        assert str(named("Ksize", 3)) == "Ksize(3)"

    def test_values(self):
        assert [v.value for v in WHOLE_SUBMAT] == [False, True]
        assert [v.value for v in ALL_CHANNELS] == [1, 2, 3, 4]
        assert [v.value for v in IMAGE_CHANNELS] == [1, 3, 4]

    def test_no_implicit_truth_value(self):
        """Wrappers must be unwrapped explicitly."""
        with pytest.raises(TypeError):
            if use_roi(True):
                pass

    def test_equality(self):
        assert use_roi(True) == use_roi(True)
        assert use_roi(True) != use_roi(False)

    def test_different_sizes(self):
        assert DIFFERENT_SIZES == [Size(128, 128), Size(113, 113)]


class TestCodeFamily:
    """Tests for opaque algorithm codes."""

    def test_lookup(self):
        tag = Interpolation(cv2.INTER_LINEAR)
        assert tag.value == cv2.INTER_LINEAR
        assert str(tag) == "INTER_LINEAR"
        assert str(NormCode(cv2.NORM_L2)) == "NORM_L2"

    def test_unknown_code(self):
        with pytest.raises(ValueError, match="BorderType"):
            BorderType(99)

    def test_border_types(self):
        assert [str(tag) for tag in ALL_BORDER_TYPES] == [
            "BORDER_REFLECT101",
            "BORDER_REPLICATE",
            "BORDER_CONSTANT",
            "BORDER_REFLECT",
            "BORDER_WRAP",
        ]

    def test_combined_flags(self):
        """Flag codes display as their set flags, lowest first."""
        flags = WarpFlags(cv2.INTER_LINEAR | cv2.WARP_INVERSE_MAP)
        assert flags.value == cv2.INTER_LINEAR | cv2.WARP_INVERSE_MAP
        assert str(flags) == "INTER_LINEAR|WARP_INVERSE_MAP"
        assert str(WarpFlags(cv2.INTER_NEAREST)) == "INTER_NEAREST"

    def test_unnamed_flag_bits(self):
        family = CodeFamily("Mode", {"NONE": 0, "A": 1, "B": 2}, flags=True)
        assert str(family(3)) == "A|B"
        assert str(family(9)) == "A|0x8"

    def test_codes_pass_through(self):
        assert [tag.value for tag in BorderType] == [
            cv2.BORDER_REFLECT101,
            cv2.BORDER_REPLICATE,
            cv2.BORDER_CONSTANT,
            cv2.BORDER_REFLECT,
            cv2.BORDER_WRAP,
        ]


class TestCombine:
    """Tests for parameter cross products."""

    def test_first_list_varies_slowest(self):
        params = combine([1, 2], ["a", "b", "c"])
        assert params == [(1, "a"), (1, "b"), (1, "c"), (2, "a"), (2, "b"), (2, "c")]
        assert all(isinstance(p, ParamTuple) for p in params)

    def test_full_grid_size(self):
        params = combine(DIFFERENT_SIZES, [MatType(Depth.U8, 1), MatType(Depth.F32, 3)],
                         ALL_BORDER_TYPES, WHOLE_SUBMAT)
        assert len(params) == 2 * 2 * 5 * 2

    def test_labels(self):
        params = combine([Size(128, 128)], [MatType(Depth.U8, 3)], [Interpolation(cv2.INTER_CUBIC)],
                         WHOLE_SUBMAT)
        assert str(params[1]) == "(128x128, CV_8UC3, INTER_CUBIC, sub matrix)"

    def test_param_id(self):
        assert param_id(use_roi(False)) == "whole matrix"
        assert param_id((1, use_roi(True))) == "(1, sub matrix)"
        assert param_id(Size(5, 6)) == "5x6"
        assert param_id(ParamTuple(MatType(Depth.F64, 2))) == "(CV_64FC2)"

    def test_unpacking(self):
        size, mat_type, roi = combine(DIFFERENT_SIZES, [MatType(Depth.U8, 1)], WHOLE_SUBMAT)[0]
        assert size == Size(128, 128)
        assert mat_type == MatType(Depth.U8, 1)
        assert roi.value is False
