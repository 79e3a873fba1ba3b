# Tests for reference image loading and dumps
"""
Test reading images from the data folder and dumping buffers.
"""

import cv2
import numpy as np
import pytest

from gputest import Depth, MatType, dump_image, load_mat, read_image, read_image_type


@pytest.fixture
def color_image(data_dir):
    """A 6x4 BGR image written to the test data folder."""
    image = np.zeros((4, 6, 3), np.uint8)
    image[:, :, 0] = 255  # Blue
    image[1, 2] = (10, 20, 30)
    cv2.imwrite(str(data_dir / "color.png"), image)
    return image


class TestReadImage:
    """Tests for read_image and read_image_type."""

    def test_read_color(self, color_image):
        np.testing.assert_array_equal(read_image("color.png"), color_image)

    def test_read_grayscale(self, color_image):
        gray = read_image("color.png", cv2.IMREAD_GRAYSCALE)
        assert gray.shape == (4, 6)

    def test_missing_file(self, data_dir):
        with pytest.raises(FileNotFoundError, match="missing.png"):
            read_image("missing.png")

    def test_type_8uc1(self, color_image):
        image = read_image_type("color.png", MatType(Depth.U8, 1))
        assert image.dtype == np.uint8
        assert image.shape == (4, 6)

    def test_type_8uc4_has_opaque_alpha(self, color_image):
        image = read_image_type("color.png", MatType(Depth.U8, 4))
        assert image.shape == (4, 6, 4)
        assert (image[:, :, 3] == 255).all()
        np.testing.assert_array_equal(image[:, :, :3], color_image)

    def test_type_32f_scaled(self, color_image):
        image = read_image_type("color.png", MatType(Depth.F32, 3))
        assert image.dtype == np.float32
        assert image.max() == pytest.approx(1.0)
        assert image[1, 2, 0] == pytest.approx(10 / 255)

    def test_type_64f_unscaled(self, color_image):
        image = read_image_type("color.png", MatType(Depth.F64, 3))
        assert image.dtype == np.float64
        assert image.max() == 255.0

    def test_type_8s_saturated(self, color_image):
        image = read_image_type("color.png", MatType(Depth.S8, 3))
        assert image.dtype == np.int8
        assert image[0, 0, 0] == 127
        assert image[1, 2, 2] == 30

    def test_type_16u(self, color_image):
        image = read_image_type("color.png", MatType(Depth.U16, 3))
        assert image.dtype == np.uint16
        assert image[0, 0, 0] == 255

    def test_two_channels_rejected(self, color_image):
        with pytest.raises(ValueError):
            read_image_type("color.png", MatType(Depth.U8, 2))


class TestDumpImage:
    """Tests for dump_image."""

    def test_dump_and_reload(self, dump_dir):
        image = np.arange(48, dtype=np.uint8).reshape(4, 4, 3)
        path = dump_image("result.png", image)
        assert path == dump_dir / "result.png"
        np.testing.assert_array_equal(cv2.imread(str(path)), image)

    def test_dump_roi_view(self, dump_dir):
        image = np.arange(48, dtype=np.uint8).reshape(4, 4, 3)
        path = dump_image("nested/roi.png", load_mat(image, use_roi=True))
        np.testing.assert_array_equal(cv2.imread(str(path)), image)
