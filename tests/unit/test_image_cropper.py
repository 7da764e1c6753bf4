"""Unit tests for the image cropping helpers."""

import numpy as np
import pytest

from pixform.buffer import PixelBuffer
from pixform.pipeline.image_cropper import Anchor, anchor_point, crop, crop_anchor, crop_center


@pytest.fixture
def indexed_buffer():
    """6x4 buffer whose red channel holds x and green channel holds y."""
    arr = np.zeros((4, 6, 4), dtype=np.uint8)
    arr[..., 0] = np.arange(6)[None, :]
    arr[..., 1] = np.arange(4)[:, None]
    arr[..., 3] = 255
    return PixelBuffer.from_array(arr)


class TestCrop:
    def test_crop_valid_area(self, indexed_buffer) -> None:
        result = crop(indexed_buffer, (1, 1, 4, 3))

        assert result.size == (3, 2)
        assert result.pixel(0, 0)[:2] == (1, 1)
        assert result.pixel(2, 1)[:2] == (3, 2)

    def test_crop_is_clipped_to_bounds(self, indexed_buffer) -> None:
        result = crop(indexed_buffer, (-2, -2, 3, 100))

        assert result.size == (3, 4)
        assert result.pixel(0, 0)[:2] == (0, 0)

    @pytest.mark.parametrize("area", [(6, 0, 10, 4), (2, 2, 2, 3), (4, 1, 1, 3)])
    def test_empty_intersection(self, indexed_buffer, area) -> None:
        assert crop(indexed_buffer, area).size == (0, 0)

    def test_full_crop_equals_source(self, indexed_buffer) -> None:
        assert crop(indexed_buffer, (0, 0, 6, 4)) == indexed_buffer


@pytest.mark.parametrize(
    "anchor,expected",
    [
        (Anchor.TOP_LEFT, (0, 0)),
        (Anchor.TOP, (2, 0)),
        (Anchor.TOP_RIGHT, (4, 0)),
        (Anchor.LEFT, (0, 1)),
        (Anchor.CENTER, (2, 1)),
        (Anchor.RIGHT, (4, 1)),
        (Anchor.BOTTOM_LEFT, (0, 2)),
        (Anchor.BOTTOM, (2, 2)),
        (Anchor.BOTTOM_RIGHT, (4, 2)),
    ],
)
def test_anchor_point(anchor, expected) -> None:
    assert anchor_point(6, 4, 2, 2, anchor) == expected


def test_anchor_point_with_oversized_crop() -> None:
    assert anchor_point(4, 4, 7, 7, Anchor.CENTER) == (-1, -1)


def test_crop_anchor_bottom_right(indexed_buffer) -> None:
    result = crop_anchor(indexed_buffer, 2, 2, Anchor.BOTTOM_RIGHT)

    assert result.pixel(0, 0)[:2] == (4, 2)


def test_crop_center(indexed_buffer) -> None:
    result = crop_center(indexed_buffer, 3, 3)

    assert result.size == (3, 3)
    assert result.pixel(0, 0)[:2] == (1, 0)
