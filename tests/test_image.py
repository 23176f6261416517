import math
from dataclasses import dataclass

import pytest
from PIL import Image as PILImage

from glance.errors import CoreError, InvalidDataError, OutOfBoundsError
from glance.image import Image
from glance.pixel import Luma, Rgba


def _write_png(path, size, color):
    PILImage.new("RGBA", size, color).save(path)
    return path


@dataclass
class _Dot:
    position: tuple
    color: object

    def draw_on(self, image):
        image.set_pixel(self.position, self.color)


def test_open_valid_image(tmp_path):
    path = _write_png(tmp_path / "red.png", (4, 3), (255, 0, 0, 255))
    img = Image.open(path, Rgba)
    assert not img.is_empty()
    assert img.dimensions() == (4, 3)
    assert img.get_pixel((3, 2)) == Rgba(1.0, 0.0, 0.0, 1.0)


def test_open_as_luma(tmp_path):
    path = _write_png(tmp_path / "white.png", (2, 2), (255, 255, 255, 255))
    img = Image.open(path, Luma)
    assert all(p.to_rgba8() == (255, 255, 255, 255) for p in img.pixels())


def test_open_invalid_path():
    with pytest.raises(CoreError):
        Image.open("non_existent_file.jpg", Rgba)


def test_save_and_reopen(tmp_path):
    img = Image.new(Rgba, 3, 2)
    img.set_pixel((1, 1), Rgba(0.0, 1.0, 0.0, 1.0))
    path = tmp_path / "out.png"
    img.save(path)
    reopened = Image.open(path, Rgba)
    assert reopened == img


def test_save_unknown_extension(tmp_path):
    img = Image.new(Rgba, 2, 2)
    with pytest.raises(CoreError):
        img.save(tmp_path / "out.unknownformat")


def test_draw_shapes():
    img = Image.new(Rgba, 40, 30)
    w, h = img.dimensions()
    center = (w // 2, h // 2)
    green = Rgba(0.0, 1.0, 0.0, 0.6)
    img.draw(_Dot(center, green))
    assert img.get_pixel(center) == green


def test_cvt_grayscale():
    img = Image.from_data(
        2, 1, [Rgba(1.0, 0.0, 0.0, 0.5), Rgba(0.0, 0.0, 1.0, 0.2)]
    )

    def to_gray(pixel):
        level = 0.299 * pixel.r + 0.587 * pixel.g + 0.114 * pixel.b
        return Rgba(level, level, level, 1.0)

    img.map_pixels(to_gray)
    for pixel in img.pixels():
        assert pixel.r == pixel.g == pixel.b
        assert pixel.a == 1.0


def test_corner_pixel_kept_when_drawing_elsewhere():
    black = Rgba(0.0, 0.0, 0.0, 0.0)
    img = Image.from_data(3, 3, [black] * 9)
    w, h = img.dimensions()
    img.draw(_Dot((0, 0), Rgba(0.0, 1.0, 0.0, 0.6)))
    assert img.get_pixel((w - 1, h - 1)) == black


def test_create_luma_image():
    data = [Luma(x / 511.0) for _ in range(512) for x in range(512)]
    img = Image.from_data(512, 512, data)
    assert not img.is_empty()
    assert img.dimensions() == (512, 512)
    assert img.get_pixel((0, 0)).l == 0.0
    assert img.get_pixel((511, 0)).l == 1.0


def test_new_fills_default_pixels():
    img = Image.new(Luma, 3, 4)
    assert img.dimensions() == (3, 4)
    assert list(img.pixels()) == [Luma(0.0)] * 12


def test_empty_image():
    img = Image.new(Rgba, 0, 5)
    assert img.is_empty()


def test_from_data_rejects_wrong_length():
    with pytest.raises(InvalidDataError):
        Image.from_data(2, 2, [Rgba.new()] * 3)


def test_get_pixel_out_of_bounds():
    img = Image.new(Rgba, 2, 2)
    with pytest.raises(OutOfBoundsError):
        img.get_pixel((0, 2))
    with pytest.raises(OutOfBoundsError):
        img.get_pixel((-1, 0))


def test_set_pixel_out_of_bounds():
    img = Image.new(Rgba, 2, 2)
    with pytest.raises(OutOfBoundsError):
        img.set_pixel((5, 5), Rgba.new())


def test_position_wraps_by_row_index():
    img = Image.from_data(2, 2, [Luma(0.0), Luma(0.1), Luma(0.2), Luma(0.3)])
    assert img.get_pixel((2, 0)) == img.get_pixel((0, 1))


def test_pixels_in_row_major_order():
    data = [Luma(v / 10) for v in range(6)]
    img = Image.from_data(3, 2, data)
    assert list(img.pixels()) == data
    assert img.get_pixel((1, 1)) == data[4]


def test_normalize_luma():
    img = Image.from_data(3, 1, [Luma(0.2), Luma(0.4), Luma(0.6)])
    values = [p.l for p in img.normalize().pixels()]
    assert values == pytest.approx([0.0, 0.5, 1.0])


def test_normalize_rgba_channels_independent():
    img = Image.from_data(
        2, 1, [Rgba(0.1, 0.5, 0.0, 0.2), Rgba(0.3, 0.9, 0.4, 0.8)]
    )
    first, second = img.normalize().pixels()
    assert (first.r, first.g, first.b, first.a) == pytest.approx((0.0, 0.0, 0.0, 0.0))
    assert (second.r, second.g, second.b, second.a) == pytest.approx((1.0, 1.0, 1.0, 1.0))


def test_normalize_constant_image_gives_nan():
    img = Image.from_data(2, 1, [Luma(0.5), Luma(0.5)])
    normalized = img.normalize()
    assert normalized.dimensions() == (2, 1)
    assert [math.isnan(p.l) for p in normalized.pixels()] == [True, True]


def test_normalize_does_not_modify_original():
    data = [Luma(0.2), Luma(0.6)]
    img = Image.from_data(2, 1, data)
    img.normalize()
    assert list(img.pixels()) == data