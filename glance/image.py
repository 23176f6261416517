"""The Image container: loading, saving, displaying and pixel access."""

from __future__ import annotations

import base64
import io
import math
import struct
from collections.abc import Callable, Iterable, Iterator
from os import PathLike
from typing import Any, Union

from PIL import Image as _PILImage

from .errors import CoreError, InvalidCastError, InvalidDataError, OutOfBoundsError
from .pixel import Luma, Pixel, Rgba

_PathType = Union[str, "PathLike[str]"]

_F32_MAX = 3.4028234663852886e38


def _fmax(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a >= b else b


def _fmin(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a <= b else b


def _ieee_div(a: float, b: float) -> float:
    """Divide as IEEE floats do, giving inf or nan rather than raising."""
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _opaque_rgb(pixel: Pixel) -> tuple[int, ...]:
    """RGB bytes of a pixel, black where it is fully transparent."""
    rgba = pixel.to_rgba8()
    if rgba[3] == 0:
        return (0, 0, 0)
    return tuple(rgba[:3])


class Image:
    """An image of ``width`` x ``height`` pixels stored in row-major order."""

    __slots__ = ("_width", "_height", "_data")

    def __init__(self, width: int, height: int, data: Iterable[Pixel]) -> None:
        if width < 0 or height < 0:
            raise InvalidDataError("Image dimensions must not be negative")
        pixels = list(data)
        if len(pixels) != width * height:
            raise InvalidDataError("Data length does not match width * height")
        self._width = width
        self._height = height
        self._data = pixels

    @classmethod
    def new(cls, pixel_type: type[Pixel], width: int, height: int) -> Image:
        """Create an image filled with the default pixel of ``pixel_type``."""
        if not (isinstance(pixel_type, type) and issubclass(pixel_type, Pixel)):
            raise InvalidCastError(f"{pixel_type!r} is not a pixel type")
        return cls(width, height, [pixel_type.new()] * (width * height))

    @classmethod
    def from_data(cls, width: int, height: int, data: Iterable[Pixel]) -> Image:
        """Create an image from row-major pixel data."""
        return cls(width, height, data)

    @classmethod
    def open(cls, path: _PathType, pixel_type: type[Pixel] = Rgba) -> Image:
        """Load an image file, converting every pixel to ``pixel_type``."""
        if not (isinstance(pixel_type, type) and issubclass(pixel_type, Pixel)):
            raise InvalidCastError(f"{pixel_type!r} is not a pixel type")
        try:
            with _PILImage.open(path) as source:
                rgba = source.convert("RGBA")
                width, height = rgba.size
                raw = rgba.tobytes()
        except (OSError, ValueError) as exc:
            raise CoreError(f"cannot open image {path!s}: {exc}") from exc
        data = [pixel_type.from_rgba8(px) for px in struct.iter_unpack("4B", raw)]
        return cls(width, height, data)

    def _rgba8_bytes(self) -> bytes:
        return bytes(channel for pixel in self._data for channel in pixel.to_rgba8())

    def save(self, path: _PathType) -> None:
        """Save the image; the file format follows the file extension."""
        try:
            buffer = _PILImage.frombytes(
                "RGBA", (self._width, self._height), self._rgba8_bytes()
            )
            buffer.save(path)
        except (OSError, ValueError, KeyError) as exc:
            raise CoreError(f"cannot save image to {path!s}: {exc}") from exc

    def display(self, title: str) -> None:
        """Show the image in a window until it is closed or Escape is pressed."""
        try:
            import tkinter
        except ImportError as exc:
            raise CoreError("no window system is available") from exc

        opaque = bytes(byte for pixel in self._data for byte in _opaque_rgb(pixel))
        frame = _PILImage.frombytes("RGB", (self._width, self._height), opaque)
        png = io.BytesIO()
        frame.save(png, format="PNG")
        encoded = base64.b64encode(png.getvalue()).decode("ascii")

        try:
            root = tkinter.Tk()
        except tkinter.TclError as exc:
            raise CoreError(f"cannot open window: {exc}") from exc
        try:
            root.title(title)
            root.resizable(False, False)
            photo = tkinter.PhotoImage(master=root, data=encoded, format="png")
            label = tkinter.Label(root, image=photo, borderwidth=0)
            label.pack()
            root.bind("<Escape>", lambda _event: root.destroy())
            root.mainloop()
        except tkinter.TclError as exc:
            raise CoreError(f"cannot display image: {exc}") from exc

    def _index(self, position: tuple[int, int]) -> int:
        x, y = position
        idx = y * self._width + x
        if x < 0 or y < 0 or idx >= len(self._data):
            raise OutOfBoundsError(
                f"{tuple(position)} is out of bounds for image of size {self.dimensions()}"
            )
        return idx

    def get_pixel(self, position: tuple[int, int]) -> Pixel:
        """Return the pixel at ``(x, y)``."""
        return self._data[self._index(position)]

    def set_pixel(self, position: tuple[int, int], color: Pixel) -> None:
        """Set the pixel at ``(x, y)`` to ``color``."""
        self._data[self._index(position)] = color

    def draw(self, shape: Any) -> None:
        """Draw a shape that provides ``draw_on(image)``."""
        shape.draw_on(self)

    def dimensions(self) -> tuple[int, int]:
        """Return ``(width, height)``."""
        return (self._width, self._height)

    def is_empty(self) -> bool:
        """True if the image holds no pixels."""
        return not self._data

    def pixels(self) -> Iterator[Pixel]:
        """Iterate over the pixels in row-major order."""
        return iter(self._data)

    def map_pixels(self, func: Callable[[Pixel], Pixel]) -> None:
        """Replace every pixel with ``func(pixel)``, in place."""
        self._data = [func(pixel) for pixel in self._data]

    def normalize(self) -> Image:
        """Return a copy with each channel stretched to span [0.0, 1.0]."""
        if not self._data:
            return Image(self._width, self._height, [])
        first = self._data[0]
        if isinstance(first, Rgba):
            return self._normalize_rgba()
        if isinstance(first, Luma):
            return self._normalize_luma()
        raise InvalidCastError(f"cannot normalize pixels of type {type(first).__name__}")

    def _normalize_rgba(self) -> Image:
        highs = [0.0] * 4
        lows = [_F32_MAX] * 4
        for pixel in self._data:
            channels = (pixel.r, pixel.g, pixel.b, pixel.a)
            highs = [_fmax(h, c) for h, c in zip(highs, channels)]
            lows = [_fmin(lo, c) for lo, c in zip(lows, channels)]
        spans = [h - lo for h, lo in zip(highs, lows)]
        data = [
            Rgba(
                *(
                    _ieee_div(c - lo, span)
                    for c, lo, span in zip((p.r, p.g, p.b, p.a), lows, spans)
                )
            )
            for p in self._data
        ]
        return Image(self._width, self._height, data)

    def _normalize_luma(self) -> Image:
        high = 0.0
        low = _F32_MAX
        for pixel in self._data:
            high = _fmax(high, pixel.l)
            low = _fmin(low, pixel.l)
        span = high - low
        data = [Luma(_ieee_div(p.l - low, span)) for p in self._data]
        return Image(self._width, self._height, data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return self.dimensions() == other.dimensions() and self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Image(width={self._width}, height={self._height})"