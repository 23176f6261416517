"""Pixel formats, with conversion to and from 8-bit RGBA."""

from __future__ import annotations

import math
import struct
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from .errors import InvalidDataError

_F32 = struct.Struct("<f")


def _to_f32(value: float) -> float:
    """Round a float to single precision."""
    return _F32.unpack(_F32.pack(value))[0]


def _saturate_u8(value: float) -> int:
    """Convert a float to an 8-bit integer, truncating and saturating."""
    if math.isnan(value):
        return 0
    if value <= 0.0:
        return 0
    if value >= 255.0:
        return 255
    return int(value)


def _round_half_away(value: float) -> float:
    if math.isnan(value) or math.isinf(value):
        return value
    return math.copysign(math.floor(abs(value) + 0.5), value)


def _check_rgba8(rgba: Sequence[int]) -> tuple[int, int, int, int]:
    values = tuple(rgba)
    if len(values) != 4:
        raise InvalidDataError(f"expected 4 channels, got {len(values)}")
    for value in values:
        if not isinstance(value, int) or not 0 <= value <= 255:
            raise InvalidDataError(f"channel value {value!r} is not in 0..=255")
    return values  # type: ignore[return-value]


class Pixel(ABC):
    """A pixel format based on conversion to and from RGBA8."""

    __slots__ = ()

    @classmethod
    @abstractmethod
    def channel_count(cls) -> int:
        """Number of channels in this format."""

    @classmethod
    @abstractmethod
    def new(cls) -> Pixel:
        """The default pixel of this format."""

    @classmethod
    @abstractmethod
    def from_rgba8(cls, rgba: Sequence[int]) -> Pixel:
        """Build a pixel from four 8-bit channel values."""

    @abstractmethod
    def to_rgba8(self) -> tuple[int, int, int, int]:
        """Convert to four 8-bit channel values."""


@dataclass(frozen=True, slots=True)
class Rgba(Pixel):
    """A colour with red, green, blue and alpha channels in [0.0, 1.0]."""

    r: float
    g: float
    b: float
    a: float

    @classmethod
    def channel_count(cls) -> int:
        return 4

    @classmethod
    def new(cls) -> Rgba:
        return cls(0.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_rgba8(cls, rgba: Sequence[int]) -> Rgba:
        r, g, b, a = _check_rgba8(rgba)
        return cls(
            _to_f32(r / 255.0),
            _to_f32(g / 255.0),
            _to_f32(b / 255.0),
            _to_f32(a / 255.0),
        )

    def to_rgba8(self) -> tuple[int, int, int, int]:
        return (
            _saturate_u8(_to_f32(self.r * 255.0)),
            _saturate_u8(_to_f32(self.g * 255.0)),
            _saturate_u8(_to_f32(self.b * 255.0)),
            _saturate_u8(_to_f32(self.a * 255.0)),
        )


@dataclass(frozen=True, slots=True)
class Luma(Pixel):
    """A single luminance channel in [0.0, 1.0]."""

    l: float  # noqa: E741

    @classmethod
    def channel_count(cls) -> int:
        return 1

    @classmethod
    def new(cls) -> Luma:
        return cls(0.0)

    @classmethod
    def from_rgba8(cls, rgba: Sequence[int]) -> Luma:
        r, g, b, _ = _check_rgba8(rgba)
        return cls(_to_f32((0.299 * r + 0.587 * g + 0.114 * b) / 255.0))

    def to_rgba8(self) -> tuple[int, int, int, int]:
        value = _saturate_u8(_round_half_away(self.l * 255.0))
        return (value, value, value, 255)