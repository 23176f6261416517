"""Point operations: per-pixel transforms of whole images."""

from __future__ import annotations

import itertools
import math
from collections.abc import Callable, Iterator
from enum import Enum

from .errors import InvalidCastError, InvalidDataError
from .image import Image
from .pixel import Luma, Pixel, Rgba, _round_half_away, _to_f32

_LEVELS = 256


class ThresholdType(Enum):
    """How ``threshold`` treats pixels relative to the threshold value."""

    BINARY = "binary"
    """Pixels at or above the threshold become ``max_intensity``, others 0."""
    TRUNCATE = "truncate"
    """Pixels above the threshold become the threshold, others are unchanged."""
    TO_ZERO = "to_zero"
    """Pixels above the threshold are unchanged, others become 0."""


def _clamp(value: float, low: float, high: float) -> float:
    if math.isnan(value):
        return value
    return min(max(value, low), high)


def _powf(base: float, exponent: float) -> float:
    if base == 0.0 and exponent < 0.0:
        odd = exponent.is_integer() and int(exponent) % 2 == 1
        return math.copysign(math.inf, base) if odd else math.inf
    try:
        return math.pow(base, exponent)
    except ValueError:
        return math.nan
    except OverflowError:
        return math.inf


def _reciprocal(value: float) -> float:
    if value == 0.0:
        return math.copysign(math.inf, value)
    return _to_f32(1.0 / value)


def _pixels_of(image: Image, kind: type[Pixel], operation: str) -> Iterator:
    for pixel in image.pixels():
        if not isinstance(pixel, kind):
            raise InvalidCastError(
                f"{operation} needs {kind.__name__} pixels, got {type(pixel).__name__}"
            )
        yield pixel


def _transform(image: Image, kind: type[Pixel], operation: str, func: Callable) -> Image:
    width, height = image.dimensions()
    return Image.from_data(width, height, (func(p) for p in _pixels_of(image, kind, operation)))


def _pixel_kind(image: Image, operation: str) -> type[Pixel]:
    first = next(image.pixels(), None)
    if first is None or isinstance(first, Rgba):
        return Rgba
    if isinstance(first, Luma):
        return Luma
    raise InvalidCastError(f"{operation} does not support {type(first).__name__} pixels")


def invert(image: Image) -> Image:
    """Return the image with each colour channel replaced by ``1.0 - value``.

    Alpha is preserved.
    """
    if _pixel_kind(image, "invert") is Luma:
        return _transform(image, Luma, "invert", lambda p: Luma(_to_f32(1.0 - p.l)))
    return _transform(
        image,
        Rgba,
        "invert",
        lambda p: Rgba(_to_f32(1.0 - p.r), _to_f32(1.0 - p.g), _to_f32(1.0 - p.b), p.a),
    )


def gamma(image: Image, gamma: float) -> Image:
    """Return the image with ``value ** (1 / gamma)`` applied to each colour channel."""
    inv_gamma = _reciprocal(gamma)

    def apply(value: float) -> float:
        return _to_f32(_powf(value, inv_gamma))

    if _pixel_kind(image, "gamma") is Luma:
        return _transform(image, Luma, "gamma", lambda p: Luma(apply(p.l)))
    return _transform(
        image,
        Rgba,
        "gamma",
        lambda p: Rgba(apply(p.r), apply(p.g), apply(p.b), p.a),
    )


def grayscale(image: Image) -> Image:
    """Return a Luma image using BT.601 weights."""
    return _transform(
        image,
        Rgba,
        "grayscale",
        lambda p: Luma(_to_f32(p.r * 0.299 + p.g * 0.587 + p.b * 0.114)),
    )


def lerp(image: Image, other: Image, alpha: float) -> Image:
    """Linearly interpolate between two Rgba images of the same dimensions."""
    if image.dimensions() != other.dimensions():
        raise InvalidDataError(
            "Cannot lerp images of different dimensions: "
            f"{image.dimensions()} and {other.dimensions()}"
        )
    keep = 1.0 - alpha

    def mix(a: float, b: float) -> float:
        return _to_f32(a * keep + b * alpha)

    width, height = image.dimensions()
    pairs = zip(_pixels_of(image, Rgba, "lerp"), _pixels_of(other, Rgba, "lerp"))
    data = [
        Rgba(mix(p.r, q.r), mix(p.g, q.g), mix(p.b, q.b), mix(p.a, q.a)) for p, q in pairs
    ]
    return Image.from_data(width, height, data)


def brightness(image: Image, brightness: float) -> Image:
    """Add ``brightness`` to each colour channel, clamped to [0.0, 1.0]."""

    def adjust(value: float) -> float:
        return _clamp(_to_f32(value + brightness), 0.0, 1.0)

    return _transform(
        image,
        Rgba,
        "brightness",
        lambda p: Rgba(adjust(p.r), adjust(p.g), adjust(p.b), p.a),
    )


def contrast(image: Image, contrast: float) -> Image:
    """Multiply each colour channel by ``contrast``, clamped to [0.0, 1.0]."""

    def adjust(value: float) -> float:
        return _clamp(_to_f32(value * contrast), 0.0, 1.0)

    return _transform(
        image,
        Rgba,
        "contrast",
        lambda p: Rgba(adjust(p.r), adjust(p.g), adjust(p.b), p.a),
    )


def threshold(
    image: Image, threshold: float, max_intensity: float, kind: ThresholdType
) -> Image:
    """Apply a threshold of the given kind to a Luma image."""
    if kind is ThresholdType.BINARY:
        def rule(value: float) -> float:
            return max_intensity if value >= threshold else 0.0
    elif kind is ThresholdType.TRUNCATE:
        def rule(value: float) -> float:
            return threshold if value > threshold else value
    elif kind is ThresholdType.TO_ZERO:
        def rule(value: float) -> float:
            return value if value > threshold else 0.0
    else:
        raise InvalidDataError(f"unknown threshold type {kind!r}")
    return _transform(image, Luma, "threshold", lambda p: Luma(rule(p.l)))


def _level(value: float) -> int:
    scaled = _round_half_away(_to_f32(value * 255.0))
    if math.isnan(scaled) or scaled <= 0.0:
        return 0
    if scaled >= _LEVELS:
        raise InvalidDataError(f"luminance {value!r} is outside [0.0, 1.0]")
    return int(scaled)


def histogram_equalize(image: Image) -> Image:
    """Equalize the histogram of a Luma image over 256 levels."""
    width, height = image.dimensions()
    levels = [_level(p.l) for p in _pixels_of(image, Luma, "histogram_equalize")]

    hist = [0] * _LEVELS
    for level in levels:
        hist[level] += 1
    cdf = list(itertools.accumulate(hist))
    cdf_min = next((count for count in cdf if count > 0), 0)

    remaining = width * height - cdf_min
    scale = _to_f32((_LEVELS - 1) / remaining) if remaining else math.inf
    lookup = [
        _clamp(_to_f32((count - cdf_min) * scale), 0.0, float(_LEVELS - 1)) for count in cdf
    ]

    data = [Luma(_to_f32(lookup[level] / 255.0)) for level in levels]
    return Image.from_data(width, height, data)