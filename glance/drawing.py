"""Shapes that can be drawn onto an image."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from .errors import InvalidDataError
from .image import Image
from .pixel import Pixel


def _check_non_negative(**values: int) -> None:
    for name, value in values.items():
        if value < 0:
            raise InvalidDataError(f"{name} must not be negative, got {value}")


class Drawable(ABC):
    """Anything that can be overlaid on top of an image."""

    @abstractmethod
    def draw_on(self, image: Image) -> None:
        """Draw this shape onto ``image`` in place."""


@dataclass
class Circle(Drawable):
    """A circle, either filled or drawn as an outline of a given thickness.

    Parts of the circle that fall outside the image are skipped.
    """

    position: tuple[int, int]
    color: Pixel
    radius: int
    filled: bool
    thickness: int

    def __post_init__(self) -> None:
        _check_non_negative(
            x=self.position[0],
            y=self.position[1],
            radius=self.radius,
            thickness=self.thickness,
        )

    def draw_on(self, image: Image) -> None:
        cx, cy = self.position
        width, height = image.dimensions()
        outer = self.radius + self.thickness
        outer_sq = outer * outer
        inner_sq = self.radius * self.radius

        for dy in range(-outer, outer):
            ny = cy + dy
            if not 0 <= ny < height:
                continue
            for dx in range(-outer, outer):
                nx = cx + dx
                if not 0 <= nx < width:
                    continue
                distance_sq = dx * dx + dy * dy
                if self.filled:
                    inside = distance_sq <= inner_sq
                else:
                    inside = inner_sq <= distance_sq <= outer_sq
                if inside:
                    image.set_pixel((nx, ny), self.color)


@dataclass
class AABB(Drawable):
    """An axis-aligned box, either filled or drawn as an outline.

    ``position`` is the top-left corner and ``size`` is ``(width, height)``.
    """

    position: tuple[int, int]
    size: tuple[int, int]
    color: Pixel
    filled: bool
    thickness: int

    def __post_init__(self) -> None:
        _check_non_negative(
            x=self.position[0],
            y=self.position[1],
            width=self.size[0],
            height=self.size[1],
            thickness=self.thickness,
        )

    def draw_on(self, image: Image) -> None:
        cx, cy = self.position
        box_width, box_height = self.size
        thickness = self.thickness
        width, height = image.dimensions()

        left_x = cx - thickness
        right_x = cx + box_width + thickness
        top_y = cy - thickness
        bottom_y = cy + box_height + thickness

        for x in range(max(left_x, 0), min(right_x, width)):
            for y in range(max(top_y, 0), min(bottom_y, height)):
                on_edge = (
                    x - left_x <= thickness
                    or right_x - x <= thickness
                    or y - top_y < thickness
                    or bottom_y - y <= thickness
                )
                if self.filled or on_edge:
                    image.set_pixel((x, y), self.color)


@dataclass
class Line(Drawable):
    """A line segment drawn with a square brush using Bresenham's algorithm."""

    start: tuple[int, int]
    end: tuple[int, int]
    color: Pixel
    thickness: int

    def __post_init__(self) -> None:
        _check_non_negative(
            start_x=self.start[0],
            start_y=self.start[1],
            end_x=self.end[0],
            end_y=self.end[1],
            thickness=self.thickness,
        )

    def _stamp(self, image: Image, x: int, y: int, half: int) -> None:
        width, height = image.dimensions()
        for tx in range(-half, half + 1):
            nx = x + tx
            if not 0 <= nx < width:
                continue
            for ty in range(-half, half + 1):
                ny = y + ty
                if 0 <= ny < height:
                    image.set_pixel((nx, ny), self.color)

    def draw_on(self, image: Image) -> None:
        x0, y0 = self.start
        x1, y1 = self.end
        half = self.thickness // 2

        dx = abs(x1 - x0)
        dy = -abs(y1 - y0)
        sx = 1 if x0 < x1 else -1
        sy = 1 if y0 < y1 else -1
        err = dx + dy
        x, y = x0, y0

        while True:
            self._stamp(image, x, y, half)
            if x == x1 and y == y1:
                break
            err_twice = 2 * err
            if err_twice >= dy:
                err += dy
                x += sx
            if err_twice <= dx:
                err += dx
                y += sy