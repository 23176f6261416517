"""Image IO, pixel access, shape drawing and point operations on float pixels."""

__version__ = "0.2.1"
__all__ = ["drawing", "errors", "image", "pixel", "point_ops"]