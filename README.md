# glance

A small image library that works on floating-point pixels. Every channel is a
float, normally in the range 0.0 to 1.0. The library covers:

- loading and saving images. Any format that Pillow can read or write works.
- reading and writing single pixels.
- drawing circles, axis-aligned boxes and thick lines.
- point operations: invert, gamma, grayscale, linear interpolation,
  brightness, contrast, thresholding and histogram equalisation.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Pixels

`glance.pixel` has two pixel types:

- `Rgba`, which has the channels `r`, `g`, `b` and `a`. Its default pixel,
  `Rgba.new()`, is opaque black.
- `Luma`, which has a single channel, `l`. Its default pixel is `Luma(0.0)`.

Pixels are immutable dataclasses. Both types convert to and from 8-bit RGBA.
`from_rgba8` raises `InvalidDataError` unless it gets four integers in 0..255.

```python
from glance.pixel import Rgba, Luma

red = Rgba.from_rgba8((255, 0, 0, 255))
red.to_rgba8()                                   # (255, 0, 0, 255)
Luma.from_rgba8((255, 255, 255, 255)).to_rgba8()  # (255, 255, 255, 255)
```

`Luma.from_rgba8` weights red, green and blue with the BT.601 factors.
`Rgba.to_rgba8` truncates each channel. `Luma.to_rgba8` rounds. Both clamp
the result to 0..255.

## Images

```python
from glance.image import Image
from glance.pixel import Rgba, Luma

img = Image.open("photo.png")            # pixels become Rgba
gray = Image.open("photo.png", Luma)     # or any other pixel type
width, height = img.dimensions()

pixel = img.get_pixel((0, 0))
img.set_pixel((0, 0), Rgba(r=1.0, g=0.0, b=0.0, a=1.0))

gradient = Image.new(Luma, 512, 512)
gradient.map_pixels(lambda p: Luma(p.l + 0.5))   # replaces every pixel in place
gradient.save("out.png")
```

More methods:

- `Image.from_data(width, height, pixels)` builds an image from pixels in
  row-major order.
- `pixels()` iterates over the pixels in row-major order.
- `is_empty()` reports whether the image has no pixels.
- `normalize()` returns a copy in which each channel is stretched to span
  0.0 to 1.0. It works on `Rgba` and `Luma` images.
- `display(title)` shows the image in a Tk window. The window stays open
  until it is closed or Escape is pressed. Fully transparent pixels are shown
  as black.

Errors are raised as exceptions. Their base class is
`glance.errors.CoreError`:

- Access outside the image raises `OutOfBoundsError`.
- `InvalidDataError` is raised when the pixel count does not match
  `width * height`, and for other data that does not fit.
- `InvalidCastError` is raised for a pixel type that an operation does not
  support.
- A file that cannot be opened or saved, or a window that cannot be shown,
  raises `CoreError`.

## Drawing

```python
from glance.drawing import Circle, AABB, Line

green = Rgba(r=0.0, g=1.0, b=0.0, a=0.6)
img.draw(Circle(position=(100, 100), color=green, radius=40, filled=True, thickness=5))
img.draw(AABB(position=(10, 10), size=(50, 30), color=green, filled=False, thickness=2))
img.draw(Line(start=(0, 0), end=(200, 120), color=green, thickness=3))
```

A shape overwrites the pixels it covers with its colour. It does not blend.
Shapes may lie partly outside the image. The parts that fall outside are
clipped. Negative coordinates, sizes, radii or thicknesses raise
`InvalidDataError`. Any object with a `draw_on(image)` method can be passed
to `Image.draw`. The abstract base class for this is `glance.drawing.Drawable`.

## Point operations

Each operation in `glance.point_ops` returns a new image:

```python
from glance import point_ops
from glance.point_ops import ThresholdType

gray = point_ops.grayscale(img)      # Rgba image -> Luma image (BT.601 weights)
binary = point_ops.threshold(gray, 0.5, 1.0, ThresholdType.BINARY)
equalised = point_ops.histogram_equalize(gray)
inverted = point_ops.invert(img)     # Rgba or Luma; alpha is kept
lighter = point_ops.gamma(img, 2.2)  # value ** (1 / gamma); Rgba or Luma
brighter = point_ops.brightness(img, 0.2)
stronger = point_ops.contrast(img, 1.5)
blended = point_ops.lerp(img, other_img, 0.5)
```

- `grayscale`, `brightness`, `contrast` and `lerp` need `Rgba` pixels.
- `threshold` and `histogram_equalize` need `Luma` pixels.
- `lerp` raises `InvalidDataError` when the two images differ in size.
- `histogram_equalize` works over 256 levels. It raises `InvalidDataError`
  for luminance above 1.0.

Threshold kinds:

- `BINARY`: pixels at or above the threshold become `max_intensity`, and the
  others become 0.
- `TRUNCATE`: pixels above the threshold become the threshold.
- `TO_ZERO`: pixels at or below the threshold become 0.

## What it does not do

glance is a library only. It has no command-line tool. `display` only shows
an image and has no editing or interaction beyond closing the window.