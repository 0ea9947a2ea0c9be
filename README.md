# wavedraw

wavedraw draws audio waveform data as PNG images. The input is the
minimum and maximum amplitude for each pixel column. It can add a border
and time axis markers with labels. The package also parses the
command-line options that control the rendering.

## Installation

wavedraw needs Python 3.10 or later. It depends on Pillow.

## Modules

### `wavedraw.renderer`

- `WaveformData(sample_rate, samples_per_pixel, min_samples, max_samples)`
  holds one min/max pair per column. `min_sample(index)` and
  `max_sample(index)` return those pairs, and `len()` gives the number of
  columns.
- `RenderColors(border_color, background_color, waveform_color,
  axis_label_color)` holds four `RGBA` values.
- `WaveformImageRenderer(output=None)` writes its progress messages to
  `output`, or to standard output when none is given.
  - `create(buffer, start_time, image_width, image_height, colors,
    render_axis_labels, auto_amplitude_scale, amplitude_scale)` draws
    the image and returns it as a Pillow `Image`.
  - `save_as_png(filename, compression_level=-1)` writes the image. A
    level from 0 to 9 sets the compression. -1 uses Pillow's default.
  - `seconds_to_pixels(seconds)` converts a time to a pixel offset.
  - `axis_label_scale()` returns the spacing between axis markers in
    seconds. The spacing is the first of 1, 2, 5, 10, 20 or 30 seconds,
    then the same steps in minutes and then in hours, that leaves at
    least 60 pixels between markers.

`create` raises `RenderError` in these cases:

- a negative start time, or one above 12 hours
- an image width or height below 1
- a sample rate below 1 Hz or above 50,000 Hz
- a zoom below 1 or above 2,000,000 samples per pixel

`save_as_png` raises `RenderError` if nothing has been rendered or if the
file cannot be written.

With an automatic amplitude scale, the visible columns are stretched to
the full 16-bit range.

### `wavedraw.options`

- `parse_command_line(argv=None)` reads an argument list into an
  `Options` object. The first item of the list is the program name. It
  uses `sys.argv` when `argv` is not given. These options are accepted:
  - `-i/--input-filename`, `-o/--output-filename` (both required)
  - `-z/--zoom`, `--pixels-per-second`
  - `-b/--bits` (8 or 16)
  - `-s/--start`, `-e/--end`
  - `-w/--width`, `-h/--height`
  - `-c/--colors`
  - `--border-color`, `--background-color`, `--waveform-color`,
    `--axis-label-color`
  - `--no-axis-labels`, `--with-axis-labels`
  - `--amplitude-scale`
  - `--compression` (-1 to 9)
  - `--help`, `-v/--version`

  Invalid input raises `OptionsError`.
- `Options` records whether the zoom, pixels per second, end time and
  bits were given explicitly. Its `show_usage(stream)`,
  `show_version(stream)` and `report_error(error, stream)` methods write
  help and error text to a stream.
- `parse_amplitude_scale(value)` returns a non-negative number. For
  `"auto"` it returns `None`.

### `wavedraw.rgba`

- `RGBA(red, green, blue, alpha=255)` is an immutable colour.
  `has_alpha()` is true when the colour is not fully opaque.
- `parse_rgba(value)` reads `rrggbb` or `rrggbbaa` hex strings. It
  raises `WaveformError` for anything else.

### `wavedraw.mathutil`

- `round_down_to_nearest(value, multiple)` rounds towards zero to a
  multiple.
- `round_up_to_nearest(value, multiple)` rounds away from zero to a
  multiple.
- `parse_number(value)` parses plain decimals such as `"+100"` or
  `"-1.5"`. It raises `ValueError` for whitespace, exponents, trailing
  text or out-of-range values.

### `wavedraw.errors`

`WaveformError` is the base of every error the package raises, apart
from `ValueError` from `parse_number`.

## Example

```python
from wavedraw.rgba import RGBA, parse_rgba
from wavedraw.renderer import RenderColors, WaveformData, WaveformImageRenderer

data = WaveformData(
    sample_rate=16000,
    samples_per_pixel=128,
    min_samples=[-1000, -8000, -3000],
    max_samples=[1200, 7500, 2800],
)
colors = RenderColors(
    border_color=parse_rgba("000000"),
    background_color=parse_rgba("ffffff"),
    waveform_color=RGBA(0, 0, 255),
    axis_label_color=parse_rgba("000000"),
)

renderer = WaveformImageRenderer()
renderer.create(data, 0.0, 800, 250, colors, True, False, 1.0)
renderer.save_as_png("waveform.png", 6)
```

## What it does not do

wavedraw does not decode audio files. It does not produce waveform data
from audio, and it does not read or write waveform data files. The
caller builds the `WaveformData` to be drawn. There is no installed
command. `parse_command_line` parses the options, but nothing in the
package acts on them.

## Running the tests

Install the `test` extra, then run `pytest` from the project directory.