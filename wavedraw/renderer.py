"""Rendering of waveform data to a PNG image."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import TextIO

from PIL import Image, ImageDraw, ImageFont

from wavedraw.errors import WaveformError
from wavedraw.mathutil import round_up_to_nearest
from wavedraw.rgba import RGBA

# Upper limits prevent numeric overflows in image rendering.
MAX_SAMPLE_RATE = 50000
MAX_ZOOM = 2000000
MAX_START_TIME = 12 * 60 * 60  # 12 hours

# Metrics of the small fixed-width font used for axis labels.
_FONT_WIDTH = 6
_FONT_HEIGHT = 13

_MARKER_HEIGHT = 10
_MIN_LABEL_SPACING = 60  # pixels
_LABEL_STEPS = (1, 2, 5, 10, 20, 30)

_INT_MAX = 2**31 - 1
_INT_MIN = -(2**31)


class RenderError(WaveformError):
    """Raised when a waveform image cannot be created or saved."""


@dataclass
class WaveformData:
    """Minimum and maximum sample values, one pair per pixel column."""

    sample_rate: int
    samples_per_pixel: int
    min_samples: list[int] = field(default_factory=list)
    max_samples: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.min_samples)

    def min_sample(self, index: int) -> int:
        """Return the minimum sample value at ``index``."""
        return self.min_samples[index]

    def max_sample(self, index: int) -> int:
        """Return the maximum sample value at ``index``."""
        return self.max_samples[index]


@dataclass(frozen=True)
class RenderColors:
    """Colours used to draw a waveform image."""

    border_color: RGBA
    background_color: RGBA
    waveform_color: RGBA
    axis_label_color: RGBA


def _colors_have_alpha(colors: RenderColors) -> bool:
    return any(
        color.has_alpha()
        for color in (
            colors.border_color,
            colors.background_color,
            colors.waveform_color,
            colors.axis_label_color,
        )
    )


def _amplitude_range(buffer: WaveformData, start: int, end: int) -> tuple[int, int]:
    low = _INT_MAX
    high = _INT_MIN
    for index in range(start, end):
        low = min(low, buffer.min_sample(index))
        high = max(high, buffer.max_sample(index))
    return low, high


def _scale(value: int, amplitude_scale: float) -> int:
    """Multiply by ``amplitude_scale``, limited to the 16-bit sample range."""
    result = value * amplitude_scale
    result = min(max(result, -32768.0), 32767.0)
    return int(result)


def _format_time(seconds: int) -> str:
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


class WaveformImageRenderer:
    """Draws waveform data, with optional border and time axis labels."""

    def __init__(self, output: TextIO | None = None) -> None:
        self.output = output if output is not None else sys.stdout
        self.image: Image.Image | None = None
        self.image_width = 0
        self.image_height = 0
        self.start_time = 0.0
        self.sample_rate = 0
        self.samples_per_pixel = 0
        self.start_index = 0
        self.render_axis_labels = True
        self.auto_amplitude_scale = False
        self.amplitude_scale = 1.0
        self._use_alpha = False
        self._colors: dict[str, tuple[int, ...]] = {}

    def create(
        self,
        buffer: WaveformData,
        start_time: float,
        image_width: int,
        image_height: int,
        colors: RenderColors,
        render_axis_labels: bool,
        auto_amplitude_scale: bool,
        amplitude_scale: float,
    ) -> Image.Image:
        """Render ``buffer`` into a new image and return it.

        Raises RenderError if any of the settings is out of range.
        """
        if start_time < 0.0:
            raise RenderError("Invalid start time: minimum 0")
        if start_time > MAX_START_TIME:
            raise RenderError(f"Invalid start time: maximum {MAX_START_TIME}")
        if image_width < 1:
            raise RenderError("Invalid image width: minimum 1")
        if image_height < 1:
            raise RenderError("Invalid image height: minimum 1")

        sample_rate = buffer.sample_rate
        if sample_rate > MAX_SAMPLE_RATE:
            raise RenderError(
                f"Invalid sample rate: {sample_rate} Hz, "
                f"maximum {MAX_SAMPLE_RATE} Hz"
            )
        if sample_rate < 1:
            raise RenderError(f"Invalid sample rate: {sample_rate} Hz")

        samples_per_pixel = buffer.samples_per_pixel
        if samples_per_pixel > MAX_ZOOM:
            raise RenderError(f"Invalid zoom: maximum {MAX_ZOOM}")
        if samples_per_pixel < 1:
            raise RenderError(f"Invalid zoom: {samples_per_pixel}")

        self.image_width = image_width
        self.image_height = image_height
        self.start_time = start_time
        self.sample_rate = sample_rate
        self.samples_per_pixel = samples_per_pixel
        self.start_index = self.seconds_to_pixels(start_time)
        self.render_axis_labels = render_axis_labels
        self.auto_amplitude_scale = auto_amplitude_scale
        self.amplitude_scale = amplitude_scale

        self.output.write(
            f"Image dimensions: {image_width}x{image_height} pixels"
            f"\nSample rate: {sample_rate} Hz"
            f"\nSamples per pixel: {samples_per_pixel}"
            f"\nStart time: {start_time:g} seconds"
            f"\nStart index: {self.start_index}"
            f"\nBuffer size: {len(buffer)}"
            f"\nAxis labels: {'yes' if render_axis_labels else 'no'}"
            "\n"
        )

        self._use_alpha = _colors_have_alpha(colors)
        mode = "RGBA" if self._use_alpha else "RGB"
        self.image = Image.new(mode, (image_width, image_height))

        self._init_colors(colors)
        draw = ImageDraw.Draw(self.image)

        self._draw_background(draw)
        if render_axis_labels:
            self._draw_border(draw)
        self._draw_waveform(draw, buffer)
        if render_axis_labels:
            self._draw_time_axis_labels(draw)

        return self.image

    def _pixel_color(self, color: RGBA) -> tuple[int, ...]:
        if not self._use_alpha:
            return (color.red, color.green, color.blue)
        if color.has_alpha():
            # 7-bit alpha, 127 fully transparent, expanded back to 8 bits.
            alpha7 = 127 - color.alpha // 2
            alpha = 255 - ((alpha7 << 1) + (alpha7 >> 6))
        else:
            alpha = 255
        return (color.red, color.green, color.blue, alpha)

    def _init_colors(self, colors: RenderColors) -> None:
        self._colors = {
            "border": self._pixel_color(colors.border_color),
            "background": self._pixel_color(colors.background_color),
            "waveform": self._pixel_color(colors.waveform_color),
            "axis_label": self._pixel_color(colors.axis_label_color),
        }

    def _draw_background(self, draw: ImageDraw.ImageDraw) -> None:
        draw.rectangle(
            [0, 0, self.image_width - 1, self.image_height - 1],
            fill=self._colors["background"],
        )

    def _draw_border(self, draw: ImageDraw.ImageDraw) -> None:
        draw.rectangle(
            [0, 0, self.image_width - 1, self.image_height - 1],
            outline=self._colors["border"],
        )

    def _draw_waveform(self, draw: ImageDraw.ImageDraw, buffer: WaveformData) -> None:
        labels = self.render_axis_labels

        # Keep clear of the border when one is drawn.
        max_x = self.image_width - 1 if labels else self.image_width
        wave_bottom_y = self.image_height - 2 if labels else self.image_height - 1
        max_wave_height = self.image_height - 2 if labels else self.image_height

        buffer_size = len(buffer)
        start_x = 1 if labels else 0
        start_index = self.start_index + 1 if labels else self.start_index

        if self.auto_amplitude_scale:
            end_index = min(start_index + max_x, buffer_size)
            low, high = _amplitude_range(buffer, start_index, end_index)
            scale_high = 1.0 if high == 0 else 32767.0 / high
            scale_low = 1.0 if low == 0 else 32767.0 / low
            amplitude_scale = abs(min(scale_high, scale_low))
        else:
            amplitude_scale = self.amplitude_scale

        self.output.write(f"Amplitude scale: {amplitude_scale:g}\n")

        color = self._colors["waveform"]
        columns = zip(range(start_x, max_x), range(start_index, buffer_size))
        for x, index in columns:
            low = _scale(buffer.min_sample(index), amplitude_scale) + 32768
            high = _scale(buffer.max_sample(index), amplitude_scale) + 32768

            low_y = wave_bottom_y - low * max_wave_height // 65536
            high_y = wave_bottom_y - high * max_wave_height // 65536

            top, bottom = sorted((low_y, high_y))
            draw.line([(x, top), (x, bottom)], fill=color)

    def _draw_time_axis_labels(self, draw: ImageDraw.ImageDraw) -> None:
        interval_secs = self.axis_label_scale()
        first_label_secs = round_up_to_nearest(self.start_time, interval_secs)

        offset_secs = first_label_secs - self.start_time
        offset_samples = int(self.sample_rate * offset_secs)
        offset_pixels = offset_samples // self.samples_per_pixel

        font = ImageFont.load_default()
        border = self._colors["border"]
        label_color = self._colors["axis_label"]
        bottom = self.image_height - 1

        secs = first_label_secs
        while True:
            x = offset_pixels + (
                (secs - first_label_secs) * self.sample_rate // self.samples_per_pixel
            )
            if x >= self.image_width:
                break

            draw.line([(x, 0), (x, _MARKER_HEIGHT)], fill=border)
            draw.line([(x, bottom - _MARKER_HEIGHT), (x, bottom)], fill=border)

            label = _format_time(secs)
            label_width = _FONT_WIDTH * len(label)
            label_x = x - label_width // 2 + 1
            label_y = bottom - _MARKER_HEIGHT - 1 - _FONT_HEIGHT

            if label_x >= 0:
                draw.text((label_x, label_y), label, fill=label_color, font=font)

            secs += interval_secs

    def axis_label_scale(self) -> int:
        """Return the seconds between axis markers for the current zoom.

        Markers fall every 1, 2, 5, 10, 20 or 30 seconds, minutes or hours,
        whichever is the first to give at least 60 pixels between them.
        """
        base_secs = 1
        while True:
            for step in _LABEL_STEPS:
                secs = base_secs * step
                if self.seconds_to_pixels(secs) >= _MIN_LABEL_SPACING:
                    return secs
            base_secs *= 60  # seconds -> minutes -> hours

    def seconds_to_pixels(self, seconds: float) -> int:
        """Convert a time in seconds to a pixel offset at the current zoom."""
        return int(seconds * self.sample_rate / self.samples_per_pixel)

    def save_as_png(self, filename: str, compression_level: int = -1) -> None:
        """Write the rendered image to ``filename`` as PNG.

        A ``compression_level`` of -1 uses the default compression.
        Raises RenderError if nothing was rendered or the file can't be written.
        """
        if self.image is None:
            raise RenderError("No image has been rendered")

        save_args: dict[str, int] = {}
        if 0 <= compression_level <= 9:
            save_args["compress_level"] = compression_level

        try:
            with open(filename, "wb") as output_file:
                self.output.write(f"Writing PNG file: {filename}\n")
                self.image.save(output_file, format="PNG", **save_args)
        except OSError as error:
            raise RenderError(
                f"Failed to write PNG file: {filename}\n{error.strerror}"
            ) from error