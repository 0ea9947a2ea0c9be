"""Command-line options for generating and rendering waveforms."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, NoReturn, TextIO

from wavedraw.errors import WaveformError
from wavedraw.mathutil import parse_number
from wavedraw.rgba import RGBA, parse_rgba

VERSION = "1.0.0"
DEFAULT_PROGRAM_NAME = "wavedraw"


class OptionsError(WaveformError):
    """Raised when the command line cannot be parsed or holds invalid values.

    ``options`` holds what was parsed so far (at least the program name).
    ``usage_hint`` tells whether a pointer to ``--help`` should be shown.
    """

    def __init__(
        self,
        message: str,
        options: Options | None = None,
        usage_hint: bool = True,
    ) -> None:
        super().__init__(message)
        self.options = options if options is not None else Options()
        self.usage_hint = usage_hint


@dataclass(frozen=True)
class _OptionSpec:
    long: str
    short: str | None
    help: str
    kind: Callable[[str], Any] | None = None
    default: Any = None
    default_text: str | None = None

    @property
    def dest(self) -> str:
        return self.long.replace("-", "_")

    @property
    def takes_value(self) -> bool:
        return self.kind is not None

    def usage_name(self) -> str:
        name = f"-{self.short} [ --{self.long} ]" if self.short else f"--{self.long}"
        if self.takes_value:
            name += " arg"
        if self.default_text is not None:
            name += f" (={self.default_text})"
        return name


_OPTION_SPECS: tuple[_OptionSpec, ...] = (
    _OptionSpec("help", None, "show help message"),
    _OptionSpec("version", "v", "show version information"),
    _OptionSpec(
        "input-filename", "i", "input file name (.mp3, .wav, .flac, .dat)", str
    ),
    _OptionSpec(
        "output-filename", "o", "output file name (.wav, .dat, .png, .json)", str
    ),
    _OptionSpec("zoom", "z", "zoom level (samples per pixel)", int, 256, "256"),
    _OptionSpec(
        "pixels-per-second", None, "zoom level (pixels per second)", int, 100, "100"
    ),
    _OptionSpec("bits", "b", "bits (8 or 16)", int, 16, "16"),
    _OptionSpec("start", "s", "start time (seconds)", float, 0.0, "0"),
    _OptionSpec("end", "e", "end time (seconds)", float, 0.0, "0"),
    _OptionSpec("width", "w", "image width (pixels)", int, 800, "800"),
    _OptionSpec("height", "h", "image height (pixels)", int, 250, "250"),
    _OptionSpec(
        "colors", "c", "color scheme (audition or audacity)", str, "audacity",
        "audacity",
    ),
    _OptionSpec("border-color", None, "border color (rrggbb[aa])", parse_rgba),
    _OptionSpec(
        "background-color", None, "background color (rrggbb[aa])", parse_rgba
    ),
    _OptionSpec("waveform-color", None, "wave color (rrggbb[aa])", parse_rgba),
    _OptionSpec(
        "axis-label-color", None, "axis label color (rrggbb[aa])", parse_rgba
    ),
    _OptionSpec("no-axis-labels", None, "render waveform image without axis labels"),
    _OptionSpec(
        "with-axis-labels", None, "render waveform image with axis labels (default)"
    ),
    _OptionSpec("amplitude-scale", None, "amplitude scale", str, "1.0", "1.0"),
    _OptionSpec(
        "compression",
        None,
        "PNG compression level: 0 (none) to 9 (best), or -1 (default)",
        int,
        -1,
        "-1",
    ),
)


def _describe_options() -> str:
    names = [spec.usage_name() for spec in _OPTION_SPECS]
    width = max(len(name) for name in names) + 2
    lines = ["Options:"]
    lines.extend(
        f"  {name.ljust(width)}{spec.help}" for name, spec in zip(names, _OPTION_SPECS)
    )
    return "\n".join(lines) + "\n"


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise OptionsError(message)


def _build_parser(program_name: str) -> argparse.ArgumentParser:
    parser = _Parser(prog=program_name, add_help=False)
    for spec in _OPTION_SPECS:
        flags = [f"--{spec.long}"]
        if spec.short:
            flags.insert(0, f"-{spec.short}")
        if spec.takes_value:
            # Defaults are applied afterwards so explicit values can be told apart.
            parser.add_argument(*flags, dest=spec.dest, type=spec.kind, default=None)
        else:
            parser.add_argument(*flags, dest=spec.dest, action="store_true")
    return parser


@dataclass
class Options:
    """Settings taken from the command line."""

    program_name: str = DEFAULT_PROGRAM_NAME
    help: bool = False
    version: bool = False

    input_filename: str = ""
    output_filename: str = ""

    start_time: float = 0.0
    end_time: float = 0.0
    has_end_time: bool = False

    samples_per_pixel: int = 256
    has_samples_per_pixel: bool = False

    pixels_per_second: int = 100
    has_pixels_per_second: bool = False

    bits: int = 16
    has_bits: bool = False

    image_width: int = 800
    image_height: int = 250

    color_scheme: str = "audacity"
    border_color: RGBA | None = None
    background_color: RGBA | None = None
    waveform_color: RGBA | None = None
    axis_label_color: RGBA | None = None

    render_axis_labels: bool = True
    auto_amplitude_scale: bool = False
    amplitude_scale: float = 1.0

    png_compression_level: int = -1

    def show_usage(self, stream: TextIO) -> None:
        """Write the version, a usage line and the option descriptions."""
        self.show_version(stream)
        stream.write(
            f"\nUsage:\n  {self.program_name} [options]\n\n{_describe_options()}"
        )

    def show_version(self, stream: TextIO) -> None:
        """Write the program version."""
        stream.write(f"{DEFAULT_PROGRAM_NAME} v{VERSION}\n")

    def report_error(self, error: BaseException, stream: TextIO) -> None:
        """Write ``error``, with a pointer to ``--help`` where it applies."""
        if isinstance(error, OptionsError) and not error.usage_hint:
            stream.write(f"{error}\n")
            return
        stream.write(
            f"Error: {error}\n"
            f"See '{self.program_name} --help' for available options\n"
        )


def parse_amplitude_scale(value: str) -> float | None:
    """Parse an amplitude scale: a non-negative number, or None for ``"auto"``."""
    if value == "auto":
        return None
    try:
        scale = parse_number(value)
    except ValueError:
        raise OptionsError("Invalid amplitude scale: must be a number") from None
    if scale < 0.0:
        raise OptionsError("Invalid amplitude scale: must be a positive number")
    return scale


def _value(namespace: argparse.Namespace, name: str) -> Any:
    spec = next(spec for spec in _OPTION_SPECS if spec.long == name)
    given = getattr(namespace, spec.dest)
    return spec.default if given is None else given


def parse_command_line(argv: Sequence[str] | None = None) -> Options:
    """Parse ``argv``, whose first item is the program name.

    Raises OptionsError if the arguments are invalid.
    """
    if argv is None:
        argv = sys.argv
    program_name = argv[0] if argv else DEFAULT_PROGRAM_NAME
    options = Options(program_name=program_name)

    parser = _build_parser(program_name)
    try:
        namespace = parser.parse_args(list(argv[1:]))
    except OptionsError as error:
        error.options = options
        raise
    except WaveformError as error:
        raise OptionsError(str(error), options) from None

    options.help = namespace.help
    options.version = namespace.version
    if options.help or options.version:
        return options

    options.render_axis_labels = not namespace.no_axis_labels
    options.has_end_time = namespace.end is not None
    options.has_samples_per_pixel = namespace.zoom is not None
    options.has_pixels_per_second = namespace.pixels_per_second is not None
    options.has_bits = namespace.bits is not None

    for name in ("input-filename", "output-filename"):
        if getattr(namespace, name.replace("-", "_")) is None:
            raise OptionsError(
                f"the option '--{name}' is required but missing", options
            )

    options.input_filename = namespace.input_filename
    options.output_filename = namespace.output_filename
    options.samples_per_pixel = _value(namespace, "zoom")
    options.pixels_per_second = _value(namespace, "pixels-per-second")
    options.bits = _value(namespace, "bits")
    options.start_time = _value(namespace, "start")
    options.end_time = _value(namespace, "end")
    options.image_width = _value(namespace, "width")
    options.image_height = _value(namespace, "height")
    options.color_scheme = _value(namespace, "colors")
    options.border_color = namespace.border_color
    options.background_color = namespace.background_color
    options.waveform_color = namespace.waveform_color
    options.axis_label_color = namespace.axis_label_color
    options.png_compression_level = _value(namespace, "compression")

    if options.bits not in (8, 16):
        raise OptionsError(
            "Invalid bits: must be either 8 or 16", options, usage_hint=False
        )

    try:
        scale = parse_amplitude_scale(_value(namespace, "amplitude-scale"))
    except OptionsError as error:
        error.options = options
        raise
    if scale is None:
        options.auto_amplitude_scale = True
    else:
        options.amplitude_scale = scale

    if not -1 <= options.png_compression_level <= 9:
        raise OptionsError(
            "Invalid compression level: must be from 0 (none) to 9 (best), "
            "or -1 (default)",
            options,
            usage_hint=False,
        )

    return options