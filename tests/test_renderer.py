import io

import pytest
from PIL import Image

from wavedraw.errors import WaveformError
from wavedraw.renderer import (
    MAX_SAMPLE_RATE,
    MAX_ZOOM,
    RenderColors,
    RenderError,
    WaveformData,
    WaveformImageRenderer,
)
from wavedraw.rgba import RGBA

BORDER = RGBA(255, 0, 0)
BACKGROUND = RGBA(0, 255, 0)
WAVEFORM = RGBA(0, 0, 255)
LABEL = RGBA(255, 255, 255)

COLORS = RenderColors(
    border_color=BORDER,
    background_color=BACKGROUND,
    waveform_color=WAVEFORM,
    axis_label_color=LABEL,
)


def rgb(color):
    return (color.red, color.green, color.blue)


def make_data(pairs, sample_rate=1000, samples_per_pixel=10):
    return WaveformData(
        sample_rate=sample_rate,
        samples_per_pixel=samples_per_pixel,
        min_samples=[low for low, _ in pairs],
        max_samples=[high for _, high in pairs],
    )


def render(data, width=50, height=50, labels=False, auto=False, scale=1.0,
           start=0.0, colors=COLORS):
    output = io.StringIO()
    renderer = WaveformImageRenderer(output)
    image = renderer.create(data, start, width, height, colors, labels, auto, scale)
    return renderer, image, output.getvalue()


def column(image, x):
    return [image.getpixel((x, y)) for y in range(image.height)]


def test_waveform_data_accessors():
    data = make_data([(-5, 7), (-2, 3)])
    assert len(data) == 2
    assert data.min_sample(1) == -2
    assert data.max_sample(0) == 7


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"start": -1.0}, "Invalid start time: minimum 0"),
        ({"width": 0}, "Invalid image width: minimum 1"),
        ({"height": 0}, "Invalid image height: minimum 1"),
    ],
)
def test_rejects_invalid_settings(kwargs, message):
    with pytest.raises(RenderError) as info:
        render(make_data([(0, 0)]), **kwargs)
    assert str(info.value) == message


def test_rejects_start_time_beyond_limit():
    with pytest.raises(RenderError, match="Invalid start time: maximum"):
        render(make_data([(0, 0)]), start=12 * 60 * 60 + 1.0)


def test_rejects_high_sample_rate():
    data = make_data([(0, 0)], sample_rate=MAX_SAMPLE_RATE + 1)
    with pytest.raises(RenderError, match="Invalid sample rate"):
        render(data)


def test_rejects_high_zoom():
    data = make_data([(0, 0)], samples_per_pixel=MAX_ZOOM + 1)
    with pytest.raises(RenderError, match="Invalid zoom: maximum"):
        render(data)


def test_render_error_is_waveform_error():
    with pytest.raises(WaveformError):
        render(make_data([(0, 0)]), width=-3)


def test_reports_settings():
    _, _, text = render(make_data([(0, 0)] * 3), width=100, height=50)
    assert "Image dimensions: 100x50 pixels" in text
    assert "Sample rate: 1000 Hz" in text
    assert "Buffer size: 3" in text
    assert "Axis labels: no" in text


def test_image_has_requested_size():
    _, image, _ = render(make_data([(0, 0)]), width=37, height=21)
    assert image.size == (37, 21)
    assert image.mode == "RGB"


def test_full_amplitude_fills_column():
    _, image, _ = render(make_data([(-32768, 32767)] * 5))
    assert set(column(image, 0)) == {rgb(WAVEFORM)}


def test_silence_draws_single_pixel_per_column():
    _, image, _ = render(make_data([(0, 0)] * 5))
    assert column(image, 2).count(rgb(WAVEFORM)) == 1


def test_columns_beyond_data_are_background():
    _, image, _ = render(make_data([(-32768, 32767)] * 5))
    assert set(column(image, 10)) == {rgb(BACKGROUND)}


def test_zero_amplitude_scale_flattens_waveform():
    _, flat, _ = render(make_data([(0, 0)] * 20))
    _, scaled, _ = render(make_data([(-20000, 15000)] * 20), scale=0.0)
    assert list(flat.getdata()) == list(scaled.getdata())


def test_auto_amplitude_scale_fills_column():
    _, image, text = render(make_data([(-100, 100)] * 5), auto=True)
    assert set(column(image, 0)) == {rgb(WAVEFORM)}
    assert "Amplitude scale:" in text


def test_border_drawn_with_axis_labels():
    _, image, text = render(make_data([(0, 0)] * 100), width=100, height=50,
                            labels=True)
    assert image.getpixel((0, 25)) == rgb(BORDER)
    assert image.getpixel((99, 25)) == rgb(BORDER)
    assert image.getpixel((50, 0)) == rgb(BORDER)
    assert "Axis labels: yes" in text


def test_axis_markers_at_label_interval():
    renderer, image, _ = render(make_data([(0, 0)] * 400), width=300,
                                height=60, labels=True)
    x = renderer.seconds_to_pixels(renderer.axis_label_scale())
    assert image.getpixel((x, 5)) == rgb(BORDER)
    assert image.getpixel((x, image.height - 1 - 5)) == rgb(BORDER)


@pytest.mark.parametrize("samples_per_pixel", [10, 64, 256, 2048, 100000])
def test_axis_label_scale_is_smallest_wide_enough_step(samples_per_pixel):
    data = make_data([(0, 0)], sample_rate=44100, samples_per_pixel=samples_per_pixel)
    renderer, _, _ = render(data)
    secs = renderer.axis_label_scale()
    assert renderer.seconds_to_pixels(secs) >= 60

    steps = [b * s for b in (1, 60, 3600, 216000) for s in (1, 2, 5, 10, 20, 30)]
    assert secs in steps
    smaller = [s for s in steps if s < secs]
    assert all(renderer.seconds_to_pixels(s) < 60 for s in smaller)


def test_start_time_sets_start_index():
    renderer, _, text = render(make_data([(0, 0)] * 500), start=2.0)
    assert renderer.start_index == renderer.seconds_to_pixels(2.0)
    assert f"Start index: {renderer.start_index}" in text


def test_alpha_colors_make_rgba_image():
    colors = RenderColors(BORDER, RGBA(0, 255, 0, 0x80), WAVEFORM, LABEL)
    _, image, _ = render(make_data([(0, 0)]), width=20, height=20, colors=colors)
    assert image.mode == "RGBA"
    assert image.getpixel((15, 0))[3] < 255


def test_save_as_png_round_trip(tmp_path):
    renderer, image, _ = render(make_data([(-1000, 2000)] * 30))
    path = tmp_path / "wave.png"
    renderer.save_as_png(str(path), 9)
    with Image.open(path) as loaded:
        assert loaded.size == image.size
        assert list(loaded.convert("RGB").getdata()) == list(image.getdata())


def test_save_as_png_reports_file(tmp_path):
    output = io.StringIO()
    renderer = WaveformImageRenderer(output)
    renderer.create(make_data([(0, 0)]), 0.0, 10, 10, COLORS, False, False, 1.0)
    path = tmp_path / "out.png"
    renderer.save_as_png(str(path))
    assert f"Writing PNG file: {path}" in output.getvalue()
    assert path.stat().st_size > 0


def test_save_as_png_fails_for_missing_directory(tmp_path):
    renderer, _, _ = render(make_data([(0, 0)]))
    path = tmp_path / "missing" / "out.png"
    with pytest.raises(RenderError, match="Failed to write PNG file"):
        renderer.save_as_png(str(path))
    assert not path.exists()


def test_save_without_render_fails(tmp_path):
    renderer = WaveformImageRenderer(io.StringIO())
    with pytest.raises(RenderError):
        renderer.save_as_png(str(tmp_path / "out.png"))