"""Render audio waveform min/max data as PNG images, with option parsing."""

__version__ = "0.1.0"