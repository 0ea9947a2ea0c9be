"""Exception type shared across the package."""


class WaveformError(RuntimeError):
    """Raised when audio or waveform data cannot be processed."""