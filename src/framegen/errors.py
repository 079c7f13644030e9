"""Exception types raised by the analysis core."""


class FrameGenError(Exception):
    """Base class for all framegen errors."""


class InvalidBuffer(FrameGenError, ValueError):
    """Pixel buffer is malformed (zero dimension or wrong sample count)."""


class DegenerateInput(FrameGenError):
    """Buffer too small for a 3x3 neighborhood.

    The analyzers degrade to neutral output instead of raising it; only an
    EdgeDetector built with strict=True does.
    """


class UnsupportedPreset(FrameGenError, KeyError):
    """Unknown preset platform or format key."""

    def __str__(self):
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0]) if self.args else ''
