"""Exception types raised by Spindle components."""


class SpindleError(Exception):
    """Base class for all Spindle errors."""


class AudioLoadError(SpindleError):
    """The audio output could not open or decode a file for playback."""


class AnalyzerError(SpindleError):
    """The cover analyzer failed or returned a malformed payload."""
