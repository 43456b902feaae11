"""Custom exceptions for tracker interlink."""


class TrackerInterlinkError(Exception):
    """Base exception for all tracker interlink errors."""

    pass


class ConfigurationError(TrackerInterlinkError):
    """Raised when there is a configuration error."""

    pass


class ParsingError(TrackerInterlinkError):
    """Raised when tracker or entry exports cannot be parsed."""

    pass


class AnalysisError(TrackerInterlinkError):
    """Raised when correlation analysis fails unexpectedly."""

    pass


class OutputError(TrackerInterlinkError):
    """Raised when writing an analysis report fails."""

    pass
