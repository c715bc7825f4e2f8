"""Custom exceptions for the personal health tracker."""


class PersonalHealthTrackerError(Exception):
    """Base exception for all personal health tracker errors."""

    pass


class ConfigurationError(PersonalHealthTrackerError):
    """Raised when there is a configuration error."""

    pass


class PersistenceError(PersonalHealthTrackerError):
    """Raised when the storage medium cannot be read or written."""

    pass


class ParseError(PersonalHealthTrackerError):
    """Raised when a stored blob does not deserialize to the expected shape."""

    pass


class ValidationError(PersonalHealthTrackerError):
    """Raised when mutation input or query parameters are invalid."""

    pass
