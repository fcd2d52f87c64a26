"""Custom exception types for the ticket score aggregator."""


class ScoreAggregatorError(Exception):
    """Base exception for all recoverable score aggregator errors."""


class ConfigurationError(ScoreAggregatorError):
    """Raised when runtime configuration values are missing or invalid."""


class DateParseError(ScoreAggregatorError):
    """Raised when a date or timestamp string cannot be parsed as a calendar date."""


class ServiceConnectionError(ScoreAggregatorError):
    """Raised when a collaborator (rating store, gateway) cannot be constructed or reached."""


class StorageError(ScoreAggregatorError):
    """Raised when the rating store fails to read rating, agent or category rows."""


class ApiError(ScoreAggregatorError):
    """Raised when a scores gateway request fails or returns an unexpected response."""


class DataValidationError(ScoreAggregatorError):
    """Raised when wire payloads do not match the expected report shape."""
