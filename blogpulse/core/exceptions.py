"""Custom exception classes for the application."""

from typing import Any


class BlogPulseError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# Authentication Errors
class AuthenticationError(BlogPulseError):
    """Authentication failed."""

    pass


class InvalidTokenError(AuthenticationError):
    """Invalid or expired token."""

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


# Configuration Errors
class ConfigurationError(BlogPulseError):
    """Required configuration is missing or malformed."""

    pass


# External API Errors
class ExternalAPIError(BlogPulseError):
    """Error calling external API."""

    def __init__(self, api_name: str, message: str) -> None:
        self.api_name = api_name
        super().__init__(f"{api_name} API error: {message}")


class RetryableAPIError(ExternalAPIError):
    """Transient upstream failure that may succeed on a later attempt."""

    pass


class APIKeyMissingError(ExternalAPIError):
    """API key not configured."""

    def __init__(self, api_name: str) -> None:
        super().__init__(api_name, "API key not configured")


class MalformedAIResponseError(ExternalAPIError):
    """Completion service answered with a payload of the wrong shape."""

    def __init__(self, message: str, raw_text: str = "") -> None:
        self.raw_text = raw_text
        super().__init__("Completion", message)


class AllModelsExhaustedError(ExternalAPIError):
    """Every model in the ladder failed after its retry budget."""

    def __init__(self, models: list[str]) -> None:
        self.models = models
        super().__init__("Completion", f"All models failed: {', '.join(models)}")


# Data Errors
class AnalyticsNotFoundError(BlogPulseError):
    """No stored analytics snapshot for this site."""

    def __init__(self, wordpress_url: str) -> None:
        super().__init__(f"No analytics stored for: {wordpress_url}")


class ScheduleItemNotFoundError(BlogPulseError):
    """Schedule item not found for the current user."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Schedule item not found: {item_id}")


class DuplicateScheduleKeywordError(BlogPulseError):
    """Keyword is already on the user's calendar."""

    def __init__(self, keyword: str) -> None:
        super().__init__(f"Keyword already on the calendar: {keyword}")


# Validation Errors
class ValidationError(BlogPulseError):
    """Data validation failed."""

    pass
