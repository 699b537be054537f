"""
Custom exception hierarchy for ClosetWise.

Provides a structured exception hierarchy for different error scenarios:
- AppException: Base for all application errors
- ConfigError: Configuration-related errors
- LedgerError: Wardrobe ledger (storage) errors
- ChallengeError: Rediscovery challenge lifecycle errors
- ValidationError: Input validation errors

Each exception includes:
- Descriptive message
- Optional error code for programmatic handling
- Optional context dictionary for debugging

Example:
    >>> from closetwise.utils.exceptions import NotFoundError
    >>> raise NotFoundError("Item not found", entity="item", identifier="item-1")
"""

from __future__ import annotations

from typing import Any, Dict, Optional


# ============================================
# Base Exception
# ============================================


class AppException(Exception):
    """
    Base exception for all ClosetWise application errors.
    
    All custom exceptions inherit from this class, allowing:
    - Catch-all handling of application errors
    - Consistent error structure across the app
    - Error code and context support
    
    Attributes:
        message: Human-readable error description.
        code: Optional error code for programmatic handling.
        context: Optional dictionary with debugging context.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Human-readable error description.
            code: Optional error code (e.g., "NOT_FOUND").
            context: Optional dict with additional debugging info.
        """
        self.message = message
        self.code = code or self._default_code()
        self.context = context or {}
        super().__init__(self.message)

    def _default_code(self) -> str:
        """Generate default error code from class name."""
        # Convert CamelCase to UPPER_SNAKE_CASE
        name = self.__class__.__name__
        code = ""
        for i, char in enumerate(name):
            if char.isupper() and i > 0:
                code += "_"
            code += char.upper()
        return code

    def __str__(self) -> str:
        """String representation with code if available."""
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "context": self.context,
        }


# ============================================
# Configuration Errors
# ============================================


class ConfigError(AppException):
    """
    Base exception for configuration-related errors.
    
    Raised when there are issues with:
    - Loading configuration files
    - Parsing YAML
    - Validating configuration values
    """

    pass


class ConfigFileNotFoundError(ConfigError):
    """
    Raised when a required configuration file is not found.
    
    Example:
        >>> raise ConfigFileNotFoundError(path="/path/to/config.yaml")
    """

    def __init__(
        self,
        message: str = "Configuration file not found",
        path: Optional[str] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if path:
            context["path"] = path
        super().__init__(message, code="CONFIG_FILE_NOT_FOUND", context=context, **kwargs)


class ConfigValidationError(ConfigError):
    """
    Raised when configuration values fail validation.
    
    Example:
        >>> raise ConfigValidationError(
        ...     "Configuration file is empty",
        ...     field="matching.weights",
        ... )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = value
        super().__init__(message, code="CONFIG_VALIDATION", context=context, **kwargs)


# ============================================
# Ledger Errors
# ============================================


class LedgerError(AppException):
    """
    Base exception for wardrobe ledger errors.
    
    Raised when there are issues with:
    - Resolving items or challenges
    - Optimistic concurrency on challenge progress
    - Reaching the underlying store
    """

    pass


class NotFoundError(LedgerError):
    """
    Raised when a referenced item, challenge or user does not exist.
    
    Example:
        >>> raise NotFoundError(
        ...     "Challenge not found",
        ...     entity="challenge",
        ...     identifier="ch_123"
        ... )
    """

    def __init__(
        self,
        message: str = "Entity not found",
        entity: Optional[str] = None,
        identifier: Optional[str] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if entity:
            context["entity"] = entity
        if identifier:
            context["identifier"] = identifier
        super().__init__(message, code="NOT_FOUND", context=context, **kwargs)


class ConflictError(LedgerError):
    """
    Raised when a challenge progress update loses an optimistic-concurrency race.
    
    The caller should re-read the challenge and retry.
    """

    def __init__(
        self,
        message: str = "Challenge progress changed concurrently",
        challenge_id: Optional[str] = None,
        expected_progress: Optional[int] = None,
        actual_progress: Optional[int] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if challenge_id:
            context["challenge_id"] = challenge_id
        if expected_progress is not None:
            context["expected_progress"] = expected_progress
        if actual_progress is not None:
            context["actual_progress"] = actual_progress
        super().__init__(message, code="CONFLICT", context=context, **kwargs)


class LedgerUnavailableError(LedgerError):
    """Raised when the underlying data store could not be reached or read."""

    def __init__(
        self,
        message: str = "Wardrobe ledger unavailable",
        operation: Optional[str] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if operation:
            context["operation"] = operation
        super().__init__(message, code="LEDGER_UNAVAILABLE", context=context, **kwargs)


# ============================================
# Challenge Errors
# ============================================


class ChallengeError(AppException):
    """Base exception for rediscovery challenge lifecycle errors."""

    pass


class NotActiveError(ChallengeError):
    """
    Raised when progress is recorded on an expired or completed challenge.
    
    Example:
        >>> raise NotActiveError(challenge_id="ch_123", reason="expired")
    """

    def __init__(
        self,
        message: str = "Challenge is no longer active",
        challenge_id: Optional[str] = None,
        reason: Optional[str] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if challenge_id:
            context["challenge_id"] = challenge_id
        if reason:
            context["reason"] = reason
        super().__init__(message, code="NOT_ACTIVE", context=context, **kwargs)


class NotTargetedError(ChallengeError):
    """Raised when an item is marked worn against a challenge that does not target it."""

    def __init__(
        self,
        message: str = "Item is not part of this challenge",
        challenge_id: Optional[str] = None,
        item_id: Optional[str] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if challenge_id:
            context["challenge_id"] = challenge_id
        if item_id:
            context["item_id"] = item_id
        super().__init__(message, code="NOT_TARGETED", context=context, **kwargs)


# ============================================
# Validation Errors
# ============================================


class ValidationError(AppException):
    """
    Base exception for input validation errors.
    
    Raised when caller input fails validation.
    """

    pass


class InvalidInputError(ValidationError):
    """Raised when input data is invalid."""

    def __init__(
        self,
        message: str = "Invalid input",
        field: Optional[str] = None,
        value: Any = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = str(value)[:100]  # Limit value length
        super().__init__(message, code="INVALID_INPUT", context=context, **kwargs)
