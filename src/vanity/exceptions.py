"""Centralized exceptions for the Vanity application."""


class VanityError(Exception):
    """Base exception for all Vanity errors."""


class ValidationError(VanityError):
    """Raised when operator input or stored content fails validation."""


class NotFoundError(VanityError):
    """Raised when the target of an operation does not exist."""


class SecurityRejection(VanityError):
    """Raised when input looks like an attempt to escape the expected location."""
