"""RXT exception hierarchy."""

from __future__ import annotations


class RXTError(Exception):
    """Base exception for all RXT errors."""

    pass


class ConfigurationError(RXTError):
    """Raised when configuration is invalid or an encoder cannot be resolved."""

    pass


class ValidationError(RXTError):
    """Raised when an input file or export configuration fails validation."""

    pass


class TransformError(RXTError):
    """Raised when the record transform pipeline receives unusable input."""

    pass


class EncoderError(RXTError):
    """Raised when an encoder fails to write or serialize its artifact."""

    pass


class RegistryError(RXTError):
    """Raised when an encoder registry operation fails."""

    pass
