"""Application-level exception types for Murmur."""

from __future__ import annotations


class MurmurError(Exception):
    """Base exception for Murmur."""


class ConfigurationError(MurmurError):
    """Base exception for configuration and startup validation errors."""


class ModelNotConfiguredError(ConfigurationError):
    """Raised when model configuration is missing."""


class InvalidModelFormatError(ConfigurationError):
    """Raised when model format is not provider:model."""


class ApiKeyNotConfiguredError(ConfigurationError):
    """Raised when an API key is required but missing."""


class InvalidEndpointError(ConfigurationError):
    """Raised when the chat endpoint URL is not an http(s) URL."""
