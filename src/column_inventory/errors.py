"""Error classes for the column inventory.

This module provides:
- ColumnInventoryError: Base exception class for all inventory errors
- InvalidArgumentError: Rejected classifier input
- StorageError, FindingNotFoundError: Finding store exceptions
- ReviewError: Invalid review workflow transition
- RulesetError and its subclasses: Ruleset loading exceptions
- SourceError: Column source enumeration failure
- ConfigurationError: Invalid component configuration
"""


class ColumnInventoryError(Exception):
    """Base exception for all column inventory errors."""

    pass


class InvalidArgumentError(ColumnInventoryError, ValueError):
    """Raised when a caller passes an empty or malformed argument.

    Not retryable: the caller must fix the input.
    """

    pass


class StorageError(ColumnInventoryError):
    """Raised when the inventory store is unreachable or rejects a write."""

    pass


class FindingNotFoundError(StorageError):
    """Raised when no finding exists for a requested identity key."""

    pass


class ReviewError(ColumnInventoryError):
    """Raised when a review decision breaks the review workflow."""

    pass


class RulesetError(ColumnInventoryError):
    """Base exception for ruleset-related errors."""

    pass


class RulesetURIParseError(RulesetError):
    """Raised when a ruleset URI cannot be parsed."""

    pass


class UnsupportedProviderError(RulesetError):
    """Raised when a ruleset provider is not supported."""

    pass


class RulesetNotFoundError(RulesetError):
    """Raised when a requested ruleset cannot be found."""

    pass


class SourceError(ColumnInventoryError):
    """Raised when a column source cannot enumerate its columns."""

    pass


class ConfigurationError(ColumnInventoryError):
    """Raised when component configuration is invalid."""

    pass
