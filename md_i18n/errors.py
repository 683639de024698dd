"""
Custom exception types used across md-i18n.

Defining explicit error classes makes it easier for the CLI and higher
layers to distinguish between user-facing failures and unexpected bugs.
Structural mismatches found while validating a translation are not
errors in this sense; they are reported as data on a ValidationResult.
"""

from __future__ import annotations


class I18nError(Exception):
    """Base class for all md-i18n specific errors."""


class GitError(I18nError):
    """Raised when git operations fail."""


class DocumentNotFoundError(I18nError):
    """Raised when a markdown file required by a command does not exist."""


class PlanError(I18nError):
    """Raised when a plan file is missing, unreadable, or malformed."""


class PlanEntryNotFoundError(PlanError):
    """Raised when a plan does not contain the requested source file."""


class ConfigError(I18nError):
    """Raised when the no-translate configuration cannot be used."""
