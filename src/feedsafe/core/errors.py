"""Exception types raised inside the filter pipeline."""

from __future__ import annotations


class FeedsafeError(Exception):
    """Base class for feedsafe errors."""


class MalformedInputError(FeedsafeError):
    """The structural parse cannot continue.

    Recovered by the pipeline, which keeps the output accumulated so far.
    """


class RuleCompilationError(FeedsafeError):
    """A site substitution has an invalid pattern or replacement template."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid site rule {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason
