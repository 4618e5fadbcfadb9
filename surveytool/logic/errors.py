"""Domain error raised by the submission engine and authoring helpers."""

from __future__ import annotations


class DomainValidationError(ValueError):
    """A submission or authoring request violates survey rules.

    The message is human readable and surfaced verbatim to the caller.
    """


__all__ = ["DomainValidationError"]
