"""QuestionType enumeration for the supported survey question types.

Provides a simple constants container instead of an Enum so values round-trip
through the database and JSON as plain strings.
"""

from __future__ import annotations


class QuestionType:
    SINGLE_CHOICE = "SingleChoice"
    MULTIPLE_CHOICE = "MultipleChoice"
    FREE_TEXT = "FreeText"

    ALL = frozenset({SINGLE_CHOICE, MULTIPLE_CHOICE, FREE_TEXT})


__all__ = ["QuestionType"]
