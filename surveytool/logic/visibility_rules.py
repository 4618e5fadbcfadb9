"""Visibility rule evaluation for conditional questions.

A question is visible when it has no parent, or when its parent is visible,
was answered in the same submission, and at least one of the parent's
selected options is in the question's trigger set. Results are memoized per
resolver, and a resolver is used for one submission only.
"""

from __future__ import annotations

from typing import Iterable, Mapping
import logging

from surveytool.models.answers import AnswerSubmission
from surveytool.models.graph import Question, SurveyGraph

logger = logging.getLogger(__name__)

_IN_PROGRESS = object()


def is_child_visible(parent_selected: Iterable[int] | None, trigger_option_ids: Iterable[int] | None) -> bool:
    """Return True if any selected parent option is in the trigger set.

    Empty or None inputs never make a child visible.
    """
    if not parent_selected or not trigger_option_ids:
        return False
    return not set(trigger_option_ids).isdisjoint(parent_selected)


class VisibilityResolver:
    """Memoized visibility lookup over one graph and one submission."""

    def __init__(self, graph: SurveyGraph, submission_index: Mapping[int, AnswerSubmission]) -> None:
        self.graph = graph
        self.submission_index = submission_index
        self._memo: dict[int, object] = {}

    def is_visible(self, question: Question) -> bool:
        cached = self._memo.get(question.id)
        if isinstance(cached, bool):
            return cached

        # Walk up to the first root or already-resolved ancestor, then resolve
        # back down so deep chains do not hit the recursion limit.
        chain: list[Question] = []
        current: Question | None = question
        while current is not None:
            state = self._memo.get(current.id)
            if isinstance(state, bool):
                break
            if state is _IN_PROGRESS:
                logger.warning(
                    "visibility_cycle_detected survey_id=%s question_id=%s",
                    self.graph.survey_id,
                    current.id,
                )
                self._memo[current.id] = False
                break
            self._memo[current.id] = _IN_PROGRESS
            chain.append(current)
            if current.parent_question_id is None:
                break
            current = self.graph.question(current.parent_question_id)

        for node in reversed(chain):
            self._memo[node.id] = self._resolve_one(node)
        return bool(self._memo[question.id])

    def _resolve_one(self, question: Question) -> bool:
        if question.parent_question_id is None:
            return True
        parent = self.graph.question(question.parent_question_id)
        if parent is None:
            return False
        if self._memo.get(parent.id) is not True:
            return False
        parent_item = self.submission_index.get(parent.id)
        if parent_item is None:
            return False
        return is_child_visible(parent_item.selected_option_ids, question.trigger_option_ids)


def compute_visible_set(graph: SurveyGraph, submission_index: Mapping[int, AnswerSubmission]) -> set[int]:
    """Return the ids of all questions visible under the given answers."""
    resolver = VisibilityResolver(graph, submission_index)
    return {q.id for q in graph.questions if resolver.is_visible(q)}


__all__ = ["is_child_visible", "VisibilityResolver", "compute_visible_set"]
