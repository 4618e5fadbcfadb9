"""Aggregate and recomputed scores over stored responses."""

from __future__ import annotations

from typing import Iterable

from surveytool.models.answers import AggregateScore, StoredResponse
from surveytool.models.graph import SurveyGraph


def summarize_scores(total: int, count: int) -> AggregateScore:
    """Build the aggregate from a precomputed sum and response count.

    Zero responses yields (0, 0, 0.0).
    """
    if count == 0:
        return AggregateScore(0, 0, 0.0)
    return AggregateScore(total, count, total / count)


def aggregate_scores(responses: Iterable[StoredResponse]) -> AggregateScore:
    """Return total, count and average of stored scores."""
    total = 0
    count = 0
    for resp in responses:
        total += resp.score
        count += 1
    return summarize_scores(total, count)


def recompute_score(graph: SurveyGraph, response: StoredResponse) -> int:
    """Re-sum option weights for a stored response's items.

    Free text contributes 0; options no longer present in the graph
    contribute 0.
    """
    score = 0
    for item in response.items:
        ids = item.selected_option_ids
        if not ids:
            continue
        question = graph.question(item.question_id)
        if question is None:
            continue
        for oid in ids:
            opt = question.option_by_id(oid)
            if opt is not None:
                score += opt.weight
    return score


__all__ = ["summarize_scores", "aggregate_scores", "recompute_score"]
