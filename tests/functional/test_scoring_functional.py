"""Functional tests for aggregate and recomputed scores."""

from __future__ import annotations

from datetime import datetime, timezone

from surveytool.logic.scoring import aggregate_scores, recompute_score, summarize_scores
from surveytool.models.answers import AggregateScore, FreeTextAnswer, ResponseItem, SelectedOptions, StoredResponse

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _resp(score: int, *items: ResponseItem) -> StoredResponse:
    return StoredResponse(survey_id=1, created_at=NOW, score=score, items=items)


def test_aggregate_of_nothing_is_zero() -> None:
    agg = aggregate_scores([])
    assert agg == AggregateScore(0, 0, 0.0)
    assert isinstance(agg.average_score, float)


def test_aggregate_totals_and_averages() -> None:
    agg = aggregate_scores([_resp(5), _resp(5), _resp(3)])
    assert agg.total_score == 13
    assert agg.response_count == 3
    assert agg.average_score == 13 / 3


def test_aggregate_handles_negative_scores() -> None:
    assert aggregate_scores([_resp(-2), _resp(1)]) == AggregateScore(-1, 2, -0.5)


def test_aggregate_accepts_generators() -> None:
    assert aggregate_scores(_resp(n) for n in range(4)).total_score == 6


def test_recompute_sums_selected_weights(satisfaction) -> None:
    resp = _resp(
        5,
        ResponseItem(satisfaction.q1, SelectedOptions((satisfaction.not_sat,))),
        ResponseItem(satisfaction.q2, SelectedOptions((satisfaction.quality, satisfaction.support))),
        ResponseItem(satisfaction.q3, FreeTextAnswer("hello")),
    )
    assert recompute_score(satisfaction.graph, resp) == 5


def test_recompute_ignores_options_missing_from_graph(satisfaction) -> None:
    resp = _resp(0, ResponseItem(satisfaction.q2, SelectedOptions((999,))), ResponseItem(555, SelectedOptions((1,))))
    assert recompute_score(satisfaction.graph, resp) == 0


def test_summarize_from_totals_matches_aggregate() -> None:
    assert summarize_scores(0, 0) == AggregateScore(0, 0, 0.0)
    assert summarize_scores(13, 3) == aggregate_scores([_resp(5), _resp(5), _resp(3)])


def test_in_memory_totals(memory_repo, satisfaction) -> None:
    assert memory_repo.score_totals(satisfaction.survey) == (0, 0)
    memory_repo.persist_response(_resp(5))
    memory_repo.persist_response(_resp(3))
    assert memory_repo.score_totals(satisfaction.survey) == (8, 2)
    assert memory_repo.survey_exists(satisfaction.survey) is True
    assert memory_repo.survey_exists(404) is False
