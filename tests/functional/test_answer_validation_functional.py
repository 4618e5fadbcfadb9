"""Functional tests for per-type answer validation and normalization."""

from __future__ import annotations

import pytest

from surveytool.logic.errors import DomainValidationError
from surveytool.logic.validation import validate_answer
from surveytool.models.answers import AnswerSubmission, FreeTextAnswer, SelectedOptions
from surveytool.models.graph import Question


def test_free_text_passes_through_with_zero_score(satisfaction) -> None:
    q3 = satisfaction.graph.question(satisfaction.q3)
    result = validate_answer(q3, AnswerSubmission(q3.id, free_text="  keep  spacing "))
    assert result.score == 0
    assert result.item.answer == FreeTextAnswer("  keep  spacing ")
    assert result.item.selected_option_ids is None


@pytest.mark.parametrize("ids", [None, ()])
def test_free_text_allows_absent_text_and_empty_options(satisfaction, ids) -> None:
    q3 = satisfaction.graph.question(satisfaction.q3)
    result = validate_answer(q3, AnswerSubmission(q3.id, ids, None))
    assert result.item.free_text is None
    assert isinstance(result.item.answer, FreeTextAnswer)


def test_free_text_rejects_options(satisfaction) -> None:
    q3 = satisfaction.graph.question(satisfaction.q3)
    with pytest.raises(DomainValidationError, match="options are not allowed"):
        validate_answer(q3, AnswerSubmission(q3.id, (satisfaction.very,), "text"))


def test_single_choice_scores_option_weight(satisfaction) -> None:
    q1 = satisfaction.graph.question(satisfaction.q1)
    result = validate_answer(q1, AnswerSubmission(q1.id, (satisfaction.somewhat,)))
    assert result.score == 3
    assert result.item.answer == SelectedOptions((satisfaction.somewhat,))
    assert result.item.free_text is None


@pytest.mark.parametrize("ids", [None, (), (11, 12), (11, 11)])
def test_single_choice_requires_exactly_one(satisfaction, ids) -> None:
    q1 = satisfaction.graph.question(satisfaction.q1)
    with pytest.raises(DomainValidationError, match="requires exactly one option"):
        validate_answer(q1, AnswerSubmission(q1.id, ids))


def test_single_choice_rejects_foreign_option(satisfaction) -> None:
    q1 = satisfaction.graph.question(satisfaction.q1)
    with pytest.raises(DomainValidationError, match="Invalid option"):
        validate_answer(q1, AnswerSubmission(q1.id, (satisfaction.quality,)))


def test_multiple_choice_sums_weights_and_keeps_order(satisfaction) -> None:
    q2 = satisfaction.graph.question(satisfaction.q2)
    ids = (satisfaction.delivery, satisfaction.quality)
    result = validate_answer(q2, AnswerSubmission(q2.id, ids))
    assert result.score == 3
    assert result.item.selected_option_ids == ids


@pytest.mark.parametrize("ids", [None, ()])
def test_multiple_choice_requires_at_least_one(satisfaction, ids) -> None:
    q2 = satisfaction.graph.question(satisfaction.q2)
    with pytest.raises(DomainValidationError, match="requires at least one option"):
        validate_answer(q2, AnswerSubmission(q2.id, ids))


def test_multiple_choice_rejects_duplicate_even_when_valid(satisfaction) -> None:
    q2 = satisfaction.graph.question(satisfaction.q2)
    with pytest.raises(DomainValidationError, match=f"duplicate option id {satisfaction.quality}"):
        validate_answer(q2, AnswerSubmission(q2.id, (satisfaction.quality, satisfaction.quality)))


def test_multiple_choice_duplicate_checked_before_ownership(satisfaction) -> None:
    q2 = satisfaction.graph.question(satisfaction.q2)
    with pytest.raises(DomainValidationError, match="duplicate option id 999"):
        validate_answer(q2, AnswerSubmission(q2.id, (999, 999)))


def test_multiple_choice_rejects_foreign_option(satisfaction) -> None:
    q2 = satisfaction.graph.question(satisfaction.q2)
    with pytest.raises(DomainValidationError, match="One or more selected options are invalid"):
        validate_answer(q2, AnswerSubmission(q2.id, (satisfaction.quality, satisfaction.very)))


def test_unknown_question_type_is_unsupported() -> None:
    q = Question(id=7, survey_id=1, text="Rate us", type="Rating")
    with pytest.raises(DomainValidationError, match="Unsupported question type for question 7"):
        validate_answer(q, AnswerSubmission(7, (1,)))


def test_negative_and_zero_weights_are_scored() -> None:
    from surveytool.models.graph import Option
    from surveytool.models.question_type import QuestionType

    q = Question(
        id=8,
        survey_id=1,
        text="Pick all",
        type=QuestionType.MULTIPLE_CHOICE,
        options=(Option(81, 8, "bad", -4), Option(82, 8, "neutral", 0), Option(83, 8, "good", 2)),
    )
    assert validate_answer(q, AnswerSubmission(8, (81, 82, 83))).score == -2
