"""Demo seed data for local runs.

Inserts two sample surveys with a handful of responses, but only into an
empty database. Seed responses go through the submission engine so their
stored scores follow the same rules as live submissions.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from surveytool.logic import authoring
from surveytool.logic.repository_responses import SqlSurveyRepository
from surveytool.logic.repository_surveys import count_surveys
from surveytool.logic.submission import submit_response
from surveytool.models.answers import AnswerSubmission
from surveytool.models.question_type import QuestionType

logger = logging.getLogger(__name__)


def seed_demo_data() -> bool:
    """Seed demo surveys; return False when the database already has surveys."""
    if count_surveys() > 0:
        logger.info("seed_skipped reason=surveys_present")
        return False

    repo = SqlSurveyRepository()
    now = datetime.now(timezone.utc)

    # Customer Satisfaction Survey
    s1 = authoring.create_survey("Customer Satisfaction Survey", "A demo survey for testing the API")
    q1 = authoring.add_question(s1, "How satisfied are you with our service?", QuestionType.SINGLE_CHOICE)
    very = authoring.add_option(q1, "Very satisfied", 5)
    authoring.add_option(q1, "Somewhat satisfied", 3)
    not_sat = authoring.add_option(q1, "Not satisfied", 1)
    q2 = authoring.add_question(
        s1,
        "What areas need improvement? (Choose all that apply)",
        QuestionType.MULTIPLE_CHOICE,
        parent_question_id=q1,
        trigger_option_ids=[not_sat],
    )
    quality = authoring.add_option(q2, "Product quality", 2)
    support = authoring.add_option(q2, "Customer support", 2)
    authoring.add_option(q2, "Delivery time", 1)
    q3 = authoring.add_question(s1, "Any additional comments?", QuestionType.FREE_TEXT)

    submit_response(
        repo,
        s1,
        [AnswerSubmission(q1, (very,)), AnswerSubmission(q3, free_text="Great service!")],
        now=now,
    )
    submit_response(
        repo,
        s1,
        [
            AnswerSubmission(q1, (not_sat,)),
            AnswerSubmission(q2, (quality, support)),
            AnswerSubmission(q3, free_text="Improve product quality and support response times."),
        ],
        now=now + timedelta(minutes=1),
    )

    # Employee Engagement Survey
    s2 = authoring.create_survey(
        "Employee Engagement Survey", "Collect feedback from employees on workplace engagement"
    )
    e1 = authoring.add_question(s2, "How would you rate your overall job satisfaction?", QuestionType.SINGLE_CHOICE)
    authoring.add_option(e1, "Highly satisfied", 5)
    satisfied = authoring.add_option(e1, "Satisfied", 3)
    authoring.add_option(e1, "Dissatisfied", 1)
    e2 = authoring.add_question(s2, "What improvements would you like to see?", QuestionType.FREE_TEXT)

    submit_response(
        repo,
        s2,
        [
            AnswerSubmission(e1, (satisfied,)),
            AnswerSubmission(e2, free_text="Better work-life balance and more team events."),
        ],
        now=now + timedelta(minutes=2),
    )
    logger.info("seed_applied surveys=%s", 2)
    return True


__all__ = ["seed_demo_data"]
