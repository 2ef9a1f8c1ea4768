# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

import logging

from zeneval.db.tables import Question, Response, ResponseAnswer
from zeneval.misc_utils import utc_now
from zeneval.zeneval_exceptions import ZenEvalNoSuchObject


log = logging.getLogger("DB")


def getAnswersForEvaluation(self, response_id):
    """Get the answers of a response along with the most each can score.

    Returns:
        list: of dicts with keys ``id`` (answer id), ``question_id``,
        ``question_number`` and ``max_marks``, ordered by question
        number.  A question with no recorded maximum counts as 1.

    Raises:
        ZenEvalNoSuchObject: no such response.
    """
    rref = Response.get_or_none(Response.id == response_id)
    if rref is None:
        raise ZenEvalNoSuchObject(f"No response with id {response_id}")
    query = (
        ResponseAnswer.select(ResponseAnswer, Question)
        .join(Question)
        .where(ResponseAnswer.response == rref)
        .order_by(Question.question_number)
    )
    answers = []
    for aref in query:
        max_marks = aref.question.marks
        answers.append(
            {
                "id": str(aref.id),
                "question_id": str(aref.question_id),
                "question_number": aref.question.question_number,
                "max_marks": 1 if max_marks is None else max_marks,
            }
        )
    log.debug("Response %s has %d answers to evaluate", response_id, len(answers))
    return answers


def setAnswerEvaluation(self, answer_id, marks, remarks):
    """Record the marks and remark of one answer, stamping the time.

    Raises:
        ZenEvalNoSuchObject: no such answer, e.g., deleted meanwhile.
    """
    n = (
        ResponseAnswer.update(marks=marks, remarks=remarks, evaluated_at=utc_now())
        .where(ResponseAnswer.id == answer_id)
        .execute()
    )
    if n != 1:
        raise ZenEvalNoSuchObject(f"No answer with id {answer_id}")


def setResponseEvaluation(self, response_id, marks, remarks):
    """Record the total marks and summary remark of a response, stamping the time.

    Raises:
        ZenEvalNoSuchObject: no such response.
    """
    n = (
        Response.update(marks=marks, remarks=remarks, evaluated_at=utc_now())
        .where(Response.id == response_id)
        .execute()
    )
    if n != 1:
        raise ZenEvalNoSuchObject(f"No response with id {response_id}")
    log.info("Response %s evaluated: %s", response_id, remarks)
