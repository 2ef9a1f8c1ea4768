# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

import logging

import peewee as pw

from zeneval.db.tables import Exam, Question, Response, ResponseAnswer
from zeneval.misc_utils import utc_now, datetime_to_json
from zeneval.zeneval_exceptions import (
    ZenEvalDuplicateRollNumber,
    ZenEvalInvalidRequest,
    ZenEvalNoSuchObject,
)


log = logging.getLogger("DB")


def _response_or_raise(response_id):
    rref = Response.get_or_none(Response.id == response_id)
    if rref is None:
        raise ZenEvalNoSuchObject(f"No response with id {response_id}")
    return rref


def _response_row(rref):
    return {
        "id": str(rref.id),
        "exam_id": str(rref.exam_id),
        "roll_number": rref.roll_number,
        "image_url": rref.image_url,
        "marks": rref.marks,
        "remarks": rref.remarks,
        "evaluated_at": datetime_to_json(rref.evaluated_at),
        "created_at": datetime_to_json(rref.created_at),
    }


def _answer_row(aref):
    return {
        "id": str(aref.id),
        "response_id": str(aref.response_id),
        "question_id": str(aref.question_id),
        "question_number": aref.question.question_number,
        "max_marks": aref.question.marks,
        "image_url": aref.image_url,
        "answer_text": aref.answer_text,
        "marks": aref.marks,
        "remarks": aref.remarks,
        "evaluated_at": datetime_to_json(aref.evaluated_at),
    }


def doesRollNumberExist(self, exam_id, roll_number):
    return (
        Response.select()
        .where(Response.exam == exam_id, Response.roll_number == roll_number)
        .exists()
    )


def createResponse(self, exam_id, roll_number, answers, *, image_url=None):
    """Create a response together with its per-question answers.

    Args:
        exam_id (str)
        roll_number (str): must not already be used within this exam.
        answers (list): of dicts with keys ``question_id``,
            ``answer_text`` and ``image_url``.  Each question must
            belong to this exam.
        image_url (str/None): legacy whole-response image.

    Returns:
        str: the id of the new response.

    Raises:
        ZenEvalNoSuchObject: no such exam.
        ZenEvalDuplicateRollNumber: roll number already used; nothing
            is written in this case.
        ZenEvalInvalidRequest: a question is not part of this exam.
    """
    eref = Exam.get_or_none(Exam.id == exam_id)
    if eref is None:
        raise ZenEvalNoSuchObject(f"No exam with id {exam_id}")
    questions = {str(q.id): q for q in eref.questions}
    with self._db.atomic():
        if self.doesRollNumberExist(eref, roll_number):
            log.info("Exam %s already has roll number %s", exam_id, roll_number)
            raise ZenEvalDuplicateRollNumber()
        seen = set()
        for a in answers:
            qid = str(a["question_id"])
            if qid not in questions:
                raise ZenEvalInvalidRequest(
                    f"Question {qid} is not part of exam {exam_id}"
                )
            if qid in seen:
                raise ZenEvalInvalidRequest(f"Question {qid} answered twice")
            seen.add(qid)
        now = utc_now()
        try:
            rref = Response.create(
                exam=eref,
                roll_number=roll_number,
                image_url=image_url,
                created_at=now,
            )
            for a in answers:
                ResponseAnswer.create(
                    response=rref,
                    question=questions[str(a["question_id"])],
                    answer_text=a.get("answer_text"),
                    image_url=a.get("image_url"),
                    created_at=now,
                )
        except pw.IntegrityError as e:
            # someone else got there between our check and insert
            log.warning("Response creation for exam %s collided: %s", exam_id, e)
            raise ZenEvalDuplicateRollNumber() from None
    log.info(
        "Response %s (roll %s) created for exam %s with %d answers",
        rref.id,
        roll_number,
        exam_id,
        len(answers),
    )
    return str(rref.id)


def listResponses(self, exam_id):
    """The responses to an exam, newest first, without their answers."""
    query = (
        Response.select()
        .where(Response.exam == exam_id)
        .order_by(Response.created_at.desc())
    )
    return [_response_row(rref) for rref in query]


def getResponse(self, response_id):
    """A response and its answers, the latter ordered by question number.

    Raises:
        ZenEvalNoSuchObject
    """
    rref = _response_or_raise(response_id)
    row = _response_row(rref)
    query = (
        ResponseAnswer.select(ResponseAnswer, Question)
        .join(Question)
        .where(ResponseAnswer.response == rref)
        .order_by(Question.question_number)
    )
    row["answers"] = [_answer_row(aref) for aref in query]
    return row


def deleteResponse(self, response_id):
    rref = _response_or_raise(response_id)
    with self._db.atomic():
        rref.delete_instance(recursive=True)
    log.info("Response %s deleted", response_id)


def ownerOfResponse(self, response_id):
    return _response_or_raise(response_id).exam.user.name


def ownerOfAnswer(self, answer_id):
    aref = ResponseAnswer.get_or_none(ResponseAnswer.id == answer_id)
    if aref is None:
        raise ZenEvalNoSuchObject(f"No answer with id {answer_id}")
    return aref.response.exam.user.name
