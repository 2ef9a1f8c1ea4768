# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

"""Exam and response management on behalf of their owner.

The routes deal in the camelCase field names of the web client; this
module checks what arrives and passes snake_case dicts to the database.
"""

import logging

from zeneval.zeneval_exceptions import ZenEvalInvalidRequest

log = logging.getLogger("servExam")


def _nonempty_string(value, what):
    if not isinstance(value, str) or not value.strip():
        raise ZenEvalInvalidRequest(f"{what} must be a non-empty string")
    return value.strip()


def _optional_string(value, what):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ZenEvalInvalidRequest(f"{what} must be a string")
    return value


def _check_max_marks(marks, n):
    if isinstance(marks, bool) or not isinstance(marks, int) or marks < 1:
        raise ZenEvalInvalidRequest(
            f"Question {n}: marks must be a positive integer, not {marks!r}"
        )
    return marks


def validate_questions(questions):
    """Check the questions of a new exam.

    Args:
        questions (list): of dicts with keys ``questionText`` and
            ``answerKey``, and optionally ``marks`` which defaults to 1.

    Returns:
        list: of dicts with the snake_case keys the database wants.

    Raises:
        ZenEvalInvalidRequest: empty list, or some question lacks text,
            lacks an answer key or has bad marks.
    """
    if not isinstance(questions, list) or not questions:
        raise ZenEvalInvalidRequest("An exam needs at least one question")
    clean = []
    for n, q in enumerate(questions, start=1):
        if not isinstance(q, dict):
            raise ZenEvalInvalidRequest(f"Question {n} is not an object")
        extra = set(q.keys()) - {"questionText", "answerKey", "marks"}
        if extra:
            raise ZenEvalInvalidRequest(f"Question {n} has unexpected fields {extra}")
        clean.append(
            {
                "question_text": _nonempty_string(
                    q.get("questionText"), f"Question {n} text"
                ),
                "answer_key": _nonempty_string(
                    q.get("answerKey"), f"Question {n} answer key"
                ),
                "marks": _check_max_marks(q.get("marks", 1), n),
            }
        )
    return clean


def validate_answers(answers):
    """Check the answers of a new response, dropping those with no content.

    Args:
        answers (list): of dicts with key ``questionId`` and at least
            one of ``answerText`` and ``imageUrl``.

    Returns:
        list: of dicts with keys ``question_id``, ``answer_text`` and
        ``image_url``.

    Raises:
        ZenEvalInvalidRequest: nothing with content remains.
    """
    if not isinstance(answers, list):
        raise ZenEvalInvalidRequest("answers must be a list")
    clean = []
    for a in answers:
        if not isinstance(a, dict):
            raise ZenEvalInvalidRequest("Each answer must be an object")
        qid = _nonempty_string(a.get("questionId"), "questionId")
        text = _optional_string(a.get("answerText"), "answerText")
        url = _optional_string(a.get("imageUrl"), "imageUrl")
        if text is not None and not text.strip():
            text = None
        if not url:
            url = None
        if text is None and url is None:
            log.debug("Skipping empty answer to question %s", qid)
            continue
        clean.append({"question_id": qid, "answer_text": text, "image_url": url})
    if not clean:
        raise ZenEvalInvalidRequest("At least one answer must have text or an image")
    return clean


def createExam(self, owner, title, description, questions):
    """Make a new exam with its questions, returning its id."""
    title = _nonempty_string(title, "Title")
    description = _optional_string(description, "Description")
    clean = validate_questions(questions)
    return self.DB.createExam(owner, title, description, clean)


def listExams(self, owner):
    return self.DB.listExams(owner)


def getExamDetails(self, exam_id):
    """An exam with its questions in order and its responses newest first.

    Raises:
        ZenEvalNoSuchObject
    """
    exam = self.DB.getExam(exam_id)
    exam["questions"] = self.DB.getQuestions(exam_id)
    exam["responses"] = self.DB.listResponses(exam_id)
    exam["evaluated_count"] = sum(
        1 for r in exam["responses"] if r["marks"] is not None
    )
    return exam


def updateExam(self, exam_id, *, title=None, description=None):
    if title is not None:
        title = _nonempty_string(title, "Title")
    description = _optional_string(description, "Description")
    if title is None and description is None:
        raise ZenEvalInvalidRequest("Nothing to update")
    self.DB.updateExam(exam_id, title=title, description=description)


def deleteExam(self, exam_id):
    self.DB.deleteExam(exam_id)


def getStats(self, owner):
    return self.DB.getOwnerStats(owner)


def createResponse(self, exam_id, roll_number, answers, *, image_url=None):
    """Record a student's response to an exam, returning its id.

    Raises:
        ZenEvalInvalidRequest: no roll number, no answers with content,
            or answers to questions of some other exam.
        ZenEvalDuplicateRollNumber: the roll number is already in use
            for this exam; nothing is written.
        ZenEvalNoSuchObject: no such exam.
    """
    roll_number = _nonempty_string(roll_number, "rollNumber")
    image_url = _optional_string(image_url, "imageUrl") or None
    clean = validate_answers(answers)
    return self.DB.createResponse(exam_id, roll_number, clean, image_url=image_url)


def getResponse(self, response_id):
    return self.DB.getResponse(response_id)


def deleteResponse(self, response_id):
    self.DB.deleteResponse(response_id)
