# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

import logging

from zeneval.db.tables import User, Exam, Question, Response
from zeneval.misc_utils import utc_now, datetime_to_json
from zeneval.zeneval_exceptions import ZenEvalNoSuchObject


log = logging.getLogger("DB")


def _exam_or_raise(exam_id):
    eref = Exam.get_or_none(Exam.id == exam_id)
    if eref is None:
        raise ZenEvalNoSuchObject(f"No exam with id {exam_id}")
    return eref


def _exam_row(eref):
    return {
        "id": str(eref.id),
        "user": eref.user.name,
        "title": eref.title,
        "description": eref.description,
        "created_at": datetime_to_json(eref.created_at),
        "updated_at": datetime_to_json(eref.updated_at),
    }


def _question_row(qref):
    return {
        "id": str(qref.id),
        "exam_id": str(qref.exam_id),
        "question_number": qref.question_number,
        "question_text": qref.question_text,
        "answer_key": qref.answer_key,
        "marks": qref.marks,
        "created_at": datetime_to_json(qref.created_at),
    }


def createExam(self, owner, title, description, questions):
    """Create an exam and all of its questions.

    Args:
        owner (str): name of the user who will own the exam.
        title (str)
        description (str/None)
        questions (list): of dicts with keys ``question_text``,
            ``answer_key`` and ``marks``, in order.  They are numbered
            from 1 in the order given.

    Returns:
        str: the id of the new exam.

    Raises:
        ValueError: no such user.
    """
    uref = User.get_or_none(name=owner)
    if uref is None:
        raise ValueError(f"No user '{owner}'")
    now = utc_now()
    with self._db.atomic():
        eref = Exam.create(
            user=uref,
            title=title,
            description=description,
            created_at=now,
            updated_at=now,
        )
        for n, q in enumerate(questions, start=1):
            Question.create(
                exam=eref,
                question_text=q["question_text"],
                answer_key=q["answer_key"],
                question_number=n,
                marks=q.get("marks", 1),
                created_at=now,
            )
    log.info('User "%s" created exam %s with %d questions', owner, eref.id, len(questions))
    return str(eref.id)


def listExams(self, owner):
    """All exams belonging to a user, newest first, with some counts."""
    exams = []
    query = (
        Exam.select()
        .join(User)
        .where(User.name == owner)
        .order_by(Exam.created_at.desc())
    )
    for eref in query:
        row = _exam_row(eref)
        row["question_count"] = eref.questions.count()
        row["response_count"] = eref.responses.count()
        row["evaluated_count"] = (
            eref.responses.where(Response.marks.is_null(False)).count()
        )
        exams.append(row)
    return exams


def getExam(self, exam_id):
    """Details of one exam.

    Raises:
        ZenEvalNoSuchObject
    """
    return _exam_row(_exam_or_raise(exam_id))


def getQuestions(self, exam_id):
    """The questions of an exam, ordered by their question number.

    Raises:
        ZenEvalNoSuchObject
    """
    eref = _exam_or_raise(exam_id)
    query = eref.questions.order_by(Question.question_number)
    return [_question_row(qref) for qref in query]


def updateExam(self, exam_id, *, title=None, description=None):
    """Change the title and/or description of an exam.

    Arguments that are None are left alone.
    """
    eref = _exam_or_raise(exam_id)
    with self._db.atomic():
        if title is not None:
            eref.title = title
        if description is not None:
            eref.description = description
        eref.updated_at = utc_now()
        eref.save()
    log.info("Exam %s updated", exam_id)


def deleteExam(self, exam_id):
    """Delete an exam along with its questions, responses and their answers."""
    eref = _exam_or_raise(exam_id)
    with self._db.atomic():
        eref.delete_instance(recursive=True)
    log.info("Exam %s deleted", exam_id)


def getOwnerStats(self, owner):
    """Count exams, responses and evaluated responses of a user."""
    exams = Exam.select(Exam.id).join(User).where(User.name == owner)
    responses = Response.select().where(Response.exam.in_(exams))
    return {
        "exams": exams.count(),
        "responses": responses.count(),
        "evaluated": responses.where(Response.marks.is_null(False)).count(),
    }


def ownerOfExam(self, exam_id):
    return _exam_or_raise(exam_id).user.name


def ownerOfQuestion(self, question_id):
    qref = Question.get_or_none(Question.id == question_id)
    if qref is None:
        raise ZenEvalNoSuchObject(f"No question with id {question_id}")
    return qref.exam.user.name
