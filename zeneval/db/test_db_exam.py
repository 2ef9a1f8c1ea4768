# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

from pytest import raises

from zeneval.zeneval_exceptions import ZenEvalNoSuchObject


def test_create_exam_numbers_questions(db, exam_id) -> None:
    qs = db.getQuestions(exam_id)
    assert [q["question_number"] for q in qs] == [1, 2, 3]
    assert [q["marks"] for q in qs] == [10, 5, 1]
    assert qs[1]["answer_key"] == "Paris"
    assert all(q["exam_id"] == exam_id for q in qs)


def test_create_exam_unknown_owner(db) -> None:
    with raises(ValueError):
        db.createExam("nobody", "T", None, [])


def test_get_exam(db, owner, exam_id) -> None:
    exam = db.getExam(exam_id)
    assert exam["id"] == exam_id
    assert exam["user"] == owner
    assert exam["title"] == "Midterm"
    assert exam["created_at"] is not None


def test_get_missing_exam(db) -> None:
    with raises(ZenEvalNoSuchObject):
        db.getExam("00000000-0000-0000-0000-000000000000")
    with raises(ZenEvalNoSuchObject):
        db.getQuestions("not-even-a-uuid")


def test_list_exams_newest_first_with_counts(db, owner, exam_id) -> None:
    second = db.createExam(
        owner, "Final", None, [{"question_text": "q", "answer_key": "a"}]
    )
    exams = db.listExams(owner)
    assert [e["id"] for e in exams] == [second, exam_id]
    assert exams[1]["question_count"] == 3
    assert exams[0]["question_count"] == 1
    assert exams[0]["response_count"] == 0
    assert db.listExams("somebodyelse") == []


def test_question_marks_default_to_one(db, owner) -> None:
    eid = db.createExam(owner, "Quiz", None, [{"question_text": "q", "answer_key": "a"}])
    assert db.getQuestions(eid)[0]["marks"] == 1


def test_update_exam(db, exam_id) -> None:
    before = db.getExam(exam_id)
    db.updateExam(exam_id, title="Midterm 2")
    after = db.getExam(exam_id)
    assert after["title"] == "Midterm 2"
    assert after["description"] == "Chapters 1-3"
    assert after["updated_at"] >= before["updated_at"]


def test_delete_exam_cascades(db, exam_id) -> None:
    q = db.getQuestions(exam_id)[0]
    rid = db.createResponse(
        exam_id, "R1", [{"question_id": q["id"], "answer_text": "4"}]
    )
    db.deleteExam(exam_id)
    with raises(ZenEvalNoSuchObject):
        db.getExam(exam_id)
    with raises(ZenEvalNoSuchObject):
        db.getResponse(rid)
    with raises(ZenEvalNoSuchObject):
        db.ownerOfQuestion(q["id"])


def test_owner_stats(db, owner, exam_id) -> None:
    qid = db.getQuestions(exam_id)[0]["id"]
    r1 = db.createResponse(exam_id, "R1", [{"question_id": qid, "answer_text": "4"}])
    db.createResponse(exam_id, "R2", [{"question_id": qid, "answer_text": "5"}])
    db.setResponseEvaluation(r1, 3, "Total: 3 marks. 1 questions evaluated.")
    assert db.getOwnerStats(owner) == {"exams": 1, "responses": 2, "evaluated": 1}
    assert db.getOwnerStats("nobody") == {"exams": 0, "responses": 0, "evaluated": 0}


def test_ownership_lookups(db, owner, exam_id) -> None:
    assert db.ownerOfExam(exam_id) == owner
    qid = db.getQuestions(exam_id)[0]["id"]
    assert db.ownerOfQuestion(qid) == owner
    with raises(ZenEvalNoSuchObject):
        db.ownerOfExam("00000000-0000-0000-0000-000000000000")
