# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

import threading

from zeneval.conftest import bearer, run_with_client, service_key
from zeneval.server.zenServer.routeutils import CORS_HEADERS, validate_required_fields


exam_body = {
    "title": "Midterm",
    "description": "Chapters 1-3",
    "questions": [
        {"questionText": "2+2?", "answerKey": "4", "marks": 10},
        {"questionText": "Capital of France?", "answerKey": "Paris", "marks": 5},
    ],
}


def _assert_cors(resp):
    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    allowed = resp.headers["Access-Control-Allow-Headers"]
    for h in ("authorization", "x-client-info", "apikey", "content-type"):
        assert h in allowed


async def _make_exam(client, token):
    resp = await client.post("/exams", json=exam_body, headers=bearer(token))
    assert resp.status == 201
    return (await resp.json())["id"]


async def _make_response(client, token, exam_id, roll="R1"):
    resp = await client.get(f"/exams/{exam_id}", headers=bearer(token))
    questions = (await resp.json())["questions"]
    body = {
        "rollNumber": roll,
        "answers": [{"questionId": q["id"], "answerText": "x"} for q in questions],
    }
    resp = await client.post(
        f"/exams/{exam_id}/responses", json=body, headers=bearer(token)
    )
    assert resp.status == 201
    return (await resp.json())["id"]


def test_validate_required_fields() -> None:
    assert validate_required_fields({"a": 1, "b": 2}, ["a", "b"])
    assert validate_required_fields({"a": 1}, ["a"], ["b"])
    assert not validate_required_fields({"a": 1}, ["a", "b"])
    assert not validate_required_fields({"a": 1, "c": 3}, ["a"], ["b"])
    assert not validate_required_fields(["a"], ["a"])


def test_preflight(server) -> None:
    async def go(client):
        resp = await client.options("/evaluate-response")
        assert resp.status == 200
        assert await resp.text() == ""
        _assert_cors(resp)

    run_with_client(server, go)


def test_version_and_info(server) -> None:
    async def go(client):
        resp = await client.get("/Version")
        assert resp.status == 200
        assert server.Version in await resp.text()
        _assert_cors(resp)
        resp = await client.get("/info/server")
        info = await resp.json()
        assert info["API_version"] == server.API

    run_with_client(server, go)


def test_signup_login_logout(server) -> None:
    async def go(client):
        resp = await client.post(
            "/auth/signup",
            json={"user": "Carol", "password": "chess-club", "fullName": "Carol C"},
        )
        assert resp.status == 201
        assert (await resp.json())["user"] == "carol"
        resp = await client.post(
            "/auth/signup", json={"user": "carol", "password": "other-pw"}
        )
        assert resp.status == 409
        resp = await client.post(
            "/auth/signup", json={"user": "service", "password": "whatever"}
        )
        assert resp.status == 400

        resp = await client.post(
            "/auth/login", json={"user": "carol", "password": "wrong-pw"}
        )
        assert resp.status == 401
        resp = await client.post(
            "/auth/login", json={"user": "carol", "password": "chess-club"}
        )
        assert resp.status == 200
        token = (await resp.json())["token"]
        resp = await client.post(
            "/auth/login", json={"user": "carol", "password": "chess-club"}
        )
        assert resp.status == 409

        resp = await client.get("/auth/user", headers=bearer(token))
        assert (await resp.json())["fullName"] == "Carol C"
        resp = await client.delete("/auth/token", headers=bearer(token))
        assert resp.status == 200
        resp = await client.get("/exams", headers=bearer(token))
        assert resp.status == 401

    run_with_client(server, go)


def test_disabled_user_cannot_login(server) -> None:
    server.createUser("dave", "daisy-daisy")
    server.DB.disableUser("dave")

    async def go(client):
        resp = await client.post(
            "/auth/login", json={"user": "dave", "password": "daisy-daisy"}
        )
        assert resp.status == 403

    run_with_client(server, go)


def test_unauthenticated(server) -> None:
    async def go(client):
        resp = await client.get("/exams")
        assert resp.status == 401
        _assert_cors(resp)
        resp = await client.get("/exams", headers=bearer("deadbeef"))
        assert resp.status == 401
        resp = await client.post("/evaluate-response", json={"responseId": "x"})
        assert resp.status == 401
        assert "error" in await resp.json()
        _assert_cors(resp)

    run_with_client(server, go)


def test_exam_crud(server, alice) -> None:
    _, token = alice

    async def go(client):
        exam_id = await _make_exam(client, token)
        resp = await client.get("/exams", headers=bearer(token))
        (listed,) = await resp.json()
        assert listed["id"] == exam_id
        assert listed["question_count"] == 2

        resp = await client.get(f"/exams/{exam_id}", headers=bearer(token))
        exam = await resp.json()
        assert [q["question_number"] for q in exam["questions"]] == [1, 2]
        assert [q["marks"] for q in exam["questions"]] == [10, 5]
        assert exam["responses"] == []
        assert exam["evaluated_count"] == 0

        resp = await client.patch(
            f"/exams/{exam_id}", json={"title": "Final"}, headers=bearer(token)
        )
        assert resp.status == 200
        resp = await client.get(f"/exams/{exam_id}", headers=bearer(token))
        assert (await resp.json())["title"] == "Final"

        resp = await client.patch(
            f"/exams/{exam_id}", json={"title": "  "}, headers=bearer(token)
        )
        assert resp.status == 400

        resp = await client.get("/stats", headers=bearer(token))
        assert await resp.json() == {"exams": 1, "responses": 0, "evaluated": 0}

        resp = await client.delete(f"/exams/{exam_id}", headers=bearer(token))
        assert resp.status == 200
        resp = await client.get(f"/exams/{exam_id}", headers=bearer(token))
        assert resp.status == 404
        _assert_cors(resp)

    run_with_client(server, go)


def test_exam_validation(server, alice) -> None:
    _, token = alice
    bad_bodies = [
        {"title": "", "questions": exam_body["questions"]},
        {"title": "T", "questions": []},
        {"title": "T", "questions": [{"questionText": "", "answerKey": "a"}]},
        {"title": "T", "questions": [{"questionText": "q", "answerKey": " "}]},
        {"title": "T", "questions": [{"questionText": "q", "answerKey": "a", "marks": 0}]},
        {"title": "T", "questions": [{"questionText": "q", "answerKey": "a", "marks": "3"}]},
        {"title": "T"},
        {"title": "T", "questions": exam_body["questions"], "owner": "bob"},
    ]

    async def go(client):
        for body in bad_bodies:
            resp = await client.post("/exams", json=body, headers=bearer(token))
            assert resp.status == 400, body
        resp = await client.get("/exams", headers=bearer(token))
        assert await resp.json() == []

    run_with_client(server, go)


def test_other_users_exam_forbidden(server, alice, bob) -> None:
    _, alice_token = alice
    _, bob_token = bob

    async def go(client):
        exam_id = await _make_exam(client, alice_token)
        rid = await _make_response(client, alice_token, exam_id)
        for method, url in (
            ("GET", f"/exams/{exam_id}"),
            ("DELETE", f"/exams/{exam_id}"),
            ("GET", f"/responses/{rid}"),
            ("DELETE", f"/responses/{rid}"),
        ):
            resp = await client.request(method, url, headers=bearer(bob_token))
            assert resp.status == 403, url
        resp = await client.post(
            f"/exams/{exam_id}/responses",
            json={"rollNumber": "R9", "answers": []},
            headers=bearer(bob_token),
        )
        assert resp.status == 403
        resp = await client.get("/exams", headers=bearer(bob_token))
        assert await resp.json() == []

        resp = await client.post(
            "/evaluate-response", json={"responseId": rid}, headers=bearer(bob_token)
        )
        assert resp.status == 500
        assert "error" in await resp.json()
        resp = await client.get(f"/responses/{rid}", headers=bearer(alice_token))
        assert (await resp.json())["marks"] is None

    run_with_client(server, go)


def test_responses(server, alice) -> None:
    _, token = alice

    async def go(client):
        exam_id = await _make_exam(client, token)
        rid = await _make_response(client, token, exam_id, roll="2024-01")

        resp = await client.get(f"/responses/{rid}", headers=bearer(token))
        r = await resp.json()
        assert r["roll_number"] == "2024-01"
        assert len(r["answers"]) == 2

        # same roll number again
        resp = await client.get(f"/exams/{exam_id}", headers=bearer(token))
        qid = (await resp.json())["questions"][0]["id"]
        resp = await client.post(
            f"/exams/{exam_id}/responses",
            json={"rollNumber": "2024-01", "answers": [{"questionId": qid, "answerText": "y"}]},
            headers=bearer(token),
        )
        assert resp.status == 409

        # answers without content are skipped, but one is needed
        resp = await client.post(
            f"/exams/{exam_id}/responses",
            json={"rollNumber": "2024-02", "answers": [{"questionId": qid, "answerText": ""}]},
            headers=bearer(token),
        )
        assert resp.status == 400
        resp = await client.post(
            f"/exams/{exam_id}/responses",
            json={"rollNumber": "", "answers": [{"questionId": qid, "answerText": "y"}]},
            headers=bearer(token),
        )
        assert resp.status == 400
        resp = await client.post(
            f"/exams/{exam_id}/responses",
            json={
                "rollNumber": "2024-02",
                "answers": [
                    {"questionId": qid, "imageUrl": "https://img.example.com/1.png"}
                ],
            },
            headers=bearer(token),
        )
        assert resp.status == 201
        resp = await client.get(f"/exams/{exam_id}", headers=bearer(token))
        assert len((await resp.json())["responses"]) == 2

        resp = await client.delete(f"/responses/{rid}", headers=bearer(token))
        assert resp.status == 200
        resp = await client.get(f"/responses/{rid}", headers=bearer(token))
        assert resp.status == 404

    run_with_client(server, go)


def test_response_to_foreign_question(server, alice) -> None:
    _, token = alice

    async def go(client):
        exam1 = await _make_exam(client, token)
        exam2 = await _make_exam(client, token)
        resp = await client.get(f"/exams/{exam2}", headers=bearer(token))
        qid = (await resp.json())["questions"][0]["id"]
        resp = await client.post(
            f"/exams/{exam1}/responses",
            json={"rollNumber": "R1", "answers": [{"questionId": qid, "answerText": "y"}]},
            headers=bearer(token),
        )
        assert resp.status == 400

    run_with_client(server, go)


def test_evaluate_response(server, alice) -> None:
    _, token = alice

    async def go(client):
        exam_id = await _make_exam(client, token)
        rid = await _make_response(client, token, exam_id)
        resp = await client.post(
            "/evaluate-response", json={"responseId": rid}, headers=bearer(token)
        )
        assert resp.status == 200
        _assert_cors(resp)
        result = await resp.json()
        assert result["success"] is True
        assert result["answersEvaluated"] == 2
        assert 0 <= result["totalMarks"] <= 15

        resp = await client.get(f"/responses/{rid}", headers=bearer(token))
        r = await resp.json()
        assert r["marks"] == result["totalMarks"]
        assert r["marks"] == sum(a["marks"] for a in r["answers"])
        assert r["evaluated_at"] is not None

        resp = await client.get("/stats", headers=bearer(token))
        assert (await resp.json())["evaluated"] == 1

        # the older field name, and the service credential
        resp = await client.post(
            "/evaluate-response",
            json={"submissionId": rid},
            headers=bearer(service_key),
        )
        assert resp.status == 200
        assert set(await resp.json()) == set(result)

    run_with_client(server, go)


def test_evaluate_errors_are_500(server, alice) -> None:
    _, token = alice

    async def go(client):
        for body in ({}, {"responseId": "00000000-0000-0000-0000-000000000000"}):
            resp = await client.post(
                "/evaluate-response", json=body, headers=bearer(token)
            )
            assert resp.status == 500
            assert (await resp.json())["error"]
            _assert_cors(resp)
        resp = await client.post(
            "/evaluate-response", data="not json", headers=bearer(token)
        )
        assert resp.status == 500

    run_with_client(server, go)


def test_cors_headers_constant() -> None:
    assert CORS_HEADERS["Access-Control-Allow-Origin"] == "*"


def test_bad_question_id_with_line_break(server, alice) -> None:
    _, token = alice

    async def go(client):
        exam_id = await _make_exam(client, token)
        resp = await client.post(
            f"/exams/{exam_id}/responses",
            json={
                "rollNumber": "R1",
                "answers": [{"questionId": "bad\nid", "answerText": "x"}],
            },
            headers=bearer(token),
        )
        assert resp.status == 400
        _assert_cors(resp)
        assert "bad\nid" in (await resp.json())["error"]

    run_with_client(server, go)


def test_evaluation_runs_off_the_event_loop(server, alice, monkeypatch) -> None:
    _, token = alice
    seen = []
    real = server.evaluate_response

    def spy(response_id, *, caller=None):
        seen.append(threading.current_thread())
        return real(response_id, caller=caller)

    monkeypatch.setattr(server, "evaluate_response", spy)

    async def go(client):
        exam_id = await _make_exam(client, token)
        rid = await _make_response(client, token, exam_id)
        resp = await client.post(
            "/evaluate-response", json={"responseId": rid}, headers=bearer(token)
        )
        assert resp.status == 200
        assert (await resp.json())["answersEvaluated"] == 2
        resp = await client.get(f"/responses/{rid}", headers=bearer(token))
        assert (await resp.json())["evaluated_at"] is not None

    run_with_client(server, go)
    assert len(seen) == 1
    assert seen[0] is not threading.main_thread()
