# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

"""Resources shared across the test modules.

Databases are throwaway sqlite files: evaluation saves answers from
worker threads, each with its own connection, which an in-memory
database would not share.
"""

import asyncio
import random

import pytest
from aiohttp.test_utils import TestClient, TestServer

from zeneval.db import ZenEvalDB
from zeneval.scoring import BaseScorer, RandomScorer
from zeneval.server.config import ServerConfig
from zeneval.server.theServer import ZenEvalServer, build_app


service_key = "correct-horse-battery-staple"


class FixedScorer(BaseScorer):
    """Always gives the same marks, capped at the maximum."""

    name = "fixed"

    def __init__(self, marks):
        self.marks = marks

    def score(self, max_marks):
        return min(self.marks, max_marks), "fixed remark"


@pytest.fixture
def db(tmp_path):
    """A fresh database in a temporary sqlite file."""
    the_db = ZenEvalDB(f"sqlite:///{tmp_path / 'zeneval.db'}")
    yield the_db
    the_db.close()


@pytest.fixture
def owner(db):
    """The name of a user in the database; their password hash is a dummy."""
    assert db.createUser("alice", "not-really-a-hash")
    return "alice"


@pytest.fixture
def exam_id(db, owner):
    """An exam of three questions worth 10, 5 and 1 marks."""
    return db.createExam(
        owner,
        "Midterm",
        "Chapters 1-3",
        [
            {"question_text": "2+2?", "answer_key": "4", "marks": 10},
            {"question_text": "Capital of France?", "answer_key": "Paris", "marks": 5},
            {"question_text": "Define entropy", "answer_key": "disorder", "marks": 1},
        ],
    )


@pytest.fixture
def config(tmp_path):
    return ServerConfig(
        db_url=f"sqlite:///{tmp_path / 'zeneval.db'}",
        service_key=service_key,
        max_workers=2,
        basedir=tmp_path,
    )


@pytest.fixture
def server(db, config):
    """A server with a seeded scorer."""
    return ZenEvalServer(db, config, scorer=RandomScorer(random.Random(1234)))


@pytest.fixture
def alice(server):
    """A real account on the server, logged in: returns (user, token)."""
    ok, _ = server.createUser("alice", "wonderland")
    assert ok
    ok, token = server.giveUserToken("alice", "wonderland", "127.0.0.1")
    assert ok
    return "alice", token


@pytest.fixture
def bob(server):
    ok, _ = server.createUser("bob", "builder")
    assert ok
    ok, token = server.giveUserToken("bob", "builder", "127.0.0.1")
    assert ok
    return "bob", token


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def run_with_client(server, fcn):
    """Run ``fcn(client)`` against the web app of a server.

    Args:
        server (ZenEvalServer)
        fcn: an async function taking an aiohttp test client.

    Returns:
        whatever ``fcn`` returns.
    """

    async def _run():
        async with TestClient(TestServer(build_app(server))) as client:
            return await fcn(client)

    return asyncio.run(_run())
