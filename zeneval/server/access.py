# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

"""Ownership checks guarding every exam, question, response and answer.

Each kind of object has an ownership predicate mapping an object id
to the name of the user who owns the exam it hangs off.  The server
calls :func:`check_ownership` before touching such an object on behalf
of a caller.
"""

import logging

from zeneval.zeneval_exceptions import ZenEvalNoPermission
from zeneval.server.authenticate import SERVICE_ROLE


log = logging.getLogger("auth")


ownership_predicates = {
    "exam": lambda db, obj_id: db.ownerOfExam(obj_id),
    "question": lambda db, obj_id: db.ownerOfQuestion(obj_id),
    "response": lambda db, obj_id: db.ownerOfResponse(obj_id),
    "answer": lambda db, obj_id: db.ownerOfAnswer(obj_id),
}


def check_ownership(db, kind, obj_id, caller):
    """Make sure the caller may read and write this object.

    Args:
        db (ZenEvalDB): the database.
        kind (str): one of the keys of ``ownership_predicates``.
        obj_id (str): the id of the object.
        caller (str): the authenticated user, or ``SERVICE_ROLE``
            which may access anything that exists.

    Raises:
        ZenEvalNoSuchObject: the object does not exist.
        ZenEvalNoPermission: it exists but belongs to someone else.
        KeyError: unknown kind.
    """
    owner = ownership_predicates[kind](db, obj_id)
    if caller == SERVICE_ROLE:
        log.debug("Service caller granted %s %s", kind, obj_id)
        return
    if owner != caller:
        log.warning('User "%s" tried to access %s %s of another user', caller, kind, obj_id)
        raise ZenEvalNoPermission(f"You do not have access to {kind} {obj_id}")
