# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers


"""Exceptions for the ZenEval software.

Serious exceptions are for unexpected things that we probably cannot
sanely or safely recover from.  Benign are for signaling expected (or
at least not unexpected) situations.
"""


class ZenEvalException(Exception):
    """Catch-all parent of all ZenEval-related exceptions."""

    pass


class ZenEvalSeriousException(ZenEvalException):
    """Serious or unexpected problems that are generally not recoverable."""

    pass


class ZenEvalBenignException(ZenEvalException):
    """A not-unexpected situation, often signaling an error condition."""

    pass


class ZenEvalConfigError(ZenEvalSeriousException):
    """The server configuration is missing or unusable; we refuse to start."""

    pass


class ZenEvalAuthenticationException(ZenEvalBenignException):
    """You are not authenticated, with precisely that as the default message."""

    def __init__(self, msg=None):
        if not msg:
            msg = "You are not authenticated."
        super().__init__(msg)


class ZenEvalNoPermission(ZenEvalBenignException):
    """You don't have permission, e.g., that exam belongs to someone else."""

    pass


class ZenEvalNoSuchObject(ZenEvalBenignException):
    """No exam, question, response or answer with that id."""

    pass


class ZenEvalInvalidRequest(ZenEvalBenignException):
    """The request was understood but its contents fail validation."""

    pass


class ZenEvalConflict(ZenEvalBenignException):
    """The action was contradictory to info already in the system."""

    pass


class ZenEvalDuplicateRollNumber(ZenEvalConflict):
    """A response with this roll number already exists for the exam."""

    def __init__(self, msg=None):
        if not msg:
            msg = "A response with this roll number already exists"
        super().__init__(msg)
