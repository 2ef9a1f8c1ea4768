# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

"""Routes and server details for the ZenEval server.

Many of these routes have a corresponding server method to do non-HTTP
stuff, but this separation is not perfect.  In many cases the server
bit just makes the same call to the database code in :mod:`zeneval.db`.
"""

__copyright__ = "Copyright (C) 2026 The ZenEval Project Developers"
__credits__ = "The ZenEval Project Developers"
__license__ = "AGPL-3.0-or-later"

from .routesEvaluate import EvaluateHandler
from .routesExam import ExamHandler
from .routesResponse import ResponseHandler
from .routesUserInit import UserInitHandler
from .routeutils import cors_middleware

__all__ = [
    "EvaluateHandler",
    "ExamHandler",
    "ResponseHandler",
    "UserInitHandler",
    "cors_middleware",
]
