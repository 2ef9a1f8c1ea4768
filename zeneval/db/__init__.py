# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

"""ZenEval database stuff."""

__copyright__ = "Copyright (C) 2026 The ZenEval Project Developers"
__credits__ = "The ZenEval Project Developers"
__license__ = "AGPL-3.0-or-later"


from .examDB import ZenEvalDB

__all__ = [
    "ZenEvalDB",
]
