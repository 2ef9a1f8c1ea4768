# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

"""ZenEval collects exam answer sheets and scores them.

ZenEval lets an instructor author exams, upload students' typed or
photographed answers and run an evaluation pass which scores each
answer and totals the submission.
"""

__copyright__ = "Copyright (C) 2026 The ZenEval Project Developers"
__credits__ = "The ZenEval Project Developers"
__license__ = "AGPL-3.0-or-later"

from .version import __version__

ZenEval_API_Version = "3"
Default_Port = 41985

__all__ = ["__version__", "ZenEval_API_Version", "Default_Port"]
