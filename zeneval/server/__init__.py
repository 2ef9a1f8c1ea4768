# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

"""The ZenEval server."""

__copyright__ = "Copyright (C) 2026 The ZenEval Project Developers"
__credits__ = "The ZenEval Project Developers"
__license__ = "AGPL-3.0-or-later"

from pathlib import Path

confdir: Path = Path("serverConfiguration")
dbdir: Path = Path("database")

from .misc import build_server_directories
from .misc import create_server_config
from .misc import check_server_directories, check_server_fully_configured
from .config import ServerConfig

from zeneval.server.theServer import ZenEvalServer, build_app, launch

__all__ = ["launch", "build_app", "ZenEvalServer", "ServerConfig"]
