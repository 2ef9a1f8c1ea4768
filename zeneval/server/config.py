# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

"""Configuration of the ZenEval server.

The settings come from ``serverConfiguration/serverDetails.toml`` with
the database URL and the service credential overridable from the
environment.  Both of those are required: we refuse to start without
them rather than discover the problem at the first database call.
"""

import logging
import os
from pathlib import Path
import sys
from urllib.parse import urlparse

if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib

from zeneval import Default_Port
from zeneval.zeneval_exceptions import ZenEvalConfigError
from zeneval.server import confdir


log = logging.getLogger("server")

db_url_env_var = "ZENEVAL_DB_URL"
service_key_env_var = "ZENEVAL_SERVICE_KEY"


def resolve_sqlite_url(db_url, basedir):
    """Make a relative sqlite url absolute with respect to basedir.

    Other urls are returned unchanged.
    """
    parsed = urlparse(db_url)
    if not parsed.scheme.startswith("sqlite"):
        return db_url
    path = db_url[len(parsed.scheme) + len(":///") :]
    if path == ":memory:" or not path or Path(path).is_absolute():
        return db_url
    return f"{parsed.scheme}:///{(Path(basedir) / path).resolve()}"


class ServerConfig:
    """Everything the server needs to know before it starts.

    Keyword args:
        db_url (str): database location, see :class:`zeneval.db.ZenEvalDB`.
        service_key (str): the privileged service credential.  A bearer
            of this key is not subject to ownership checks.
        server (str): name or address of the server.
        port (int): port to listen on.
        log_level (str): e.g., "info" or "debug".
        max_workers (int): bound on concurrent answer writes during
            evaluation.
        scorer (str): name of the scorer, see :mod:`zeneval.scoring`.
        master_token (str/None): 32 hex-digit string used to encrypt
            tokens in the database, or None to make a new one.
        basedir (pathlib.Path): the server's directory.

    Raises:
        ZenEvalConfigError: a required value is missing or invalid.
    """

    def __init__(
        self,
        *,
        db_url,
        service_key,
        server="localhost",
        port=Default_Port,
        log_level="info",
        max_workers=4,
        scorer="random",
        master_token=None,
        basedir=Path("."),
    ):
        if not db_url:
            raise ZenEvalConfigError(
                f"No database url: set {db_url_env_var} or db_url in serverDetails.toml"
            )
        if not service_key:
            raise ZenEvalConfigError(f"No service credential: set {service_key_env_var}")
        if isinstance(max_workers, bool) or not isinstance(max_workers, int):
            raise ZenEvalConfigError(f"max_workers must be an integer: {max_workers!r}")
        if max_workers < 1:
            raise ZenEvalConfigError(f"max_workers must be positive: {max_workers}")
        if not isinstance(port, int) or not 0 < port < 65536:
            raise ZenEvalConfigError(f"Invalid port: {port!r}")
        self.basedir = Path(basedir)
        self.db_url = resolve_sqlite_url(db_url, self.basedir)
        self.service_key = service_key
        self.server = server
        self.port = port
        self.log_level = log_level
        self.max_workers = max_workers
        self.scorer = scorer
        self.master_token = master_token

    def __repr__(self):
        # never show the service key
        return (
            f"ServerConfig(db_url={self.db_url!r}, server={self.server!r}, "
            f"port={self.port}, log_level={self.log_level!r}, "
            f"max_workers={self.max_workers}, scorer={self.scorer!r})"
        )

    @classmethod
    def load(cls, basedir=Path("."), *, environ=None, master_token=None):
        """Read the config file and the environment.

        Args:
            basedir (pathlib.Path/str): the server's directory.

        Keyword Args:
            environ (dict/None): where to look for environment variables,
                defaults to ``os.environ``.
            master_token (str/None): passed through.

        Returns:
            ServerConfig

        Raises:
            ZenEvalConfigError: missing database url or service
                credential, or the config file cannot be parsed.
        """
        basedir = Path(basedir)
        if environ is None:
            environ = os.environ
        info = {}
        try:
            with open(basedir / confdir / "serverDetails.toml", "rb") as f:
                info = tomllib.load(f)
            log.debug("Server details loaded: {}".format(info))
        except FileNotFoundError:
            log.warning("Cannot find server details, using defaults")
        except tomllib.TOMLDecodeError as e:
            raise ZenEvalConfigError(f"Cannot parse serverDetails.toml: {e}") from None
        return cls(
            db_url=environ.get(db_url_env_var) or info.get("db_url"),
            service_key=environ.get(service_key_env_var) or info.get("service_key"),
            server=info.get("server", "localhost"),
            port=info.get("port", Default_Port),
            log_level=info.get("LogLevel", "info"),
            max_workers=info.get("max_workers", 4),
            scorer=info.get("scorer", "random"),
            master_token=master_token,
            basedir=basedir,
        )
