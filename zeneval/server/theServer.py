# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

import json
import logging
from pathlib import Path

from aiohttp import web

from zeneval import __version__
from zeneval import ZenEval_API_Version as serverAPI
from zeneval.db import ZenEvalDB
from zeneval.scoring import get_scorer
from zeneval.server import confdir, check_server_directories
from zeneval.server.config import ServerConfig
from zeneval.misc_utils import working_directory, utc_now_to_filename_string

from .authenticate import Authority

from .zenServer import (
    EvaluateHandler,
    ExamHandler,
    ResponseHandler,
    UserInitHandler,
    cors_middleware,
)


class ZenEvalServer:
    """The server, less the HTTP parts.

    Args:
        db (ZenEvalDB): the database.
        config (ServerConfig): the configuration.

    Keyword Args:
        scorer (BaseScorer/None): how to score answers, by default
            the one named in the configuration.
    """

    def __init__(self, db, config, *, scorer=None):
        log = logging.getLogger("server")
        log.debug("Initialising server")
        self.config = config
        self.authority = Authority(config.master_token, config.service_key)
        self.DB = db
        self.API = serverAPI
        self.Version = __version__
        self.scorer = scorer if scorer is not None else get_scorer(config.scorer)
        log.info('Scoring answers with the "%s" scorer', self.scorer.name)
        self.load_users()

    def load_users(self):
        """Load the users from json file and add them to the database.

        Users that already exist are left alone, passwords included.
        """
        log = logging.getLogger("server")
        init_user_list = self.config.basedir / confdir / "bootstrap_initial_users.json"
        if not init_user_list.exists():
            log.info(f'"{init_user_list}" not found: skipping')
            return
        log.info(f'Loading users from "{init_user_list}"')
        with open(init_user_list) as data_file:
            userList = json.load(data_file)
        for user, details in userList.items():
            if self.DB.doesUserExist(user):
                log.warning("User %s already exists: not updating password", user)
                continue
            self.DB.createUser(
                user,
                details["password"],
                full_name=details.get("full_name", ""),
                email=details.get("email", ""),
            )
        log.info(f'archived "{init_user_list}" to "{init_user_list}.done"')
        init_user_list.rename(
            init_user_list.with_suffix(init_user_list.suffix + ".done")
        )

    from .zenServer.serverUserInit import (
        caller_from_token,
        checkPassword,
        checkUserEnabled,
        createUser,
        giveUserToken,
        closeUser,
    )
    from .zenServer.serverExam import (
        createExam,
        listExams,
        getExamDetails,
        updateExam,
        deleteExam,
        getStats,
        createResponse,
        getResponse,
        deleteResponse,
    )
    from .zenServer.serverEvaluate import (
        _persist_answer,
        evaluate_answers,
        aggregate_response,
        evaluate_response,
    )


def build_app(server):
    """Construct the web application around a server."""
    log = logging.getLogger("server")
    app = web.Application(middlewares=[cors_middleware])
    log.info("Setting up routes")
    UserInitHandler(server).setUpRoutes(app.router)
    ExamHandler(server).setUpRoutes(app.router)
    ResponseHandler(server).setUpRoutes(app.router)
    EvaluateHandler(server).setUpRoutes(app.router)
    return app


def launch(basedir=Path("."), *, master_token=None, logfile=None, logconsole=True):
    """Launches the ZenEval server.

    args:
        basedir (pathlib.Path/str): the directory containing the file
            space to be used by this server.
        logfile (pathlib.Path/str/None): name-only then relative to basedir else
            If omitted, use a default name with date and time included.
        logconsole (bool): if True (default) then log to the stderr.
        master_token (None/str): a 32 hex-digit string used to encrypt tokens
            in the database.  Not needed on server unless you want to
            hot-restart the server without requiring users to log-off
            and log-in again.  If None, a new token is created.

    raises:
        ZenEvalConfigError: no database url or no service credential.
    """
    basedir = Path(basedir)
    if not logfile:
        now = utc_now_to_filename_string()
        logfile = basedir / f"zeneval-server-{now}.log"
    logfile = Path(logfile)
    # if just filename, make log in basedir
    if logfile.parent == Path("."):
        logfile = basedir / logfile
    # 5 is to keep debug/info lined up
    fmtstr = "%(asctime)s %(levelname)5s:%(name)s\t%(message)s"
    logging.basicConfig(format=fmtstr, datefmt="%b%d %H:%M:%S %Z", filename=logfile)
    if logconsole:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(fmtstr, datefmt="%b%d %H:%M:%S %Z"))
        logging.getLogger().addHandler(h)

    log = logging.getLogger("server")
    # We will reset this later after we read the config
    logging.getLogger().setLevel("Debug".upper())

    log.info("ZenEval Server {} (communicates with api {})".format(__version__, serverAPI))
    check_server_directories(basedir)
    config = ServerConfig.load(basedir, master_token=master_token)
    logging.getLogger().setLevel(config.log_level.upper())
    # Special treatment for chatty modules
    if config.log_level.upper() == "INFO":
        logging.getLogger("aiohttp.access").setLevel("WARNING")
    log.info(f'Working from directory "{basedir}"')
    log.info(f"Configuration: {config}")

    examDB = ZenEvalDB(config.db_url)
    peon = ZenEvalServer(examDB, config)
    app = build_app(peon)

    log.info("Start the server!")
    try:
        with working_directory(basedir):
            web.run_app(app, port=config.port)
    finally:
        examDB.close()
