# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

"""Misc utilities for the ZenEval Server"""

from importlib import resources
import logging
from pathlib import Path

import zeneval
from zeneval import Default_Port
from zeneval.server import confdir, dbdir


server_dirs = (
    Path("."),
    confdir,
    dbdir,
)


def build_server_directories(basedir=Path(".")):
    """Build some directories the server will need"""
    log = logging.getLogger("server")
    for d in server_dirs:
        log.debug("Making directory {}".format(d))
        (basedir / d).mkdir(exist_ok=True)


def check_server_directories(basedir=Path(".")):
    """Ensure some server directories exist"""
    basedir = Path(basedir)
    for d in server_dirs:
        if not (basedir / d).is_dir():
            raise FileNotFoundError(
                "Required directory '{}' are not present. "
                "Have you run 'zeneval-server init'?".format(d)
            )


def check_server_fully_configured(basedir):
    if not (Path(basedir) / confdir / "serverDetails.toml").exists():
        raise FileNotFoundError(
            "Server configuration file not present. Have you run 'zeneval-server init'?"
        )


def create_server_config(dur=confdir, *, port=None, name=None, db_url=None):
    """Create a default server configuration file.

    args:
        dur (pathlib.Path): where to put the file.

    keyword args:
        port (int/None): port on which to run the server.
        name (str/None): the name of your server such as
            "zeneval.example.com" or an IP address.  Defaults to
            "localhost".
        db_url (str/None): the database url, default sqlite if `None`.

    raises:
        FileExistsError: file is already there.

    The toml file is manipulated here with find-and-replace so as to
    preserve comments in the template.
    """
    sd = Path(dur) / "serverDetails.toml"
    if sd.exists():
        raise FileExistsError("Config already exists in {}".format(sd))
    template = (resources.files(zeneval) / "serverDetails.toml").read_text()
    if name:
        template = template.replace('"localhost"', f'"{name}"')
    if port:
        template = template.replace(f"{Default_Port}", str(port))
    if db_url:
        template = template.replace(
            'db_url = "sqlite:///database/zeneval.db"', f'db_url = "{db_url}"'
        )
    with open(sd, "w") as fh:
        fh.write(template)
