# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

from contextlib import contextmanager
import os

import arrow


# ------------------------------------------------
# some time conversion tools put here nice and central


def utc_now():
    """The time now in UTC, as a naive datetime suitable for the database."""
    return arrow.utcnow().naive


def datetime_to_json(timestamp):
    """ISO 8601 string for a timestamp read from the database, or None."""
    if timestamp is None:
        return None
    return arrow.get(timestamp).for_json()


def utc_now_to_filename_string():
    """Format the time now in UTC for use in a filename.

    Filenames must not have ":" (forbidden on win32), so e.g., we use
    "ZZZ" not "ZZ" as the latter has "+00:00".
    """
    return arrow.utcnow().format("YYYY-MM-DD_HH-mm-ss_ZZZ")


@contextmanager
def working_directory(path):
    """Temporarily change the current working directory.

    Usage:
    ```
    with working_directory(path):
        do_things()   # working in the given path
    do_other_things() # back to original path
    ```
    """
    current_directory = os.getcwd()
    os.chdir(path)
    try:
        yield
    finally:
        os.chdir(current_directory)
