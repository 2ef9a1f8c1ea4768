# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

import csv
from importlib import resources
import json
from pathlib import Path

import zeneval
from zeneval.server import confdir
from zeneval.server.authenticate import basic_username_password_check
from zeneval.server.authenticate import SimpleAuthorityHasher


user_list_filename = "bootstrap_initial_users.json"
csv_required_headers = ["user", "password"]
csv_optional_headers = ["full_name", "email"]


def check_username_password_format(user_dict):
    """Checks that the username-passwords are valid and to a specific standard.

    May not check all the data: short-circuits out on first false.

    Arguments:
        user_dict (dict): keys username (str) to value a dict with at
            least the key "password".

    Returns:
        boolean: also prints to screen as a side effect.
    """
    for username, details in user_dict.items():
        r, msg = basic_username_password_check(username, details["password"])
        if not r:
            print(f"Username '{username}': {msg}")
            return False
    return True


def make_password_hashes(user_dict):
    """Replace each user's password with a hash of it.

    Arguments:
        user_dict (dict): keys username (str) to value a dict with
            "password" and maybe "full_name" and "email".

    Returns:
        dict: same shape but the passwords are hashed.
    """
    hasher = SimpleAuthorityHasher()
    hashed = {}
    for user, details in user_dict.items():
        hashed[user] = dict(details)
        hashed[user]["password"] = hasher.create_password_hash(details["password"])
    return hashed


def get_raw_user_dict_from_csv(user_file_path):
    """Gets the user dictionary from a csv file.

    Arguments:
        user_file_path (str/pathlib.Path): a csv file of proposed
            usernames and passwords, optionally with full names and
            emails.

    Returns:
        dict: keys are usernames, values are dicts with "password",
        "full_name" and "email".

    Raises:
        ValueError: malformed csv file.
    """
    with open(user_file_path, "r", newline="") as f:
        return _get_raw_user_dict(f)


def _get_raw_user_dict(f):
    user_dict = {}
    reader = csv.reader(f, skipinitialspace=True)
    csv_headers = next(reader, None)
    if not csv_headers or csv_headers[:2] != csv_required_headers:
        raise ValueError('csv file must start with columns "user" and "password".')
    extra = csv_headers[2:]
    if any(h not in csv_optional_headers for h in extra):
        raise ValueError(
            f"csv file has unexpected columns {extra}: "
            f"only {csv_optional_headers} are allowed"
        )
    for row in reader:
        if not row:
            continue
        if len(row) != len(csv_headers):
            raise ValueError(f"csv row {row} does not match headers {csv_headers}")
        fields = dict(zip(csv_headers, row))
        user = fields["user"].lower()
        if user in user_dict:
            raise ValueError(f"User '{user}' appears more than once")
        user_dict[user] = {
            "password": fields["password"],
            "full_name": fields.get("full_name", ""),
            "email": fields.get("email", ""),
        }
    return user_dict


def get_template_user_list():
    """Gets the user dictionary for some fixed demo values."""
    with (resources.files(zeneval) / "templateUserList.csv").open("r") as f:
        return _get_raw_user_dict(f)


def write_template_csv_user_list(filename):
    """Save a csv file of fixed demo usernames and nonhashed passwords."""
    b = (resources.files(zeneval) / "templateUserList.csv").read_bytes()
    with open(filename, "wb") as f:
        f.write(b)


def parse_and_save_user_list(user_file_path, basedir=Path(".")):
    """Parses the user list provided and saves the user hash dictionary.

    Arguments:
        user_file_path (str/pathlib.Path): a csv file of proposed
            usernames and passwords.
        basedir (pathlib.Path): the server directory.

    Returns:
        None: has side effect of saving user hash dictionary.

    Raises:
        ValueError
    """
    save_user_list(get_raw_user_dict_from_csv(user_file_path), basedir)


def save_user_list(user_dict, basedir=Path(".")):
    """Saves userlist and their hashed passwords.

    The server adds them to the database the next time it launches.

    Arguments:
        user_dict (dict): keys are names and values are dicts with
            "password" and maybe "full_name" and "email".
        basedir (pathlib.Path): written to
            `basedir/serverConfiguration/bootstrap_initial_users.json`.

    Raises:
        ValueError: empty list or some username/password not acceptable.
    """
    basedir = Path(basedir)
    if not user_dict:
        raise ValueError("Userlist must contain at least one user.")
    if not check_username_password_format(user_dict):
        raise ValueError("Username and passwords are not in the required format.")

    hashed = make_password_hashes(user_dict)

    where = basedir / confdir
    where.mkdir(exist_ok=True)
    with open(where / user_list_filename, "w") as fh:
        fh.write(json.dumps(hashed, indent=2))
