# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

import logging

import peewee as pw

from zeneval.db.tables import User
from zeneval.misc_utils import utc_now, datetime_to_json


log = logging.getLogger("DB")


def createUser(self, uname, passwordHash, *, full_name="", email=""):
    try:
        User.create(
            name=uname,
            password=passwordHash,
            full_name=full_name,
            email=email,
            last_activity=utc_now(),
            last_action="Created",
        )
    except pw.IntegrityError as e:
        log.error("Create User {} error - {}".format(uname, e))
        return False
    return True


def doesUserExist(self, uname):
    return User.get_or_none(name=uname) is not None


def setUserPasswordHash(self, uname, passwordHash):
    uref = User.get_or_none(name=uname)
    if uref is None:
        return False
    with self._db.atomic():
        uref.password = passwordHash
        uref.last_activity = utc_now()
        uref.last_action = "Password set"
        uref.save()
    return True


def getUserPasswordHash(self, uname):
    uref = User.get_or_none(name=uname)
    if uref is None:
        return None
    return uref.password


def isUserEnabled(self, uname):
    uref = User.get_or_none(name=uname)
    if uref is None:
        return False
    return uref.enabled


def enableUser(self, uname):
    uref = User.get_or_none(name=uname)
    if uref is None:
        raise ValueError(f"No user '{uname}'")
    with self._db.atomic():
        uref.enabled = True
        uref.save()


def disableUser(self, uname):
    uref = User.get_or_none(name=uname)
    if uref is None:
        raise ValueError(f"No user '{uname}'")
    # a disabled user must also be logged out
    with self._db.atomic():
        uref.enabled = False
        uref.token = None
        uref.save()


def setUserToken(self, uname, token, msg="Log on"):
    uref = User.get_or_none(name=uname)
    if uref is None:
        return False
    with self._db.atomic():
        uref.token = token
        uref.last_activity = utc_now()
        uref.last_action = msg
        uref.save()
    return True


def clearUserToken(self, uname):
    return self.setUserToken(uname, None, "Log off")


def getUserToken(self, uname):
    """Return the stored token of a user.

    Raises:
        ValueError: no such user.
    """
    uref = User.get_or_none(name=uname)
    if uref is None:
        raise ValueError("No such user")
    return uref.token


def userHasToken(self, uname):
    uref = User.get_or_none(name=uname)
    if uref is None:
        return False
    return uref.token is not None


def userFromStorageToken(self, storage_token):
    """Which enabled user, if any, holds this (xor'd) storage token?

    Returns:
        str/None: the user name or None if nobody has that token.
    """
    if not storage_token:
        return None
    uref = User.get_or_none(User.token == storage_token, User.enabled == True)  # noqa: E712
    if uref is None:
        return None
    return uref.name


def getUserDetails(self, uname):
    uref = User.get_or_none(name=uname)
    if uref is None:
        return None
    return {
        "user": uref.name,
        "fullName": uref.full_name,
        "email": uref.email,
        "enabled": uref.enabled,
        "loggedIn": uref.token is not None,
        "lastActivity": datetime_to_json(uref.last_activity),
        "lastAction": uref.last_action,
    }
