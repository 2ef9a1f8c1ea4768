# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

import logging

from zeneval.server.authenticate import SERVICE_ROLE

log = logging.getLogger("servUI")


def caller_from_token(self, token):
    """Who is presenting this bearer token?

    Returns:
        str/None: the user name, ``SERVICE_ROLE`` for the service
        credential, or None if the token is not valid.
    """
    if token is None:
        return None
    if self.authority.is_service_key(token):
        return SERVICE_ROLE
    storage = self.authority.storage_token(token)
    if storage is None:
        log.warning("Malformed bearer token: client bug? malicious probing?")
        return None
    user = self.DB.userFromStorageToken(storage)
    if user is None:
        log.info("Someone tried to use a stale or invalid token")
    return user


def checkPassword(self, user, password):
    """Does user's password match the hashed one on file?"""
    hashed_pwd = self.DB.getUserPasswordHash(user)
    return self.authority.check_password(password, hashed_pwd)


def checkUserEnabled(self, user):
    return self.DB.isUserEnabled(user)


def giveUserToken(self, user, password, remote_ip):
    """Verify a user's password and give them back a token for quicker future actions.

    The password is only checked on first authorisation since it is slow.

    returns:
        tuple: `(True, token)` on success, `(False, code, user_readable)`
        on failure.  Here `code` can be one of the strings "NotAuth",
        "Disabled", "HasToken" and `user_readable` is a longer string
        appropriate for an user-centred error message.
    """
    if not self.checkPassword(user, password):
        log.warning('Invalid password login attempt by "{}" from {}'.format(user, remote_ip))
        return (False, "NotAuth", "The name / password pair is not authorised")

    if not self.checkUserEnabled(user):
        log.info('User "{}" logged in but account is disabled'.format(user))
        return (
            False,
            "Disabled",
            "User login has been disabled. Contact your administrator?",
        )

    if self.DB.userHasToken(user):
        log.debug('User "{}" already has token'.format(user))
        return (
            False,
            "HasToken",
            "User already has token: perhaps logged in elsewhere or previous session crashed?",
        )
    # give user a token, and store the xor'd version.
    [clientToken, storageToken] = self.authority.create_token()
    self.DB.setUserToken(user, storageToken)
    log.info('Authorising user "{}" from {}'.format(user, remote_ip))
    return (True, clientToken)


def createUser(self, username, password, *, full_name="", email=""):
    r, msg = self.authority.basic_username_password_check(username, password)
    if not r:
        return [False, f"Username/Password fails basic checks: {msg}"]

    if self.DB.doesUserExist(username.lower()):
        return [False, "User already exists."]

    passwordHash = self.authority.create_password_hash(password)
    if self.DB.createUser(
        username.lower(), passwordHash, full_name=full_name, email=email
    ):
        log.info('Created user "%s"', username.lower())
        return [True, True]

    return [False, "User creation error."]


def closeUser(self, user):
    """Client is logging out, so remove the authorisation token"""
    log.info("Revoking auth token from user {}".format(user))
    self.DB.clearUserToken(user)
