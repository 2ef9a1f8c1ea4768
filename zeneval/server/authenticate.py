# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

"""Passwords, session tokens and the service credential.

Session tokens are handed to clients as 32 hex digits; the database only
ever sees them xor'd with the server's master token.
"""

import hmac
import logging
import uuid

from passlib.context import CryptContext


log = logging.getLogger("auth")

# The privileged caller presenting the service credential
SERVICE_ROLE = "service"

reserved_usernames = (SERVICE_ROLE,)

# longest client token we will try to parse; a uuid has 32 hex digits
_max_token_length = 64


def _password_context():
    return CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")


def basic_username_check(username):
    """Can this be the name of a new account?

    Arguments:
        username (str)

    Returns:
        tuple: ``(True, "")`` if acceptable, else ``(False, why)``.
    """
    if not isinstance(username, str):
        return False, "Username must be a string"
    if len(username) < 3:
        return False, "Username too short, should be at least 3 chars"
    if not (username.isalnum() and username[0].isalpha()):
        return False, "Username should be alphanumeric and start with a letter"
    if username.lower() in reserved_usernames:
        return False, f'Username "{username}" is reserved'
    return True, ""


def basic_username_password_check(username, password):
    """Can these be the name and password of a new account?

    Beyond the username rules, a password needs 4 characters and may
    not be the username itself.

    Returns:
        tuple: ``(True, "")`` if acceptable, else ``(False, why)``.
    """
    r = basic_username_check(username)
    if not r[0]:
        return r
    if not isinstance(password, str) or len(password) < 4:
        return False, "Password too short, should be at least 4 chars"
    if password == username:
        return False, "Password is too close to the username"
    return True, ""


class SimpleAuthorityHasher:
    """Password hashing without any tokens, for preparing user lists offline."""

    def __init__(self):
        self.ctx = _password_context()

    def create_password_hash(self, password):
        return self.ctx.hash(password)


class Authority:
    """Checks passwords, issues and validates session tokens.

    Args:
        masterToken (str/None): a uuid, in any form `uuid.UUID` accepts,
            mixed into tokens before they are stored.  A fresh one is
            made if None, which logs everyone out on restart.
        service_key (str/None): the service credential.  Without one,
            no bearer is ever the service.
    """

    def __init__(self, masterToken, service_key=None):
        self.ctx = _password_context()
        self.masterToken = self.build_master_token(masterToken)
        self.mti = int(self.masterToken, 16)
        self._service_key = service_key

    def build_master_token(self, token):
        """Normalise a given master token to hex, or make a new one.

        Raises:
            ValueError: ``token`` is not a uuid.
        """
        if token is None:
            log.info("No master token given, creating one")
            return uuid.uuid4().hex
        try:
            return uuid.UUID(token).hex
        except ValueError as e:
            raise ValueError(f"Supplied master token not valid UUID: {e}") from None

    def get_master_token(self):
        return self.masterToken

    def check_password(self, password, expected_hash):
        """Does the password match the hash on file?

        An ``expected_hash`` of None, meaning no such user, never matches.
        """
        if expected_hash is None:
            return False
        if not isinstance(password, str):
            password = ""
        return self.ctx.verify(password, expected_hash)

    def create_token(self):
        """A new session token.

        Returns:
            list: ``[clientToken, storageToken]``, the first for the
            client and the second for the database.
        """
        clientToken = uuid.uuid4().hex
        return [clientToken, self.storage_token(clientToken)]

    def storage_token(self, clientToken):
        """The stored form of a token a client presents.

        Arguments:
            clientToken (str): untrusted input from a request header.

        Returns:
            str/None: hex of the token xor the master token, or None if
            the input is not a plausible token.
        """
        if not isinstance(clientToken, str) or len(clientToken) > _max_token_length:
            return None
        try:
            return hex(int(clientToken, 16) ^ self.mti)
        except ValueError:
            return None

    def validate_token(self, clientToken, stored_token):
        """Does a client's token match the one stored for a user?

        Returns:
            bool/None: None if ``clientToken`` is malformed, otherwise
            whether it matches; a ``stored_token`` of None never does.
        """
        s = self.storage_token(clientToken)
        if s is None:
            return None
        return s == stored_token

    def is_service_key(self, key):
        """Is this the privileged service credential?"""
        if not self._service_key or not isinstance(key, str):
            return False
        return hmac.compare_digest(key.encode(), self._service_key.encode())

    def basic_username_password_check(self, username, password):
        return basic_username_password_check(username, password)

    def create_password_hash(self, password):
        return self.ctx.hash(password)
