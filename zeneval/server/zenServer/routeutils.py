# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

"""Misc routing utilities"""

import json
import logging
import functools

from aiohttp import web

from zeneval.zeneval_exceptions import ZenEvalNoPermission, ZenEvalNoSuchObject
from zeneval.server.access import check_ownership

log = logging.getLogger("routes")


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, PATCH, DELETE, OPTIONS",
}


@web.middleware
async def cors_middleware(request, handler):
    """Put the cross-origin headers on every response, errors included."""
    try:
        response = await handler(request)
    except web.HTTPException as e:
        e.headers.update(CORS_HEADERS)
        raise
    response.headers.update(CORS_HEADERS)
    return response


def json_error(exc_class, msg):
    """An aiohttp HTTP exception with body ``{"error": msg}``.

    Messages that can echo client input go in the body: a reason phrase
    may not contain line breaks.
    """
    return exc_class(text=json.dumps({"error": msg}), content_type="application/json")


def validate_required_fields(data, required_fields, optional_fields=()):
    """Check that input dict has the required fields and nothing unexpected.

    Arguments:
        data (dict): the body of a request.
        required_fields (iterable): must all be present.
        optional_fields (iterable): may be present.

    Returns:
        bool: True iff the fields are acceptable.
    """
    if not isinstance(data, dict):
        return False
    keys = set(data.keys())
    required = set(required_fields)
    return required <= keys and keys <= required | set(optional_fields)


def log_request(request_name, request):
    """Logs the requests done by the server.

    Arguments:
        request_name (str): Name of the request function.
        request (aiohttp.web_request.Request): an `aiohttp` request object.
    """
    log.info("{} {} {}".format(request_name, request.method, request.rel_url))


def bearer_token(request):
    """The token from an ``Authorization: Bearer <token>`` header, or None."""
    auth = request.headers.get("Authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _authenticate(zelf, f, request):
    caller = zelf.server.caller_from_token(bearer_token(request))
    if caller is None:
        log.warning("%s: bearer token could not be validated", f.__name__)
        raise web.HTTPUnauthorized(reason="bearer token could not be validated")
    log.info('%s authenticated "%s" via bearer token', f.__name__, caller)
    return caller


def authenticate_by_bearer(f):
    """Decorator for authentication by bearer token and logging.

    The function under decoration should be a class method taking the
    authenticated caller and the request:

    ```
    @authenticate_by_bearer
    def foo(zelf, caller, request):
        return ...
    ```

    Arguments:
        f (function): a routing method associated with the ZenEval server.

    Returns:
        function: the input wrapped with token-based authentication.
    """

    @functools.wraps(f)
    async def wrapped(zelf, request):
        log_request(f.__name__, request)
        caller = _authenticate(zelf, f, request)
        return f(zelf, caller, request)

    return wrapped


def authenticate_by_bearer_required_fields(fields, optional=()):
    """Decorator for field validation, authentication by bearer token, and logging.

    The decorated function raises `web.HTTPBadRequest` if the JSON body
    of the request is missing any of `fields` or has keys outside of
    `fields` and `optional`.

    Example
    -------
    ```
    @authenticate_by_bearer_required_fields(["bar"], optional=["baz"])
    def foo(zelf, caller, data, request):
        return ...
    ```
    Here `data` is the result of `request.json()` and `request` is the
    original request (don't try to take data from it again!)

    Arguments:
        fields (iterable): the required fields for this request.
        optional (iterable): fields that may also appear.

    Returns:
        function: the original function wrapped with authentication.
    """

    def _decorate(f):
        @functools.wraps(f)
        async def wrapped(zelf, request):
            log_request(f.__name__, request)
            caller = _authenticate(zelf, f, request)
            try:
                data = await request.json()
            except ValueError:
                raise web.HTTPBadRequest(reason="body must be JSON") from None
            log.debug("{} validating fields {}".format(f.__name__, fields))
            if not validate_required_fields(data, fields, optional):
                got = list(data.keys()) if isinstance(data, dict) else data
                log.warning(
                    "%s: fields %s do not match expected %s",
                    f.__name__,
                    got,
                    fields,
                )
                raise web.HTTPBadRequest(
                    reason=f"fields {got} do not match expected {list(fields)}"
                )
            return f(zelf, caller, data, request)

        return wrapped

    return _decorate


def owner_required(kind, match_key):
    """Decorator requiring the caller to own the object named in the url.

    Goes beneath one of the `authenticate_by_bearer` decorators, which
    supply the caller as the first argument after `zelf`.

    Arguments:
        kind (str): "exam", "question", "response" or "answer".
        match_key (str): the part of the route holding the object's id.

    Returns:
        function: the original wrapped with an ownership check, giving
        NotFound (404) for a missing object and Forbidden (403) for an
        object belonging to someone else.
    """

    def _decorate(f):
        @functools.wraps(f)
        def wrapped(zelf, caller, *args):
            request = args[-1]
            obj_id = request.match_info[match_key]
            try:
                check_ownership(zelf.server.DB, kind, obj_id, caller)
            except ZenEvalNoSuchObject as e:
                raise json_error(web.HTTPNotFound, str(e))
            except ZenEvalNoPermission as e:
                raise json_error(web.HTTPForbidden, str(e))
            return f(zelf, caller, *args)

        return wrapped

    return _decorate


def no_authentication_only_log_request(f):
    """Decorator for logging requests only.

    Arguments:
        f (function): a routing method associated with the ZenEval server.

    Returns:
        function: the original wrapped with logging.
    """

    @functools.wraps(f)
    async def wrapped(zelf, request):
        log_request(f.__name__, request)
        return await f(zelf, request)

    return wrapped
