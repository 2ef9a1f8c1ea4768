# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

from aiohttp import web

from .routeutils import authenticate_by_bearer
from .routeutils import no_authentication_only_log_request
from .routeutils import validate_required_fields, log_request
from .routeutils import log, json_error

from zeneval.server.authenticate import SERVICE_ROLE


class UserInitHandler:
    """The UserInit Handler interfaces between the HTTP API and the server itself.

    These routes handle signing up, logging in and out, and server info.
    """

    def __init__(self, zenServer):
        self.server = zenServer

    def _version_string(self):
        return f"ZenEval server version {self.server.Version} with API {self.server.API}"

    # @routes.get("/Version")
    @no_authentication_only_log_request
    async def version(self, request):
        return web.Response(
            text=self._version_string(),
            status=200,
        )

    # @routes.get("/info/server")
    @no_authentication_only_log_request
    async def get_server_info(self, request):
        info = {
            "product_string": "ZenEval Server",
            "version": self.server.Version,
            "API_version": self.server.API,
            "version_string": self._version_string(),
        }
        return web.json_response(info, status=200)

    # @routes.post("/auth/signup")
    async def signup(self, request):
        """Create a new account.

        Returns:
            aiohttp.web.Response: 201 on success, 400 for malformed
            request or a username/password that fails the basic checks,
            409 if the user already exists.
        """
        log_request("signup", request)
        try:
            data = await request.json()
        except ValueError:
            raise web.HTTPBadRequest(reason="body must be JSON") from None
        if not validate_required_fields(
            data, ["user", "password"], ["fullName", "email"]
        ):
            raise web.HTTPBadRequest(reason="expected fields user and password")
        ok, val = self.server.createUser(
            data["user"],
            data["password"],
            full_name=data.get("fullName") or "",
            email=data.get("email") or "",
        )
        if not ok:
            log.info('Failed to create user "%s": %s', data["user"], val)
            if val == "User already exists.":
                raise json_error(web.HTTPConflict, val)
            raise json_error(web.HTTPBadRequest, val)
        return web.json_response({"user": data["user"].lower()}, status=201)

    # @routes.post("/auth/login")
    async def login(self, request):
        log_request("login", request)
        try:
            data = await request.json()
        except ValueError:
            raise web.HTTPBadRequest(reason="body must be JSON") from None
        if not validate_required_fields(data, ["user", "password"]):
            return web.Response(status=400)  # malformed request.
        if not isinstance(data["user"], str):
            return web.Response(status=400)
        rmsg = self.server.giveUserToken(
            data["user"].lower(), data["password"], request.remote
        )
        if rmsg[0]:
            return web.json_response({"token": rmsg[1]}, status=200)
        elif rmsg[1] == "Disabled":
            raise json_error(web.HTTPForbidden, rmsg[2])
        elif rmsg[1] == "HasToken":
            raise json_error(web.HTTPConflict, rmsg[2])
        raise json_error(web.HTTPUnauthorized, rmsg[2])

    # @routes.delete("/auth/token")
    @authenticate_by_bearer
    def logout(self, caller, request):
        """User self-indicates they are logging out, revoke their token."""
        if caller == SERVICE_ROLE:
            raise web.HTTPBadRequest(reason="The service credential cannot log out")
        self.server.closeUser(caller)
        return web.Response(status=200)

    # @routes.get("/auth/user")
    @authenticate_by_bearer
    def whoami(self, caller, request):
        if caller == SERVICE_ROLE:
            return web.json_response({"user": SERVICE_ROLE}, status=200)
        return web.json_response(self.server.DB.getUserDetails(caller), status=200)

    def setUpRoutes(self, router):
        router.add_get("/Version", self.version)
        router.add_get("/info/server", self.get_server_info)
        router.add_post("/auth/signup", self.signup)
        router.add_post("/auth/login", self.login)
        router.add_delete("/auth/token", self.logout)
        router.add_get("/auth/user", self.whoami)
