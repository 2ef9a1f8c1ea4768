# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

import asyncio

from aiohttp import web

from .routeutils import bearer_token, log_request
from .routeutils import log


class EvaluateHandler:
    """The Evaluate Handler runs the evaluation of one response.

    The web client calls this straight after uploading a response.
    Apart from authentication, every failure is reported the same way:
    status 500 with a JSON body ``{"error": message}``.
    """

    def __init__(self, zenServer):
        self.server = zenServer

    def _evaluate(self, response_id, caller):
        # off the event loop, so this thread needs its own connection
        with self.server.DB.worker_connection():
            return self.server.evaluate_response(response_id, caller=caller)

    # @routes.options("/evaluate-response")
    async def preflight(self, request):
        """Cross-origin preflight: empty, the headers are added by middleware."""
        log_request("preflight", request)
        return web.Response(status=200)

    # @routes.post("/evaluate-response")
    async def evaluate_response(self, request):
        """Score each answer of a response and total them up.

        The JSON body is ``{"responseId": id}``; ``submissionId`` is
        accepted in place of ``responseId``.

        Returns:
            aiohttp.web.Response: 200 with JSON ``{"success": true,
            "totalMarks": N, "answersEvaluated": K}``; 401 if the bearer
            token is not valid; otherwise 500 with ``{"error": msg}``.
        """
        log_request("evaluate_response", request)
        caller = self.server.caller_from_token(bearer_token(request))
        if caller is None:
            log.warning("evaluate_response: bearer token could not be validated")
            return web.json_response(
                {"error": "bearer token could not be validated"}, status=401
            )
        try:
            data = await request.json()
            if not isinstance(data, dict):
                raise ValueError("body must be a JSON object")
            response_id = data.get("responseId", data.get("submissionId"))
            if not response_id:
                raise ValueError("responseId is required")
            result = await asyncio.get_running_loop().run_in_executor(
                None, self._evaluate, str(response_id), caller
            )
        except Exception as e:
            log.error("Evaluation of %s failed: %s", request.rel_url, e)
            return web.json_response({"error": str(e)}, status=500)
        return web.json_response(result, status=200)

    def setUpRoutes(self, router):
        router.add_route("OPTIONS", "/evaluate-response", self.preflight)
        router.add_post("/evaluate-response", self.evaluate_response)
