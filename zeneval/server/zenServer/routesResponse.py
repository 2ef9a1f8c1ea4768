# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

from aiohttp import web

from .routeutils import authenticate_by_bearer, authenticate_by_bearer_required_fields
from .routeutils import owner_required, json_error

from zeneval.zeneval_exceptions import (
    ZenEvalConflict,
    ZenEvalInvalidRequest,
    ZenEvalNoSuchObject,
)


class ResponseHandler:
    """The Response Handler interfaces between the HTTP API and the server itself.

    These routes handle uploading students' responses to an exam, and
    looking at or deleting them afterwards.
    """

    def __init__(self, zenServer):
        self.server = zenServer

    # @routes.post("/exams/{exam}/responses")
    @authenticate_by_bearer_required_fields(
        ["rollNumber", "answers"], optional=["imageUrl"]
    )
    @owner_required("exam", "exam")
    def create_response(self, caller, data, request):
        """Record one student's answers to the questions of an exam.

        Returns:
            aiohttp.web.Response: 201 with the id of the new response.
            BadRequest (400) if there is no roll number, no answer with
            text or an image, or an answer to a question of another
            exam.  Conflict (409) if the roll number was already used
            for this exam, in which case nothing is stored.
        """
        exam_id = request.match_info["exam"]
        try:
            response_id = self.server.createResponse(
                exam_id,
                data["rollNumber"],
                data["answers"],
                image_url=data.get("imageUrl"),
            )
        except ZenEvalInvalidRequest as e:
            raise json_error(web.HTTPBadRequest, str(e))
        except ZenEvalConflict as e:
            raise json_error(web.HTTPConflict, str(e))
        except ZenEvalNoSuchObject as e:
            # exam deleted since the ownership check
            raise json_error(web.HTTPNotFound, str(e))
        return web.json_response({"id": response_id}, status=201)

    # @routes.get("/responses/{response}")
    @authenticate_by_bearer
    @owner_required("response", "response")
    def get_response(self, caller, request):
        response_id = request.match_info["response"]
        return web.json_response(self.server.getResponse(response_id), status=200)

    # @routes.delete("/responses/{response}")
    @authenticate_by_bearer
    @owner_required("response", "response")
    def delete_response(self, caller, request):
        response_id = request.match_info["response"]
        self.server.deleteResponse(response_id)
        return web.Response(status=200)

    def setUpRoutes(self, router):
        router.add_post("/exams/{exam}/responses", self.create_response)
        router.add_get("/responses/{response}", self.get_response)
        router.add_delete("/responses/{response}", self.delete_response)
