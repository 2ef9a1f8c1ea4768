# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

from aiohttp import web

from .routeutils import authenticate_by_bearer, authenticate_by_bearer_required_fields
from .routeutils import owner_required, json_error
from .routeutils import log

from zeneval.zeneval_exceptions import ZenEvalInvalidRequest
from zeneval.server.authenticate import SERVICE_ROLE


class ExamHandler:
    """The Exam Handler interfaces between the HTTP API and the server itself.

    These routes handle creating, reading, changing and deleting exams
    along with their questions.  Every route needs a bearer token and
    only the owner of an exam may see or touch it.
    """

    def __init__(self, zenServer):
        self.server = zenServer

    def _not_for_service(self, caller):
        if caller == SERVICE_ROLE:
            raise web.HTTPBadRequest(reason="The service credential owns no exams")

    # @routes.get("/stats")
    @authenticate_by_bearer
    def get_stats(self, caller, request):
        """Counts of exams, responses and evaluated responses of the caller."""
        self._not_for_service(caller)
        return web.json_response(self.server.getStats(caller), status=200)

    # @routes.get("/exams")
    @authenticate_by_bearer
    def list_exams(self, caller, request):
        self._not_for_service(caller)
        return web.json_response(self.server.listExams(caller), status=200)

    # @routes.post("/exams")
    @authenticate_by_bearer_required_fields(
        ["title", "questions"], optional=["description"]
    )
    def create_exam(self, caller, data, request):
        """Create an exam and its questions.

        Returns:
            aiohttp.web.Response: 201 with the id of the new exam, or
            BadRequest (400) if the title or some question is invalid.
        """
        self._not_for_service(caller)
        try:
            exam_id = self.server.createExam(
                caller, data["title"], data.get("description"), data["questions"]
            )
        except ZenEvalInvalidRequest as e:
            raise json_error(web.HTTPBadRequest, str(e))
        return web.json_response({"id": exam_id}, status=201)

    # @routes.get("/exams/{exam}")
    @authenticate_by_bearer
    @owner_required("exam", "exam")
    def get_exam(self, caller, request):
        """An exam, its questions in order and its responses newest first."""
        exam_id = request.match_info["exam"]
        return web.json_response(self.server.getExamDetails(exam_id), status=200)

    # @routes.patch("/exams/{exam}")
    @authenticate_by_bearer_required_fields([], optional=["title", "description"])
    @owner_required("exam", "exam")
    def update_exam(self, caller, data, request):
        exam_id = request.match_info["exam"]
        try:
            self.server.updateExam(
                exam_id, title=data.get("title"), description=data.get("description")
            )
        except ZenEvalInvalidRequest as e:
            raise json_error(web.HTTPBadRequest, str(e))
        return web.Response(status=200)

    # @routes.delete("/exams/{exam}")
    @authenticate_by_bearer
    @owner_required("exam", "exam")
    def delete_exam(self, caller, request):
        """Delete the exam, its questions, and all responses to it."""
        exam_id = request.match_info["exam"]
        self.server.deleteExam(exam_id)
        log.info('"%s" deleted exam %s', caller, exam_id)
        return web.Response(status=200)

    def setUpRoutes(self, router):
        router.add_get("/stats", self.get_stats)
        router.add_get("/exams", self.list_exams)
        router.add_post("/exams", self.create_exam)
        router.add_get("/exams/{exam}", self.get_exam)
        router.add_patch("/exams/{exam}", self.update_exam)
        router.add_delete("/exams/{exam}", self.delete_exam)
