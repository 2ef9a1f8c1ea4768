# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

"""Evaluation of a response: score each answer, then total them up.

Each answer is scored by the server's scorer, bounded by the maximum
marks of its question.  The per-answer results are saved by a small
pool of worker threads: a failure to save one answer is logged and
evaluation carries on, with the computed marks still counting towards
the total of the response.  The total and a summary remark are then
saved on the response itself; a failure there is an error for the
caller.

Re-evaluating a response overwrites its previous marks with freshly
drawn ones.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
import logging

import peewee as pw

from zeneval.zeneval_exceptions import ZenEvalNoSuchObject
from zeneval.server.access import check_ownership

log = logging.getLogger("eval")


def summary_remark(total_marks, num_evaluated):
    return f"Total: {total_marks} marks. {num_evaluated} questions evaluated."


def _persist_answer(self, answer_id, marks, remark):
    # runs in a worker thread which needs its own connection
    with self.DB.worker_connection():
        self.DB.setAnswerEvaluation(answer_id, marks, remark)


def evaluate_answers(self, response_id):
    """Score and save each answer of a response.

    Args:
        response_id (str)

    Returns:
        list: of ``(answer_id, marks, remark)`` triples in question
        order, including those whose save failed.

    Raises:
        ZenEvalNoSuchObject: no such response.
    """
    answers = self.DB.getAnswersForEvaluation(response_id)
    results = []
    for a in answers:
        marks, remark = self.scorer.score(a["max_marks"])
        log.debug(
            "Response %s question %d: %d/%d",
            response_id,
            a["question_number"],
            marks,
            a["max_marks"],
        )
        results.append((a["id"], marks, remark))
    if not results:
        return results

    workers = min(self.config.max_workers, len(results))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="eval") as pool:
        futures = {pool.submit(self._persist_answer, *r): r[0] for r in results}
        for fut in as_completed(futures):
            try:
                fut.result()
            except (pw.PeeweeException, ZenEvalNoSuchObject) as e:
                log.error("Failed to save evaluation of answer %s: %s", futures[fut], e)
    return results


def aggregate_response(self, response_id, results):
    """Save the total of freshly computed results onto the response.

    The total is the sum of the marks in ``results``, not re-read from
    the database.

    Returns:
        int: the total marks.

    Raises:
        ZenEvalNoSuchObject: no such response.
        peewee.PeeweeException: the response could not be written.
    """
    total = sum(marks for _, marks, _ in results)
    self.DB.setResponseEvaluation(response_id, total, summary_remark(total, len(results)))
    return total


def evaluate_response(self, response_id, *, caller=None):
    """Evaluate all answers of a response and record the total.

    Args:
        response_id (str)

    Keyword Args:
        caller (str/None): if given, the caller must own the response.

    Returns:
        dict: with keys ``success``, ``totalMarks`` and
        ``answersEvaluated``.
    """
    if caller is not None:
        check_ownership(self.DB, "response", response_id, caller)
    log.info("Evaluating response %s", response_id)
    results = self.evaluate_answers(response_id)
    total = self.aggregate_response(response_id, results)
    return {"success": True, "totalMarks": total, "answersEvaluated": len(results)}
