# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

import uuid

import peewee as pw


database_proxy = pw.Proxy()


class BaseModel(pw.Model):
    class Meta:
        database = database_proxy


class User(BaseModel):
    name = pw.CharField(unique=True, max_length=1000)
    full_name = pw.TextField(default="")  # can be long
    email = pw.CharField(default="")
    enabled = pw.BooleanField(default=True)
    password = pw.CharField(null=True)  # hash of password for comparison - fixed length
    token = pw.CharField(null=True, index=True)  # xor'd authentication token
    last_activity = pw.DateTimeField(null=False)
    last_action = pw.CharField(null=False)  # System generated string, not long


class Exam(BaseModel):
    id = pw.UUIDField(primary_key=True, default=uuid.uuid4)
    user = pw.ForeignKeyField(User, backref="exams", on_delete="CASCADE")
    title = pw.TextField(null=False)
    description = pw.TextField(null=True)
    created_at = pw.DateTimeField(null=False)
    updated_at = pw.DateTimeField(null=False)


class Question(BaseModel):
    id = pw.UUIDField(primary_key=True, default=uuid.uuid4)
    exam = pw.ForeignKeyField(Exam, backref="questions", on_delete="CASCADE")
    question_text = pw.TextField(null=False)
    answer_key = pw.TextField(null=False)
    # position within the exam, starting from 1
    question_number = pw.IntegerField(null=False)
    # the maximum marks for this question: null is treated as 1
    marks = pw.IntegerField(null=True, default=1)
    created_at = pw.DateTimeField(null=False)


class Response(BaseModel):
    """One student's submission for an exam."""

    id = pw.UUIDField(primary_key=True, default=uuid.uuid4)
    exam = pw.ForeignKeyField(Exam, backref="responses", on_delete="CASCADE")
    roll_number = pw.CharField(null=False)
    # legacy single-image submissions: answers now carry their own images
    image_url = pw.TextField(null=True)
    # all three stay null until evaluated
    marks = pw.IntegerField(null=True)
    remarks = pw.TextField(null=True)
    evaluated_at = pw.DateTimeField(null=True)
    created_at = pw.DateTimeField(null=False)

    class Meta:
        indexes = ((("exam", "roll_number"), True),)


class ResponseAnswer(BaseModel):
    """The answer within a response to one particular question."""

    id = pw.UUIDField(primary_key=True, default=uuid.uuid4)
    response = pw.ForeignKeyField(Response, backref="answers", on_delete="CASCADE")
    question = pw.ForeignKeyField(
        Question, backref="response_answers", on_delete="CASCADE"
    )
    image_url = pw.TextField(null=True)
    answer_text = pw.TextField(null=True)
    marks = pw.IntegerField(null=True)
    remarks = pw.TextField(null=True)
    evaluated_at = pw.DateTimeField(null=True)
    created_at = pw.DateTimeField(null=False)

    class Meta:
        indexes = ((("response", "question"), True),)
