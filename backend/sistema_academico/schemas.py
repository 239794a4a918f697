"""Pydantic request schemas used by the API.

Schemas validate request bodies before they reach the services: names
are required, must not be blank and are limited to 80 characters.
Violations surface as FastAPI validation errors, which the API answers
with 400.
"""

from pydantic import BaseModel, Field, field_validator

from .models import NAME_MAX_LENGTH


class _NamedIn(BaseModel):
    name: str = Field(max_length=NAME_MAX_LENGTH)

    @field_validator("name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name is required")
        return value


class CourseIn(_NamedIn):
    """Payload for creating or renaming a course."""


class SubjectIn(_NamedIn):
    """Payload for creating or renaming a subject."""


class StudentIn(_NamedIn):
    """Payload for creating or renaming a student.

    The course is passed separately as the `idCurso` query parameter.
    """
