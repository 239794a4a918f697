"""SQLModel data models.

This module defines the application's database tables using SQLModel.
Table names follow the institution's schema (CURSO, DISCIPLINA, ALUNO
and the CURSO_DISCIPLINA join table).

The Course/Subject association is stored only as `CourseSubjectLink`
rows; neither side keeps an in-memory collection of the other. Both
directions are read back through repository queries, so adding or
removing a link is a single row operation.
"""

from typing import Optional
from sqlmodel import SQLModel, Field, Relationship

NAME_MAX_LENGTH = 80


class Course(SQLModel, table=True):
    """A program of study.

    Fields:
    - `name`: unique display name (max 80 chars)
    """
    __tablename__ = "CURSO"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=NAME_MAX_LENGTH, index=True, nullable=False, unique=True)


class Subject(SQLModel, table=True):
    """A teachable unit that may be offered by several courses."""
    __tablename__ = "DISCIPLINA"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=NAME_MAX_LENGTH, index=True, nullable=False, unique=True)


class CourseSubjectLink(SQLModel, table=True):
    """Association row: `course_id` offers `subject_id`."""
    __tablename__ = "CURSO_DISCIPLINA"

    course_id: int = Field(foreign_key="CURSO.id", primary_key=True)
    subject_id: int = Field(foreign_key="DISCIPLINA.id", primary_key=True)


class Student(SQLModel, table=True):
    """A student enrolled in exactly one course.

    Names are not unique; `course_id` is mandatory.
    """
    __tablename__ = "ALUNO"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=NAME_MAX_LENGTH, index=True, nullable=False)
    course_id: int = Field(foreign_key="CURSO.id", index=True, nullable=False)
    course: Optional[Course] = Relationship()
