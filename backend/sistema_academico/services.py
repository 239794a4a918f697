"""Business logic services used by HTTP controllers.

This module holds the service classes that coordinate repositories and
enforce the academic rules:

- course and subject names are unique (exact, case-sensitive match);
- a course with enrolled students and a subject offered by any course
  cannot be deleted;
- course/subject links are idempotent single-row operations;
- every student belongs to exactly one existing course, and a transfer
  moves it with a single committed update.

Services raise the `DomainError` subclasses below; controllers map them
to HTTP status codes. Every check runs before the first write, so a
failed call leaves the database untouched.
"""

import logging
from typing import List, Optional
from sqlmodel import Session
from sqlalchemy.exc import IntegrityError
from . import models, repositories

logger = logging.getLogger("sistema_academico.services")

REPORT_TITLE = "=== RELATÓRIO DE ALUNOS POR CURSO ==="


class DomainError(Exception):
    """Base class for rule violations raised by the services."""


class NotFound(DomainError):
    """A referenced id does not exist."""


class DuplicateName(DomainError):
    """A course or subject name is already taken."""


class HasDependents(DomainError):
    """Deletion blocked because dependent rows exist."""


class CourseService:
    """Course lifecycle and course/subject association."""
    def __init__(self, session: Session):
        self.session = session
        self.course_repo = repositories.CourseRepository(session)
        self.subject_repo = repositories.SubjectRepository(session)
        self.link_repo = repositories.CourseSubjectLinkRepository(session)
        self.student_repo = repositories.StudentRepository(session)

    def list_all(self) -> List[models.Course]:
        return self.course_repo.list_all()

    def get(self, course_id: int) -> Optional[models.Course]:
        return self.course_repo.get(course_id)

    def search_by_name(self, term: str) -> List[models.Course]:
        return self.course_repo.search_by_name(term)

    def require(self, course_id: int) -> models.Course:
        """Return the course or raise `NotFound`."""
        course = self.course_repo.get(course_id)
        if course is None:
            raise NotFound(f"course not found: {course_id}")
        return course

    def create(self, name: str) -> models.Course:
        """Persist a new course.

        Raises `DuplicateName` if the exact name is already used. The
        pre-check is not race free; a concurrent insert with the same
        name is rejected by the unique constraint and reported the same
        way.
        """
        if self.course_repo.get_by_name(name) is not None:
            raise DuplicateName(f"a course named '{name}' already exists")
        try:
            course = self.course_repo.save(models.Course(name=name))
        except IntegrityError as exc:
            raise DuplicateName(f"a course named '{name}' already exists") from exc
        logger.info("course created id=%s name=%r", course.id, course.name)
        return course

    def update(self, course_id: int, new_name: str) -> models.Course:
        """Rename a course, keeping names unique."""
        course = self.require(course_id)
        if course.name != new_name:
            other = self.course_repo.get_by_name(new_name)
            if other is not None and other.id != course_id:
                raise DuplicateName(f"another course named '{new_name}' already exists")
            course.name = new_name
            try:
                course = self.course_repo.save(course)
            except IntegrityError as exc:
                raise DuplicateName(f"another course named '{new_name}' already exists") from exc
        return course

    def delete(self, course_id: int) -> None:
        """Delete a course that has no enrolled students.

        Its subject links are removed in the same transaction; students
        are never cascaded.
        """
        course = self.require(course_id)
        enrolled = self.course_repo.count_students(course_id)
        if enrolled > 0:
            raise HasDependents(f"cannot delete course '{course.name}': {enrolled} student(s) enrolled")
        self.course_repo.delete(course)
        logger.info("course deleted id=%s", course_id)

    def add_subject(self, course_id: int, subject_id: int) -> models.Course:
        """Associate a subject with a course. Idempotent."""
        course = self.require(course_id)
        if self.subject_repo.get(subject_id) is None:
            raise NotFound(f"subject not found: {subject_id}")
        if self.link_repo.get(course_id, subject_id) is None:
            self.link_repo.add(course_id, subject_id)
            logger.info("subject %s added to course %s", subject_id, course_id)
        return course

    def remove_subject(self, course_id: int, subject_id: int) -> models.Course:
        """Dissociate a subject from a course; a missing link is a no-op."""
        course = self.require(course_id)
        if self.subject_repo.get(subject_id) is None:
            raise NotFound(f"subject not found: {subject_id}")
        if self.link_repo.remove(course_id, subject_id):
            logger.info("subject %s removed from course %s", subject_id, course_id)
        return course

    def subjects_of(self, course_id: int) -> List[models.Subject]:
        return self.subject_repo.list_by_course(course_id)

    def students_of(self, course_id: int) -> List[models.Student]:
        return self.student_repo.list_by_course(course_id)

    def list_with_subject(self, subject_id: int) -> List[models.Course]:
        return self.course_repo.list_with_subject(subject_id)

    def list_without_students(self) -> List[models.Course]:
        return self.course_repo.list_without_students()

    def count_students(self, course_id: int) -> int:
        return self.course_repo.count_students(course_id)


class SubjectService:
    """Subject lifecycle and offering queries."""
    def __init__(self, session: Session):
        self.session = session
        self.subject_repo = repositories.SubjectRepository(session)

    def list_all(self) -> List[models.Subject]:
        return self.subject_repo.list_all()

    def get(self, subject_id: int) -> Optional[models.Subject]:
        return self.subject_repo.get(subject_id)

    def search_by_name(self, term: str) -> List[models.Subject]:
        return self.subject_repo.search_by_name(term)

    def require(self, subject_id: int) -> models.Subject:
        subject = self.subject_repo.get(subject_id)
        if subject is None:
            raise NotFound(f"subject not found: {subject_id}")
        return subject

    def create(self, name: str) -> models.Subject:
        """Persist a new subject; raises `DuplicateName` on a taken name."""
        if self.subject_repo.get_by_name(name) is not None:
            raise DuplicateName(f"a subject named '{name}' already exists")
        try:
            subject = self.subject_repo.save(models.Subject(name=name))
        except IntegrityError as exc:
            raise DuplicateName(f"a subject named '{name}' already exists") from exc
        logger.info("subject created id=%s name=%r", subject.id, subject.name)
        return subject

    def update(self, subject_id: int, new_name: str) -> models.Subject:
        subject = self.require(subject_id)
        if subject.name != new_name:
            other = self.subject_repo.get_by_name(new_name)
            if other is not None and other.id != subject_id:
                raise DuplicateName(f"another subject named '{new_name}' already exists")
            subject.name = new_name
            try:
                subject = self.subject_repo.save(subject)
            except IntegrityError as exc:
                raise DuplicateName(f"another subject named '{new_name}' already exists") from exc
        return subject

    def delete(self, subject_id: int) -> None:
        """Delete a subject that no course offers."""
        subject = self.require(subject_id)
        offered_by = self.subject_repo.count_courses(subject_id)
        if offered_by > 0:
            raise HasDependents(f"cannot delete subject '{subject.name}': offered by {offered_by} course(s)")
        self.subject_repo.delete(subject)
        logger.info("subject deleted id=%s", subject_id)

    def list_by_course(self, course_id: int) -> List[models.Subject]:
        return self.subject_repo.list_by_course(course_id)

    def list_offered_by_many(self) -> List[models.Subject]:
        return self.subject_repo.list_offered_by_many()

    def list_without_courses(self) -> List[models.Subject]:
        return self.subject_repo.list_without_courses()

    def count_courses(self, subject_id: int) -> int:
        return self.subject_repo.count_courses(subject_id)


class StudentService:
    """Enrollment, transfer and reporting for students."""
    def __init__(self, session: Session):
        self.session = session
        self.student_repo = repositories.StudentRepository(session)
        self.course_repo = repositories.CourseRepository(session)

    def list_all(self) -> List[models.Student]:
        return self.student_repo.list_all()

    def get(self, student_id: int) -> Optional[models.Student]:
        return self.student_repo.get(student_id)

    def search_by_name(self, term: str) -> List[models.Student]:
        return self.student_repo.search_by_name(term)

    def require(self, student_id: int) -> models.Student:
        student = self.student_repo.get(student_id)
        if student is None:
            raise NotFound(f"student not found: {student_id}")
        return student

    def validate_enrollment(self, course_id: int) -> bool:
        """Return True if a student may be enrolled in `course_id`.

        Only course existence is checked for now.
        """
        return self.course_repo.get(course_id) is not None

    def create(self, name: str, course_id: int) -> models.Student:
        """Create a student enrolled in `course_id`.

        Duplicate student names are allowed; they only produce a warning
        in the log. A course removed between the check and the insert is
        rejected by the foreign key and reported as `NotFound`.
        """
        if not self.validate_enrollment(course_id):
            raise NotFound(f"course not found: {course_id}")
        if self.student_repo.get_by_name(name) is not None:
            logger.warning("a student named %r already exists; check this is not a duplicate", name)
        try:
            student = self.student_repo.save(models.Student(name=name, course_id=course_id))
        except IntegrityError as exc:
            raise NotFound(f"course not found: {course_id}") from exc
        logger.info("student created id=%s course=%s", student.id, course_id)
        return student

    def update(self, student_id: int, new_name: str) -> models.Student:
        """Rename a student; enrollment is left unchanged."""
        student = self.require(student_id)
        student.name = new_name
        return self.student_repo.save(student)

    def transfer(self, student_id: int, new_course_id: int) -> models.Student:
        """Move a student to another course.

        The foreign key is the only place enrollment is stored, so one
        committed update removes the student from the old course and adds
        it to the new one.
        """
        student = self.require(student_id)
        if self.course_repo.get(new_course_id) is None:
            raise NotFound(f"course not found: {new_course_id}")
        old_course_id = student.course_id
        student.course_id = new_course_id
        student = self.student_repo.save(student)
        logger.info("student %s transferred from course %s to %s", student_id, old_course_id, new_course_id)
        return student

    def delete(self, student_id: int) -> None:
        student = self.require(student_id)
        self.student_repo.delete(student)
        logger.info("student deleted id=%s", student_id)

    def list_by_course(self, course_id: int) -> List[models.Student]:
        return self.student_repo.list_by_course(course_id)

    def list_by_course_name(self, course_name: str) -> List[models.Student]:
        return self.student_repo.list_by_course_name(course_name)

    def search(self, student_name: Optional[str], course_name: Optional[str]) -> List[models.Student]:
        """Combined search; a missing or blank filter matches everything."""
        return self.student_repo.search((student_name or "").strip(), (course_name or "").strip())

    def count_by_course(self, course_id: int) -> int:
        return self.student_repo.count_by_course(course_id)

    def report(self) -> str:
        """Plain-text enrollment count per course, in course name order."""
        lines = [REPORT_TITLE, ""]
        for course in self.course_repo.list_all():
            count = self.student_repo.count_by_course(course.id)
            lines.append(f"Curso: {course.name} - {count} aluno(s)")
        return "\n".join(lines) + "\n"
