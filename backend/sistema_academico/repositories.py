"""Repository classes encapsulating database operations.

Each repository is small and focused on a single table (courses,
subjects, students and the course/subject links). Reads never modify
state and return SQLModel objects, `None` or plain counts. Writes are
committed immediately; a failed commit is rolled back before the error
propagates so the session stays usable.
"""

from typing import List, Optional
from sqlmodel import Session, select, col
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from . import models


def _commit(session: Session) -> None:
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise


class CourseRepository:
    """CRUD and relationship queries for `Course` rows."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.Course]:
        """Return every course ordered by name."""
        stmt = select(models.Course).order_by(models.Course.name)
        return self.session.exec(stmt).all()

    def get(self, course_id: int) -> Optional[models.Course]:
        """Get a `Course` by primary key."""
        return self.session.get(models.Course, course_id)

    def get_by_name(self, name: str) -> Optional[models.Course]:
        """Return the course with exactly this name or `None`."""
        stmt = select(models.Course).where(models.Course.name == name)
        return self.session.exec(stmt).first()

    def search_by_name(self, term: str) -> List[models.Course]:
        """Case-insensitive substring search on the course name."""
        stmt = (
            select(models.Course)
            .where(col(models.Course.name).icontains(term, autoescape=True))
            .order_by(models.Course.name)
        )
        return self.session.exec(stmt).all()

    def list_with_subject(self, subject_id: int) -> List[models.Course]:
        """Return the courses offering `subject_id`."""
        stmt = (
            select(models.Course)
            .join(models.CourseSubjectLink, models.CourseSubjectLink.course_id == models.Course.id)
            .where(models.CourseSubjectLink.subject_id == subject_id)
            .order_by(models.Course.name)
        )
        return self.session.exec(stmt).all()

    def count_students(self, course_id: int) -> int:
        stmt = select(func.count()).select_from(models.Student).where(models.Student.course_id == course_id)
        return self.session.exec(stmt).one()

    def list_without_students(self) -> List[models.Course]:
        """Return courses nobody is enrolled in."""
        enrolled = select(models.Student.course_id)
        stmt = select(models.Course).where(col(models.Course.id).not_in(enrolled)).order_by(models.Course.name)
        return self.session.exec(stmt).all()

    def save(self, course: models.Course) -> models.Course:
        """Insert or update a course and return the refreshed instance."""
        self.session.add(course)
        _commit(self.session)
        self.session.refresh(course)
        return course

    def delete(self, course: models.Course) -> None:
        """Delete a course together with its subject links.

        Students are never touched here; callers must make sure the
        course has none.
        """
        links = self.session.exec(
            select(models.CourseSubjectLink).where(models.CourseSubjectLink.course_id == course.id)
        ).all()
        for link in links:
            self.session.delete(link)
        self.session.flush()
        self.session.delete(course)
        _commit(self.session)


class SubjectRepository:
    """CRUD and relationship queries for `Subject` rows."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.Subject]:
        stmt = select(models.Subject).order_by(models.Subject.name)
        return self.session.exec(stmt).all()

    def get(self, subject_id: int) -> Optional[models.Subject]:
        return self.session.get(models.Subject, subject_id)

    def get_by_name(self, name: str) -> Optional[models.Subject]:
        stmt = select(models.Subject).where(models.Subject.name == name)
        return self.session.exec(stmt).first()

    def search_by_name(self, term: str) -> List[models.Subject]:
        stmt = (
            select(models.Subject)
            .where(col(models.Subject.name).icontains(term, autoescape=True))
            .order_by(models.Subject.name)
        )
        return self.session.exec(stmt).all()

    def list_by_course(self, course_id: int) -> List[models.Subject]:
        """Return the subjects offered by `course_id`, ordered by name."""
        stmt = (
            select(models.Subject)
            .join(models.CourseSubjectLink, models.CourseSubjectLink.subject_id == models.Subject.id)
            .where(models.CourseSubjectLink.course_id == course_id)
            .order_by(models.Subject.name)
        )
        return self.session.exec(stmt).all()

    def count_courses(self, subject_id: int) -> int:
        stmt = (
            select(func.count())
            .select_from(models.CourseSubjectLink)
            .where(models.CourseSubjectLink.subject_id == subject_id)
        )
        return self.session.exec(stmt).one()

    def list_without_courses(self) -> List[models.Subject]:
        """Return subjects that no course offers."""
        offered = select(models.CourseSubjectLink.subject_id)
        stmt = select(models.Subject).where(col(models.Subject.id).not_in(offered)).order_by(models.Subject.name)
        return self.session.exec(stmt).all()

    def list_offered_by_many(self) -> List[models.Subject]:
        """Return subjects offered by more than one course."""
        shared = (
            select(models.CourseSubjectLink.subject_id)
            .group_by(models.CourseSubjectLink.subject_id)
            .having(func.count(models.CourseSubjectLink.course_id) > 1)
        )
        stmt = select(models.Subject).where(col(models.Subject.id).in_(shared)).order_by(models.Subject.name)
        return self.session.exec(stmt).all()

    def save(self, subject: models.Subject) -> models.Subject:
        self.session.add(subject)
        _commit(self.session)
        self.session.refresh(subject)
        return subject

    def delete(self, subject: models.Subject) -> None:
        """Delete a subject together with any remaining course links."""
        links = self.session.exec(
            select(models.CourseSubjectLink).where(models.CourseSubjectLink.subject_id == subject.id)
        ).all()
        for link in links:
            self.session.delete(link)
        self.session.flush()
        self.session.delete(subject)
        _commit(self.session)


class CourseSubjectLinkRepository:
    """Single-row operations on the course/subject join table."""
    def __init__(self, session: Session):
        self.session = session

    def get(self, course_id: int, subject_id: int) -> Optional[models.CourseSubjectLink]:
        return self.session.get(models.CourseSubjectLink, (course_id, subject_id))

    def add(self, course_id: int, subject_id: int) -> models.CourseSubjectLink:
        link = models.CourseSubjectLink(course_id=course_id, subject_id=subject_id)
        self.session.add(link)
        _commit(self.session)
        return link

    def remove(self, course_id: int, subject_id: int) -> bool:
        """Delete the link if present. Returns whether a row was removed."""
        link = self.get(course_id, subject_id)
        if link is None:
            return False
        self.session.delete(link)
        _commit(self.session)
        return True


class StudentRepository:
    """CRUD and filtered queries for `Student` rows."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.Student]:
        stmt = select(models.Student).order_by(models.Student.name)
        return self.session.exec(stmt).all()

    def get(self, student_id: int) -> Optional[models.Student]:
        return self.session.get(models.Student, student_id)

    def get_by_name(self, name: str) -> Optional[models.Student]:
        stmt = select(models.Student).where(models.Student.name == name)
        return self.session.exec(stmt).first()

    def search_by_name(self, term: str) -> List[models.Student]:
        stmt = (
            select(models.Student)
            .where(col(models.Student.name).icontains(term, autoescape=True))
            .order_by(models.Student.name)
        )
        return self.session.exec(stmt).all()

    def list_by_course(self, course_id: int) -> List[models.Student]:
        """Return the students enrolled in `course_id`, ordered by name."""
        stmt = select(models.Student).where(models.Student.course_id == course_id).order_by(models.Student.name)
        return self.session.exec(stmt).all()

    def list_by_course_name(self, course_name: str) -> List[models.Student]:
        """Return students of the course whose name matches exactly."""
        stmt = (
            select(models.Student)
            .join(models.Course, models.Course.id == models.Student.course_id)
            .where(models.Course.name == course_name)
            .order_by(models.Student.name)
        )
        return self.session.exec(stmt).all()

    def search(self, student_term: str, course_term: str) -> List[models.Student]:
        """Substring search on student name AND course name.

        Both terms match case-sensitively; an empty term matches every row
        because `LIKE '%%'` matches any non-null string.
        """
        stmt = (
            select(models.Student)
            .join(models.Course, models.Course.id == models.Student.course_id)
            .where(
                col(models.Student.name).contains(student_term, autoescape=True),
                col(models.Course.name).contains(course_term, autoescape=True),
            )
            .order_by(models.Student.name)
        )
        return self.session.exec(stmt).all()

    def count_by_course(self, course_id: int) -> int:
        stmt = select(func.count()).select_from(models.Student).where(models.Student.course_id == course_id)
        return self.session.exec(stmt).one()

    def save(self, student: models.Student) -> models.Student:
        self.session.add(student)
        _commit(self.session)
        self.session.refresh(student)
        return student

    def delete(self, student: models.Student) -> None:
        self.session.delete(student)
        _commit(self.session)
