import pytest
from sqlalchemy.exc import IntegrityError

from sistema_academico import models
from sistema_academico.repositories import (
    CourseRepository,
    CourseSubjectLinkRepository,
    StudentRepository,
    SubjectRepository,
)


def test_get_missing_returns_none(session):
    assert CourseRepository(session).get(999) is None
    assert SubjectRepository(session).get(999) is None
    assert StudentRepository(session).get(999) is None
    assert CourseSubjectLinkRepository(session).get(1, 13) is None


def test_exact_name_lookup_is_case_sensitive(session):
    repo = CourseRepository(session)
    assert repo.get_by_name('Engenharia de Software').id == 2
    assert repo.get_by_name('engenharia de software') is None
    assert repo.get_by_name('Engenharia') is None


def test_link_add_and_remove(session):
    links = CourseSubjectLinkRepository(session)
    links.add(1, 13)
    assert links.get(1, 13) is not None
    assert links.remove(1, 13) is True
    assert links.remove(1, 13) is False


def test_duplicate_link_rejected_by_store(session):
    with pytest.raises(IntegrityError):
        CourseSubjectLinkRepository(session).add(1, 1)
    # session is usable again after the rollback
    assert CourseRepository(session).get(1).name == 'Ciência da Computação'


def test_student_requires_existing_course(session):
    with pytest.raises(IntegrityError):
        StudentRepository(session).save(models.Student(name='Sem Curso', course_id=999))


def test_course_delete_removes_links(session):
    courses = CourseRepository(session)
    course = courses.save(models.Course(name='Robótica'))
    course_id = course.id
    CourseSubjectLinkRepository(session).add(course_id, 6)
    courses.delete(course)
    assert CourseSubjectLinkRepository(session).get(course_id, 6) is None
    assert SubjectRepository(session).count_courses(6) == 1


def test_counts(session):
    assert CourseRepository(session).count_students(3) == 5
    assert StudentRepository(session).count_by_course(5) == 3
    assert SubjectRepository(session).count_courses(2) == 5
