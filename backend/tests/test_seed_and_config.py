import pytest
from sqlalchemy import func
from sqlmodel import select

from sistema_academico import models
from sistema_academico.config import Settings
from sistema_academico.utils.seed_data import seed_database, CURRICULUM


def _count(session, model):
    return session.exec(select(func.count()).select_from(model)).one()


def test_seed_loads_fixed_dataset(session):
    assert _count(session, models.Course) == 5
    assert _count(session, models.Subject) == 15
    assert _count(session, models.Student) == 20
    assert _count(session, models.CourseSubjectLink) == sum(len(v) for v in CURRICULUM.values())


def test_seed_is_skipped_when_data_exists(session):
    created = seed_database(session)
    assert created == {'courses': 0, 'subjects': 0, 'links': 0, 'students': 0}
    assert _count(session, models.Course) == 5


def test_settings_defaults(monkeypatch):
    for name in ('ENV', 'BASE_PATH', 'SEED_DATA', 'DATABASE_URL'):
        monkeypatch.delenv(name, raising=False)
    s = Settings()
    assert s.ENV == 'dev'
    assert s.BASE_PATH == ''
    assert s.SEED_DATA is True
    assert s.DATABASE_URL.startswith('sqlite:///')


@pytest.mark.parametrize('base_path', ['api', '/academico/'])
def test_settings_reject_bad_base_path(monkeypatch, base_path):
    monkeypatch.setenv('BASE_PATH', base_path)
    with pytest.raises(RuntimeError):
        Settings()


def test_settings_reject_memory_db_outside_dev(monkeypatch):
    monkeypatch.setenv('ENV', 'prod')
    monkeypatch.setenv('DATABASE_URL', 'sqlite://')
    with pytest.raises(RuntimeError):
        Settings()
    monkeypatch.setenv('BASE_PATH', '/academico')
    monkeypatch.setenv('DATABASE_URL', 'postgresql://db/academico')
    assert Settings().BASE_PATH == '/academico'
