"""Fixed demo data set for the academic records database.

`seed_database` loads five courses, fifteen subjects, their curriculum
links and twenty students with stable ids so API examples (e.g. course
1 is "Ciência da Computação") work on a fresh database. Loading is
skipped when any course already exists.
"""

from __future__ import annotations

import logging

from sqlmodel import Session, select

from .. import models

_LOGGER = logging.getLogger("sistema_academico.seed")

COURSES = {
    1: "Ciência da Computação",
    2: "Engenharia de Software",
    3: "Sistemas de Informação",
    4: "Análise e Desenvolvimento de Sistemas",
    5: "Engenharia da Computação",
}

SUBJECTS = {
    1: "Algoritmos e Estruturas de Dados",
    2: "Programação Orientada a Objetos",
    3: "Banco de Dados",
    4: "Engenharia de Software",
    5: "Redes de Computadores",
    6: "Inteligência Artificial",
    7: "Cálculo I",
    8: "Álgebra Linear",
    9: "Estatística",
    10: "Arquitetura de Computadores",
    11: "Sistemas Operacionais",
    12: "Compiladores",
    13: "Interface Homem-Máquina",
    14: "Gestão de Projetos",
    15: "Segurança da Informação",
}

# course id -> subject ids
CURRICULUM = {
    1: (1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12),
    2: (1, 2, 3, 4, 5, 13, 14, 15),
    3: (1, 2, 3, 4, 5, 9, 14, 15),
    4: (1, 2, 3, 4, 13, 14),
    5: (1, 2, 7, 8, 10, 11, 5),
}

# student id -> (name, course id)
STUDENTS = {
    1: ("Ana Silva Santos", 1),
    2: ("Bruno Costa Lima", 1),
    3: ("Carlos Eduardo Mendes", 1),
    4: ("Daniela Ferreira Rocha", 1),
    5: ("Eduardo Alves Pereira", 1),
    6: ("Fernanda Oliveira Cruz", 2),
    7: ("Gabriel Santos Martins", 2),
    8: ("Helena Rodrigues Silva", 2),
    9: ("Igor Nascimento Souza", 2),
    10: ("Julia Campos Barbosa", 3),
    11: ("Leonardo Dias Cardoso", 3),
    12: ("Marina Almeida Correia", 3),
    13: ("Nicolas Ferreira Gomes", 3),
    14: ("Patrícia Santos Ribeiro", 3),
    15: ("Ricardo Lima Moreira", 4),
    16: ("Sofia Cavalcanti Nunes", 4),
    17: ("Thiago Mendes Teixeira", 4),
    18: ("Vitória Araújo Fonseca", 5),
    19: ("Wesley Pinto Machado", 5),
    20: ("Yasmin Costa Borges", 5),
}


def seed_database(session: Session) -> dict:
    """Insert the demo data set if the database has no courses.

    Returns the number of rows created per table; all zeros when the
    data was already present.
    """
    created = {"courses": 0, "subjects": 0, "links": 0, "students": 0}
    if session.exec(select(models.Course.id)).first() is not None:
        _LOGGER.info("seed skipped: courses already present")
        return created
    for course_id, name in COURSES.items():
        session.add(models.Course(id=course_id, name=name))
    for subject_id, name in SUBJECTS.items():
        session.add(models.Subject(id=subject_id, name=name))
    session.flush()
    for course_id, subject_ids in CURRICULUM.items():
        for subject_id in subject_ids:
            session.add(models.CourseSubjectLink(course_id=course_id, subject_id=subject_id))
    for student_id, (name, course_id) in STUDENTS.items():
        session.add(models.Student(id=student_id, name=name, course_id=course_id))
    session.commit()
    created = {
        "courses": len(COURSES),
        "subjects": len(SUBJECTS),
        "links": sum(len(ids) for ids in CURRICULUM.values()),
        "students": len(STUDENTS),
    }
    _LOGGER.info("seed loaded %s", created)
    return created
