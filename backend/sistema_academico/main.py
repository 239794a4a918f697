"""FastAPI application entrypoint and HTTP controllers.

This module defines the REST endpoints of the academic records backend.
Controllers are intentionally thin: they accept requests, delegate to
services, and shape the JSON responses. Domain errors raised by the
services are translated by the exception handlers below:

- NotFound -> 404 (empty body)
- DuplicateName / request validation failure -> 400 (message as text)
- HasDependents -> 409 (message as text)

Route groups (all below `settings.BASE_PATH`):
- /api/cursos       courses, their subjects and enrollment counts
- /api/disciplinas  subjects and the courses offering them
- /api/alunos       students, search, transfer and the enrollment report
"""

from fastapi import FastAPI, APIRouter, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse, RedirectResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session
from typing import List, Optional
import json
import logging
import time
import uuid
from .database import engine, create_db_and_tables, get_session
from . import services, models
from .schemas import CourseIn, SubjectIn, StudentIn
from .utils.seed_data import seed_database
from .config import settings

app = FastAPI(title="Sistema Acadêmico API")
logger = logging.getLogger("sistema_academico.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()
if settings.SEED_DATA:
    with Session(engine) as _session:
        seed_database(_session)

API_ROOT = f"{settings.BASE_PATH}/api"


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    if request.url.path.startswith(API_ROOT):
        logger.info(
            "request_done %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": response.status_code,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
    return response


@app.exception_handler(services.DomainError)
async def domain_error_handler(request: Request, exc: services.DomainError):
    if isinstance(exc, services.NotFound):
        logger.info("not found on %s: %s", request.url.path, exc)
        return Response(status_code=404)
    status_code = 409 if isinstance(exc, services.HasDependents) else 400
    logger.info("rejected %s %s: %s", request.method, request.url.path, exc)
    return PlainTextResponse(str(exc), status_code=status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        # drop the "body"/"query"/"path" prefix of the location
        loc = ".".join(str(part) for part in err.get("loc", ())[1:])
        messages.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    logger.info("validation failed on %s: %s", request.url.path, messages)
    return PlainTextResponse("; ".join(messages), status_code=400)


def _subject_out(subject: models.Subject) -> dict:
    return {"id": subject.id, "name": subject.name}


def _course_out(course: models.Course, svc: services.CourseService) -> dict:
    return {
        "id": course.id,
        "name": course.name,
        "subjects": [_subject_out(s) for s in svc.subjects_of(course.id)],
        "students": [{"id": s.id, "name": s.name} for s in svc.students_of(course.id)],
    }


def _courses_out(courses: List[models.Course], svc: services.CourseService) -> list:
    return [_course_out(c, svc) for c in courses]


def _student_out(student: models.Student) -> dict:
    course = student.course
    return {
        "id": student.id,
        "name": student.name,
        "course": {"id": course.id, "name": course.name} if course else None,
    }


courses = APIRouter(prefix="/api/cursos", tags=["cursos"])
subjects = APIRouter(prefix="/api/disciplinas", tags=["disciplinas"])
students = APIRouter(prefix="/api/alunos", tags=["alunos"])


@courses.get("")
def list_courses(db: Session = Depends(get_session)):
    """List every course in name order, with its subjects."""
    svc = services.CourseService(db)
    return _courses_out(svc.list_all(), svc)


@courses.get("/buscar")
def search_courses(nome: str, db: Session = Depends(get_session)):
    """Case-insensitive partial match on the course name."""
    svc = services.CourseService(db)
    return _courses_out(svc.search_by_name(nome), svc)


@courses.get("/sem-alunos")
def courses_without_students(db: Session = Depends(get_session)):
    svc = services.CourseService(db)
    return _courses_out(svc.list_without_students(), svc)


@courses.get("/com-disciplina/{subject_id}")
def courses_with_subject(subject_id: int, db: Session = Depends(get_session)):
    """Courses offering the given subject."""
    svc = services.CourseService(db)
    return _courses_out(svc.list_with_subject(subject_id), svc)


@courses.get("/{course_id}")
def get_course(course_id: int, db: Session = Depends(get_session)):
    svc = services.CourseService(db)
    return _course_out(svc.require(course_id), svc)


@courses.get("/{course_id}/alunos/count")
def count_course_students(course_id: int, db: Session = Depends(get_session)) -> int:
    return services.CourseService(db).count_students(course_id)


@courses.post("", status_code=201)
def create_course(payload: CourseIn, db: Session = Depends(get_session)):
    """Create a course. A name already in use yields 400."""
    svc = services.CourseService(db)
    return _course_out(svc.create(payload.name), svc)


@courses.put("/{course_id}")
def update_course(course_id: int, payload: CourseIn, db: Session = Depends(get_session)):
    svc = services.CourseService(db)
    return _course_out(svc.update(course_id, payload.name), svc)


@courses.delete("/{course_id}", status_code=204)
def delete_course(course_id: int, db: Session = Depends(get_session)):
    """Delete a course; 409 while any student is enrolled in it."""
    services.CourseService(db).delete(course_id)
    return Response(status_code=204)


@courses.post("/{course_id}/disciplinas/{subject_id}")
def add_course_subject(course_id: int, subject_id: int, db: Session = Depends(get_session)):
    """Offer a subject in a course. Repeating the call changes nothing."""
    svc = services.CourseService(db)
    return _course_out(svc.add_subject(course_id, subject_id), svc)


@courses.delete("/{course_id}/disciplinas/{subject_id}")
def remove_course_subject(course_id: int, subject_id: int, db: Session = Depends(get_session)):
    svc = services.CourseService(db)
    return _course_out(svc.remove_subject(course_id, subject_id), svc)


@subjects.get("")
def list_subjects(db: Session = Depends(get_session)):
    return [_subject_out(s) for s in services.SubjectService(db).list_all()]


@subjects.get("/buscar")
def search_subjects(nome: str, db: Session = Depends(get_session)):
    return [_subject_out(s) for s in services.SubjectService(db).search_by_name(nome)]


@subjects.get("/multiplos-cursos")
def subjects_in_many_courses(db: Session = Depends(get_session)):
    """Subjects offered by more than one course."""
    return [_subject_out(s) for s in services.SubjectService(db).list_offered_by_many()]


@subjects.get("/sem-cursos")
def subjects_without_courses(db: Session = Depends(get_session)):
    return [_subject_out(s) for s in services.SubjectService(db).list_without_courses()]


@subjects.get("/curso/{course_id}")
def subjects_by_course(course_id: int, db: Session = Depends(get_session)):
    """Subjects offered by a course, in name order."""
    return [_subject_out(s) for s in services.SubjectService(db).list_by_course(course_id)]


@subjects.get("/{subject_id}")
def get_subject(subject_id: int, db: Session = Depends(get_session)):
    return _subject_out(services.SubjectService(db).require(subject_id))


@subjects.get("/{subject_id}/cursos/count")
def count_subject_courses(subject_id: int, db: Session = Depends(get_session)) -> int:
    return services.SubjectService(db).count_courses(subject_id)


@subjects.post("", status_code=201)
def create_subject(payload: SubjectIn, db: Session = Depends(get_session)):
    return _subject_out(services.SubjectService(db).create(payload.name))


@subjects.put("/{subject_id}")
def update_subject(subject_id: int, payload: SubjectIn, db: Session = Depends(get_session)):
    return _subject_out(services.SubjectService(db).update(subject_id, payload.name))


@subjects.delete("/{subject_id}", status_code=204)
def delete_subject(subject_id: int, db: Session = Depends(get_session)):
    """Delete a subject; 409 while any course offers it."""
    services.SubjectService(db).delete(subject_id)
    return Response(status_code=204)


@students.get("")
def list_students(db: Session = Depends(get_session)):
    return [_student_out(s) for s in services.StudentService(db).list_all()]


@students.get("/buscar")
def search_students(nome: str, db: Session = Depends(get_session)):
    return [_student_out(s) for s in services.StudentService(db).search_by_name(nome)]


@students.get("/curso-nome")
def students_by_course_name(course_name: str = Query(..., alias="nomeCurso"), db: Session = Depends(get_session)):
    """Students of the course with exactly this name."""
    return [_student_out(s) for s in services.StudentService(db).list_by_course_name(course_name)]


@students.get("/busca-avancada")
def advanced_student_search(
    student_name: Optional[str] = Query(None, alias="nomeAluno"),
    course_name: Optional[str] = Query(None, alias="nomeCurso"),
    db: Session = Depends(get_session),
):
    """Partial student name AND partial course name; omitted filters match all."""
    return [_student_out(s) for s in services.StudentService(db).search(student_name, course_name)]


@students.get("/relatorio", response_class=PlainTextResponse)
def enrollment_report(db: Session = Depends(get_session)):
    """Plain-text enrollment count per course."""
    return services.StudentService(db).report()


@students.get("/curso/{course_id}")
def students_by_course(course_id: int, db: Session = Depends(get_session)):
    return [_student_out(s) for s in services.StudentService(db).list_by_course(course_id)]


@students.get("/curso/{course_id}/count")
def count_students_by_course(course_id: int, db: Session = Depends(get_session)) -> int:
    return services.StudentService(db).count_by_course(course_id)


@students.get("/{student_id}")
def get_student(student_id: int, db: Session = Depends(get_session)):
    return _student_out(services.StudentService(db).require(student_id))


@students.post("", status_code=201)
def create_student(payload: StudentIn, course_id: int = Query(..., alias="idCurso"), db: Session = Depends(get_session)):
    """Create a student enrolled in `idCurso`; 404 if that course does not exist."""
    return _student_out(services.StudentService(db).create(payload.name, course_id))


@students.put("/{student_id}")
def update_student(student_id: int, payload: StudentIn, db: Session = Depends(get_session)):
    return _student_out(services.StudentService(db).update(student_id, payload.name))


@students.put("/{student_id}/transferir")
def transfer_student(student_id: int, new_course_id: int = Query(..., alias="idNovoCurso"), db: Session = Depends(get_session)):
    """Move a student to another course."""
    return _student_out(services.StudentService(db).transfer(student_id, new_course_id))


@students.delete("/{student_id}", status_code=204)
def delete_student(student_id: int, db: Session = Depends(get_session)):
    services.StudentService(db).delete(student_id)
    return Response(status_code=204)


app.include_router(courses, prefix=settings.BASE_PATH)
app.include_router(subjects, prefix=settings.BASE_PATH)
app.include_router(students, prefix=settings.BASE_PATH)


@app.get("/")
def docs_shortcut():
    """Shortcut route to the interactive API docs."""
    return RedirectResponse(url="/docs")


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}
