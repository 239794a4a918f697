"""Run a quick smoke request against the app.

Uses FastAPI's TestClient to hit `/health` and the course listing and
prints the results.
"""

import sys
import os

# Ensure backend folder is on sys.path so the package can be imported
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fastapi.testclient import TestClient
from sistema_academico.main import app
from sistema_academico.config import settings


def run_testclient():
    client = TestClient(app)
    resp = client.get('/health')
    print('STATUS:', resp.status_code)
    print('JSON:', resp.json())
    resp = client.get(f'{settings.BASE_PATH}/api/cursos')
    print('COURSES:', resp.status_code, [c['name'] for c in resp.json()])


if __name__ == '__main__':
    run_testclient()
