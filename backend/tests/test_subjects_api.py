from fastapi.testclient import TestClient
from sistema_academico.main import app

client = TestClient(app)


def test_list_and_get_subjects():
    r = client.get('/api/disciplinas')
    assert r.status_code == 200
    names = [s['name'] for s in r.json()]
    assert len(names) == 15
    assert names == sorted(names)
    assert client.get('/api/disciplinas/3').json() == {'id': 3, 'name': 'Banco de Dados'}
    missing = client.get('/api/disciplinas/999')
    assert missing.status_code == 404
    assert missing.content == b''


def test_search_subjects():
    r = client.get('/api/disciplinas/buscar', params={'nome': 'SISTEMAS'})
    assert [s['name'] for s in r.json()] == ['Sistemas Operacionais']


def test_create_and_rename_subject_uniqueness():
    created = client.post('/api/disciplinas', json={'name': 'Robótica Aplicada'})
    assert created.status_code == 201
    dup = client.post('/api/disciplinas', json={'name': 'Robótica Aplicada'})
    assert dup.status_code == 400
    sid = created.json()['id']
    clash = client.put(f'/api/disciplinas/{sid}', json={'name': 'Banco de Dados'})
    assert clash.status_code == 400
    same = client.put(f'/api/disciplinas/{sid}', json={'name': 'Robótica Aplicada'})
    assert same.status_code == 200
    assert client.put('/api/disciplinas/999', json={'name': 'Outra'}).status_code == 404


def test_delete_subject_offered_by_course_conflicts():
    r = client.delete('/api/disciplinas/1')
    assert r.status_code == 409
    assert '5 course(s)' in r.text
    assert client.delete('/api/disciplinas/999').status_code == 404


def test_subject_queries():
    by_course = client.get('/api/disciplinas/curso/4').json()
    assert {s['id'] for s in by_course} == {1, 2, 3, 4, 13, 14}
    names = [s['name'] for s in by_course]
    assert names == sorted(names)
    # subject 6, 12 are only offered by course 1
    many = {s['id'] for s in client.get('/api/disciplinas/multiplos-cursos').json()}
    assert 6 not in many and 12 not in many
    assert {1, 2, 3, 4, 5, 14} <= many
    assert client.get('/api/disciplinas/sem-cursos').json() == []
    assert client.get('/api/disciplinas/1/cursos/count').json() == 5
    assert client.get('/api/disciplinas/12/cursos/count').json() == 1


def test_orphan_subject_listed_and_deletable():
    created = client.post('/api/disciplinas', json={'name': 'Computação Quântica'}).json()
    orphans = client.get('/api/disciplinas/sem-cursos').json()
    assert orphans == [created]
    assert client.delete(f"/api/disciplinas/{created['id']}").status_code == 204
    assert client.get(f"/api/disciplinas/{created['id']}").status_code == 404


def test_robotics_scenario():
    course = client.post('/api/cursos', json={'name': 'Robótica'})
    assert course.status_code == 201
    course_id = course.json()['id']
    subject = client.post('/api/disciplinas', json={'name': 'Robótica Aplicada'})
    assert subject.status_code == 201
    subject_id = subject.json()['id']

    linked = client.post(f'/api/cursos/{course_id}/disciplinas/{subject_id}')
    assert linked.status_code == 200

    offered = client.get(f'/api/disciplinas/curso/{course_id}').json()
    assert len(offered) == 1
    assert offered[0]['name'] == 'Robótica Aplicada'

    blocked = client.delete(f'/api/disciplinas/{subject_id}')
    assert blocked.status_code == 409

    unlinked = client.delete(f'/api/cursos/{course_id}/disciplinas/{subject_id}')
    assert unlinked.status_code == 200
    assert unlinked.json()['subjects'] == []

    deleted = client.delete(f'/api/disciplinas/{subject_id}')
    assert deleted.status_code == 204
