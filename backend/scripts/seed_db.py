"""CLI script to create the tables and load the demo data set.
Usage: python scripts/seed_db.py [--reset]
"""
import sys
import argparse
import pathlib
# Ensure `backend/` is on sys.path so the package imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from sistema_academico.database import engine, create_db_and_tables, drop_db_and_tables
from sistema_academico.utils.seed_data import seed_database


def main(reset: bool = False):
    """Create missing tables and insert the demo data.

    With `reset`, every table is dropped first so the database ends up
    holding exactly the demo data. Results are printed to stdout.
    """
    print(f'Using database: {engine.url.render_as_string(hide_password=True)}')
    if reset:
        drop_db_and_tables()
        print('Dropped existing tables')
    create_db_and_tables()
    with Session(engine) as session:
        created = seed_database(session)
    if not any(created.values()):
        print('Database already has courses; nothing inserted (use --reset to reload)')
        return
    print(f"Created {created['courses']} courses, {created['subjects']} subjects, "
          f"{created['links']} course-subject links, {created['students']} students")


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--reset', action='store_true', help='Drop all tables before loading the demo data')
    args = parser.parse_args()
    main(reset=args.reset)
