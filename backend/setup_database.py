"""Create the education tables and check the shared Users table.

Usage:
    python -m backend.setup_database          # create EducationEntries, report
    python -m backend.setup_database --check  # connection test only
"""
import sys

from sqlalchemy import func, inspect
from sqlalchemy.exc import SQLAlchemyError

from backend.database import Database, ensure_education_schema
from backend.models.education_entry import EducationEntry
from backend.models.user import User
from backend.services.education import active_user_clause

USERS_TABLE = User.__tablename__
EDUCATION_TABLES = (EducationEntry.__tablename__,)
HIDDEN_COLUMNS = {'password_hash', 'passwordhash', 'password'}


def check_connection(database: Database) -> None:
    print(f"Connecting to {database.engine.url.render_as_string(hide_password=True)}")
    inspector = inspect(database.engine)
    if USERS_TABLE not in inspector.get_table_names():
        print(f"{USERS_TABLE} table does not exist. Tables found:")
        for table_name in sorted(inspector.get_table_names()):
            print(f"  - {table_name}")
        return

    print(f"{USERS_TABLE} table columns:")
    for column in inspector.get_columns(USERS_TABLE):
        marker = ' (hidden in output)' if column['name'].lower() in HIDDEN_COLUMNS else ''
        print(f"  - {column['name']}: {column['type']}{marker}")


def setup(database: Database) -> None:
    ensure_education_schema(database)

    existing = set(inspect(database.engine).get_table_names())
    print("Education tables:")
    for table_name in EDUCATION_TABLES:
        state = 'present' if table_name in existing else 'MISSING'
        print(f"  - {table_name}: {state}")

    with database.session() as db:
        active_users = db.query(func.count(User.id)).filter(active_user_clause()).scalar()
    print(f"Found {active_users} active users")
    if not active_users:
        print("WARNING: no active users found. Make sure users have IsActive = 1 in the Users table.")


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    database = Database()
    try:
        if '--check' in args:
            check_connection(database)
        else:
            setup(database)
    except SQLAlchemyError as exc:
        print(f"Database setup failed: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
