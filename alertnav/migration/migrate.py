"""
Migration Script: apply the user/ownership schema to an existing iot_data database

Runs the SQL files in migration/sql in order on a single connection.
Connection parameters come from the same POSTGRES_* settings as the service.

USAGE:
    python -m alertnav.migration.migrate

    # Custom SQL directory:
    python -m alertnav.migration.migrate --sql-dir ./sql
"""
import argparse
import os
import sys

import psycopg2

from alertnav.config import get_settings

DEFAULT_SQL_DIR = os.path.join(os.path.dirname(__file__), 'sql')

# Applied in this order
SQL_FILES = [
    '001_create_users_table.sql',
    '002_add_user_to_iot_data.sql',
]


def get_postgres_connection():
    """Get PostgreSQL connection"""
    return psycopg2.connect(**get_settings().psycopg2_params)


def read_sql_file(sql_dir: str, filename: str) -> str:
    """Read a migration file"""
    with open(os.path.join(sql_dir, filename), 'r', encoding='utf-8') as f:
        return f.read()


def run_migrations(pg_conn, sql_dir: str = DEFAULT_SQL_DIR, files=None):
    """Execute each migration file and commit; stops at the first failure"""
    files = files or SQL_FILES
    cursor = pg_conn.cursor()
    try:
        for filename in files:
            print(f"Running {filename}...")
            cursor.execute(read_sql_file(sql_dir, filename))
            pg_conn.commit()
            print(f"  ✓ {filename} completed")
    except Exception:
        pg_conn.rollback()
        raise
    finally:
        cursor.close()
    return files


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Apply the AlertNAV schema migrations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--sql-dir', default=DEFAULT_SQL_DIR, help='Directory holding the .sql files')
    args = parser.parse_args(argv)

    print("=" * 70)
    print("Starting database migration...")
    print("=" * 70)

    pg_conn = get_postgres_connection()
    try:
        run_migrations(pg_conn, args.sql_dir)
        print("\n✓ All migrations completed successfully!")
    except Exception as e:
        print(f"\n❌ Migration error: {e}")
        return 1
    finally:
        pg_conn.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
