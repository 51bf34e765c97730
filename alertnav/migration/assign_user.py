"""
Backfill Script: assign every unowned reading to one user

Creates the user if needed (or bumps last_login), then sets user_email on
all iot_data rows where it is NULL. Everything is committed at the end.

USAGE:
    python -m alertnav.migration.assign_user someone@example.com
"""
import argparse
import sys

import psycopg2

from alertnav.config import get_settings

UPSERT_USER_SQL = """
    INSERT INTO users (email, created_at, last_login)
    VALUES (%s, NOW(), NOW())
    ON CONFLICT (email) DO UPDATE
    SET last_login = NOW()
"""

COUNT_UNASSIGNED_SQL = "SELECT COUNT(*) FROM iot_data WHERE user_email IS NULL"

ASSIGN_SQL = "UPDATE iot_data SET user_email = %s WHERE user_email IS NULL"

COUNT_FOR_USER_SQL = "SELECT COUNT(*) FROM iot_data WHERE user_email = %s"


def get_postgres_connection():
    """Get PostgreSQL connection"""
    return psycopg2.connect(**get_settings().psycopg2_params)


def assign_unowned_readings(pg_conn, email: str) -> dict:
    """
    Give all unassigned readings to email.

    Returns:
        dict with 'email', 'unassigned' (rows found), 'assigned' (rows updated)
        and 'total' (rows now owned by the user)
    """
    email = email.strip().lower()
    if not email or '@' not in email:
        raise ValueError(f"Invalid email: {email!r}")

    cursor = pg_conn.cursor()
    try:
        print(f"Assigning all data to user: {email}")

        print("Creating/verifying user...")
        cursor.execute(UPSERT_USER_SQL, (email,))
        print("  ✓ User created/verified")

        cursor.execute(COUNT_UNASSIGNED_SQL)
        unassigned = int(cursor.fetchone()[0])
        print(f"Found {unassigned:,} data points without user assignment")

        assigned = 0
        if unassigned > 0:
            print("Assigning data points to user...")
            cursor.execute(ASSIGN_SQL, (email,))
            assigned = cursor.rowcount
            print(f"  ✓ Updated {assigned:,} data points")

        cursor.execute(COUNT_FOR_USER_SQL, (email,))
        total = int(cursor.fetchone()[0])

        pg_conn.commit()
        print(f"\n✓ Total data points for {email}: {total:,}")
    except Exception:
        pg_conn.rollback()
        raise
    finally:
        cursor.close()

    return {'email': email, 'unassigned': unassigned, 'assigned': assigned, 'total': total}


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Assign unowned location readings to a user",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('email', help='Owner email (stored lowercase)')
    args = parser.parse_args(argv)

    pg_conn = get_postgres_connection()
    try:
        assign_unowned_readings(pg_conn, args.email)
    except Exception as e:
        print(f"\n❌ Error assigning user: {e}")
        return 1
    finally:
        pg_conn.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
