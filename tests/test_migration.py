from unittest.mock import MagicMock

import pytest

from alertnav.migration import assign_user, migrate


def make_connection():
    conn = MagicMock()
    cursor = MagicMock()
    conn.cursor.return_value = cursor
    return conn, cursor


def executed_sql(cursor):
    return [call.args[0] for call in cursor.execute.call_args_list]


def test_bundled_sql_files_exist():
    for filename in migrate.SQL_FILES:
        sql = migrate.read_sql_file(migrate.DEFAULT_SQL_DIR, filename)
        assert sql.strip()

    users_sql = migrate.read_sql_file(migrate.DEFAULT_SQL_DIR, "001_create_users_table.sql")
    assert "CREATE TABLE IF NOT EXISTS users" in users_sql
    owner_sql = migrate.read_sql_file(migrate.DEFAULT_SQL_DIR, "002_add_user_to_iot_data.sql")
    assert "user_email" in owner_sql


def test_run_migrations_applies_files_in_order(tmp_path):
    (tmp_path / "a.sql").write_text("SELECT 1;", encoding="utf-8")
    (tmp_path / "b.sql").write_text("SELECT 2;", encoding="utf-8")
    conn, cursor = make_connection()

    applied = migrate.run_migrations(conn, str(tmp_path), ["a.sql", "b.sql"])

    assert applied == ["a.sql", "b.sql"]
    assert executed_sql(cursor) == ["SELECT 1;", "SELECT 2;"]
    assert conn.commit.call_count == 2
    cursor.close.assert_called_once()


def test_run_migrations_stops_at_first_failure(tmp_path):
    (tmp_path / "a.sql").write_text("BROKEN;", encoding="utf-8")
    (tmp_path / "b.sql").write_text("SELECT 2;", encoding="utf-8")
    conn, cursor = make_connection()
    cursor.execute.side_effect = RuntimeError("syntax error")

    with pytest.raises(RuntimeError):
        migrate.run_migrations(conn, str(tmp_path), ["a.sql", "b.sql"])

    assert cursor.execute.call_count == 1
    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()
    cursor.close.assert_called_once()


def test_migrate_main_closes_connection(monkeypatch, tmp_path):
    for filename in migrate.SQL_FILES:
        (tmp_path / filename).write_text("SELECT 1;", encoding="utf-8")
    conn, _ = make_connection()
    monkeypatch.setattr(migrate, "get_postgres_connection", lambda: conn)

    assert migrate.main(["--sql-dir", str(tmp_path)]) == 0
    conn.close.assert_called_once()


def test_migrate_main_reports_failure(monkeypatch, tmp_path):
    conn, cursor = make_connection()
    cursor.execute.side_effect = RuntimeError("relation iot_data does not exist")
    for filename in migrate.SQL_FILES:
        (tmp_path / filename).write_text("SELECT 1;", encoding="utf-8")
    monkeypatch.setattr(migrate, "get_postgres_connection", lambda: conn)

    assert migrate.main(["--sql-dir", str(tmp_path)]) == 1
    conn.close.assert_called_once()


def test_assign_unowned_readings():
    conn, cursor = make_connection()
    cursor.fetchone.side_effect = [(3,), (8,)]
    cursor.rowcount = 3

    result = assign_user.assign_unowned_readings(conn, "  Owner@Example.com ")

    assert result == {"email": "owner@example.com", "unassigned": 3, "assigned": 3, "total": 8}
    statements = executed_sql(cursor)
    assert statements == [
        assign_user.UPSERT_USER_SQL,
        assign_user.COUNT_UNASSIGNED_SQL,
        assign_user.ASSIGN_SQL,
        assign_user.COUNT_FOR_USER_SQL,
    ]
    assert cursor.execute.call_args_list[0].args[1] == ("owner@example.com",)
    assert cursor.execute.call_args_list[2].args[1] == ("owner@example.com",)
    conn.commit.assert_called_once()
    conn.rollback.assert_not_called()


def test_assign_skips_update_when_nothing_unowned():
    conn, cursor = make_connection()
    cursor.fetchone.side_effect = [(0,), (5,)]

    result = assign_user.assign_unowned_readings(conn, "owner@example.com")

    assert result["assigned"] == 0
    assert result["total"] == 5
    assert assign_user.ASSIGN_SQL not in executed_sql(cursor)


def test_assign_rolls_back_on_error():
    conn, cursor = make_connection()
    cursor.execute.side_effect = [None, RuntimeError("lost connection")]

    with pytest.raises(RuntimeError):
        assign_user.assign_unowned_readings(conn, "owner@example.com")

    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()
    cursor.close.assert_called_once()


def test_assign_rejects_invalid_email():
    conn, cursor = make_connection()

    with pytest.raises(ValueError):
        assign_user.assign_unowned_readings(conn, "not-an-email")

    cursor.execute.assert_not_called()


def test_assign_user_main(monkeypatch):
    conn, cursor = make_connection()
    cursor.fetchone.side_effect = [(0,), (0,)]
    monkeypatch.setattr(assign_user, "get_postgres_connection", lambda: conn)

    assert assign_user.main(["owner@example.com"]) == 0
    conn.close.assert_called_once()
