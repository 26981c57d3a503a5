from __future__ import annotations

from datetime import date, datetime

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.hrms_system.hrms_system.core.enums import LeaveStatus, ReviewStage
from src.hrms_system.hrms_system.core.exceptions import ConflictError, StoreError
from src.hrms_system.hrms_system.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use
from src.hrms_system.hrms_system.database.mysql_base import db_cursor
from src.hrms_system.hrms_system.employees.mysql_history_repository import MySQLEmployeeHistoryRepository
from src.hrms_system.hrms_system.leave.mysql_leave_repository import MySQLLeaveRepository


class RecordingCursor:
    def __init__(self, *, rowcount=1, error=None):
        self.rowcount = rowcount
        self.error = error
        self.executed = []
        self.closed = False

    def execute(self, sql, params=()):
        if self.error is not None:
            raise self.error
        self.executed.append((" ".join(sql.split()), params))

    def close(self):
        self.closed = True


class RecordingConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class ConnFactory:
    def __init__(self, cursor):
        self.conn = RecordingConnection(cursor)

    def connect(self):
        return self.conn


def test_transition_is_a_guarded_update():
    cursor = RecordingCursor(rowcount=1)
    factory = ConnFactory(cursor)
    repo = MySQLLeaveRepository(factory)

    moved = repo.transition(
        leave_id=7,
        expected_status=LeaveStatus.DEPT_APPROVED,
        new_status=LeaveStatus.APPROVED,
        stage=ReviewStage.HR,
        reviewer_id=2,
        comments="ok",
        reviewed_at=datetime(2024, 1, 10, 9, 0),
    )

    sql, params = cursor.executed[0]
    assert moved is True
    assert "SET status=%s, reviewed_by_hr=%s, hr_comments=%s, hr_review_date=%s" in sql
    assert sql.endswith("WHERE leave_id=%s AND status=%s")
    assert params[-2:] == (7, "dept_approved")
    assert factory.conn.committed and factory.conn.closed


def test_transition_reports_lost_race():
    repo = MySQLLeaveRepository(ConnFactory(RecordingCursor(rowcount=0)))
    moved = repo.transition(
        leave_id=7,
        expected_status=LeaveStatus.PENDING,
        new_status=LeaveStatus.DEPT_APPROVED,
        stage=ReviewStage.DEPARTMENT,
        reviewer_id=3,
        comments=None,
        reviewed_at=datetime(2024, 1, 10, 9, 0),
    )
    assert moved is False


def test_duplicate_key_becomes_conflict():
    error = mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)
    factory = ConnFactory(RecordingCursor(error=error))

    with pytest.raises(ConflictError):
        with db_cursor(factory) as (_, cur):
            cur.execute("INSERT INTO holidays(holiday_date) VALUES(%s)", ("2024-01-01",))

    assert factory.conn.rolled_back
    assert not factory.conn.committed
    assert factory.conn.closed


def test_driver_error_becomes_store_error():
    factory = ConnFactory(RecordingCursor(error=mysql.connector.ProgrammingError(msg="bad sql", errno=1064)))

    with pytest.raises(StoreError):
        with db_cursor(factory) as (_, cur):
            cur.execute("SELEC 1")
    assert factory.conn.rolled_back


def test_unreachable_database_becomes_store_error():
    class Down:
        def connect(self):
            raise mysql.connector.InterfaceError(msg="Can't connect", errno=2003)

    with pytest.raises(StoreError):
        with db_cursor(Down()):
            pass


def test_sql_splitter_keeps_semicolons_inside_quotes():
    sql = _strip_create_db_and_use(
        "CREATE DATABASE IF NOT EXISTS hrms_db;\n"
        "USE hrms_db;\n"
        "INSERT INTO policies(policy_name, description) VALUES('A', 'one; two');\n"
        "SELECT 1"
    )
    assert list(_iter_sql_statements(sql)) == [
        "INSERT INTO policies(policy_name, description) VALUES('A', 'one; two')",
        "SELECT 1",
    ]


def test_history_change_closes_open_period_in_the_same_transaction():
    cursor = RecordingCursor(rowcount=1)
    cursor.lastrowid = 11
    factory = ConnFactory(cursor)
    repo = MySQLEmployeeHistoryRepository(factory)

    history_id = repo.record_change(
        emp_id=5,
        start_date=date(2024, 3, 1),
        old_designation_id=None,
        new_designation_id=None,
        old_dept_id=1,
        new_dept_id=3,
        old_salary=None,
        new_salary=None,
        change_reason="Transfer",
    )

    (close_sql, close_params), (insert_sql, insert_params) = cursor.executed
    assert history_id == 11
    assert close_sql == "UPDATE employee_history SET end_date=%s WHERE emp_id=%s AND end_date IS NULL"
    assert close_params == (date(2024, 3, 1), 5)
    assert insert_sql.startswith("INSERT INTO employee_history(")
    assert insert_params[0] == 5 and insert_params[-1] == "Transfer"
    assert factory.conn.committed


def test_history_for_nobody_skips_the_query():
    cursor = RecordingCursor()
    repo = MySQLEmployeeHistoryRepository(ConnFactory(cursor))

    assert repo.list_history(emp_ids=[]) == []
    assert cursor.executed == []
