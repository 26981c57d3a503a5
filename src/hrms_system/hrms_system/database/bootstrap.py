from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

# (first_name, last_name, username, email, password, role, dept_name, designation, manager_username)
DEMO_EMPLOYEES = (
    ("Chief", "Executive", "ceo", "ceo@company.test", "Password123", "CXO", None, "Chief Executive Officer", None),
    ("Hannah", "Reyes", "hr", "hr@company.test", "Password123", "HR Manager", "Human Resources", "HR Manager", "ceo"),
    ("Daniel", "Okafor", "dhead", "dhead@company.test", "Password123", "Department Head", "Engineering", "Department Head", "ceo"),
    ("Tara", "Lindqvist", "tlead", "tlead@company.test", "Password123", "Team Lead", "Engineering", "Team Lead", "dhead"),
    ("Evan", "Marsh", "employee", "employee@company.test", "Password123", "Employee", "Engineering", "Software Engineer", "tlead"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _run_script(db_config: dict, path: str | Path) -> None:
    target = DBConfig.from_dict(db_config)
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, schema_path)
    logger.info("Applied schema %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _run_script(db_config, seed_path)
    logger.info("Applied seed %s", seed_path)


def ensure_demo_employees(db_config: dict) -> None:
    """Upsert the demo accounts and wire department heads to their departments."""
    target = DBConfig.from_dict(db_config)

    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)

        def lookup(sql: str, value) -> int | None:
            if value is None:
                return None
            cur.execute(sql, (value,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing seed row for {value!r}")
            return int(row["id"])

        for first, last, username, email, password, role, dept, designation, manager in DEMO_EMPLOYEES:
            dept_id = lookup("SELECT dept_id AS id FROM departments WHERE dept_name=%s", dept)
            designation_id = lookup(
                "SELECT designation_id AS id FROM designations WHERE designation_name=%s", designation
            )
            manager_id = lookup("SELECT emp_id AS id FROM employees WHERE username=%s", manager)
            password_hash = generate_password_hash(password)

            cur.execute("SELECT emp_id FROM employees WHERE username=%s", (username,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE employees
                    SET first_name=%s, last_name=%s, email=%s, password_hash=%s, role=%s,
                        department_id=%s, designation_id=%s, reporting_manager_id=%s, status='active'
                    WHERE username=%s
                    """,
                    (first, last, email, password_hash, role, dept_id, designation_id, manager_id, username),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO employees(first_name, last_name, username, email, password_hash, role,
                                          department_id, designation_id, reporting_manager_id)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (first, last, username, email, password_hash, role, dept_id, designation_id, manager_id),
                )

            if role == "Department Head" and dept_id:
                cur.execute(
                    "UPDATE departments SET dept_head_id=(SELECT emp_id FROM employees WHERE username=%s) WHERE dept_id=%s",
                    (username, dept_id),
                )

        conn.commit()
        logger.info("Demo employees ready (%d accounts)", len(DEMO_EMPLOYEES))
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
