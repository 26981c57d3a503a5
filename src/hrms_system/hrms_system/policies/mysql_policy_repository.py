from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Policy
from .repository import PolicyRepository


class MySQLPolicyRepository(PolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Policy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT p.policy_id, p.policy_name, p.description, p.effective_date,
                       p.created_by, p.created_at,
                       CONCAT(e.first_name, ' ', e.last_name) AS author_name
                FROM policies p
                LEFT JOIN employees e ON e.emp_id = p.created_by
                ORDER BY p.effective_date DESC, p.policy_id DESC
                """
            )
            return [
                Policy(
                    policy_id=int(r["policy_id"]),
                    policy_name=r["policy_name"],
                    description=r["description"],
                    effective_date=r["effective_date"],
                    created_by=r.get("created_by"),
                    created_at=r.get("created_at"),
                    author_name=r.get("author_name"),
                )
                for r in fetchall(cur)
            ]

    def create(self, *, policy_name: str, description: str, effective_date: date, created_by: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO policies(policy_name, description, effective_date, created_by)
                VALUES(%s,%s,%s,%s)
                """,
                (policy_name, description, effective_date, int(created_by)),
            )
            return int(cur.lastrowid)

    def delete(self, *, policy_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM policies WHERE policy_id=%s", (int(policy_id),))
            return cur.rowcount == 1
