"""Example: drive the leave workflow through the service layer (no Flask).

Assumes the demo seed is loaded (``scripts/seed_db.py``).
"""

import importlib
from datetime import date, timedelta

from config import get_settings_module

from src.hrms_system.hrms_system.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    employee = container.auth_service.authenticate("employee", "Password123")
    dhead = container.auth_service.authenticate("dhead", "Password123")
    hr = container.auth_service.authenticate("hr", "Password123")

    start = date.today() + timedelta(days=30)
    leave_id = container.leave_service.apply(
        actor_id=employee.emp_id,
        leave_type="vacation",
        start_date=start,
        end_date=start + timedelta(days=2),
        reason="Family trip",
    )
    print("submitted:", leave_id)
    print("department:", container.leave_service.approve(actor_id=dhead.emp_id, leave_id=leave_id).value)
    print("hr:", container.leave_service.approve(actor_id=hr.emp_id, leave_id=leave_id).value)


if __name__ == "__main__":
    main()
