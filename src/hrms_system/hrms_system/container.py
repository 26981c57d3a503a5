from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository, MySQLHolidayRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_department_repository import MySQLDepartmentRepository, MySQLDesignationRepository
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.mysql_history_repository import MySQLEmployeeHistoryRepository
from .employees.service import AuthService, DepartmentService, DesignationService, EmployeeService
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.service import LeaveService
from .policies.mysql_policy_repository import MySQLPolicyRepository
from .policies.service import PolicyService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    auth_service: AuthService
    employee_service: EmployeeService
    department_service: DepartmentService
    designation_service: DesignationService
    leave_service: LeaveService
    attendance_service: AttendanceService
    policy_service: PolicyService


def build_container(*, db_config: dict, senior_bypass: bool = True) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    departments_repo = MySQLDepartmentRepository(conn)
    designations_repo = MySQLDesignationRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)
    policies_repo = MySQLPolicyRepository(conn)
    history_repo = MySQLEmployeeHistoryRepository(conn)

    leave_service = LeaveService(leaves_repo, employees_repo, departments_repo, senior_bypass=senior_bypass)

    return Container(
        conn=conn,
        auth_service=AuthService(employees_repo),
        employee_service=EmployeeService(employees_repo, departments_repo, history_repo),
        department_service=DepartmentService(departments_repo, employees_repo),
        designation_service=DesignationService(designations_repo, employees_repo),
        leave_service=leave_service,
        attendance_service=AttendanceService(
            attendance_repo,
            holidays_repo,
            employees_repo,
            departments_repo,
            leave_service,
        ),
        policy_service=PolicyService(policies_repo, employees_repo),
    )
