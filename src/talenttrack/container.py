from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Callable, Optional

from sqlalchemy.engine import Engine

from .auth.service import AuthService
from .auth.sql_user_repository import SqlUserRepository
from .auth.tokens import TokenService, TokenSettings
from .common.error_logger import ErrorLogger
from .core.enums import AttendanceStatus, EmployeeStatus, EmploymentType, LeaveStatus, PayrollStatus
from .database.connection import ConnectionConfig, ConnectionManager
from .database.models import (
    Attendance,
    Department,
    Document,
    Employee,
    Leave,
    Notification,
    Offboarding,
    Onboarding,
    Payroll,
    PerformanceReview,
    Recruitment,
    Training,
)
from .database.repository import SqlAlchemyRepository
from .leaves.service import LeaveService
from .notifications.service import NotificationService
from .resources.service import ResourceService

# resource path -> (model, display name, fields required on create)
RESOURCES = {
    "employees": (Employee, "Employee", ("employee_id", "first_name", "last_name", "email", "hire_date")),
    "departments": (Department, "Department", ("name",)),
    "attendance": (Attendance, "Attendance record", ("employee_id", "date")),
    "payroll": (Payroll, "Payroll record", ("employee_id", "pay_period_start", "pay_period_end", "basic_salary")),
    "performance": (PerformanceReview, "Performance review", ("employee_id", "review_period_start", "review_period_end")),
    "training": (Training, "Training", ("title",)),
    "documents": (Document, "Document", ("title",)),
    "recruitment": (Recruitment, "Job posting", ("job_title",)),
    "onboarding": (Onboarding, "Onboarding", ("employee_id", "start_date")),
    "offboarding": (Offboarding, "Offboarding", ("employee_id", "last_working_date", "reason")),
}

CHOICES = {
    "employees": {"employment_type": EmploymentType, "status": EmployeeStatus},
    "attendance": {"status": AttendanceStatus},
    "payroll": {"status": PayrollStatus},
    "leaves": {"status": LeaveStatus},
}


@dataclass(frozen=True)
class Container:
    db: ConnectionManager
    error_logger: ErrorLogger

    users_repo: SqlUserRepository
    auth_service: AuthService
    leave_service: LeaveService
    notification_service: NotificationService

    # every CRUD resource by URL segment, including leaves and notifications
    resource_services: dict


def build_container(
    settings,
    *,
    engine: Optional[Engine] = None,
    sleep: Callable[[float], None] = time.sleep,
    error_logger: Optional[ErrorLogger] = None,
) -> Container:
    config = ConnectionConfig.from_settings(settings)
    error_logger = error_logger or ErrorLogger(getattr(settings, "LOG_DIR", "logs"))
    db = ConnectionManager(config, engine=engine, error_logger=error_logger, sleep=sleep)

    users_repo = SqlUserRepository(db)
    auth_service = AuthService(users_repo, TokenService(TokenSettings.from_settings(settings)))

    resource_services: dict[str, ResourceService] = {
        path: ResourceService(SqlAlchemyRepository(db, model, name=name), required=required, choices=CHOICES.get(path))
        for path, (model, name, required) in RESOURCES.items()
    }
    leave_service = LeaveService(
        SqlAlchemyRepository(db, Leave, name="Leave request"),
        required=("employee_id", "type", "start_date", "end_date"),
        choices=CHOICES["leaves"],
    )
    notification_service = NotificationService(
        SqlAlchemyRepository(db, Notification, name="Notification"),
        required=("user_id", "title", "message"),
    )
    resource_services["leaves"] = leave_service
    resource_services["notifications"] = notification_service

    return Container(
        db=db,
        error_logger=error_logger,
        users_repo=users_repo,
        auth_service=auth_service,
        leave_service=leave_service,
        notification_service=notification_service,
        resource_services=resource_services,
    )
