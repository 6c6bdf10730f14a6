"""ORM schema for TalentTrack.

Column names are snake_case; relationships mirror the HR domain
(user <-> employee profile, department -> employees, employee -> records).
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
    inspect,
)
from sqlalchemy.orm import declarative_base, relationship


class _Serializable:
    # columns never exposed through the API
    __hidden__: frozenset = frozenset()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for attr in inspect(self).mapper.column_attrs:
            name = attr.columns[0].name
            if name in self.__hidden__:
                continue
            value = getattr(self, attr.key)
            if isinstance(value, (datetime, date)):
                value = value.isoformat()
            elif isinstance(value, Decimal):
                value = float(value)
            out[name] = value
        return out


Base = declarative_base(cls=_Serializable)


class TimestampMixin:
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())


class User(TimestampMixin, Base):
    __tablename__ = "users"
    __hidden__ = frozenset({"password_hash"})

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="employee")
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime, nullable=True)

    employee_profile = relationship("Employee", back_populates="user", uselist=False, foreign_keys="Employee.user_id")
    notifications = relationship("Notification", back_populates="user", foreign_keys="Notification.user_id")


class Department(TimestampMixin, Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text)
    manager_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    budget = Column(Numeric(15, 2))
    location = Column(String(255))
    is_active = Column(Boolean, nullable=False, default=True)

    employees = relationship("Employee", back_populates="department")


class Employee(TimestampMixin, Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(String(20), nullable=False, unique=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    phone = Column(String(20))
    date_of_birth = Column(Date)
    gender = Column(String(10))
    address = Column(Text)
    position = Column(String(100))
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True)
    manager_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
    hire_date = Column(Date, nullable=False)
    termination_date = Column(Date)
    salary = Column(Numeric(10, 2))
    employment_type = Column(String(20), nullable=False, default="full_time")
    status = Column(String(20), nullable=False, default="active")
    emergency_contact_name = Column(String(100))
    emergency_contact_phone = Column(String(20))

    user = relationship("User", back_populates="employee_profile", foreign_keys=[user_id])
    department = relationship("Department", back_populates="employees")
    manager = relationship("Employee", remote_side=[id])


class Attendance(TimestampMixin, Base):
    __tablename__ = "attendance"
    __table_args__ = (UniqueConstraint("employee_id", "date", name="uq_attendance_employee_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    date = Column(Date, nullable=False)
    check_in = Column(DateTime)
    check_out = Column(DateTime)
    break_start = Column(DateTime)
    break_end = Column(DateTime)
    hours_worked = Column(Numeric(4, 2))
    overtime_hours = Column(Numeric(4, 2), default=0)
    status = Column(String(20), nullable=False, default="present")
    notes = Column(Text)


class Leave(TimestampMixin, Base):
    __tablename__ = "leaves"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    type = Column(String(20), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    days_requested = Column(Integer, nullable=False)
    reason = Column(Text)
    status = Column(String(20), nullable=False, default="pending")
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime)
    rejection_reason = Column(Text)


class Payroll(TimestampMixin, Base):
    __tablename__ = "payroll"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    pay_period_start = Column(Date, nullable=False)
    pay_period_end = Column(Date, nullable=False)
    basic_salary = Column(Numeric(10, 2), nullable=False)
    overtime_pay = Column(Numeric(10, 2), default=0)
    bonus = Column(Numeric(10, 2), default=0)
    allowances = Column(Numeric(10, 2), default=0)
    deductions = Column(Numeric(10, 2), default=0)
    tax_deduction = Column(Numeric(10, 2), default=0)
    gross_pay = Column(Numeric(10, 2))
    net_pay = Column(Numeric(10, 2))
    status = Column(String(20), nullable=False, default="pending")
    processed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    processed_at = Column(DateTime)
    payment_date = Column(Date)


class PerformanceReview(TimestampMixin, Base):
    __tablename__ = "performance_reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    reviewer_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
    review_period_start = Column(Date, nullable=False)
    review_period_end = Column(Date, nullable=False)
    overall_rating = Column(Numeric(3, 2))
    goals = Column(Text)
    achievements = Column(Text)
    areas_for_improvement = Column(Text)
    feedback = Column(Text)
    status = Column(String(20), nullable=False, default="draft")


class Training(TimestampMixin, Base):
    __tablename__ = "trainings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    trainer = Column(String(100))
    start_date = Column(Date)
    end_date = Column(Date)
    duration_hours = Column(Integer)
    location = Column(String(255))
    capacity = Column(Integer)
    cost = Column(Numeric(10, 2))
    status = Column(String(20), nullable=False, default="scheduled")


class TrainingParticipant(TimestampMixin, Base):
    __tablename__ = "training_participants"

    training_id = Column(Integer, ForeignKey("trainings.id"), primary_key=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), primary_key=True)
    enrollment_date = Column(DateTime, server_default=func.now())
    completion_date = Column(DateTime)
    status = Column(String(20), nullable=False, default="enrolled")
    score = Column(Numeric(5, 2))
    feedback = Column(Text)


class Document(TimestampMixin, Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    document_type = Column(String(30), nullable=False, default="other")
    file_name = Column(String(255))
    file_path = Column(String(500))
    file_size = Column(Integer)
    mime_type = Column(String(100))
    version = Column(String(20), default="1.0")
    is_template = Column(Boolean, default=False)
    access_level = Column(String(20), nullable=False, default="internal")
    expiry_date = Column(DateTime)
    tags = Column(JSON)
    uploaded_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    download_count = Column(Integer, default=0)
    is_active = Column(Boolean, nullable=False, default=True)


class EmployeeDocument(TimestampMixin, Base):
    __tablename__ = "employee_documents"

    document_id = Column(Integer, ForeignKey("documents.id"), primary_key=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), primary_key=True)
    access_level = Column(String(10), nullable=False, default="read")
    assigned_date = Column(DateTime, server_default=func.now())
    acknowledged_date = Column(DateTime)
    is_acknowledged = Column(Boolean, nullable=False, default=False)


class Recruitment(TimestampMixin, Base):
    __tablename__ = "recruitments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_title = Column(String(255), nullable=False)
    job_description = Column(Text)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True)
    hiring_manager_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
    requirements = Column(Text)
    experience_level = Column(String(20), default="mid")
    employment_type = Column(String(20), default="full_time")
    salary_min = Column(Numeric(10, 2))
    salary_max = Column(Numeric(10, 2))
    currency = Column(String(3), default="USD")
    location = Column(String(255))
    is_remote = Column(Boolean, default=False)
    application_deadline = Column(DateTime)
    status = Column(String(20), nullable=False, default="draft")
    priority = Column(String(20), nullable=False, default="medium")
    positions_available = Column(Integer, default=1)
    applications_count = Column(Integer, default=0)
    skills = Column(JSON)
    benefits = Column(Text)


class Onboarding(TimestampMixin, Base):
    __tablename__ = "onboardings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, unique=True)
    buddy_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
    start_date = Column(Date, nullable=False)
    expected_completion_date = Column(Date)
    actual_completion_date = Column(Date)
    checklist = Column(JSON)
    status = Column(String(20), nullable=False, default="pending")
    notes = Column(Text)


class Offboarding(TimestampMixin, Base):
    __tablename__ = "offboardings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, unique=True)
    hr_representative_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
    last_working_date = Column(DateTime, nullable=False)
    notice_date = Column(DateTime)
    reason = Column(String(20), nullable=False)
    reason_details = Column(Text)
    status = Column(String(20), nullable=False, default="initiated")
    checklist = Column(JSON)
    assets_to_return = Column(JSON)
    final_settlement_amount = Column(Numeric(10, 2))
    exit_interview_completed = Column(Boolean, default=False)
    exit_interview_notes = Column(Text)
    clearance_status = Column(String(20), nullable=False, default="pending")
    progress = Column(Integer, default=0)


class Notification(TimestampMixin, Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="info")
    category = Column(String(20), nullable=False, default="general")
    priority = Column(String(20), nullable=False, default="medium")
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime)
    action_url = Column(String(500))
    metadata_ = Column("metadata", JSON)

    user = relationship("User", back_populates="notifications", foreign_keys=[user_id])
