"""Employee and phone ORM models."""

from datetime import date
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from employee_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class EmployeeORM(Base, UUIDMixin, TimestampMixin):
    """Employee database model."""

    __tablename__ = "employees"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    # Unique constraints are the final backstop against concurrent duplicate inserts
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    document_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    birth_date: Mapped[date] = mapped_column(Date, nullable=False)
    role: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Self-referential manager link, never an ownership relation
    manager_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("employees.id", ondelete="SET NULL"),
        nullable=True,
    )

    manager: Mapped["EmployeeORM | None"] = relationship(
        "EmployeeORM",
        remote_side="EmployeeORM.id",
        foreign_keys=[manager_id],
        lazy="select",
    )

    # Phones live and die with their employee
    phones: Mapped[list["PhoneORM"]] = relationship(
        "PhoneORM",
        back_populates="employee",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_employees_manager_id", "manager_id"),
        Index("idx_employees_is_active", "is_active"),
    )


class PhoneORM(Base, UUIDMixin, TimestampMixin):
    """Employee phone database model."""

    __tablename__ = "employee_phones"

    employee_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
    )
    number: Mapped[str] = mapped_column(String(20), nullable=False)
    type: Mapped[str | None] = mapped_column(String(50), nullable=True)

    employee: Mapped[EmployeeORM] = relationship("EmployeeORM", back_populates="phones")

    __table_args__ = (Index("idx_employee_phones_employee_id", "employee_id"),)
