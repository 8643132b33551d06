# infra/db/models.py
from __future__ import annotations
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import (
    String,
    Date,
    DateTime,
    Float,
    Boolean,
    ForeignKey,
    Enum as SAEnum,
    Index,
    Integer,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from infra.db.base import Base
from core.models import ProjectStatus


class ProjectORM(Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, default="")
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[ProjectStatus] = mapped_column(
        SAEnum(ProjectStatus), default=ProjectStatus.PLANNED, nullable=False
    )

    client_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    planned_budget: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    currency: Mapped[Optional[str]] = mapped_column(String(8), nullable=True) # EUR, USD, etc.
    required_skills_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    required_roles_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)


class ResourceORM(Base):
    __tablename__ = "resources"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String, default="")
    hourly_rate: Mapped[float] = mapped_column(Float, default=0.0)
    billable_rate: Mapped[float] = mapped_column(Float, default=0.0)
    currency_code: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    weekly_capacity_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    skills_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    allocations: Mapped[List["AllocationORM"]] = relationship(
        back_populates="resource",
        order_by="AllocationORM.start_date",
        lazy="selectin",
        passive_deletes=True,
    )


class AllocationORM(Base):
    __tablename__ = "allocations"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    resource_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("resources.id", ondelete="CASCADE"),
        nullable=False,
    )
    project_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    utilization: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    hourly_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    billable_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    total_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    notes: Mapped[str] = mapped_column(Text, default="")
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    resource: Mapped[ResourceORM] = relationship(back_populates="allocations")

Index("idx_allocations_resource", AllocationORM.resource_id)
Index("idx_allocations_project", AllocationORM.project_id)


class ScenarioORM(Base):
    __tablename__ = "scenarios"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    base_scenario_id: Mapped[Optional[str]] = mapped_column(
        String,
        ForeignKey("scenarios.id", ondelete="SET NULL"),
        nullable=True,
    )
    clone_from_base: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="DRAFT")
    resource_changes_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    timeline_changes_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    change_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    metrics_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    metrics_version: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    promoted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

Index("idx_scenarios_status", ScenarioORM.status)


class SystemSettingORM(Base):
    __tablename__ = "system_settings"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
