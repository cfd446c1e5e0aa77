"""
SQLAlchemy models for NestScore.

Scores are never stored: they are derived from `answers` and the current
weights every time a property is read.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import String, Float, Text, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from nestscore.database import Base

USER_SETTINGS_ID = "user-settings"


class Property(Base):
    """
    A candidate property being evaluated.

    `answers` maps question id -> answer value (str for select questions,
    bool for boolean questions, number for sliders). It is never validated
    against the catalogue on write; stale keys are ignored when scoring.
    """

    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(primary_key=True, index=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    address: Mapped[str] = mapped_column(String(500), default="")
    postcode: Mapped[str] = mapped_column(String(20), default="", index=True)
    price: Mapped[Optional[float]] = mapped_column(Float)
    agent: Mapped[Optional[str]] = mapped_column(String(255))
    viewing_date: Mapped[Optional[str]] = mapped_column(String(50))
    listing_url: Mapped[Optional[str]] = mapped_column(String(1000))

    answers: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict)
    notes: Mapped[str] = mapped_column(Text, default="")

    # Geolocation (from postcode lookup)
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, name='{self.name}')>"


class UserSettings(Base):
    """
    Single-row user settings: category weights, work location and theme.

    Created on first read with the catalogue's default weights.
    """

    __tablename__ = "settings"

    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=USER_SETTINGS_ID)
    weights: Mapped[Dict[str, int]] = mapped_column(JSON, default=dict)
    work_postcode: Mapped[Optional[str]] = mapped_column(String(20))
    work_latitude: Mapped[Optional[float]] = mapped_column(Float)
    work_longitude: Mapped[Optional[float]] = mapped_column(Float)
    theme: Mapped[str] = mapped_column(String(10), default="system")  # "light", "dark", "system"

    def __repr__(self) -> str:
        return f"<UserSettings(id='{self.id}', theme='{self.theme}')>"
