# modhall/db/models.py
from __future__ import annotations

from sqlalchemy import Boolean, Column, JSON, String, Text
from sqlalchemy.orm import declarative_base

__all__ = ["Base", "SettingRow", "ProfileRow"]

Base = declarative_base()



class SettingRow(Base):
    """Scalar key -> string settings (install override, active profile, ...)."""
    __tablename__ = "app_settings"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)



class ProfileRow(Base):
    __tablename__ = "profiles"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    enabled_mods = Column(JSON, nullable=False, default=list)  # ordered list of mod ids
    readonly = Column(Boolean, nullable=False, default=False)
