# SQLAlchemy Models Package

from .property import Property, UserSettings, USER_SETTINGS_ID

__all__ = [
    "Property",
    "UserSettings",
    "USER_SETTINGS_ID",
]
