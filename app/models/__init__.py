"""Database models."""

from app.models.admin_activities import admin_activities
from app.models.admins import admins
from app.models.blacklist import blacklist
from app.models.doctor_suspensions import doctor_suspensions
from app.models.doctors import doctors
from app.models.metadata import metadata
from app.models.notifications import notifications

__all__ = [
    "admin_activities",
    "admins",
    "blacklist",
    "doctor_suspensions",
    "doctors",
    "metadata",
    "notifications",
]
