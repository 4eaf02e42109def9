"""
Base service utilities and shared imports.
All services should import from here for common functionality.
"""
from fastapi import HTTPException
import uuid
import json
import logging
from datetime import date, datetime, timedelta

from database import get_db_session, Base, engine
from models_orm import (
    UserORM, TrainerORM, ClientORM, TrainerRequestORM,
    WorkoutORM, WorkoutExerciseORM, WorkoutAssignmentORM, WorkoutLogORM,
    DailyCheckInORM, ProgressEntryORM, TrainerAlertORM, MessageORM,
    SessionORM
)

# Re-export for convenience
__all__ = [
    'HTTPException', 'uuid', 'json', 'logging', 'date', 'datetime', 'timedelta',
    'get_db_session', 'Base', 'engine',
    'UserORM', 'TrainerORM', 'ClientORM', 'TrainerRequestORM',
    'WorkoutORM', 'WorkoutExerciseORM', 'WorkoutAssignmentORM', 'WorkoutLogORM',
    'DailyCheckInORM', 'ProgressEntryORM', 'TrainerAlertORM', 'MessageORM',
    'SessionORM',
    'to_dict', 'load_json', 'now_iso', 'today_iso'
]

logger = logging.getLogger("trainr")


def now_iso() -> str:
    return datetime.utcnow().isoformat()


def today_iso() -> str:
    return date.today().isoformat()


def load_json(value, default=None):
    """Parse a *_json column, tolerating NULL and legacy plain strings."""
    if value is None or value == "":
        return default
    if isinstance(value, (list, dict)):
        return value
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        return default


def to_dict(row, **extra) -> dict:
    """
    Serialize an ORM row to a plain dict.

    Columns named ``foo_json`` come back decoded under ``foo``. Keyword
    arguments are merged on top (joined names, computed counts).
    """
    data = {}
    for column in row.__table__.columns:
        value = getattr(row, column.name)
        if column.name.endswith("_json"):
            data[column.name[:-5]] = load_json(value)
        elif column.name == "hashed_password":
            continue
        else:
            data[column.name] = value
    data.update(extra)
    return data
