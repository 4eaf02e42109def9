"""
Schedule Service - training sessions, recurring series, conflict checks
and trainer availability.
"""
from typing import List, Optional

from .base import (
    HTTPException, uuid, logging,
    get_db_session, UserORM, SessionORM,
    to_dict, now_iso, today_iso
)
from models_orm import (
    SessionChangeORM, TrainerAvailabilityORM,
    ProgramORM, ProgramWorkoutORM, ProgramWorkoutCompletionORM
)
from models import CreateSessionRequest, UpdateSessionRequest, WorkoutSessionsUpdate, AvailabilityRequest
from .program_calendar import (
    check_time_overlap, generate_recurring_dates, group_by_date, normalize_time,
    DEFAULT_SESSION_DURATION
)
from .trainer_service import get_owned_client

logger = logging.getLogger("trainr")

ACTIVE_STATUSES = ("scheduled", "confirmed")
SESSION_FIELDS = ("session_date", "session_time", "duration", "session_type", "location", "meeting_link", "notes", "status")


def find_conflict(db, trainer_id: str, session_date: str, session_time: str, duration: Optional[int],
                  exclude_id: Optional[str] = None) -> Optional[SessionORM]:
    """First active session of the trainer on that date whose time range overlaps."""
    query = db.query(SessionORM).filter(
        SessionORM.trainer_id == trainer_id,
        SessionORM.session_date == session_date,
        SessionORM.status.in_(ACTIVE_STATUSES)
    )
    if exclude_id:
        query = query.filter(SessionORM.id != exclude_id)
    for existing in query.all():
        if existing.session_time and check_time_overlap(session_time, duration, existing.session_time, existing.duration):
            return existing
    return None


def _client_name(db, user_id: str) -> str:
    user = db.query(UserORM).filter(UserORM.id == user_id).first()
    return user.name if user and user.name else "another client"


class ScheduleService:
    """Service for trainer and client schedules."""

    # --- TRAINER VIEWS ---

    def get_trainer_upcoming(self, trainer_id: str, start_date: Optional[str] = None,
                             end_date: Optional[str] = None, limit: Optional[int] = 100) -> List[dict]:
        db = get_db_session()
        try:
            query = db.query(SessionORM, UserORM).join(
                UserORM, SessionORM.client_id == UserORM.id
            ).filter(
                SessionORM.trainer_id == trainer_id,
                SessionORM.status.in_(ACTIVE_STATUSES),
                SessionORM.session_date >= (start_date or today_iso())
            )
            if end_date:
                query = query.filter(SessionORM.session_date <= end_date)
            query = query.order_by(SessionORM.session_date, SessionORM.session_time)
            if limit and 0 < limit <= 1000:
                query = query.limit(limit)
            return [
                to_dict(s, client_name=u.name, client_email=u.email)
                for s, u in query.all()
            ]
        finally:
            db.close()

    def get_trainer_calendar(self, trainer_id: str, start: Optional[str] = None, end: Optional[str] = None) -> dict:
        """All of the trainer's sessions in a date range, grouped by session date."""
        db = get_db_session()
        try:
            query = db.query(SessionORM, UserORM).join(
                UserORM, SessionORM.client_id == UserORM.id
            ).filter(SessionORM.trainer_id == trainer_id)
            if start:
                query = query.filter(SessionORM.session_date >= start)
            if end:
                query = query.filter(SessionORM.session_date <= end)
            sessions = [
                to_dict(s, client_name=u.name)
                for s, u in query.order_by(SessionORM.session_date, SessionORM.session_time).all()
            ]
            return group_by_date(sessions, key="session_date")
        finally:
            db.close()

    def get_client_sessions(self, trainer_id: str, client_id: str,
                            start_date: Optional[str] = None, end_date: Optional[str] = None) -> List[dict]:
        db = get_db_session()
        try:
            get_owned_client(db, trainer_id, client_id)
            query = db.query(SessionORM).filter(
                SessionORM.client_id == client_id,
                SessionORM.trainer_id == trainer_id
            )
            if start_date and end_date:
                query = query.filter(SessionORM.session_date.between(start_date, end_date))
            return [to_dict(s) for s in query.order_by(SessionORM.session_date, SessionORM.session_time).all()]
        finally:
            db.close()

    # --- CLIENT VIEWS ---

    def get_client_upcoming(self, client_id: str) -> List[dict]:
        """Upcoming sessions that came from a program."""
        db = get_db_session()
        try:
            rows = db.query(SessionORM, UserORM, ProgramWorkoutORM, ProgramORM).join(
                UserORM, SessionORM.trainer_id == UserORM.id
            ).outerjoin(
                ProgramWorkoutORM, SessionORM.program_workout_id == ProgramWorkoutORM.id
            ).outerjoin(
                ProgramORM, SessionORM.program_id == ProgramORM.id
            ).filter(
                SessionORM.client_id == client_id,
                SessionORM.status.in_(ACTIVE_STATUSES),
                SessionORM.session_date >= today_iso(),
                (SessionORM.program_id.isnot(None)) | (SessionORM.program_workout_id.isnot(None))
            ).order_by(SessionORM.session_date, SessionORM.session_time).limit(20).all()
            return [
                to_dict(
                    s,
                    trainer_name=trainer.name,
                    workout_name=workout.workout_name if workout else None,
                    program_name=program.name if program else None
                )
                for s, trainer, workout, program in rows
            ]
        finally:
            db.close()

    def get_today_completed(self, client_id: str) -> dict:
        db = get_db_session()
        try:
            today = today_iso()
            has_session = db.query(SessionORM).filter(
                SessionORM.client_id == client_id,
                SessionORM.session_date == today,
                SessionORM.status == "completed"
            ).count() > 0
            has_workout = db.query(ProgramWorkoutCompletionORM).filter(
                ProgramWorkoutCompletionORM.client_id == client_id,
                ProgramWorkoutCompletionORM.completed_date == today
            ).count() > 0
            return {
                "hasCompleted": has_session or has_workout,
                "hasCompletedSession": has_session,
                "hasCompletedWorkout": has_workout,
            }
        finally:
            db.close()

    # --- CREATE / UPDATE / CANCEL ---

    def create_session(self, trainer_id: str, data: CreateSessionRequest) -> dict:
        """
        Create a single session, or a recurring series when isRecurring and
        recurringEndDate are given.

        A clash on the first date fails the whole request. Later dates that
        clash are skipped and reported under "conflicts".
        """
        if not data.client_id or not data.session_date or not data.session_time:
            raise HTTPException(status_code=400, detail="Client ID, date, and time are required")

        session_time = normalize_time(data.session_time)
        duration = data.duration or DEFAULT_SESSION_DURATION

        db = get_db_session()
        try:
            get_owned_client(db, trainer_id, data.client_id)

            def new_session(session_date: str, **extra) -> SessionORM:
                session = SessionORM(
                    id=str(uuid.uuid4()),
                    trainer_id=trainer_id,
                    client_id=data.client_id,
                    session_date=session_date,
                    session_time=session_time,
                    duration=duration,
                    session_type=data.session_type or "in_person",
                    location=data.location,
                    meeting_link=data.meeting_link,
                    notes=data.notes,
                    status="scheduled",
                    created_at=now_iso(),
                    **extra
                )
                db.add(session)
                db.flush()
                return session

            if not (data.is_recurring and data.recurring_end_date):
                clash = find_conflict(db, trainer_id, data.session_date, session_time, duration)
                if clash:
                    raise HTTPException(
                        status_code=400,
                        detail=f"This session overlaps with an existing session for "
                               f"{_client_name(db, clash.client_id)} at {clash.session_time}"
                    )
                session = new_session(data.session_date)
                db.commit()
                logger.info(f"Trainer {trainer_id} scheduled session {session.id} on {data.session_date}")
                return to_dict(session)

            pattern = data.recurring_pattern or "weekly"
            dates = generate_recurring_dates(data.session_date, data.recurring_end_date, pattern)
            if not dates:
                raise HTTPException(status_code=400, detail="No valid dates found for recurring pattern")

            clash = find_conflict(db, trainer_id, dates[0], session_time, duration)
            if clash:
                raise HTTPException(
                    status_code=400,
                    detail=f"The first session overlaps with an existing session for "
                           f"{_client_name(db, clash.client_id)} at {clash.session_time} on {dates[0]}"
                )

            series = dict(is_recurring=True, recurring_pattern=pattern, day_of_week=data.day_of_week)
            parent = new_session(dates[0], recurring_end_date=data.recurring_end_date, **series)
            created = [parent]
            conflicts = []
            for session_date in dates[1:]:
                if find_conflict(db, trainer_id, session_date, session_time, duration):
                    conflicts.append(session_date)
                    continue
                created.append(new_session(session_date, recurring_parent_id=parent.id, **series))

            db.commit()

            message = f"Created {len(created)} recurring session{'s' if len(created) != 1 else ''}"
            if conflicts:
                shown = ", ".join(conflicts[:3]) + ("..." if len(conflicts) > 3 else "")
                message += (f". {len(conflicts)} date{'s' if len(conflicts) != 1 else ''} "
                            f"skipped due to conflicts: {shown}")
            logger.info(f"Trainer {trainer_id}: {message}")

            result = {
                "message": message,
                "sessions": [to_dict(s) for s in created],
                "parentId": parent.id,
            }
            if conflicts:
                result["conflicts"] = conflicts
            return result
        except HTTPException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating session for trainer {trainer_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create session: {str(e)}")
        finally:
            db.close()

    def _get_owned_session(self, db, trainer_id: str, session_id: str) -> SessionORM:
        session = db.query(SessionORM).filter(
            SessionORM.id == session_id,
            SessionORM.trainer_id == trainer_id
        ).first()
        if not session:
            raise HTTPException(status_code=404, detail="Session not found")
        return session

    def update_session(self, trainer_id: str, session_id: str, data: UpdateSessionRequest) -> dict:
        updates = data.model_dump(include=set(SESSION_FIELDS), exclude_unset=True)
        if not updates:
            raise HTTPException(status_code=400, detail="No fields to update")
        if updates.get("session_time"):
            updates["session_time"] = normalize_time(updates["session_time"])

        db = get_db_session()
        try:
            session = self._get_owned_session(db, trainer_id, session_id)
            original_date, original_time = session.session_date, session.session_time
            final_date = updates.get("session_date", session.session_date)
            final_time = updates.get("session_time", session.session_time)
            final_duration = updates.get("duration", session.duration)

            if {"session_date", "session_time", "duration"} & set(updates):
                clash = find_conflict(db, trainer_id, final_date, final_time, final_duration, exclude_id=session_id)
                if clash:
                    raise HTTPException(
                        status_code=400,
                        detail=f"This session overlaps with an existing session for "
                               f"{_client_name(db, clash.client_id)} at {clash.session_time}"
                    )

            for field, value in updates.items():
                setattr(session, field, value)
            session.updated_at = now_iso()

            if final_date != original_date or final_time != original_time:
                db.add(SessionChangeORM(
                    id=str(uuid.uuid4()),
                    session_id=session_id,
                    change_type="rescheduled",
                    original_date=original_date,
                    original_time=original_time,
                    new_date=final_date,
                    new_time=final_time,
                    reason=data.reason,
                    requested_by=trainer_id,
                    created_at=now_iso()
                ))

            db.commit()
            db.refresh(session)
            return to_dict(session)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating session {session_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to update session: {str(e)}")
        finally:
            db.close()

    def cancel_session(self, trainer_id: str, session_id: str, reason: Optional[str] = None,
                       series: bool = False) -> dict:
        """Cancel one session, or with series=True also the later sessions of its series."""
        db = get_db_session()
        try:
            session = self._get_owned_session(db, trainer_id, session_id)
            targets = [session]
            if series:
                parent_id = session.recurring_parent_id or (session.id if session.is_recurring else None)
                if parent_id:
                    targets = db.query(SessionORM).filter(
                        (SessionORM.id == parent_id) | (SessionORM.recurring_parent_id == parent_id),
                        SessionORM.trainer_id == trainer_id,
                        SessionORM.session_date >= session.session_date,
                        SessionORM.status.in_(ACTIVE_STATUSES)
                    ).all()
                    if session not in targets:
                        targets.append(session)

            for target in targets:
                db.add(SessionChangeORM(
                    id=str(uuid.uuid4()),
                    session_id=target.id,
                    change_type="cancelled",
                    original_date=target.session_date,
                    original_time=target.session_time,
                    reason=reason,
                    requested_by=trainer_id,
                    created_at=now_iso()
                ))
                target.status = "cancelled"
                target.updated_at = now_iso()

            db.commit()
            db.refresh(session)
            logger.info(f"Trainer {trainer_id} cancelled {len(targets)} session(s) starting at {session_id}")
            result = to_dict(session)
            if series:
                result["cancelledCount"] = len(targets)
            return result
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error cancelling session {session_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to cancel session: {str(e)}")
        finally:
            db.close()

    # --- PROGRAM WORKOUT SESSIONS ---

    def get_workout_sessions(self, trainer_id: str, workout_id: str) -> List[dict]:
        db = get_db_session()
        try:
            rows = db.query(SessionORM, UserORM).join(
                UserORM, SessionORM.client_id == UserORM.id
            ).filter(
                SessionORM.program_workout_id == workout_id,
                SessionORM.trainer_id == trainer_id,
                SessionORM.status.in_(ACTIVE_STATUSES)
            ).order_by(SessionORM.session_date, SessionORM.session_time).all()
            return [to_dict(s, client_name=u.name) for s, u in rows]
        finally:
            db.close()

    def update_workout_sessions(self, trainer_id: str, workout_id: str, data: WorkoutSessionsUpdate) -> dict:
        updates = data.model_dump(exclude_unset=True)
        if not updates:
            raise HTTPException(status_code=400, detail="No fields to update")
        if updates.get("session_time"):
            updates["session_time"] = normalize_time(updates["session_time"])
        for field in ("location", "meeting_link"):
            if field in updates:
                updates[field] = updates[field] or None

        db = get_db_session()
        try:
            row = db.query(ProgramWorkoutORM, ProgramORM).join(
                ProgramORM, ProgramWorkoutORM.program_id == ProgramORM.id
            ).filter(ProgramWorkoutORM.id == workout_id).first()
            if not row:
                raise HTTPException(status_code=404, detail="Workout not found")
            if row[1].trainer_id != trainer_id:
                raise HTTPException(status_code=403, detail="Not authorized")

            sessions = db.query(SessionORM).filter(
                SessionORM.program_workout_id == workout_id,
                SessionORM.trainer_id == trainer_id,
                SessionORM.status.in_(ACTIVE_STATUSES)
            ).all()
            for session in sessions:
                for field, value in updates.items():
                    setattr(session, field, value)
                session.updated_at = now_iso()
            db.commit()
            return {"message": f"Updated {len(sessions)} session(s)", "updatedCount": len(sessions)}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating sessions of workout {workout_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to update workout sessions: {str(e)}")
        finally:
            db.close()

    # --- AVAILABILITY ---

    def get_availability(self, trainer_id: str) -> List[dict]:
        db = get_db_session()
        try:
            rows = db.query(TrainerAvailabilityORM).filter(
                TrainerAvailabilityORM.trainer_id == trainer_id
            ).order_by(TrainerAvailabilityORM.day_of_week, TrainerAvailabilityORM.start_time).all()
            return [to_dict(r) for r in rows]
        finally:
            db.close()

    def set_availability(self, trainer_id: str, data: AvailabilityRequest) -> dict:
        if data.day_of_week is None or not data.start_time or not data.end_time:
            raise HTTPException(status_code=400, detail="Day of week, start time, and end time are required")

        start_time = normalize_time(data.start_time)
        db = get_db_session()
        try:
            slot = db.query(TrainerAvailabilityORM).filter(
                TrainerAvailabilityORM.trainer_id == trainer_id,
                TrainerAvailabilityORM.day_of_week == data.day_of_week,
                TrainerAvailabilityORM.start_time == start_time
            ).first()
            if not slot:
                slot = TrainerAvailabilityORM(
                    id=str(uuid.uuid4()),
                    trainer_id=trainer_id,
                    day_of_week=data.day_of_week,
                    start_time=start_time
                )
                db.add(slot)
            slot.end_time = normalize_time(data.end_time)
            slot.is_available = data.is_available is not False
            slot.updated_at = now_iso()
            db.commit()
            db.refresh(slot)
            return to_dict(slot)
        except Exception as e:
            db.rollback()
            logger.error(f"Error setting availability for trainer {trainer_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to set availability: {str(e)}")
        finally:
            db.close()


# Singleton instance
schedule_service = ScheduleService()

def get_schedule_service() -> ScheduleService:
    """Dependency injection helper."""
    return schedule_service
