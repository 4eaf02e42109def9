"""
Program Service - multi-week training programs, their assignment to
clients, the session calendar they generate, system templates and the
exercise library.
"""
from typing import List, Optional

from sqlalchemy import func

from .base import (
    HTTPException, uuid, json, logging,
    get_db_session, UserORM, TrainerORM, ClientORM, SessionORM,
    to_dict, load_json, now_iso, today_iso
)
from models_orm import (
    ProgramORM, ProgramWeekORM, ProgramWorkoutORM, ProgramWorkoutExerciseORM,
    ProgramAssignmentORM, ProgramWorkoutCompletionORM,
    ProgramTemplateORM, TemplateWorkoutORM, TemplateWorkoutExerciseORM, ExerciseORM
)
from models import (
    CreateProgramRequest, UpdateProgramRequest, AssignProgramRequest,
    CreateSessionsRequest, CompleteProgramWorkoutRequest,
    RecommendProgramRequest, FromTemplateRequest, ProgramWorkoutInput
)
from .program_calendar import (
    calculate_session_date, generate_recurring_dates, session_slot_for_day,
    normalize_time, group_by_date, DEFAULT_SESSION_TIME, DEFAULT_SESSION_DURATION
)

logger = logging.getLogger("trainr")

DIFFICULTY_RANK = {"beginner": 1, "intermediate": 2, "advanced": 3}
INACTIVE_SESSION_STATUSES = ("cancelled", "completed")


def _text(value):
    return str(value) if value not in (None, "") else None


def _exercise_dict(e) -> dict:
    return {
        "id": e.id,
        "exercise_name": e.exercise_name,
        "exercise_type": e.exercise_type,
        "sets": e.sets,
        "reps": e.reps,
        "weight": e.weight,
        "duration": e.duration,
        "rest": e.rest,
        "tempo": e.tempo,
        "notes": e.notes,
        "order_index": e.order_index,
    }


def load_program_workouts(db, program_id: str) -> List[dict]:
    """Workouts ordered by week, day and order, each with its exercises."""
    workouts = db.query(ProgramWorkoutORM).filter(
        ProgramWorkoutORM.program_id == program_id
    ).order_by(
        ProgramWorkoutORM.week_number, ProgramWorkoutORM.day_number, ProgramWorkoutORM.order_index
    ).all()
    result = []
    for w in workouts:
        exercises = db.query(ProgramWorkoutExerciseORM).filter(
            ProgramWorkoutExerciseORM.program_workout_id == w.id
        ).order_by(ProgramWorkoutExerciseORM.order_index).all()
        result.append(to_dict(w, exercises=[_exercise_dict(e) for e in exercises]))
    return result


def load_week_names(db, program_id: str) -> dict:
    weeks = db.query(ProgramWeekORM).filter(
        ProgramWeekORM.program_id == program_id
    ).order_by(ProgramWeekORM.week_number).all()
    return {str(w.week_number): w.week_name for w in weeks}


def add_program_workouts(db, program_id: str, workouts: List[ProgramWorkoutInput], skip_nameless: bool = False):
    for workout in workouts:
        program_workout = ProgramWorkoutORM(
            id=str(uuid.uuid4()),
            program_id=program_id,
            workout_name=(workout.workout_name or "").strip(),
            week_number=workout.week_number or 1,
            day_number=workout.day_number or 1,
            order_index=workout.order_index or 0
        )
        db.add(program_workout)
        for i, ex in enumerate(workout.exercises):
            name = (ex.exercise_name or "").strip()
            if skip_nameless and not name:
                continue
            db.add(ProgramWorkoutExerciseORM(
                id=str(uuid.uuid4()),
                program_workout_id=program_workout.id,
                exercise_name=name,
                exercise_type=ex.exercise_type,
                sets=ex.sets,
                reps=_text(ex.reps),
                weight=_text(ex.weight),
                duration=_text(ex.duration),
                rest=_text(ex.rest),
                tempo=ex.tempo,
                notes=ex.notes,
                order_index=ex.order_index if ex.order_index is not None else i
            ))


def trainer_session_defaults(db, trainer_id: str) -> dict:
    trainer = db.query(TrainerORM).filter(TrainerORM.user_id == trainer_id).first()
    if not trainer:
        return {
            "time": DEFAULT_SESSION_TIME, "duration": DEFAULT_SESSION_DURATION,
            "type": "in_person", "location": None, "day_times": {}, "day_durations": {},
        }
    return {
        "time": trainer.default_session_time or DEFAULT_SESSION_TIME,
        "duration": trainer.default_session_duration or DEFAULT_SESSION_DURATION,
        "type": trainer.default_session_type or "in_person",
        "location": trainer.default_session_location,
        "day_times": load_json(trainer.day_specific_session_times_json, {}),
        "day_durations": load_json(trainer.day_specific_session_durations_json, {}),
    }


def score_template(template, profile: dict):
    """Match score for a template against a client profile, with the reasons."""
    score = 0
    reasons = []
    level = template.target_experience_level
    experience = profile["experience_level"]
    if level == experience or level == "all":
        score += 10
        reasons.append(f"Designed for {experience} lifters")
    elif (experience, level) in (("beginner", "intermediate"), ("intermediate", "advanced")):
        score += 5
        reasons.append(f"A step up from {experience}")

    if template.target_goal == profile["goal"]:
        score += 10
        reasons.append(f"Targets {profile['goal'].replace('_', ' ')}")

    days = profile["days_per_week"]
    if template.target_days_per_week == days:
        score += 8
        reasons.append(f"{days} training days per week")
    elif template.target_days_per_week is not None and abs(template.target_days_per_week - days) <= 1:
        score += 4
        reasons.append(f"{template.target_days_per_week} days per week, close to {days}")

    equipment = profile["equipment"]
    if template.target_equipment == equipment:
        score += 8
        reasons.append(f"Uses {equipment.replace('_', ' ')}")
    elif (equipment == "full_gym" and template.target_equipment != "bodyweight_only") or (
        equipment == "dumbbells_only" and template.target_equipment in ("dumbbells_only", "home_gym", "full_gym")
    ):
        score += 4
        reasons.append("Compatible with available equipment")

    duration = profile["session_duration"]
    if template.target_session_duration == duration:
        score += 5
        reasons.append(f"{duration}-minute sessions")
    elif template.target_session_duration is not None and abs(template.target_session_duration - duration) <= 15:
        score += 2
        reasons.append(f"{template.target_session_duration}-minute sessions")

    return score, reasons


class ProgramService:
    """Service for programs, templates and the exercise library."""

    def _get_owned_program(self, db, trainer_id: str, program_id: str, action: str = "update") -> ProgramORM:
        program = db.query(ProgramORM).filter(ProgramORM.id == program_id).first()
        if not program:
            raise HTTPException(status_code=404, detail="Program not found")
        if program.trainer_id != trainer_id:
            raise HTTPException(status_code=403, detail=f"Not authorized to {action} this program")
        return program

    def _program_payload(self, db, program: ProgramORM) -> dict:
        return to_dict(
            program,
            week_names=load_week_names(db, program.id),
            workouts=load_program_workouts(db, program.id)
        )

    # --- CRUD ---

    def create_program(self, trainer_id: str, data: CreateProgramRequest) -> dict:
        db = get_db_session()
        try:
            program = ProgramORM(
                id=str(uuid.uuid4()),
                trainer_id=trainer_id,
                client_id=data.client_id,
                name=data.name,
                description=data.description,
                split_type=data.split_type,
                duration_weeks=data.duration_weeks or 4,
                is_template=data.is_template,
                start_date=data.start_date,
                created_at=now_iso()
            )
            db.add(program)
            if data.workouts:
                add_program_workouts(db, program.id, data.workouts)
            db.commit()
            logger.info(f"Trainer {trainer_id} created program {program.id} ({len(data.workouts or [])} workouts)")
            return self._program_payload(db, program)
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating program for trainer {trainer_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create program: {str(e)}")
        finally:
            db.close()

    def get_trainer_programs(self, trainer_id: str) -> List[dict]:
        db = get_db_session()
        try:
            programs = db.query(ProgramORM).filter(
                ProgramORM.trainer_id == trainer_id
            ).order_by(ProgramORM.created_at.desc()).all()
            result = []
            for p in programs:
                workout_count = db.query(func.count(ProgramWorkoutORM.id)).filter(
                    ProgramWorkoutORM.program_id == p.id
                ).scalar()
                assigned = db.query(func.count(func.distinct(ProgramAssignmentORM.client_id))).filter(
                    ProgramAssignmentORM.program_id == p.id,
                    ProgramAssignmentORM.status == "active"
                ).scalar()
                result.append(to_dict(p, workout_count=workout_count or 0, assigned_clients_count=assigned or 0))
            return result
        finally:
            db.close()

    def get_client_programs(self, client_id: str) -> List[dict]:
        """Active assignments of a client with program and trainer details."""
        db = get_db_session()
        try:
            rows = db.query(ProgramAssignmentORM, ProgramORM, UserORM).join(
                ProgramORM, ProgramAssignmentORM.program_id == ProgramORM.id
            ).join(
                UserORM, ProgramORM.trainer_id == UserORM.id
            ).filter(
                ProgramAssignmentORM.client_id == client_id,
                ProgramAssignmentORM.status == "active"
            ).order_by(ProgramAssignmentORM.assigned_date.desc()).all()
            result = []
            for assignment, program, trainer in rows:
                workout_count = db.query(func.count(ProgramWorkoutORM.id)).filter(
                    ProgramWorkoutORM.program_id == program.id
                ).scalar()
                result.append(to_dict(
                    program,
                    trainer_name=trainer.name,
                    workout_count=workout_count or 0,
                    assigned_date=assignment.assigned_date,
                    start_date=assignment.start_date or program.start_date,
                    assignment_status=assignment.status
                ))
            return result
        finally:
            db.close()

    def get_trainer_client_programs(self, trainer_id: str, client_id: str) -> List[dict]:
        db = get_db_session()
        try:
            client = db.query(ClientORM).filter(
                ClientORM.user_id == client_id,
                ClientORM.trainer_id == trainer_id
            ).first()
            if not client:
                raise HTTPException(status_code=404, detail="Client not found")
        finally:
            db.close()
        return self.get_client_programs(client_id)

    def get_program(self, user: UserORM, program_id: str) -> dict:
        db = get_db_session()
        try:
            program = db.query(ProgramORM).filter(ProgramORM.id == program_id).first()
            if not program:
                raise HTTPException(status_code=404, detail="Program not found")
            if not self._can_view(db, user, program):
                raise HTTPException(status_code=403, detail="Not authorized to view this program")

            trainer = db.query(UserORM).filter(UserORM.id == program.trainer_id).first()
            client = db.query(UserORM).filter(UserORM.id == program.client_id).first() if program.client_id else None
            payload = self._program_payload(db, program)
            payload["trainer_name"] = trainer.name if trainer else None
            payload["client_name"] = client.name if client else None
            return payload
        finally:
            db.close()

    def _can_view(self, db, user: UserORM, program: ProgramORM) -> bool:
        if program.trainer_id == user.id or program.client_id == user.id:
            return True
        return db.query(ProgramAssignmentORM).filter(
            ProgramAssignmentORM.program_id == program.id,
            ProgramAssignmentORM.client_id == user.id
        ).first() is not None

    def update_week_name(self, trainer_id: str, program_id: str, week_number: int, week_name: Optional[str]) -> dict:
        db = get_db_session()
        try:
            self._get_owned_program(db, trainer_id, program_id)
            week = db.query(ProgramWeekORM).filter(
                ProgramWeekORM.program_id == program_id,
                ProgramWeekORM.week_number == week_number
            ).first()
            if not week:
                week = ProgramWeekORM(id=str(uuid.uuid4()), program_id=program_id, week_number=week_number)
                db.add(week)
            week.week_name = week_name or None
            week.updated_at = now_iso()
            db.commit()
            db.refresh(week)
            return {"message": "Week name updated successfully", "week": to_dict(week)}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating week name for program {program_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to update week name: {str(e)}")
        finally:
            db.close()

    def update_program(self, trainer_id: str, program_id: str, data: UpdateProgramRequest) -> dict:
        """Partial update. A workouts list replaces every existing workout."""
        if data.workouts is not None:
            for workout in data.workouts:
                if not workout.workout_name or not workout.workout_name.strip():
                    raise HTTPException(status_code=400, detail="Workout name is required for all workouts")

        db = get_db_session()
        try:
            program = self._get_owned_program(db, trainer_id, program_id)
            for field in ("name", "description", "split_type", "duration_weeks", "start_date", "end_date"):
                value = getattr(data, field)
                if value is not None:
                    setattr(program, field, value)
            program.updated_at = now_iso()

            if data.workouts is not None:
                old_ids = [w.id for w in db.query(ProgramWorkoutORM.id).filter(
                    ProgramWorkoutORM.program_id == program_id
                ).all()]
                if old_ids:
                    db.query(ProgramWorkoutExerciseORM).filter(
                        ProgramWorkoutExerciseORM.program_workout_id.in_(old_ids)
                    ).delete(synchronize_session=False)
                    # Sessions keep their date but lose the link to the removed workout
                    db.query(SessionORM).filter(
                        SessionORM.program_workout_id.in_(old_ids)
                    ).update({"program_workout_id": None}, synchronize_session=False)
                    db.query(ProgramWorkoutCompletionORM).filter(
                        ProgramWorkoutCompletionORM.program_workout_id.in_(old_ids)
                    ).delete(synchronize_session=False)
                    db.query(ProgramWorkoutORM).filter(
                        ProgramWorkoutORM.program_id == program_id
                    ).delete(synchronize_session=False)
                add_program_workouts(db, program_id, data.workouts, skip_nameless=True)

            db.commit()
            logger.info(f"Program {program_id} updated")
            return self._program_payload(db, program)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating program {program_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to update program: {str(e)}")
        finally:
            db.close()

    def delete_program(self, trainer_id: str, program_id: str) -> dict:
        db = get_db_session()
        try:
            self._get_owned_program(db, trainer_id, program_id, action="delete")
            workout_ids = [w.id for w in db.query(ProgramWorkoutORM.id).filter(
                ProgramWorkoutORM.program_id == program_id
            ).all()]
            if workout_ids:
                db.query(ProgramWorkoutExerciseORM).filter(
                    ProgramWorkoutExerciseORM.program_workout_id.in_(workout_ids)
                ).delete(synchronize_session=False)
                db.query(ProgramWorkoutCompletionORM).filter(
                    ProgramWorkoutCompletionORM.program_workout_id.in_(workout_ids)
                ).delete(synchronize_session=False)
            db.query(SessionORM).filter(SessionORM.program_id == program_id).update(
                {"program_id": None, "program_workout_id": None}, synchronize_session=False
            )
            db.query(ProgramWorkoutORM).filter(ProgramWorkoutORM.program_id == program_id).delete(synchronize_session=False)
            db.query(ProgramWeekORM).filter(ProgramWeekORM.program_id == program_id).delete(synchronize_session=False)
            db.query(ProgramAssignmentORM).filter(ProgramAssignmentORM.program_id == program_id).delete(synchronize_session=False)
            db.query(ProgramORM).filter(ProgramORM.id == program_id).delete(synchronize_session=False)
            db.commit()
            logger.info(f"Program {program_id} deleted by {trainer_id}")
            return {"message": "Program deleted successfully"}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error deleting program {program_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to delete program: {str(e)}")
        finally:
            db.close()

    # --- ASSIGNMENT & SESSIONS ---

    def assign_program(self, trainer_id: str, program_id: str, data: AssignProgramRequest) -> dict:
        """
        Assign the program and put every program workout on the calendar.

        Each workout lands on calculate_session_date(start, week, day) at the
        trainer's default (or day-specific) time. Time clashes with other
        sessions are counted but never block; an existing session for the
        same client, workout and date is left alone.
        """
        db = get_db_session()
        try:
            program = self._get_owned_program(db, trainer_id, program_id, action="assign")
            if not data.client_id or not db.query(UserORM).filter(UserORM.id == data.client_id).first():
                raise HTTPException(status_code=400, detail="Invalid client_id")

            start_date = data.start_date or today_iso()
            assignment = db.query(ProgramAssignmentORM).filter(
                ProgramAssignmentORM.program_id == program_id,
                ProgramAssignmentORM.client_id == data.client_id
            ).first()
            if assignment:
                assignment.start_date = start_date
                assignment.status = "active"
                assignment.updated_at = now_iso()
            else:
                db.add(ProgramAssignmentORM(
                    id=str(uuid.uuid4()),
                    program_id=program_id,
                    client_id=data.client_id,
                    assigned_date=today_iso(),
                    start_date=start_date,
                    status="active"
                ))

            defaults = trainer_session_defaults(db, trainer_id)
            workouts = db.query(ProgramWorkoutORM).filter(
                ProgramWorkoutORM.program_id == program_id
            ).order_by(
                ProgramWorkoutORM.week_number, ProgramWorkoutORM.day_number, ProgramWorkoutORM.order_index
            ).all()

            sessions_created = 0
            conflicts_detected = 0
            for workout in workouts:
                session_date = calculate_session_date(start_date, workout.week_number or 1, workout.day_number or 1)
                session_time, duration = session_slot_for_day(
                    workout.day_number or 1, defaults["time"], defaults["duration"],
                    defaults["day_times"], defaults["day_durations"]
                )

                clash = db.query(SessionORM).filter(
                    SessionORM.trainer_id == trainer_id,
                    SessionORM.session_date == session_date,
                    SessionORM.session_time == session_time,
                    SessionORM.status.notin_(INACTIVE_SESSION_STATUSES)
                ).first()
                if clash:
                    conflicts_detected += 1

                duplicate = db.query(SessionORM).filter(
                    SessionORM.trainer_id == trainer_id,
                    SessionORM.client_id == data.client_id,
                    SessionORM.program_workout_id == workout.id,
                    SessionORM.session_date == session_date
                ).first()
                if duplicate:
                    continue

                db.add(SessionORM(
                    id=str(uuid.uuid4()),
                    trainer_id=trainer_id,
                    client_id=data.client_id,
                    program_id=program_id,
                    program_workout_id=workout.id,
                    session_date=session_date,
                    session_time=session_time,
                    duration=duration,
                    session_type=defaults["type"],
                    location=defaults["location"],
                    status="scheduled",
                    notes=f"From {program.name} - Week {workout.week_number}, Day {workout.day_number}",
                    created_at=now_iso()
                ))
                db.flush()
                sessions_created += 1

            db.commit()
            logger.info(
                f"Program {program_id} assigned to {data.client_id} from {start_date}: "
                f"{sessions_created} sessions, {conflicts_detected} conflicts"
            )
            return {
                "message": "Program assigned successfully",
                "sessionsCreated": sessions_created,
                "conflictsDetected": conflicts_detected,
                "totalWorkouts": len(workouts),
            }
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error assigning program {program_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to assign program: {str(e)}")
        finally:
            db.close()

    def get_assigned_clients(self, trainer_id: str, program_id: str) -> List[dict]:
        db = get_db_session()
        try:
            self._get_owned_program(db, trainer_id, program_id, action="view")
            rows = db.query(ProgramAssignmentORM, UserORM, ClientORM).join(
                UserORM, ProgramAssignmentORM.client_id == UserORM.id
            ).outerjoin(
                ClientORM, ClientORM.user_id == UserORM.id
            ).filter(
                ProgramAssignmentORM.program_id == program_id,
                ProgramAssignmentORM.status == "active"
            ).order_by(UserORM.name).all()
            return [{
                "client_id": a.client_id,
                "id": u.id,
                "name": u.name,
                "email": u.email,
                "client_table_id": c.id if c else None,
                "start_date": a.start_date,
            } for a, u, c in rows]
        finally:
            db.close()

    def create_workout_sessions(self, trainer_id: str, program_id: str, workout_id: str,
                                data: CreateSessionsRequest) -> dict:
        """Schedule one program workout for several clients, optionally repeating."""
        db = get_db_session()
        try:
            program = self._get_owned_program(db, trainer_id, program_id, action="schedule")
            workout = db.query(ProgramWorkoutORM).filter(
                ProgramWorkoutORM.id == workout_id,
                ProgramWorkoutORM.program_id == program_id
            ).first()
            if not workout:
                raise HTTPException(status_code=404, detail="Workout not found")

            start_date = program.start_date
            if not start_date:
                assignment = db.query(ProgramAssignmentORM).filter(
                    ProgramAssignmentORM.program_id == program_id,
                    ProgramAssignmentORM.start_date.isnot(None)
                ).order_by(ProgramAssignmentORM.assigned_date.desc()).first()
                start_date = assignment.start_date if assignment else None
            if not start_date:
                raise HTTPException(status_code=400, detail="Program start date is required to create sessions")

            first_date = data.session_date or calculate_session_date(
                start_date, workout.week_number or 1, workout.day_number or 1
            )
            if data.repeat and data.repeat_end_date:
                dates = generate_recurring_dates(first_date, data.repeat_end_date, data.repeat_pattern)
            else:
                dates = [first_date]

            defaults = trainer_session_defaults(db, trainer_id)
            slot_time, slot_duration = session_slot_for_day(
                workout.day_number or 1, defaults["time"], defaults["duration"],
                defaults["day_times"], defaults["day_durations"]
            )
            session_time = normalize_time(data.session_time) or slot_time
            duration = data.duration or slot_duration

            sessions_created = 0
            for client_id in data.client_ids:
                for session_date in dates:
                    existing = db.query(SessionORM).filter(
                        SessionORM.trainer_id == trainer_id,
                        SessionORM.client_id == client_id,
                        SessionORM.program_workout_id == workout_id,
                        SessionORM.session_date == session_date
                    ).first()
                    if existing:
                        continue
                    db.add(SessionORM(
                        id=str(uuid.uuid4()),
                        trainer_id=trainer_id,
                        client_id=client_id,
                        program_id=program_id,
                        program_workout_id=workout_id,
                        session_date=session_date,
                        session_time=session_time,
                        duration=duration,
                        session_type=data.session_type or "in_person",
                        location=data.location,
                        meeting_link=data.meeting_link,
                        status="scheduled",
                        notes=f"From {program.name or 'Program'} - Week {workout.week_number}, Day {workout.day_number}",
                        created_at=now_iso()
                    ))
                    db.flush()
                    sessions_created += 1

            db.commit()
            return {
                "message": "Sessions created successfully",
                "sessionsCreated": sessions_created,
                "totalSessions": len(dates) * len(data.client_ids),
            }
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating sessions for workout {workout_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create sessions: {str(e)}")
        finally:
            db.close()

    def complete_workout(self, client_id: str, workout_id: str, data: CompleteProgramWorkoutRequest) -> dict:
        db = get_db_session()
        try:
            workout = db.query(ProgramWorkoutORM).filter(ProgramWorkoutORM.id == workout_id).first()
            program = db.query(ProgramORM).filter(ProgramORM.id == workout.program_id).first() if workout else None
            assigned = program is not None and (
                program.client_id == client_id or db.query(ProgramAssignmentORM).filter(
                    ProgramAssignmentORM.program_id == program.id,
                    ProgramAssignmentORM.client_id == client_id,
                    ProgramAssignmentORM.status == "active"
                ).first() is not None
            )
            if not assigned:
                raise HTTPException(status_code=404, detail="Workout not found or not assigned to you")

            db.add(ProgramWorkoutCompletionORM(
                id=str(uuid.uuid4()),
                program_workout_id=workout_id,
                client_id=client_id,
                completed_date=today_iso(),
                exercises_completed_json=json.dumps(data.exercises_completed or {}),
                notes=data.notes,
                duration=data.duration,
                created_at=now_iso()
            ))
            db.commit()
            logger.info(f"Client {client_id} completed program workout {workout_id}")
            return {"message": "Workout completed successfully"}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error completing program workout {workout_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to complete workout: {str(e)}")
        finally:
            db.close()

    def get_program_calendar(self, user: UserORM, program_id: str, client_id: Optional[str] = None) -> dict:
        """
        Program workouts laid out on calendar dates for one client, grouped by
        date together with the sessions actually booked for that client.
        """
        db = get_db_session()
        try:
            program = db.query(ProgramORM).filter(ProgramORM.id == program_id).first()
            if not program:
                raise HTTPException(status_code=404, detail="Program not found")
            if user.role == "client":
                client_id = user.id
            elif program.trainer_id != user.id:
                raise HTTPException(status_code=403, detail="Not authorized to view this program")

            start_date = program.start_date
            if client_id:
                assignment = db.query(ProgramAssignmentORM).filter(
                    ProgramAssignmentORM.program_id == program_id,
                    ProgramAssignmentORM.client_id == client_id
                ).first()
                if user.role == "client" and not assignment and program.client_id != client_id:
                    raise HTTPException(status_code=403, detail="Not authorized to view this program")
                if assignment and assignment.start_date:
                    start_date = assignment.start_date
            if not start_date:
                raise HTTPException(status_code=400, detail="Program start date is required to build the calendar")

            # each program workout maps to one date, so a late completion still counts
            completions = {}
            if client_id:
                for c in db.query(ProgramWorkoutCompletionORM).filter(
                    ProgramWorkoutCompletionORM.client_id == client_id
                ).order_by(ProgramWorkoutCompletionORM.completed_date).all():
                    completions.setdefault(c.program_workout_id, c.completed_date)

            entries = []
            for w in db.query(ProgramWorkoutORM).filter(ProgramWorkoutORM.program_id == program_id).order_by(
                ProgramWorkoutORM.week_number, ProgramWorkoutORM.day_number, ProgramWorkoutORM.order_index
            ).all():
                workout_date = calculate_session_date(start_date, w.week_number or 1, w.day_number or 1)
                entries.append({
                    "date": workout_date,
                    "kind": "workout",
                    "program_workout_id": w.id,
                    "workout_name": w.workout_name,
                    "week_number": w.week_number,
                    "day_number": w.day_number,
                    "completed": w.id in completions,
                    "completed_date": completions.get(w.id),
                })

            session_query = db.query(SessionORM).filter(SessionORM.program_id == program_id)
            if client_id:
                session_query = session_query.filter(SessionORM.client_id == client_id)
            for s in session_query.all():
                entries.append({
                    "date": s.session_date,
                    "kind": "session",
                    "session_id": s.id,
                    "program_workout_id": s.program_workout_id,
                    "client_id": s.client_id,
                    "session_time": s.session_time,
                    "duration": s.duration,
                    "status": s.status,
                })

            days = [
                {"date": day, "items": sorted(items, key=lambda i: (i["kind"], i.get("session_time") or ""))}
                for day, items in group_by_date(entries).items()
            ]
            return {
                "program_id": program_id,
                "client_id": client_id,
                "start_date": start_date,
                "week_names": load_week_names(db, program_id),
                "days": days,
            }
        finally:
            db.close()

    # --- TEMPLATES ---

    def get_templates(self, user_id: str, experience_level: Optional[str] = None, goal: Optional[str] = None,
                      equipment: Optional[str] = None, split_type: Optional[str] = None) -> List[dict]:
        db = get_db_session()
        try:
            query = db.query(ProgramTemplateORM).filter(
                (ProgramTemplateORM.is_system_template == True) | (ProgramTemplateORM.created_by == user_id)
            )
            if experience_level:
                query = query.filter(ProgramTemplateORM.target_experience_level == experience_level)
            if goal:
                query = query.filter(ProgramTemplateORM.target_goal == goal)
            if equipment:
                query = query.filter(ProgramTemplateORM.target_equipment == equipment)
            if split_type:
                query = query.filter(ProgramTemplateORM.split_type == split_type)
            templates = query.order_by(
                ProgramTemplateORM.is_system_template.desc(), ProgramTemplateORM.created_at.desc()
            ).all()
            result = []
            for t in templates:
                count = db.query(func.count(TemplateWorkoutORM.id)).filter(
                    TemplateWorkoutORM.template_id == t.id
                ).scalar()
                result.append(to_dict(t, workout_count=count or 0))
            return result
        finally:
            db.close()

    def _template_workouts(self, db, template_id: str) -> List[dict]:
        workouts = db.query(TemplateWorkoutORM).filter(
            TemplateWorkoutORM.template_id == template_id
        ).order_by(
            TemplateWorkoutORM.week_number, TemplateWorkoutORM.day_number, TemplateWorkoutORM.order_index
        ).all()
        result = []
        for w in workouts:
            exercises = db.query(TemplateWorkoutExerciseORM).filter(
                TemplateWorkoutExerciseORM.template_workout_id == w.id
            ).order_by(TemplateWorkoutExerciseORM.order_index).all()
            result.append(to_dict(w, exercises=[to_dict(e) for e in exercises]))
        return result

    def get_template(self, template_id: str) -> dict:
        db = get_db_session()
        try:
            template = db.query(ProgramTemplateORM).filter(ProgramTemplateORM.id == template_id).first()
            if not template:
                raise HTTPException(status_code=404, detail="Template not found")
            return to_dict(template, workouts=self._template_workouts(db, template_id))
        finally:
            db.close()

    def create_from_template(self, trainer_id: str, template_id: str, data: FromTemplateRequest) -> dict:
        db = get_db_session()
        try:
            template = db.query(ProgramTemplateORM).filter(ProgramTemplateORM.id == template_id).first()
            if not template:
                raise HTTPException(status_code=404, detail="Template not found")

            program = ProgramORM(
                id=str(uuid.uuid4()),
                trainer_id=trainer_id,
                client_id=data.client_id,
                name=data.name or template.name,
                description=data.description or template.description,
                split_type=template.split_type,
                duration_weeks=template.duration_weeks,
                is_template=False,
                created_at=now_iso()
            )
            db.add(program)

            for tw in self._template_workouts(db, template_id):
                workout_id = str(uuid.uuid4())
                db.add(ProgramWorkoutORM(
                    id=workout_id,
                    program_id=program.id,
                    workout_name=tw["workout_name"],
                    week_number=tw["week_number"],
                    day_number=tw["day_number"],
                    order_index=tw["order_index"]
                ))
                for i, ex in enumerate(tw["exercises"]):
                    db.add(ProgramWorkoutExerciseORM(
                        id=str(uuid.uuid4()),
                        program_workout_id=workout_id,
                        exercise_name=ex["exercise_name"],
                        exercise_type=ex["exercise_type"] or "REGULAR",
                        sets=ex["sets"],
                        reps=ex["reps"],
                        weight=ex["weight"],
                        duration=ex["duration"],
                        rest=ex["rest"],
                        tempo=ex["tempo"],
                        notes=ex["notes"],
                        order_index=ex["order_index"] if ex["order_index"] is not None else i
                    ))

            db.commit()
            logger.info(f"Trainer {trainer_id} created program {program.id} from template {template_id}")
            return self._program_payload(db, program)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating program from template {template_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create program from template: {str(e)}")
        finally:
            db.close()

    def recommend_templates(self, data: RecommendProgramRequest) -> dict:
        db = get_db_session()
        try:
            client = db.query(ClientORM).filter(ClientORM.user_id == data.client_id).first() if data.client_id else None
            if not client:
                raise HTTPException(status_code=404, detail="Client not found")

            profile = {
                "experience_level": client.training_experience or "beginner",
                "goal": client.primary_goal or "general_fitness",
                "days_per_week": client.training_days_per_week or 3,
                "equipment": client.equipment_access or "full_gym",
                "session_duration": client.session_duration_minutes or 60,
            }

            scored = []
            for template in db.query(ProgramTemplateORM).filter(ProgramTemplateORM.is_system_template == True).all():
                score, reasons = score_template(template, profile)
                count = db.query(func.count(TemplateWorkoutORM.id)).filter(
                    TemplateWorkoutORM.template_id == template.id
                ).scalar()
                scored.append(to_dict(template, workout_count=count or 0, match_score=score, match_reasons=reasons))

            scored.sort(key=lambda t: t["match_score"], reverse=True)
            return {"client_profile": profile, "recommendations": scored[:3]}
        finally:
            db.close()

    # --- EXERCISE LIBRARY ---

    def search_exercises(self, search: Optional[str] = None, muscle_group: Optional[str] = None,
                         movement_pattern: Optional[str] = None, equipment: Optional[str] = None,
                         difficulty: Optional[str] = None) -> List[dict]:
        db = get_db_session()
        try:
            query = db.query(ExerciseORM)
            if search:
                query = query.filter(ExerciseORM.name.ilike(f"%{search}%"))
            if muscle_group:
                query = query.filter(ExerciseORM.primary_muscle_group == muscle_group)
            if movement_pattern:
                query = query.filter(ExerciseORM.movement_pattern == movement_pattern)
            if equipment:
                query = query.filter(ExerciseORM.equipment_required == equipment)
            if difficulty:
                query = query.filter(ExerciseORM.difficulty_level == difficulty)
            return [to_dict(e) for e in query.order_by(ExerciseORM.name).limit(100).all()]
        finally:
            db.close()

    def get_substitutions(self, exercise_name: str, equipment: Optional[str] = None) -> dict:
        """Same movement pattern, no harder than the original, easiest first."""
        db = get_db_session()
        try:
            exercise = db.query(ExerciseORM).filter(ExerciseORM.name == exercise_name).first()
            if not exercise:
                raise HTTPException(status_code=404, detail="Exercise not found")

            max_rank = DIFFICULTY_RANK.get(exercise.difficulty_level, 3)
            query = db.query(ExerciseORM).filter(
                ExerciseORM.movement_pattern == exercise.movement_pattern,
                ExerciseORM.id != exercise.id
            )
            if equipment:
                query = query.filter(ExerciseORM.equipment_required == equipment)
            candidates = [
                e for e in query.all() if DIFFICULTY_RANK.get(e.difficulty_level, 3) <= max_rank
            ]
            candidates.sort(key=lambda e: (DIFFICULTY_RANK.get(e.difficulty_level, 3), e.name))
            return {"original": to_dict(exercise), "alternatives": [to_dict(e) for e in candidates[:10]]}
        finally:
            db.close()


# Singleton instance
program_service = ProgramService()

def get_program_service() -> ProgramService:
    """Dependency injection helper."""
    return program_service
