"""
Trainer Service - the trainer's client roster, standalone workouts and
incoming connection requests.
"""
import secrets
from typing import List

from .base import (
    HTTPException, uuid, json, logging,
    get_db_session, UserORM, TrainerORM, ClientORM, TrainerRequestORM,
    WorkoutORM, WorkoutExerciseORM, WorkoutAssignmentORM,
    DailyCheckInORM, ProgressEntryORM,
    to_dict, now_iso, today_iso
)
from auth import get_password_hash
from models import (
    CreateClientRequest, CreateWorkoutRequest, AssignWorkoutRequest,
    ClientMetricRequest, ClientProfileUpdate
)
from .client_service import apply_client_profile

logger = logging.getLogger("trainr")


def get_owned_client(db, trainer_id: str, client_id: str) -> ClientORM:
    """Client row for a client user id, 404 unless it belongs to the trainer."""
    client = db.query(ClientORM).filter(
        ClientORM.user_id == client_id,
        ClientORM.trainer_id == trainer_id
    ).first()
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


def _text(value):
    return str(value) if value is not None else None


class TrainerService:
    """Service for trainer-side client and workout management."""

    # --- CLIENTS ---

    def get_clients(self, trainer_id: str) -> List[dict]:
        db = get_db_session()
        try:
            rows = db.query(ClientORM, UserORM).join(
                UserORM, ClientORM.user_id == UserORM.id
            ).filter(
                ClientORM.trainer_id == trainer_id
            ).order_by(ClientORM.start_date.desc()).all()

            return [{
                "id": user.id,
                "client_profile_id": client.id,
                "name": user.name,
                "email": user.email,
                "start_date": client.start_date,
                "status": client.status,
                "onboarding_completed": bool(client.onboarding_completed),
                "primary_goal": client.primary_goal,
            } for client, user in rows]
        finally:
            db.close()

    def create_client(self, trainer_id: str, data: CreateClientRequest) -> dict:
        """Create a client account linked to the trainer."""
        if not data.name or not data.email:
            raise HTTPException(status_code=400, detail="Name and email are required")

        db = get_db_session()
        try:
            if db.query(UserORM).filter(UserORM.email == data.email).first():
                raise HTTPException(status_code=400, detail="User already exists")

            temporary_password = None
            password = data.password
            if not password:
                temporary_password = secrets.token_urlsafe(9)
                password = temporary_password

            user = UserORM(
                id=str(uuid.uuid4()),
                name=data.name,
                email=data.email,
                hashed_password=get_password_hash(password),
                role="client",
                created_at=now_iso()
            )
            db.add(user)
            db.flush()

            client = ClientORM(
                id=str(uuid.uuid4()),
                user_id=user.id,
                trainer_id=trainer_id,
                start_date=today_iso(),
                status="active"
            )
            db.add(client)

            trainer = db.query(TrainerORM).filter(TrainerORM.user_id == trainer_id).first()
            if trainer:
                trainer.total_clients = (trainer.total_clients or 0) + 1
                trainer.active_clients = (trainer.active_clients or 0) + 1

            db.commit()
            logger.info(f"Trainer {trainer_id} created client {user.id}")

            result = {
                "message": "Client created successfully",
                "client": {
                    "id": user.id,
                    "client_profile_id": client.id,
                    "name": user.name,
                    "email": user.email,
                    "start_date": client.start_date,
                    "status": client.status,
                },
            }
            if temporary_password:
                result["temporaryPassword"] = temporary_password
            return result
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating client for trainer {trainer_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create client: {str(e)}")
        finally:
            db.close()

    def get_client(self, trainer_id: str, client_id: str) -> dict:
        db = get_db_session()
        try:
            client = get_owned_client(db, trainer_id, client_id)
            user = db.query(UserORM).filter(UserORM.id == client_id).first()
            return to_dict(
                client,
                id=client_id,
                client_profile_id=client.id,
                name=user.name if user else None,
                email=user.email if user else None,
            )
        finally:
            db.close()

    def get_client_workouts(self, trainer_id: str, client_id: str) -> List[dict]:
        db = get_db_session()
        try:
            get_owned_client(db, trainer_id, client_id)
            rows = db.query(WorkoutAssignmentORM, WorkoutORM).join(
                WorkoutORM, WorkoutAssignmentORM.workout_id == WorkoutORM.id
            ).filter(
                WorkoutAssignmentORM.client_id == client_id
            ).order_by(WorkoutAssignmentORM.assigned_date.desc()).all()
            return [
                to_dict(a, workout_name=w.name, workout_description=w.description)
                for a, w in rows
            ]
        finally:
            db.close()

    def get_client_metrics(self, trainer_id: str, client_id: str) -> dict:
        db = get_db_session()
        try:
            get_owned_client(db, trainer_id, client_id)
            progress = db.query(ProgressEntryORM).filter(
                ProgressEntryORM.client_id == client_id
            ).order_by(ProgressEntryORM.date.desc()).all()
            check_ins = db.query(DailyCheckInORM).filter(
                DailyCheckInORM.client_id == client_id
            ).order_by(DailyCheckInORM.check_in_date.desc()).limit(30).all()
            return {
                "progress": [to_dict(p) for p in progress],
                "check_ins": [to_dict(c) for c in check_ins],
            }
        finally:
            db.close()

    def add_client_metric(self, trainer_id: str, client_id: str, data: ClientMetricRequest) -> dict:
        db = get_db_session()
        try:
            get_owned_client(db, trainer_id, client_id)
            entry = ProgressEntryORM(
                id=str(uuid.uuid4()),
                client_id=client_id,
                date=data.date or today_iso(),
                weight=data.weight,
                body_fat=data.body_fat,
                measurements_json=json.dumps(data.measurements) if data.measurements else None,
                notes=data.notes,
                created_at=now_iso()
            )
            db.add(entry)
            db.commit()
            db.refresh(entry)
            return to_dict(entry)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error recording metric for client {client_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to record metrics: {str(e)}")
        finally:
            db.close()

    def update_client_onboarding(self, trainer_id: str, client_id: str, data: ClientProfileUpdate) -> dict:
        db = get_db_session()
        try:
            client = get_owned_client(db, trainer_id, client_id)
            apply_client_profile(client, data.model_dump(exclude_unset=True))
            client.updated_at = now_iso()
            db.commit()
            return {"message": "Client onboarding updated successfully"}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating onboarding for client {client_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to update client onboarding: {str(e)}")
        finally:
            db.close()

    # --- WORKOUTS ---

    def get_workouts(self, trainer_id: str) -> List[dict]:
        db = get_db_session()
        try:
            rows = db.query(WorkoutORM).filter(
                WorkoutORM.trainer_id == trainer_id
            ).order_by(WorkoutORM.created_at.desc()).all()
            return [
                {"id": w.id, "name": w.name, "description": w.description, "created_at": w.created_at}
                for w in rows
            ]
        finally:
            db.close()

    def create_workout(self, trainer_id: str, data: CreateWorkoutRequest) -> dict:
        if not data.name or not data.exercises:
            raise HTTPException(status_code=400, detail="Name and exercises are required")

        db = get_db_session()
        try:
            workout = WorkoutORM(
                id=str(uuid.uuid4()),
                trainer_id=trainer_id,
                name=data.name,
                description=data.description,
                created_at=now_iso()
            )
            db.add(workout)
            for i, ex in enumerate(data.exercises):
                db.add(WorkoutExerciseORM(
                    id=str(uuid.uuid4()),
                    workout_id=workout.id,
                    exercise_name=ex.name,
                    sets=ex.sets,
                    reps=_text(ex.reps),
                    weight=_text(ex.weight),
                    rest=_text(ex.rest),
                    notes=ex.notes,
                    order_index=ex.order if ex.order is not None else i
                ))
            db.commit()
            logger.info(f"Trainer {trainer_id} created workout {workout.id} ({len(data.exercises)} exercises)")
            return {"message": "Workout created successfully", "workoutId": workout.id}
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating workout for trainer {trainer_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create workout: {str(e)}")
        finally:
            db.close()

    def assign_workout(self, trainer_id: str, workout_id: str, data: AssignWorkoutRequest) -> dict:
        if not data.client_id:
            raise HTTPException(status_code=400, detail="Client ID is required")

        db = get_db_session()
        try:
            workout = db.query(WorkoutORM).filter(
                WorkoutORM.id == workout_id,
                WorkoutORM.trainer_id == trainer_id
            ).first()
            if not workout:
                raise HTTPException(status_code=404, detail="Workout not found")
            get_owned_client(db, trainer_id, data.client_id)

            assignment = WorkoutAssignmentORM(
                id=str(uuid.uuid4()),
                workout_id=workout_id,
                client_id=data.client_id,
                assigned_date=today_iso(),
                due_date=data.due_date,
                status="assigned",
                created_at=now_iso()
            )
            db.add(assignment)
            db.commit()
            logger.info(f"Workout {workout_id} assigned to {data.client_id}")
            return {"message": "Workout assigned successfully", "assignmentId": assignment.id}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error assigning workout {workout_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to assign workout: {str(e)}")
        finally:
            db.close()

    # --- CONNECTION REQUESTS ---

    def get_requests(self, trainer_id: str, pending_only: bool = True) -> List[dict]:
        db = get_db_session()
        try:
            query = db.query(TrainerRequestORM, UserORM, ClientORM).join(
                UserORM, TrainerRequestORM.client_id == UserORM.id
            ).outerjoin(
                ClientORM, ClientORM.user_id == TrainerRequestORM.client_id
            ).filter(TrainerRequestORM.trainer_id == trainer_id)
            if pending_only:
                query = query.filter(TrainerRequestORM.status == "pending")
            rows = query.order_by(TrainerRequestORM.created_at.desc()).all()

            return [{
                "id": req.id,
                "clientId": req.client_id,
                "clientName": user.name,
                "clientEmail": user.email,
                "status": req.status,
                "message": req.message,
                "trainerResponse": req.trainer_response,
                "isRead": bool(req.is_read),
                "createdAt": req.created_at,
                "updatedAt": req.updated_at,
                "primaryGoal": client.primary_goal if client else None,
                "onboardingCompleted": bool(client and client.onboarding_completed),
            } for req, user, client in rows]
        finally:
            db.close()

    def respond_to_request(self, trainer_id: str, request_id: str, accept: bool, trainer_response: str = None) -> dict:
        """
        Accept or reject a pending request.

        Accepting moves the client over to this trainer; the previous
        trainer (if any) loses an active client.
        """
        db = get_db_session()
        try:
            request = db.query(TrainerRequestORM).filter(
                TrainerRequestORM.id == request_id,
                TrainerRequestORM.trainer_id == trainer_id
            ).first()
            if not request:
                raise HTTPException(status_code=404, detail="Request not found")
            if request.status != "pending":
                raise HTTPException(status_code=400, detail=f"Request has already been {request.status}")

            request.status = "accepted" if accept else "rejected"
            request.trainer_response = trainer_response
            request.is_read = True
            request.updated_at = now_iso()

            if accept:
                client = db.query(ClientORM).filter(ClientORM.user_id == request.client_id).first()
                if not client:
                    client = ClientORM(id=str(uuid.uuid4()), user_id=request.client_id)
                    db.add(client)
                previous_trainer_id = client.trainer_id
                if previous_trainer_id and previous_trainer_id != trainer_id:
                    previous = db.query(TrainerORM).filter(TrainerORM.user_id == previous_trainer_id).first()
                    if previous:
                        previous.active_clients = max((previous.active_clients or 0) - 1, 0)

                client.trainer_id = trainer_id
                client.start_date = today_iso()
                client.status = "active"
                client.updated_at = now_iso()

                if previous_trainer_id != trainer_id:
                    trainer = db.query(TrainerORM).filter(TrainerORM.user_id == trainer_id).first()
                    if trainer:
                        trainer.total_clients = (trainer.total_clients or 0) + 1
                        trainer.active_clients = (trainer.active_clients or 0) + 1

            db.commit()
            db.refresh(request)
            logger.info(f"Trainer {trainer_id} {request.status} request {request_id}")
            return {
                "message": f"Request {request.status} successfully",
                "request": to_dict(request),
            }
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error responding to request {request_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to respond to request: {str(e)}")
        finally:
            db.close()

    def mark_requests_read(self, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            db.query(TrainerRequestORM).filter(
                TrainerRequestORM.trainer_id == trainer_id,
                TrainerRequestORM.is_read == False
            ).update({"is_read": True}, synchronize_session=False)
            db.commit()
            return {"message": "Requests marked as read"}
        finally:
            db.close()

    def get_unread_request_count(self, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            count = db.query(TrainerRequestORM).filter(
                TrainerRequestORM.trainer_id == trainer_id,
                TrainerRequestORM.status == "pending",
                TrainerRequestORM.is_read == False
            ).count()
            return {"count": count}
        finally:
            db.close()


# Singleton instance
trainer_service = TrainerService()

def get_trainer_service() -> TrainerService:
    """Dependency injection helper."""
    return trainer_service
