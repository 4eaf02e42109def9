"""
Client Service - daily check-ins, progress tracking, nutrition logs,
trainer discovery and the client's own onboarding profile.
"""
from typing import List, Optional

from sqlalchemy import or_

from .base import (
    HTTPException, uuid, json, logging,
    get_db_session, UserORM, TrainerORM, ClientORM, TrainerRequestORM,
    DailyCheckInORM, ProgressEntryORM, TrainerAlertORM,
    to_dict, load_json, now_iso, today_iso
)
from models_orm import NutritionLogORM, NutritionPlanORM
from models import (
    CheckInRequest, ProgressEntryRequest, NutritionLogRequest,
    TrainerConnectRequest, ClientProfileUpdate
)

logger = logging.getLogger("trainr")

CLIENT_JSON_FIELDS = {
    "secondary_goals": "secondary_goals_json",
    "available_dates": "available_dates_json",
}

LOW_RATING_THRESHOLD = 4


def apply_client_profile(client: ClientORM, updates: dict) -> None:
    """Copy onboarding answers onto a client row. Unknown keys are ignored."""
    for field in ClientProfileUpdate.model_fields:
        if field not in updates:
            continue
        value = updates[field]
        if field in CLIENT_JSON_FIELDS:
            setattr(client, CLIENT_JSON_FIELDS[field], json.dumps(value) if value else None)
        elif field in ("height", "weight", "sleep_hours") and value is not None:
            setattr(client, field, str(value))
        else:
            setattr(client, field, value)


def _check_range(value: Optional[int], label: str):
    if value is not None and (value < 1 or value > 10):
        raise HTTPException(status_code=400, detail=f"{label} must be between 1 and 10")


def _ensure_client(db, user_id: str) -> ClientORM:
    client = db.query(ClientORM).filter(ClientORM.user_id == user_id).first()
    if not client:
        client = ClientORM(id=str(uuid.uuid4()), user_id=user_id, start_date=today_iso())
        db.add(client)
        db.flush()
    return client


def _ilike_any(columns, needles: List[str]):
    """OR of case-insensitive substring matches over every column/needle pair."""
    return or_(*[c.ilike(f"%{n}%") for c in columns for n in needles])


def _clean_terms(values: Optional[List[str]]) -> List[str]:
    return [v.strip() for v in (values or []) if v and v.strip()]


class ClientService:
    """Service for client-facing features."""

    # --- CHECK-INS ---

    def submit_check_in(self, user_id: str, data: CheckInRequest) -> dict:
        """
        Create or update today's check-in.

        Returns the check-in, whether it was newly created, and any trainer
        alerts raised by it so the route can push them over the websocket.
        """
        if data.workout_completed is True:
            _check_range(data.workout_rating, "Workout rating")
        _check_range(data.sleep_quality, "Sleep quality")
        _check_range(data.energy_level, "Energy level")
        if data.pain_experienced:
            _check_range(data.pain_intensity, "Pain intensity")

        db = get_db_session()
        try:
            today = today_iso()
            values = data.model_dump()
            values["pain_experienced"] = bool(data.pain_experienced)

            check_in = db.query(DailyCheckInORM).filter(
                DailyCheckInORM.client_id == user_id,
                DailyCheckInORM.check_in_date == today
            ).first()
            created = check_in is None
            if created:
                check_in = DailyCheckInORM(
                    id=str(uuid.uuid4()),
                    client_id=user_id,
                    check_in_date=today,
                    created_at=now_iso()
                )
                db.add(check_in)
            for field, value in values.items():
                setattr(check_in, field, value)
            check_in.status = "completed"
            check_in.updated_at = now_iso()
            db.commit()
            db.refresh(check_in)
            result = to_dict(check_in)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error saving check-in for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to submit check-in: {str(e)}")
        finally:
            db.close()

        trainer_id, alerts = self._create_check_in_alerts(user_id, result)
        return {"check_in": result, "created": created, "trainer_id": trainer_id, "alerts": alerts}

    def _create_check_in_alerts(self, user_id: str, check_in: dict):
        """Raise low_rating/pain_report alerts. Failures never fail the check-in."""
        db = get_db_session()
        try:
            client = db.query(ClientORM).filter(ClientORM.user_id == user_id).first()
            if not client or not client.trainer_id:
                return None, []
            user = db.query(UserORM).filter(UserORM.id == user_id).first()
            name = user.name if user else "Your client"

            alerts = []
            rating = check_in.get("workout_rating")
            if rating is not None and rating <= LOW_RATING_THRESHOLD:
                alerts.append(TrainerAlertORM(
                    id=str(uuid.uuid4()),
                    trainer_id=client.trainer_id,
                    client_id=user_id,
                    alert_type="low_rating",
                    title=f"Low Workout Rating from {name}",
                    message=f"{name} rated their workout {rating}/10. This may indicate they're struggling or need support.",
                    severity="high",
                    related_checkin_id=check_in["id"],
                    metadata_json=json.dumps({
                        "rating": rating,
                        "workout_completed": check_in.get("workout_completed"),
                    }),
                    created_at=now_iso()
                ))

            if check_in.get("pain_experienced") is True:
                location = check_in.get("pain_location")
                intensity = check_in.get("pain_intensity")
                if location:
                    message = f"{name} reported pain in {location} (intensity: {intensity or 'N/A'}/10)."
                else:
                    message = f"{name} reported experiencing pain during their workout."
                alerts.append(TrainerAlertORM(
                    id=str(uuid.uuid4()),
                    trainer_id=client.trainer_id,
                    client_id=user_id,
                    alert_type="pain_report",
                    title=f"Pain Report from {name}",
                    message=message,
                    severity="urgent",
                    related_checkin_id=check_in["id"],
                    metadata_json=json.dumps({
                        "pain_location": location,
                        "pain_intensity": intensity,
                        "workout_completed": check_in.get("workout_completed"),
                    }),
                    created_at=now_iso()
                ))

            for alert in alerts:
                db.add(alert)
            db.commit()
            if alerts:
                logger.info(f"Created {len(alerts)} alert(s) for trainer {client.trainer_id} from {user_id}")
            return client.trainer_id, [to_dict(a, client_name=name) for a in alerts]
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating check-in alerts for {user_id}: {e}")
            return None, []
        finally:
            db.close()

    def get_today_check_in(self, user_id: str) -> dict:
        db = get_db_session()
        try:
            check_in = db.query(DailyCheckInORM).filter(
                DailyCheckInORM.client_id == user_id,
                DailyCheckInORM.check_in_date == today_iso()
            ).first()
            if not check_in:
                return {"checked_in": False}
            return to_dict(check_in)
        finally:
            db.close()

    def get_check_ins(self, user_id: str, limit: int = 30) -> List[dict]:
        db = get_db_session()
        try:
            rows = db.query(DailyCheckInORM).filter(
                DailyCheckInORM.client_id == user_id
            ).order_by(DailyCheckInORM.check_in_date.desc()).limit(limit).all()
            return [to_dict(r) for r in rows]
        finally:
            db.close()

    # --- PROGRESS ---

    def get_recent_progress(self, user_id: str) -> List[dict]:
        db = get_db_session()
        try:
            rows = db.query(ProgressEntryORM).filter(
                ProgressEntryORM.client_id == user_id
            ).order_by(ProgressEntryORM.date.desc()).limit(10).all()
            return [
                {"id": r.id, "date": r.date, "weight": r.weight, "body_fat": r.body_fat, "notes": r.notes}
                for r in rows
            ]
        finally:
            db.close()

    def get_progress(self, user_id: str) -> List[dict]:
        """Progress entries merged with completed check-ins, newest first."""
        db = get_db_session()
        try:
            entries = [
                to_dict(r, entry_type="progress")
                for r in db.query(ProgressEntryORM).filter(ProgressEntryORM.client_id == user_id).all()
            ]
            check_ins = db.query(DailyCheckInORM).filter(
                DailyCheckInORM.client_id == user_id,
                DailyCheckInORM.status == "completed"
            ).all()
            for c in check_ins:
                entries.append(to_dict(
                    c,
                    date=c.check_in_date,
                    photos=[c.progress_photo] if c.progress_photo else [],
                    entry_type="checkin"
                ))
            entries.sort(key=lambda e: e.get("date") or "", reverse=True)
            return entries
        finally:
            db.close()

    def create_progress_entry(self, user_id: str, data: ProgressEntryRequest) -> dict:
        db = get_db_session()
        try:
            entry = ProgressEntryORM(
                id=str(uuid.uuid4()),
                client_id=user_id,
                date=data.date or today_iso(),
                weight=data.weight,
                body_fat=data.body_fat,
                measurements_json=json.dumps(data.measurements) if data.measurements else None,
                notes=data.notes,
                created_at=now_iso()
            )
            db.add(entry)
            db.commit()
            return {"message": "Progress entry created successfully", "id": entry.id}
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating progress entry for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create progress entry: {str(e)}")
        finally:
            db.close()

    # --- NUTRITION ---

    def get_nutrition_goals(self, user_id: str) -> Optional[dict]:
        """Daily targets from the active nutrition plan, or None."""
        db = get_db_session()
        try:
            plan = db.query(NutritionPlanORM).filter(
                NutritionPlanORM.client_id == user_id,
                NutritionPlanORM.is_active == True
            ).order_by(NutritionPlanORM.created_at.desc()).first()
            if not plan:
                return None
            return {
                "plan_id": plan.id,
                "plan_name": plan.plan_name,
                "daily_calories": plan.daily_calories,
                "daily_protein": plan.daily_protein,
                "daily_carbs": plan.daily_carbs,
                "daily_fats": plan.daily_fats,
                "nutrition_approach": plan.nutrition_approach,
                "meal_frequency": plan.meal_frequency,
            }
        finally:
            db.close()

    def get_nutrition_logs(self, user_id: str, start_date: Optional[str] = None,
                           end_date: Optional[str] = None) -> List[dict]:
        db = get_db_session()
        try:
            query = db.query(NutritionLogORM).filter(NutritionLogORM.client_id == user_id)
            if start_date and end_date:
                query = query.filter(
                    NutritionLogORM.log_date >= start_date,
                    NutritionLogORM.log_date <= end_date
                )
            rows = query.order_by(NutritionLogORM.log_date.desc()).limit(100).all()
            return [to_dict(r) for r in rows]
        finally:
            db.close()

    def create_nutrition_log(self, user_id: str, data: NutritionLogRequest) -> dict:
        if not data.food_name:
            raise HTTPException(status_code=400, detail="Food name is required")
        db = get_db_session()
        try:
            values = data.model_dump()
            values["log_date"] = data.log_date or today_iso()
            log = NutritionLogORM(id=str(uuid.uuid4()), client_id=user_id, created_at=now_iso(), **values)
            db.add(log)
            db.commit()
            db.refresh(log)
            return to_dict(log)
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating nutrition log for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create nutrition log: {str(e)}")
        finally:
            db.close()

    # --- TRAINER RELATIONSHIP ---

    def get_trainer(self, user_id: str) -> dict:
        db = get_db_session()
        try:
            client = db.query(ClientORM).filter(ClientORM.user_id == user_id).first()
            if not client or not client.trainer_id:
                raise HTTPException(status_code=404, detail="No trainer assigned")

            user = db.query(UserORM).filter(UserORM.id == client.trainer_id).first()
            trainer = db.query(TrainerORM).filter(TrainerORM.user_id == client.trainer_id).first()
            if not user:
                raise HTTPException(status_code=404, detail="No trainer assigned")
            return {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "phoneNumber": trainer.phone_number if trainer else None,
                "bio": trainer.bio if trainer else None,
                "specialties": load_json(trainer.specialties_json, []) if trainer else [],
                "certifications": load_json(trainer.certifications_json, []) if trainer else [],
                "hourly_rate": trainer.hourly_rate if trainer else None,
                "total_clients": trainer.total_clients if trainer else 0,
                "active_clients": trainer.active_clients if trainer else 0,
                "profile_image": user.profile_image,
            }
        finally:
            db.close()

    def disconnect_trainer(self, user_id: str) -> dict:
        db = get_db_session()
        try:
            client = db.query(ClientORM).filter(ClientORM.user_id == user_id).first()
            if not client or not client.trainer_id:
                raise HTTPException(status_code=404, detail="No trainer assigned")

            trainer_id = client.trainer_id
            # Erase the request history so the client can ask again later
            db.query(TrainerRequestORM).filter(
                TrainerRequestORM.client_id == user_id,
                TrainerRequestORM.trainer_id == trainer_id
            ).delete(synchronize_session=False)
            client.trainer_id = None
            client.updated_at = now_iso()

            trainer = db.query(TrainerORM).filter(TrainerORM.user_id == trainer_id).first()
            if trainer:
                trainer.active_clients = max((trainer.active_clients or 0) - 1, 0)

            db.commit()
            logger.info(f"Client {user_id} disconnected from trainer {trainer_id}")
            return {"message": "Disconnected from trainer successfully"}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error disconnecting {user_id} from trainer: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to disconnect from trainer: {str(e)}")
        finally:
            db.close()

    def search_trainers(self, q: Optional[str] = None, specialties: Optional[List[str]] = None,
                        fitness_goals: Optional[List[str]] = None,
                        client_age_ranges: Optional[List[str]] = None,
                        special_needs: Optional[List[str]] = None,
                        location: Optional[str] = None) -> List[dict]:
        """
        Case-insensitive search over trainer profiles.

        List filters match when ANY of their values is contained in the
        corresponding field. With no filters every trainer is returned.
        """
        db = get_db_session()
        try:
            query = db.query(TrainerORM, UserORM).join(UserORM, TrainerORM.user_id == UserORM.id)

            q_terms = _clean_terms([q])
            if q_terms:
                query = query.filter(_ilike_any([
                    UserORM.name, UserORM.email, TrainerORM.bio, TrainerORM.specialties_json, TrainerORM.location
                ], q_terms))
            location_terms = _clean_terms([location])
            if location_terms:
                query = query.filter(_ilike_any([TrainerORM.location], location_terms))
            for column, values in (
                (TrainerORM.specialties_json, specialties),
                (TrainerORM.fitness_goals_json, fitness_goals),
                (TrainerORM.client_age_ranges_json, client_age_ranges),
            ):
                terms = _clean_terms(values)
                if terms:
                    query = query.filter(_ilike_any([column], terms))
            needs = _clean_terms(special_needs)
            if needs:
                query = query.filter(_ilike_any([TrainerORM.bio, TrainerORM.specialties_json], needs))

            results = []
            for trainer, user in query.order_by(UserORM.name.asc()).limit(50).all():
                results.append({
                    "id": trainer.id,
                    "user_id": user.id,
                    "name": user.name,
                    "email": user.email,
                    "profile_image": user.profile_image,
                    "bio": trainer.bio,
                    "certifications": load_json(trainer.certifications_json, []),
                    "specialties": load_json(trainer.specialties_json, []),
                    "hourly_rate": trainer.hourly_rate,
                    "phone_number": trainer.phone_number,
                    "total_clients": trainer.total_clients or 0,
                    "active_clients": trainer.active_clients or 0,
                    "fitness_goals": load_json(trainer.fitness_goals_json, []),
                    "client_age_ranges": load_json(trainer.client_age_ranges_json, []),
                    "location": trainer.location,
                })
            return results
        finally:
            db.close()

    def request_trainer(self, user_id: str, data: TrainerConnectRequest) -> dict:
        """Send a connection request. Onboarding must be completed first."""
        if not data.trainer_id:
            raise HTTPException(status_code=400, detail="Trainer ID is required")

        db = get_db_session()
        try:
            client = db.query(ClientORM).filter(ClientORM.user_id == user_id).first()
            if not client or not client.onboarding_completed:
                raise HTTPException(status_code=403, detail={
                    "message": "Please complete your profile before requesting a trainer",
                    "requires_onboarding": True
                })

            trainer = db.query(TrainerORM).filter(TrainerORM.user_id == data.trainer_id).first()
            if not trainer:
                raise HTTPException(status_code=404, detail="Trainer not found")

            if client.trainer_id == data.trainer_id:
                raise HTTPException(status_code=400, detail="You are already connected with this trainer")

            pending = db.query(TrainerRequestORM).filter(
                TrainerRequestORM.client_id == user_id,
                TrainerRequestORM.trainer_id == data.trainer_id,
                TrainerRequestORM.status == "pending"
            ).first()
            if pending:
                raise HTTPException(status_code=400, detail="You already have a pending request with this trainer")

            request = TrainerRequestORM(
                id=str(uuid.uuid4()),
                client_id=user_id,
                trainer_id=data.trainer_id,
                status="pending",
                message=data.message,
                is_read=False,
                created_at=now_iso(),
                updated_at=now_iso()
            )
            db.add(request)
            db.commit()
            db.refresh(request)
            logger.info(f"Trainer request {request.id}: {user_id} -> {data.trainer_id}")

            return {
                "message": "Trainer request sent successfully! The trainer will review your request.",
                "request": to_dict(request)
            }
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error sending trainer request from {user_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to send trainer request: {str(e)}")
        finally:
            db.close()

    def get_trainer_requests(self, user_id: str) -> List[dict]:
        db = get_db_session()
        try:
            rows = db.query(TrainerRequestORM, UserORM, TrainerORM).join(
                UserORM, TrainerRequestORM.trainer_id == UserORM.id
            ).outerjoin(
                TrainerORM, TrainerORM.user_id == TrainerRequestORM.trainer_id
            ).filter(
                TrainerRequestORM.client_id == user_id
            ).order_by(TrainerRequestORM.created_at.desc()).all()

            return [{
                "id": req.id,
                "trainerId": req.trainer_id,
                "trainerName": user.name,
                "trainerEmail": user.email,
                "status": req.status,
                "message": req.message,
                "trainerResponse": req.trainer_response,
                "createdAt": req.created_at,
                "updatedAt": req.updated_at,
                "bio": trainer.bio if trainer else None,
                "specialties": load_json(trainer.specialties_json) if trainer else None,
            } for req, user, trainer in rows]
        finally:
            db.close()

    # --- ONBOARDING PROFILE ---

    def get_profile(self, user_id: str) -> dict:
        db = get_db_session()
        try:
            row = db.query(ClientORM, UserORM).join(
                UserORM, ClientORM.user_id == UserORM.id
            ).filter(ClientORM.user_id == user_id).first()
            if not row:
                raise HTTPException(status_code=404, detail="Client profile not found")
            client, user = row
            return to_dict(client, name=user.name, email=user.email)
        finally:
            db.close()

    def update_profile(self, user_id: str, data: ClientProfileUpdate) -> dict:
        """Save the onboarding questionnaire and mark onboarding complete."""
        db = get_db_session()
        try:
            client = _ensure_client(db, user_id)
            updates = data.model_dump(exclude_unset=True)
            apply_client_profile(client, updates)
            client.onboarding_data_json = json.dumps(updates)
            client.onboarding_completed = True
            client.updated_at = now_iso()
            db.commit()
            logger.info(f"Onboarding completed for client {user_id}")
            return {"message": "Profile updated successfully", "onboarding_completed": True}
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating client profile {user_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to update profile: {str(e)}")
        finally:
            db.close()

    def get_onboarding_status(self, user_id: str) -> dict:
        db = get_db_session()
        try:
            client = db.query(ClientORM).filter(ClientORM.user_id == user_id).first()
            return {"onboarding_completed": bool(client and client.onboarding_completed)}
        finally:
            db.close()


# Singleton instance
client_service = ClientService()

def get_client_service() -> ClientService:
    """Dependency injection helper."""
    return client_service
