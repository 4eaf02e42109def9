"""
Profile Service - account details for any user plus the trainer's public
profile and default session preferences.
"""
from .base import (
    HTTPException, json, logging,
    get_db_session, UserORM, TrainerORM, load_json, now_iso
)
from models import ProfileUpdateRequest

logger = logging.getLogger("trainr")

# Trainer columns stored as JSON text, keyed by request field
TRAINER_JSON_FIELDS = {
    "certifications": "certifications_json",
    "specialties": "specialties_json",
    "fitness_goals": "fitness_goals_json",
    "client_age_ranges": "client_age_ranges_json",
    "day_specific_session_times": "day_specific_session_times_json",
    "day_specific_session_durations": "day_specific_session_durations_json",
}

TRAINER_PLAIN_FIELDS = (
    "bio", "phone_number", "location",
    "default_session_time", "default_session_duration",
    "default_session_type", "default_session_location",
)


class ProfileService:
    """Service for reading and updating user profiles."""

    def get_profile(self, user_id: str) -> dict:
        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.id == user_id).first()
            if not user:
                raise HTTPException(status_code=404, detail="User not found")

            profile = {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "role": user.role,
                "profile_image": user.profile_image,
            }

            if user.role == "trainer":
                trainer = db.query(TrainerORM).filter(TrainerORM.user_id == user.id).first()
                if trainer:
                    profile.update({
                        "bio": trainer.bio,
                        "certifications": load_json(trainer.certifications_json, []),
                        "specialties": load_json(trainer.specialties_json, []),
                        "hourly_rate": trainer.hourly_rate,
                        "phone_number": trainer.phone_number,
                        "fitness_goals": load_json(trainer.fitness_goals_json, []),
                        "client_age_ranges": load_json(trainer.client_age_ranges_json, []),
                        "location": trainer.location,
                        "default_session_time": trainer.default_session_time,
                        "default_session_duration": trainer.default_session_duration,
                        "default_session_type": trainer.default_session_type,
                        "default_session_location": trainer.default_session_location,
                        "day_specific_session_times": load_json(trainer.day_specific_session_times_json, {}),
                        "day_specific_session_durations": load_json(trainer.day_specific_session_durations_json, {}),
                    })
            return profile
        finally:
            db.close()

    def update_profile(self, user_id: str, data: ProfileUpdateRequest) -> dict:
        """Partial update: only fields present in the request body are touched."""
        updates = data.model_dump(exclude_unset=True)
        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.id == user_id).first()
            if not user:
                raise HTTPException(status_code=404, detail="User not found")

            if updates.get("email") and updates["email"] != user.email:
                taken = db.query(UserORM).filter(
                    UserORM.email == updates["email"],
                    UserORM.id != user_id
                ).first()
                if taken:
                    raise HTTPException(status_code=400, detail="Email already in use")
                user.email = updates["email"]
            if updates.get("name"):
                user.name = updates["name"]
            if updates.get("profile_image"):
                user.profile_image = updates["profile_image"]

            if user.role == "trainer":
                trainer = db.query(TrainerORM).filter(TrainerORM.user_id == user.id).first()
                if trainer:
                    for field in TRAINER_PLAIN_FIELDS:
                        if field in updates:
                            setattr(trainer, field, updates[field] or None)
                    if "hourly_rate" in updates:
                        rate = updates["hourly_rate"]
                        trainer.hourly_rate = float(rate) if rate not in (None, "") else None
                    for field, column in TRAINER_JSON_FIELDS.items():
                        if field in updates:
                            value = updates[field]
                            setattr(trainer, column, json.dumps(value) if value else None)
                    trainer.updated_at = now_iso()

            db.commit()
            logger.info(f"Profile updated for {user_id}: {sorted(updates.keys())}")
            return {"message": "Profile updated successfully"}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating profile for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to update profile: {str(e)}")
        finally:
            db.close()


# Singleton instance
profile_service = ProfileService()

def get_profile_service() -> ProfileService:
    """Dependency injection helper."""
    return profile_service
