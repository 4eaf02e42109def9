"""
Auth Service - handles registration, login and the current-user payload.
"""
from .base import (
    HTTPException, uuid, logging,
    get_db_session, UserORM, TrainerORM, ClientORM, load_json, now_iso
)
from auth import verify_password, get_password_hash, create_user_token
from models import RegisterRequest, LoginRequest

logger = logging.getLogger("trainr")

VALID_ROLES = ("trainer", "client")


def _user_payload(user: UserORM) -> dict:
    return {"id": user.id, "email": user.email, "name": user.name, "role": user.role}


class AuthService:
    """Service for managing authentication and user registration."""

    def register_user(self, data: RegisterRequest) -> dict:
        """Create the user, its trainer/client profile row and a token."""
        if not data.name or not data.email or not data.password or not data.role:
            raise HTTPException(status_code=400, detail="All fields are required")
        if data.role not in VALID_ROLES:
            raise HTTPException(status_code=400, detail="Invalid role")
        if data.role == "trainer" and not data.phone_number:
            raise HTTPException(status_code=400, detail="Phone number is required for trainers")

        db = get_db_session()
        try:
            existing_user = db.query(UserORM).filter(UserORM.email == data.email).first()
            if existing_user:
                raise HTTPException(status_code=400, detail="User already exists")

            new_user = UserORM(
                id=str(uuid.uuid4()),
                name=data.name,
                email=data.email,
                hashed_password=get_password_hash(data.password),
                role=data.role,
                created_at=now_iso()
            )
            db.add(new_user)
            db.flush()

            if data.role == "trainer":
                db.add(TrainerORM(
                    id=str(uuid.uuid4()),
                    user_id=new_user.id,
                    phone_number=data.phone_number
                ))
            else:
                db.add(ClientORM(id=str(uuid.uuid4()), user_id=new_user.id))

            db.commit()
            db.refresh(new_user)
            logger.info(f"Registered {new_user.role} {new_user.id}")

            return {
                "message": "User created successfully",
                "token": create_user_token(new_user.id),
                "user": _user_payload(new_user)
            }
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Registration failed for {data.email}: {e}")
            raise HTTPException(status_code=500, detail=f"Registration failed: {str(e)}")
        finally:
            db.close()

    def login(self, data: LoginRequest) -> dict:
        if not data.email or not data.password:
            raise HTTPException(status_code=400, detail="Email and password are required")

        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.email == data.email).first()
            if not user or not verify_password(data.password, user.hashed_password):
                logger.info(f"Failed login for {data.email}")
                raise HTTPException(status_code=401, detail="Invalid credentials")

            return {
                "message": "Login successful",
                "token": create_user_token(user.id),
                "user": _user_payload(user)
            }
        finally:
            db.close()

    def get_me(self, user_id: str) -> dict:
        """User fields; trainers also get bio, certifications and specialties."""
        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.id == user_id).first()
            if not user:
                raise HTTPException(status_code=404, detail="User not found")

            result = _user_payload(user)
            if user.role == "trainer":
                trainer = db.query(TrainerORM).filter(TrainerORM.user_id == user.id).first()
                result["bio"] = trainer.bio if trainer else None
                result["certifications"] = load_json(trainer.certifications_json, []) if trainer else []
                result["specialties"] = load_json(trainer.specialties_json, []) if trainer else []
            return result
        finally:
            db.close()


# Singleton instance
auth_service = AuthService()

def get_auth_service() -> AuthService:
    """Dependency injection helper."""
    return auth_service
