"""
Password hashing, JWT issue/decode and the FastAPI identity dependencies.

Routes depend on get_current_user, or on get_current_trainer /
get_current_client when only one role may call them.
"""
import os
import logging
from datetime import datetime, timedelta
from typing import Optional, List

import bcrypt
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status, Request
from sqlalchemy.orm import Session

from database import get_db
from models_orm import UserORM

logger = logging.getLogger("trainr")

SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret_key_123")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "7"))


def get_password_hash(password: str) -> str:
    # stored as text, bcrypt works on bytes
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def create_user_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Signed JWT whose subject is the user id."""
    lifetime = expires_delta or timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS)
    claims = {"sub": user_id, "exp": datetime.utcnow() + lifetime}
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def _credentials_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _token_from_request(request: Request) -> Optional[str]:
    """Bearer header wins; the access_token cookie is the browser fallback."""
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip() or None
    return request.cookies.get("access_token")


def decode_user_id(token: str) -> Optional[str]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.info(f"AUTH: JWT validation error: {e}")
        return None
    return payload.get("sub")


async def get_current_user(request: Request, db: Session = Depends(get_db)) -> UserORM:
    token = _token_from_request(request)
    if not token:
        logger.debug("AUTH: No token found in header or cookie")
        raise _credentials_error()

    user_id = decode_user_id(token)
    if user_id is None:
        raise _credentials_error()

    user = db.query(UserORM).filter(UserORM.id == user_id).first()
    if user is None:
        logger.info(f"AUTH: User {user_id} not found in DB")
        raise _credentials_error()
    return user


def require_role(roles: List[str]):
    """Dependency factory: the current user must hold one of `roles`."""
    async def role_checker(user: UserORM = Depends(get_current_user)):
        if user.role not in roles:
            logger.warning(f"AUTH: {user.id} ({user.role}) denied, needs one of {roles}")
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return user
    return role_checker


get_current_trainer = require_role(["trainer"])
get_current_client = require_role(["client"])
