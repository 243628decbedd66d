from typing import Optional
from uuid import uuid4

from fastapi import HTTPException, Cookie, Response, status, Depends
from sqlalchemy.orm import Session

from api.config import get_db, settings
from api.models.models import User
from api.schemas.auth_schemas import AuthTokenPayload
from api.schemas.user_schemas import User as UserSchema
from api.utils.jwt import verify_token, get_password_hash, create_access_token, verify_password, access_token_expiry
from api.utils.logger import configure_logging

logger = configure_logging()


def get_current_user(access_token: Optional[str] = Cookie(None), db: Session = Depends(get_db)) -> UserSchema:
    if not access_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing token",
        )

    payload = verify_token(access_token)
    if payload is None or payload.sub is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )
    user = get_user_by_email(payload.sub, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )
    return UserSchema(email=user.email, display_name=user.display_name)


def set_auth_cookie(response: Response, user: User) -> None:
    token = create_access_token(AuthTokenPayload(sub=user.email, exp=access_token_expiry()))
    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60,
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key="access_token",
        httponly=True,
        secure=False,
        samesite="lax"
    )


def get_user_by_email(email: str, db: Session) -> User | None:
    return db.query(User).filter(User.email == email).first()


def create_user(email: str, password: str, db: Session, display_name: Optional[str] = None) -> User:
    logger.info("creating user email=%s", email)
    user = User(
        id=str(uuid4()),
        email=email,
        hashed_password=get_password_hash(password),
        display_name=display_name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def authenticate_user(email: str, password: str, db: Session) -> User | None:
    user = get_user_by_email(email, db)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user
