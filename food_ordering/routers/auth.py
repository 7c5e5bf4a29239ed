# food_ordering/routers/auth.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from food_ordering.core.database import get_db
from food_ordering.models.user import User
from food_ordering.schemas.users import AuthResponse, LoginPayload, RegisterPayload
from food_ordering.services.auth import create_access_token, hash_password, verify_password

router = APIRouter(prefix="/api/auth", tags=["auth"])

logger = logging.getLogger(__name__)


def _user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "phone": user.phone,
        "user_type": user.user_type,
        "discount_type": user.discount_type,
    }


def _authenticate(db: Session, email: str, password: str) -> User | None:
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


@router.post("/register", status_code=201, response_model=AuthResponse)
def register(payload: RegisterPayload, db: Session = Depends(get_db)):
    full_name = (payload.full_name or "").strip()
    if not payload.email or not payload.password or not full_name:
        raise HTTPException(status_code=400, detail="Email, password, and full name are required")

    if db.query(User).filter(User.email == payload.email).first():
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(
        email=payload.email,
        password_hash=hash_password(payload.password),
        full_name=full_name,
        phone=(payload.phone or None),
        user_type="customer",
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # concurrent registration with the same email
        db.rollback()
        raise HTTPException(status_code=400, detail="User already exists") from exc
    db.refresh(user)
    logger.info("user registered user_id=%s", user.id)

    return {
        "message": "User registered successfully",
        "token": create_access_token(user.id),
        "user": _user_to_dict(user),
    }


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginPayload, db: Session = Depends(get_db)):
    user = _authenticate(db, payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=400, detail="Invalid credentials")

    return {
        "message": "Login successful",
        "token": create_access_token(user.id),
        "user": _user_to_dict(user),
    }


@router.post("/token")
def token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """Used by the Swagger UI Authorize button (form fields: username, password)."""
    user = _authenticate(db, form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {"access_token": create_access_token(user.id), "token_type": "bearer"}
