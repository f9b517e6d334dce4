# symptom_intake/routes/auth_routes.py
from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from symptom_intake.auth.deps import get_current_user
from symptom_intake.auth.jwt import (
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
    verify_refresh_token,
)
from symptom_intake.auth.schemas import LoginIn, RefreshIn, RegisterIn, Token, UserOut
from symptom_intake.db.session import get_db
from symptom_intake.models.user import User
from symptom_intake.utils.rate_limit import AUTH_RATE_LIMIT, limiter

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _tokens_for(user: User) -> dict:
    claims = {"sub": str(user.id), "email": user.email}
    return {
        "access_token": create_access_token(claims),
        "refresh_token": create_refresh_token(claims),
        "token_type": "bearer",
    }


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
@limiter.limit(AUTH_RATE_LIMIT)
def register(request: Request, payload: RegisterIn = Body(...), db: Session = Depends(get_db)):
    existing = db.query(User).filter(User.email == str(payload.email)).first()
    if existing:
        raise HTTPException(status_code=409, detail="User with this email already exists")

    user = User(
        email=str(payload.email),
        hashed_password=hash_password(payload.password),
        name=payload.name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return _tokens_for(user)


@router.post("/login", response_model=Token)
@limiter.limit(AUTH_RATE_LIMIT)
def login(request: Request, payload: LoginIn = Body(...), db: Session = Depends(get_db)):
    email = payload.email or payload.username
    if not email:
        raise HTTPException(status_code=422, detail="Provide 'email' or 'username'")
    user = db.query(User).filter(User.email == str(email)).first()
    if not user or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _tokens_for(user)


@router.post("/refresh", response_model=Token)
def refresh(payload: RefreshIn, db: Session = Depends(get_db)):
    """Exchange a refresh token for a new access token."""
    data = verify_refresh_token(payload.refresh_token)
    if not data or not data.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid refresh token")
    user = db.query(User).filter(User.id == str(data["sub"])).first()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    access = create_access_token({"sub": str(user.id), "email": user.email})
    return {"access_token": access, "token_type": "bearer"}


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
