"""Authentication dependencies for FastAPI routes."""
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from symptom_intake.db.session import get_db
from symptom_intake.models.user import User
from symptom_intake.auth import jwt

_bearer_scheme = HTTPBearer(auto_error=False)


def _resolve_user(credentials: Optional[HTTPAuthorizationCredentials], db: Session) -> Optional[User]:
    if not credentials or credentials.scheme.lower() != "bearer":
        return None
    user_id = jwt.verify(credentials.credentials)
    if not user_id:
        return None
    return db.query(User).filter(User.id == user_id).first()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the authenticated user from the Authorization bearer token."""
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
        )
    user = _resolve_user(credentials, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    return user


def get_optional_user(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user, but callers without a valid token are anonymous."""
    return _resolve_user(credentials, db)
