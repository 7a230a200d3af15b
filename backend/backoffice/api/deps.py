from datetime import datetime
from typing import List, Tuple
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
import jwt

from backoffice.core.config import settings
from backoffice.core.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

def _roles_of(payload: dict) -> List[str]:
    roles = payload.get("roles") or []
    if not isinstance(roles, list):
        roles = [roles]
    return roles

def get_current_roles(token: str = Depends(oauth2_scheme)) -> List[str]:
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return _roles_of(payload)

def require_roles(*allowed: str):
    def checker(roles: List[str] = Depends(get_current_roles)):
        if not any(r in roles for r in allowed):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return checker

def get_current_identity(token: str = Depends(oauth2_scheme)) -> Tuple[str, List[str]]:
    """Return (email, roles) from the JWT token."""
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return sub, _roles_of(payload)

def request_now() -> datetime:
    """The single instant every derived status of one request is computed against."""
    return datetime.utcnow()

def expiry_window() -> int:
    return settings.payment_expiry_days

class Period:
    """Calendar filter taken from ``?month=&year=&date=`` ("all" or empty means no filter)."""

    def __init__(self, month: int | None = None, year: int | None = None, day=None):
        self.month = month
        self.year = year
        self.day = day

def _int_param(name: str, raw: str | None, lo: int, hi: int) -> int | None:
    if raw is None or raw.strip().lower() in ("", "all"):
        return None
    try:
        value = int(raw)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"invalid {name}")
    if not lo <= value <= hi:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"invalid {name}")
    return value

def get_period(month: str | None = None, year: str | None = None, date: str | None = None) -> Period:
    day = None
    if date and date.strip().lower() != "all":
        try:
            day = datetime.strptime(date.strip(), "%Y-%m-%d").date()
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid date, use YYYY-MM-DD")
    return Period(month=_int_param("month", month, 1, 12), year=_int_param("year", year, 1900, 9999), day=day)
