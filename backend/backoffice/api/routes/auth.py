from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from backoffice.api.deps import get_current_identity
from backoffice.core.config import settings
from backoffice.core.security import create_access_token, verify_password
from backoffice.db.session import get_db
from backoffice.models.employee import Employee
from backoffice.schemas.auth import EmployeeLogin, EmployeeOut, Token

router = APIRouter()

def _authenticate(db: Session, email: str, password: str) -> Employee:
    """Employees must already exist; 401 for unknown email or wrong password, 403 when disabled."""
    employee = db.query(Employee).filter(Employee.email == email.lower().strip()).first()
    if not employee:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    if not employee.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is blocked")
    if not verify_password(password, employee.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect credentials")
    return employee

def _token_for(employee: Employee) -> dict:
    roles = [employee.role]
    # ADMIN_EMAILS promotes listed employees without a data migration
    if employee.role != "admin" and employee.email in [e.lower() for e in settings.admin_emails]:
        roles.append("admin")
    return {"access_token": create_access_token(subject=employee.email, roles=roles), "token_type": "bearer"}

@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    employee = _authenticate(db, form_data.username, form_data.password)
    return _token_for(employee)

@router.post("/login-json", response_model=Token)
def login_json(payload: EmployeeLogin, db: Session = Depends(get_db)):
    employee = _authenticate(db, payload.email, payload.password)
    return _token_for(employee)

@router.get("/me", response_model=EmployeeOut)
def me(identity=Depends(get_current_identity), db: Session = Depends(get_db)):
    email, _ = identity
    employee = db.query(Employee).filter(Employee.email == email).first()
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return employee
