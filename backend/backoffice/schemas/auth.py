from pydantic import BaseModel, EmailStr

class Token(BaseModel):
    access_token: str
    token_type: str

class EmployeeOut(BaseModel):
    id: int
    email: EmailStr
    full_name: str
    phone: str | None = None
    role: str
    is_active: bool

    model_config = {"from_attributes": True}

class EmployeeLogin(BaseModel):
    email: EmailStr
    password: str
