from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional

class SignupRequest(BaseModel):
    username: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    image: Optional[str] = None

    @field_validator('username', mode='before')
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

class SignupResponse(BaseModel):
    success: bool = True
    username: str

class SigninRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

class SigninResponse(BaseModel):
    success: bool = True
    username: str
    access_token: str
    token_type: str = "bearer"
