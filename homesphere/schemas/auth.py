from pydantic import EmailStr, Field
from typing import Literal, Optional
from homesphere.schemas.common import CamelModel
from homesphere.schemas.agent import AgentProfileResponse


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=2)
    last_name: str = Field(..., min_length=2)
    role: Literal["USER", "AGENT"] = "USER"
    phone: Optional[str] = None
    business_name: Optional[str] = Field(None, min_length=2)
    registration_number: Optional[str] = None  # Required when role is AGENT
    years_of_experience: Optional[int] = Field(None, ge=0, le=50)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class EmailRequest(CamelModel):
    email: EmailStr


class VerifyEmailRequest(CamelModel):
    token: str = Field(..., min_length=1)


class ResetPasswordRequest(CamelModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)


class UserResponse(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    avatar: Optional[str] = None
    role: str
    is_active: bool
    email_verified: bool
    created_at: Optional[str] = None


class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserResponse


class MeResponse(CamelModel):
    user: UserResponse
    agent: Optional[AgentProfileResponse] = None
