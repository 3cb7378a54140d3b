from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    PATIENT = "patient"
    PROFESSIONAL = "professional"
    ADMIN = "admin"


class Profile(BaseModel):
    id: str
    full_name: str
    email: str
    role: UserRole
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class ProfessionalProfile(BaseModel):
    id: str
    profile_id: str
    display_name: str
    registration_type: Optional[str] = None  # CRM, CRP, CRN, ...
    registration_number: Optional[str] = None
    registration_state: Optional[str] = None
    specialty: Optional[str] = None
    bio: Optional[str] = None
    phone: Optional[str] = None
    consultation_price_cents: Optional[int] = None
    consultation_duration_minutes: Optional[int] = None
    accepts_insurance: bool = False
    offers_telemedicine: bool = False
    verified: bool = False
    rating_average: float = 0
    rating_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    avatar_url: Optional[str] = None
    role: Optional[UserRole] = None

    model_config = ConfigDict(extra="forbid", use_enum_values=True)
