from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional

class AccountOut(BaseModel):
    id: str
    email: Optional[str]
    first_name: Optional[str]
    last_name: Optional[str]
    profile_image_url: Optional[str]
    company_name: Optional[str]
    company_logo: Optional[str]
    brand_color: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class AccountUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    company_name: Optional[str] = None
    company_logo: Optional[str] = None
    brand_color: Optional[str] = None  # #RRGGBB

class BrandingOut(BaseModel):
    """What the public questionnaire page needs from the owning account."""
    company_name: Optional[str]
    company_logo: Optional[str]
    brand_color: str

    model_config = ConfigDict(from_attributes=True)
