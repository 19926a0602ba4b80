from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CompanyAccess(BaseModel):
    """A business a staff member is allowed to act for."""
    id: str = Field(description="Access grant identifier")
    business_name: str = Field(description="Business display name")
    owner_id: str = Field(description="Owner account identifier")
    staff_id: str = Field(description="Staff member identifier")
    created_at: Optional[datetime] = Field(default=None, description="When the grant was created")
