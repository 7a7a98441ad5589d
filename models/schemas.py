from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from models.user import Address


class SubmissionReport(BaseModel):
    """Outcome of one submitter run."""
    total: int = 0
    sent: int = 0
    skipped: int = 0
    aborted: bool = False
    error: Optional[str] = None


class UserInfo(BaseModel):
    """Stored user as returned by the users service."""
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., ge=1)
    email: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    birth_date: str = Field(alias="birthDate")
    address: Optional[Address] = None
    phone: Optional[str] = None


class UserPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: List[UserInfo]
    page: int
    size: int
    total_elements: int = Field(alias="totalElements")
    total_pages: int = Field(alias="totalPages")


class ErrorResponse(BaseModel):
    message: str
