from typing import Optional

from pydantic import BaseModel, Field


class ContainerValidationRequest(BaseModel):
    """Request to validate a container number."""
    container_number: str = Field(..., description="Container number (e.g., MSCU1234566)")


class ContainerValidationResponse(BaseModel):
    """ISO 6346 validation outcome."""
    valid: bool
    normalized: Optional[str] = None
    error: Optional[str] = None
    message: Optional[str] = None

    # Parsed parts
    owner_code: Optional[str] = None
    equipment_category: Optional[str] = None
    serial_number: Optional[str] = None
    check_digit: Optional[int] = None
    expected_check_digit: Optional[int] = None
