"""
Container Number API Router.

ISO 6346 validation for form input (interactive feedback) and as the final
gate before a container number is written.
"""

from fastapi import APIRouter

from journey_engine.schemas.container import ContainerValidationRequest, ContainerValidationResponse
from journey_engine.services.drayage.container_number import validate_container_number

router = APIRouter(prefix="/drayage/container", tags=["Drayage - Container Numbers"])


@router.post("/validate", response_model=ContainerValidationResponse)
async def validate_container(request: ContainerValidationRequest):
    """
    Validate a container number.

    Whitespace is stripped and letters uppercased before checking:
    - Length (11 characters)
    - Owner code + equipment category (4 letters)
    - Serial number (6 digits)
    - Check digit (mod 11)

    Always returns 200; ``valid`` and ``error`` carry the outcome.
    """
    result = validate_container_number(request.container_number)
    return ContainerValidationResponse(**result.to_dict())


@router.get("/validate/{container_number}", response_model=ContainerValidationResponse)
async def validate_container_get(container_number: str):
    """Validate a container number (GET method)."""
    request = ContainerValidationRequest(container_number=container_number)
    return await validate_container(request)
