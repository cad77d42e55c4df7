from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status

from journey_engine.core.config import Settings, get_settings
from journey_engine.schemas.street_turn import (
    StreetTurnRequest,
    StreetTurnResponse,
    StreetTurnTransitionRequest,
    StreetTurnTransitionResponse,
)
from journey_engine.services.drayage.street_turn_lifecycle import advance, allowed_transitions
from journey_engine.services.drayage.street_turn_service import StreetTurnService

router = APIRouter(prefix="/drayage/street-turns", tags=["Drayage - Street Turns"])


async def _street_turn_service(settings: Settings = Depends(get_settings)) -> StreetTurnService:
    return StreetTurnService(settings)


@router.post("/candidates", response_model=StreetTurnResponse)
async def find_candidates(
    request: StreetTurnRequest,
    service: StreetTurnService = Depends(_street_turn_service),
) -> StreetTurnResponse:
    """
    Rank import empties against export bookings.

    Every eligible pair is returned, best match first. Use ``limit`` to
    trim the list; there is no score cutoff.
    """
    imports = service.eligible_imports(request.import_candidates)
    exports = service.eligible_exports(request.export_candidates)
    candidates = service.rank_pairs(imports, exports, as_of=request.as_of, limit=request.limit)
    return StreetTurnResponse(
        generated_at=datetime.utcnow(),
        eligible_imports=len(imports),
        eligible_exports=len(exports),
        candidates=candidates,
    )


@router.post("/transition", response_model=StreetTurnTransitionResponse)
async def check_transition(request: StreetTurnTransitionRequest) -> StreetTurnTransitionResponse:
    """Validate a street turn status change before it is written."""
    try:
        new_status = advance(request.current_status, request.target_status)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    return StreetTurnTransitionResponse(
        current_status=request.current_status,
        target_status=new_status,
        allowed_next=allowed_transitions(new_status),
    )
