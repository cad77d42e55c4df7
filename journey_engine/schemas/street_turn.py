from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from journey_engine.schemas.journey import LfdWarningLevel
from journey_engine.schemas.leg import Leg


class StreetTurnStatus(str, Enum):
    POTENTIAL = "POTENTIAL"
    APPROVED = "APPROVED"
    LINKED = "LINKED"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"


class MatchingReason(BaseModel):
    label: str
    detail: Optional[str] = None
    weight: float = 0.0


class StreetTurnCandidate(BaseModel):
    import_leg: Leg
    export_leg: Leg
    match_score: float = Field(ge=0, le=100)
    estimated_savings: float = 0.0
    reasons: List[MatchingReason] = Field(default_factory=list)
    same_city: bool = False
    same_size: bool = False
    same_steamship_line: Optional[bool] = None
    same_terminal: bool = False
    empty_ready: bool = False
    days_until_lfd: Optional[int] = None
    lfd_warning_level: LfdWarningLevel = LfdWarningLevel.NONE


class StreetTurnRequest(BaseModel):
    import_candidates: List[Leg] = Field(default_factory=list, description="Empty-return legs awaiting pickup")
    export_candidates: List[Leg] = Field(default_factory=list, description="Empty-pickup legs awaiting an empty")
    as_of: Optional[date] = None
    limit: Optional[int] = Field(None, ge=1)


class StreetTurnResponse(BaseModel):
    generated_at: datetime
    eligible_imports: int
    eligible_exports: int
    candidates: List[StreetTurnCandidate]


class StreetTurnTransitionRequest(BaseModel):
    current_status: StreetTurnStatus
    target_status: StreetTurnStatus


class StreetTurnTransitionResponse(BaseModel):
    current_status: StreetTurnStatus
    target_status: StreetTurnStatus
    allowed_next: List[StreetTurnStatus]
