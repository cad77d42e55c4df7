"""Schemas for derived container journeys and the dispatch board built from them."""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field

from journey_engine.schemas.leg import Leg, ShipmentDirection


class LfdWarningLevel(str, Enum):
    NONE = "none"
    WARNING = "warning"  # within lfd_warning_days
    URGENT = "urgent"  # within lfd_urgent_days
    OVERDUE = "overdue"


class NextActionKind(str, Enum):
    COMPLETE = "complete"
    DISPATCH = "dispatch"
    CREATE = "create"


class NextAction(BaseModel):
    """Structured form of a journey's next action."""
    kind: NextActionKind
    leg_type: str
    leg_id: Optional[str] = None  # Existing leg to complete/dispatch, None when a leg must be created
    label: str

    def __str__(self) -> str:
        return f"{self.kind.value} {self.leg_type}"


class Journey(BaseModel):
    """Progress of one container through the legs its shipment direction requires."""
    container_id: str
    container_number: Optional[str] = None
    container_size: Optional[str] = None
    shipment_direction: ShipmentDirection
    customer_name: Optional[str] = None
    terminal_name: Optional[str] = None
    steamship_line: Optional[str] = None
    delivery_city: Optional[str] = None
    last_free_day: Optional[date] = None
    is_hazmat: bool = False
    is_overweight: bool = False

    legs: List[Leg] = Field(default_factory=list)

    expected_leg_types: List[str]
    completed_leg_types: List[str] = Field(default_factory=list)
    missing_leg_types: List[str] = Field(default_factory=list)
    current_step_index: float = 0.0
    total_steps: int
    next_action: Optional[str] = None
    next_step: Optional[NextAction] = None
    is_complete: bool = False

    days_until_lfd: Optional[int] = None
    lfd_warning_level: LfdWarningLevel = LfdWarningLevel.NONE

    anomalies: List[str] = Field(default_factory=list)

    @computed_field
    @property
    def progress(self) -> float:
        if not self.total_steps:
            return 0.0
        return round(min(self.current_step_index / self.total_steps, 1.0), 4)


class JourneyBoardSummary(BaseModel):
    total: int = 0
    complete: int = 0
    in_progress: int = 0
    awaiting_dispatch: int = 0
    awaiting_leg_creation: int = 0
    overdue: int = 0


class JourneyBoardRequest(BaseModel):
    legs: List[Leg] = Field(default_factory=list)
    as_of: Optional[date] = Field(None, description="Date used for LFD urgency, defaults to today")


class JourneyBoardResponse(BaseModel):
    generated_at: datetime
    journeys: List[Journey]
    summary: JourneyBoardSummary


class JourneyDefinition(BaseModel):
    shipment_direction: ShipmentDirection
    leg_types: List[str]
    labels: List[str]


class JourneyDefinitionsResponse(BaseModel):
    definitions: List[JourneyDefinition]
