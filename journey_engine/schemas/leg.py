"""
Pydantic schemas for dispatch legs.

A leg is one atomic, assignable movement of a container (an "order" on the
dispatch board). Container and shipment metadata is attached to every leg when
it is loaded so the engine never has to look containers up itself.
"""

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


class LegType(str, Enum):
    """Known leg (move) types."""
    IMPORT_DELIVERY = "IMPORT_DELIVERY"
    EMPTY_RETURN = "EMPTY_RETURN"
    EMPTY_PICKUP = "EMPTY_PICKUP"
    EXPORT_PICKUP = "EXPORT_PICKUP"
    PRE_PULL = "PRE_PULL"
    YARD_MOVE = "YARD_MOVE"
    STREET_TURN = "STREET_TURN"


class LegStatus(str, Enum):
    PENDING = "PENDING"
    READY = "READY"
    DISPATCHED = "DISPATCHED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    # Anything else the order table carries (DELIVERED, HOLD, FAILED, ...)
    UNKNOWN = "UNKNOWN"


class ShipmentDirection(str, Enum):
    IMPORT = "IMPORT"
    EXPORT = "EXPORT"


OPEN_STATUSES = frozenset({LegStatus.PENDING, LegStatus.READY})
IN_FLIGHT_STATUSES = frozenset({LegStatus.DISPATCHED, LegStatus.IN_PROGRESS})


class Leg(BaseModel):
    """A dispatched movement plus the container metadata it was loaded with."""
    id: str
    container_id: Optional[str] = None
    leg_type: str = Field(..., description="Move type, e.g. IMPORT_DELIVERY. Unknown values are kept as labels.")
    status: LegStatus = LegStatus.PENDING
    raw_status: Optional[str] = Field(None, description="Original status text when it was not recognized")
    sequence_number: Optional[int] = None
    created_at: Optional[datetime] = None

    # Display locations
    pickup_location_label: Optional[str] = None
    delivery_location_label: Optional[str] = None
    pickup_city: Optional[str] = None
    delivery_city: Optional[str] = None

    # Assignment
    assigned_driver_id: Optional[str] = None
    street_turn_id: Optional[str] = None

    # Container / shipment metadata
    container_number: Optional[str] = None
    container_size: Optional[str] = None
    shipment_direction: Optional[ShipmentDirection] = None
    customer_name: Optional[str] = None
    terminal_name: Optional[str] = None
    steamship_line: Optional[str] = None
    last_free_day: Optional[date] = None
    is_hazmat: bool = False
    is_overweight: bool = False
    empty_ready_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def tolerate_unknown_status(cls, data: Any) -> Any:
        """Unrecognized statuses become UNKNOWN; the original text is kept in raw_status."""
        if not isinstance(data, dict) or data.get("status") is None:
            return data
        value = data["status"]
        if isinstance(value, Enum):
            value = value.value
        text = str(value).strip().upper()
        if text in LegStatus.__members__:
            return {**data, "status": text}
        logger.warning(f"Unknown status '{value}' on leg {data.get('id')}; treating as UNKNOWN")
        return {**data, "status": LegStatus.UNKNOWN, "raw_status": str(value)}

    @field_validator("leg_type", mode="before")
    @classmethod
    def normalize_leg_type(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            value = value.value
        if value is None:
            return value
        return str(value).strip().upper()

    @field_validator("shipment_direction", mode="before")
    @classmethod
    def tolerate_unknown_direction(cls, value: Any) -> Any:
        """Unrecognized directions become None instead of rejecting the leg."""
        if value is None or isinstance(value, ShipmentDirection):
            return value
        text = str(value).strip().upper()
        if text in ShipmentDirection.__members__:
            return text
        logger.warning(f"Unknown shipment direction '{value}' on leg; treating as missing")
        return None

    @property
    def is_known_type(self) -> bool:
        return self.leg_type in LegType.__members__
