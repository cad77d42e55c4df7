"""
Journey definitions - the legs each shipment direction requires, in order.

Import: terminal -> customer (IMPORT_DELIVERY), then customer -> terminal (EMPTY_RETURN)
Export: terminal -> shipper (EMPTY_PICKUP), then shipper -> terminal (EXPORT_PICKUP)
"""

from typing import Dict, List, Optional

from journey_engine.schemas.leg import LegType, ShipmentDirection

JOURNEY_DEFINITIONS: Dict[ShipmentDirection, List[str]] = {
    ShipmentDirection.IMPORT: [LegType.IMPORT_DELIVERY.value, LegType.EMPTY_RETURN.value],
    ShipmentDirection.EXPORT: [LegType.EMPTY_PICKUP.value, LegType.EXPORT_PICKUP.value],
}

# Legs without a shipment direction are treated as imports
DEFAULT_DIRECTION = ShipmentDirection.IMPORT

LEG_TYPE_LABELS: Dict[str, str] = {
    LegType.IMPORT_DELIVERY.value: "Import Delivery",
    LegType.EXPORT_PICKUP.value: "Export Pickup",
    LegType.EMPTY_RETURN.value: "Empty Return",
    LegType.EMPTY_PICKUP.value: "Empty Pickup",
    LegType.PRE_PULL.value: "Pre-Pull",
    LegType.YARD_MOVE.value: "Yard Move",
    LegType.STREET_TURN.value: "Street Turn",
}


def expected_legs(direction: Optional[ShipmentDirection]) -> List[str]:
    """Ordered leg types required for a direction (a fresh list each call)."""
    return list(JOURNEY_DEFINITIONS[direction or DEFAULT_DIRECTION])


def leg_type_label(leg_type: str) -> str:
    """Display label, falling back to the raw leg type for unknown values."""
    return LEG_TYPE_LABELS.get(leg_type, leg_type)
