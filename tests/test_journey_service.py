import itertools
from datetime import date, datetime, timezone

import pytest

from journey_engine.schemas.journey import LfdWarningLevel, NextActionKind
from journey_engine.schemas.leg import LegStatus, ShipmentDirection
from journey_engine.services.drayage.journey_definitions import expected_legs, leg_type_label
from journey_engine.services.drayage.journey_service import JourneyService, aggregate_journeys, order_legs

AS_OF = date(2024, 1, 10)


@pytest.fixture
def service(settings):
    return JourneyService(settings)


def _only(journeys):
    assert len(journeys) == 1
    return journeys[0]


class TestDefinitions:
    def test_expected_legs_per_direction(self):
        assert expected_legs(ShipmentDirection.IMPORT) == ["IMPORT_DELIVERY", "EMPTY_RETURN"]
        assert expected_legs(ShipmentDirection.EXPORT) == ["EMPTY_PICKUP", "EXPORT_PICKUP"]

    def test_missing_direction_defaults_to_import(self):
        assert expected_legs(None) == ["IMPORT_DELIVERY", "EMPTY_RETURN"]

    def test_callers_cannot_mutate_the_table(self):
        legs = expected_legs(ShipmentDirection.IMPORT)
        legs.append("YARD_MOVE")
        assert expected_legs(ShipmentDirection.IMPORT) == ["IMPORT_DELIVERY", "EMPTY_RETURN"]

    def test_labels_fall_back_to_raw_type(self):
        assert leg_type_label("EMPTY_RETURN") == "Empty Return"
        assert leg_type_label("MYSTERY_MOVE") == "MYSTERY_MOVE"


class TestNextAction:
    def test_delivered_import_needs_empty_return(self, service, make_leg):
        legs = [make_leg("IMPORT_DELIVERY", "COMPLETED", shipment_direction="IMPORT")]

        journey = _only(service.aggregate(legs, as_of=AS_OF))

        assert journey.next_action == "create EMPTY_RETURN"
        assert journey.is_complete is False
        assert journey.completed_leg_types == ["IMPORT_DELIVERY"]
        assert journey.missing_leg_types == ["EMPTY_RETURN"]
        assert journey.current_step_index == 1.0
        assert journey.next_step.kind == NextActionKind.CREATE
        assert journey.next_step.leg_id is None
        assert journey.next_step.label == "Create Empty Return leg"

    def test_in_flight_leg_wins_over_open_leg(self, service, make_leg):
        legs = [
            make_leg("IMPORT_DELIVERY", "IN_PROGRESS", shipment_direction="IMPORT"),
            make_leg("EMPTY_RETURN", "PENDING", shipment_direction="IMPORT"),
        ]

        journey = _only(service.aggregate(legs, as_of=AS_OF))

        assert journey.next_action == "complete IMPORT_DELIVERY"
        assert journey.next_step.leg_id == legs[0].id
        assert journey.current_step_index == 0.5

    def test_open_leg_is_dispatched(self, service, make_leg):
        legs = [
            make_leg("IMPORT_DELIVERY", "COMPLETED", shipment_direction="IMPORT"),
            make_leg("EMPTY_RETURN", "READY", shipment_direction="IMPORT"),
        ]

        journey = _only(service.aggregate(legs, as_of=AS_OF))

        assert journey.next_action == "dispatch EMPTY_RETURN"
        assert journey.next_step.kind == NextActionKind.DISPATCH
        assert journey.next_step.leg_id == legs[1].id
        assert journey.next_step.label == "Dispatch Empty Return"

    def test_finished_import(self, service, make_leg):
        legs = [
            make_leg("IMPORT_DELIVERY", "COMPLETED", shipment_direction="IMPORT"),
            make_leg("EMPTY_RETURN", "COMPLETED", shipment_direction="IMPORT"),
        ]

        journey = _only(service.aggregate(legs, as_of=AS_OF))

        assert journey.is_complete is True
        assert journey.next_action is None
        assert journey.next_step is None
        assert journey.progress == 1.0

    def test_export_journey(self, service, make_leg):
        legs = [make_leg("EMPTY_PICKUP", "DISPATCHED", shipment_direction="EXPORT")]

        journey = _only(service.aggregate(legs, as_of=AS_OF))

        assert journey.shipment_direction == ShipmentDirection.EXPORT
        assert journey.expected_leg_types == ["EMPTY_PICKUP", "EXPORT_PICKUP"]
        assert journey.next_action == "complete EMPTY_PICKUP"
        assert journey.next_step.label == "Complete Empty Pickup"
        assert journey.total_steps == 2
        assert journey.progress == 0.25

    def test_earliest_in_flight_leg_is_picked(self, service, make_leg):
        legs = [
            make_leg("EMPTY_RETURN", "DISPATCHED", sequence_number=2, shipment_direction="IMPORT"),
            make_leg("IMPORT_DELIVERY", "IN_PROGRESS", sequence_number=1, shipment_direction="IMPORT"),
        ]

        journey = _only(service.aggregate(legs, as_of=AS_OF))

        assert journey.next_action == "complete IMPORT_DELIVERY"


class TestNoData:
    def test_container_without_legs_is_incomplete(self, service):
        journey = service.build_journey("C9", [], as_of=AS_OF, shipment_direction=ShipmentDirection.EXPORT)

        assert journey.is_complete is False
        assert journey.next_action == "create EMPTY_PICKUP"
        assert journey.current_step_index == 0.0
        assert journey.legs == []

    def test_container_without_legs_or_direction_assumes_import(self, service):
        journey = service.build_journey("C9", [], as_of=AS_OF)

        assert journey.shipment_direction == ShipmentDirection.IMPORT
        assert journey.next_action == "create IMPORT_DELIVERY"
        assert any("Missing shipment direction" in note for note in journey.anomalies)

    def test_empty_batch(self, service):
        assert service.aggregate([], as_of=AS_OF) == []


class TestAnomalies:
    def test_cancelled_legs_do_not_count(self, service, make_leg):
        legs = [
            make_leg("IMPORT_DELIVERY", "COMPLETED", shipment_direction="IMPORT"),
            make_leg("EMPTY_RETURN", "CANCELLED", shipment_direction="IMPORT"),
        ]

        journey = _only(service.aggregate(legs, as_of=AS_OF))

        assert journey.is_complete is False
        assert journey.next_action == "create EMPTY_RETURN"
        assert len(journey.legs) == 2

    def test_duplicate_completed_legs_count_once(self, service, make_leg):
        legs = [
            make_leg("IMPORT_DELIVERY", "COMPLETED", shipment_direction="IMPORT"),
            make_leg("IMPORT_DELIVERY", "COMPLETED", shipment_direction="IMPORT"),
            make_leg("EMPTY_RETURN", "COMPLETED", shipment_direction="IMPORT"),
        ]

        journey = _only(service.aggregate(legs, as_of=AS_OF))

        assert journey.is_complete is True
        assert journey.completed_leg_types == ["IMPORT_DELIVERY", "EMPTY_RETURN"]
        assert journey.current_step_index == 2.0
        assert "2 active IMPORT_DELIVERY legs" in journey.anomalies

    def test_unknown_leg_type_is_a_label_only(self, service, make_leg):
        legs = [
            make_leg("IMPORT_DELIVERY", "COMPLETED", shipment_direction="IMPORT"),
            make_leg("mystery_move", "COMPLETED", shipment_direction="IMPORT"),
        ]

        journey = _only(service.aggregate(legs, as_of=AS_OF))

        assert journey.is_complete is False
        assert journey.completed_leg_types == ["IMPORT_DELIVERY"]
        assert journey.next_action == "create EMPTY_RETURN"
        assert any("MYSTERY_MOVE" in note for note in journey.anomalies)

    def test_open_unknown_leg_is_still_dispatchable(self, service, make_leg):
        legs = [make_leg("MYSTERY_MOVE", "PENDING", shipment_direction="IMPORT")]

        journey = _only(service.aggregate(legs, as_of=AS_OF))

        assert journey.next_action == "dispatch MYSTERY_MOVE"
        assert journey.next_step.label == "Dispatch MYSTERY_MOVE"

    def test_extra_completed_legs_do_not_complete_a_journey(self, service, make_leg):
        legs = [
            make_leg("IMPORT_DELIVERY", "COMPLETED", shipment_direction="IMPORT"),
            make_leg("YARD_MOVE", "COMPLETED", shipment_direction="IMPORT"),
        ]

        journey = _only(service.aggregate(legs, as_of=AS_OF))

        assert journey.is_complete is False
        assert journey.anomalies == []

    def test_conflicting_directions_use_the_first_leg(self, service, make_leg):
        legs = [
            make_leg("EMPTY_PICKUP", "COMPLETED", shipment_direction="EXPORT"),
            make_leg("EXPORT_PICKUP", "PENDING", shipment_direction="IMPORT"),
        ]

        journey = _only(service.aggregate(legs, as_of=AS_OF))

        assert journey.shipment_direction == ShipmentDirection.EXPORT
        assert any("Conflicting shipment directions" in note for note in journey.anomalies)

    def test_unknown_direction_is_treated_as_missing(self, make_leg):
        leg = make_leg("IMPORT_DELIVERY", shipment_direction="domestic")
        assert leg.shipment_direction is None

    def test_legs_without_container_are_skipped(self, service, make_leg):
        legs = [
            make_leg("IMPORT_DELIVERY", "COMPLETED", shipment_direction="IMPORT"),
            make_leg("EMPTY_RETURN", "PENDING", container_id=None, shipment_direction="IMPORT"),
        ]

        journey = _only(service.aggregate(legs, as_of=AS_OF))

        assert [leg.id for leg in journey.legs] == [legs[0].id]


class TestOrdering:
    def test_sequence_numbers_win_when_all_present(self, make_leg):
        late = make_leg("IMPORT_DELIVERY", sequence_number=1, created_at=datetime(2024, 1, 5))
        early = make_leg("EMPTY_RETURN", sequence_number=2, created_at=datetime(2024, 1, 1))

        assert [leg.id for leg in order_legs([early, late])] == [late.id, early.id]

    def test_created_at_used_when_a_sequence_is_missing(self, make_leg):
        late = make_leg("IMPORT_DELIVERY", sequence_number=1, created_at=datetime(2024, 1, 5))
        early = make_leg("EMPTY_RETURN", created_at=datetime(2024, 1, 1))

        assert [leg.id for leg in order_legs([late, early])] == [early.id, late.id]

    def test_mixed_naive_and_aware_timestamps(self, make_leg):
        naive = make_leg("IMPORT_DELIVERY", created_at=datetime(2024, 1, 2, 12, 0))
        aware = make_leg("EMPTY_RETURN", created_at=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))
        missing = make_leg("YARD_MOVE", created_at=None)

        assert [leg.id for leg in order_legs([missing, naive, aware])] == [aware.id, naive.id, missing.id]

    def test_input_list_is_not_mutated(self, service, make_leg):
        legs = [
            make_leg("EMPTY_RETURN", created_at=datetime(2024, 1, 3)),
            make_leg("IMPORT_DELIVERY", created_at=datetime(2024, 1, 1)),
        ]
        snapshot = list(legs)

        service.aggregate(legs, as_of=AS_OF)

        assert legs == snapshot

    def test_board_order_incomplete_first_then_lfd(self, service, make_leg):
        legs = [
            make_leg("IMPORT_DELIVERY", "COMPLETED", container_id="DONE",
                     shipment_direction="IMPORT", last_free_day=date(2024, 1, 1)),
            make_leg("EMPTY_RETURN", "COMPLETED", container_id="DONE", shipment_direction="IMPORT"),
            make_leg("IMPORT_DELIVERY", container_id="LATE", shipment_direction="IMPORT",
                     last_free_day=date(2024, 1, 15)),
            make_leg("IMPORT_DELIVERY", container_id="NO_LFD", shipment_direction="IMPORT"),
            make_leg("IMPORT_DELIVERY", container_id="SOON", shipment_direction="IMPORT",
                     last_free_day=date(2024, 1, 12)),
        ]

        journeys = service.aggregate(legs, as_of=AS_OF)

        assert [j.container_id for j in journeys] == ["SOON", "LATE", "NO_LFD", "DONE"]


class TestMetadata:
    def test_container_metadata_and_lfd(self, service, make_leg):
        legs = [
            make_leg("IMPORT_DELIVERY", "COMPLETED", shipment_direction="IMPORT",
                     container_number="MSCU1234566", container_size="40", customer_name="Acme",
                     terminal_name="APM", last_free_day=date(2024, 1, 11), is_hazmat=True),
            make_leg("EMPTY_RETURN", "PENDING"),
        ]

        journey = _only(service.aggregate(legs, as_of=AS_OF))

        assert journey.container_number == "MSCU1234566"
        assert journey.customer_name == "Acme"
        assert journey.is_hazmat is True
        assert journey.is_overweight is False
        assert journey.days_until_lfd == 1
        assert journey.lfd_warning_level == LfdWarningLevel.URGENT


_STATUS_OR_ABSENT = [None] + list(LegStatus)


@pytest.mark.parametrize("delivery,empty_return", list(itertools.product(_STATUS_OR_ABSENT, repeat=2)))
def test_completeness_and_next_action_are_total(service, make_leg, delivery, empty_return):
    legs = []
    if delivery is not None:
        legs.append(make_leg("IMPORT_DELIVERY", delivery, shipment_direction="IMPORT"))
    if empty_return is not None:
        legs.append(make_leg("EMPTY_RETURN", empty_return, shipment_direction="IMPORT"))

    journey = service.build_journey("C1", legs, as_of=AS_OF, shipment_direction=ShipmentDirection.IMPORT)

    both_done = delivery == LegStatus.COMPLETED and empty_return == LegStatus.COMPLETED
    assert journey.is_complete is both_done
    assert (journey.next_action is None) is both_done
    if journey.next_action:
        assert journey.next_action.split(" ")[0] in {"complete", "dispatch", "create"}


class TestLooseInput:
    def test_lowercase_status_is_normalized(self, make_leg):
        leg = make_leg("IMPORT_DELIVERY", " completed ")
        assert leg.status == LegStatus.COMPLETED
        assert leg.raw_status is None

    def test_unrecognized_status_is_ignored_and_noted(self, service, make_leg):
        legs = [
            make_leg("IMPORT_DELIVERY", "COMPLETED", shipment_direction="IMPORT"),
            make_leg("EMPTY_RETURN", "DELIVERED", shipment_direction="IMPORT"),
        ]

        journey = _only(service.aggregate(legs, as_of=AS_OF))

        assert legs[1].status == LegStatus.UNKNOWN
        assert legs[1].raw_status == "DELIVERED"
        assert journey.is_complete is False
        assert journey.current_step_index == 1.0
        assert journey.next_action == "create EMPTY_RETURN"
        assert any("'DELIVERED'" in note for note in journey.anomalies)

    def test_unknown_status_survives_a_round_trip(self, make_leg):
        leg = make_leg("EMPTY_RETURN", "hold")
        again = type(leg).model_validate(leg.model_dump())
        assert again.status == LegStatus.UNKNOWN
        assert again.raw_status == "hold"

    def test_numeric_leg_type_becomes_a_label(self, service, make_leg):
        leg = make_leg(42, "PENDING", shipment_direction="IMPORT")

        journey = _only(service.aggregate([leg], as_of=AS_OF))

        assert leg.leg_type == "42"
        assert journey.next_action == "dispatch 42"
        assert any("'42'" in note for note in journey.anomalies)


def test_aggregate_journeys_uses_default_settings(make_leg):
    legs = [
        make_leg("EMPTY_PICKUP", "COMPLETED", container_id="X", shipment_direction="EXPORT"),
        make_leg("EXPORT_PICKUP", "COMPLETED", container_id="X"),
        make_leg("IMPORT_DELIVERY", container_id="Y", shipment_direction="IMPORT"),
    ]

    journeys = aggregate_journeys(legs, as_of=AS_OF)

    assert [j.container_id for j in journeys] == ["Y", "X"]
    assert journeys[1].is_complete is True
