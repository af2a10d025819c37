"""
Unit tests for SeatMap aggregate

Covers the ownership rules shared by both seat map stores:
- all-or-nothing reservation replacement
- lapsed holds
- pinning seats to a booking and settling them
"""

from datetime import datetime, timedelta, timezone

import pytest

from tourbus.service.seating.domain.aggregate.seat_map_aggregate import SeatMap


NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
HOLD = NOW + timedelta(minutes=10)


@pytest.fixture
def seat_map() -> SeatMap:
    return SeatMap.fresh(tour_id='t1', bus_id='1')


def _reserve(seat_map: SeatMap, user_id: str, seats: list[str], now: datetime = NOW):
    return seat_map.replace_reservation(
        user_id=user_id, selected_seats=seats, now=now, hold_until=now + timedelta(minutes=10)
    )


class TestReplaceReservation:
    def test_claims_free_seats(self, seat_map):
        result = _reserve(seat_map, 'alice', ['A1', 'A2'])

        assert result.ok
        assert result.claimed == ['A1', 'A2']
        assert seat_map.holder_of('A1', now=NOW) == 'alice'
        assert len(seat_map.available_seat_ids(now=NOW)) == 38

    def test_replacing_releases_seats_dropped_from_selection(self, seat_map):
        _reserve(seat_map, 'alice', ['A1', 'A2'])

        result = _reserve(seat_map, 'alice', ['A2', 'A3'])

        assert result.claimed == ['A3']
        assert result.released == ['A1']
        assert seat_map.holder_of('A1', now=NOW) is None
        assert seat_map.holder_of('A3', now=NOW) == 'alice'

    def test_empty_selection_releases_everything(self, seat_map):
        _reserve(seat_map, 'alice', ['A1', 'A2'])

        result = _reserve(seat_map, 'alice', [])

        assert sorted(result.released) == ['A1', 'A2']
        assert len(seat_map.available_seat_ids(now=NOW)) == 40

    def test_conflict_changes_nothing(self, seat_map):
        _reserve(seat_map, 'alice', ['A1'])
        _reserve(seat_map, 'bob', ['B1'])

        result = _reserve(seat_map, 'bob', ['A1', 'B2'])

        assert not result.ok
        assert result.conflicts == ['A1']
        # bob keeps his previous selection untouched
        assert seat_map.holder_of('B1', now=NOW) == 'bob'
        assert seat_map.holder_of('B2', now=NOW) is None
        assert seat_map.holder_of('A1', now=NOW) == 'alice'

    def test_reselecting_own_seat_is_not_a_conflict(self, seat_map):
        _reserve(seat_map, 'alice', ['A1'])

        result = _reserve(seat_map, 'alice', ['A1'])

        assert result.ok
        assert result.claimed == []

    def test_lapsed_hold_can_be_claimed_by_someone_else(self, seat_map):
        _reserve(seat_map, 'alice', ['A1'])
        later = NOW + timedelta(minutes=11)

        result = _reserve(seat_map, 'bob', ['A1'], now=later)

        assert result.ok
        assert seat_map.holder_of('A1', now=later) == 'bob'

    def test_release_lapsed_clears_expired_holds(self, seat_map):
        _reserve(seat_map, 'alice', ['A1', 'A2'])

        assert seat_map.release_lapsed(now=NOW) == []
        assert seat_map.release_lapsed(now=NOW + timedelta(minutes=10)) == ['A1', 'A2']
        assert seat_map.seats['A1'].reserved_by is None


class TestBookingPins:
    def test_hold_for_booking_pins_own_and_free_seats(self, seat_map):
        _reserve(seat_map, 'alice', ['A1'])

        result = seat_map.hold_for_booking(
            user_id='alice', seat_ids=['A1', 'A2'], booking_id='bk-1', now=NOW, hold_until=HOLD
        )

        assert result.ok
        assert result.claimed == ['A2']
        assert seat_map.seats['A1'].booking_id == 'bk-1'
        assert seat_map.seats['A2'].booking_id == 'bk-1'

    def test_hold_for_booking_conflicts_with_other_holder(self, seat_map):
        _reserve(seat_map, 'bob', ['A2'])

        result = seat_map.hold_for_booking(
            user_id='alice', seat_ids=['A1', 'A2'], booking_id='bk-1', now=NOW, hold_until=HOLD
        )

        assert result.conflicts == ['A2']
        assert seat_map.seats['A1'].booking_id is None

    def test_pinned_seats_survive_selection_changes(self, seat_map):
        seat_map.hold_for_booking(
            user_id='alice', seat_ids=['A1'], booking_id='bk-1', now=NOW, hold_until=HOLD
        )

        _reserve(seat_map, 'alice', ['B1'])

        assert seat_map.seats['A1'].booking_id == 'bk-1'
        assert seat_map.holder_of('A1', now=NOW) == 'alice'

    def test_settle_book_marks_seats_booked(self, seat_map):
        seat_map.hold_for_booking(
            user_id='alice', seat_ids=['A1', 'A2'], booking_id='bk-1', now=NOW, hold_until=HOLD
        )

        affected = seat_map.settle_booking(booking_id='bk-1', outcome='book')

        assert affected == ['A1', 'A2']
        seat = seat_map.seats['A1'].to_seat(NOW)
        assert seat.booked_by == 'alice'
        assert seat.reserved_by is None
        # booked seats never lapse
        assert seat_map.release_lapsed(now=NOW + timedelta(days=30)) == []

    def test_settle_release_frees_seats(self, seat_map):
        seat_map.hold_for_booking(
            user_id='alice', seat_ids=['A1'], booking_id='bk-1', now=NOW, hold_until=HOLD
        )

        assert seat_map.settle_booking(booking_id='bk-1', outcome='release') == ['A1']
        assert 'A1' in seat_map.available_seat_ids(now=NOW)

    def test_booked_seat_cannot_be_claimed(self, seat_map):
        seat_map.hold_for_booking(
            user_id='alice', seat_ids=['A1'], booking_id='bk-1', now=NOW, hold_until=HOLD
        )
        seat_map.settle_booking(booking_id='bk-1', outcome='book')

        assert _reserve(seat_map, 'bob', ['A1']).conflicts == ['A1']
        assert _reserve(seat_map, 'alice', ['A1']).conflicts == ['A1']
