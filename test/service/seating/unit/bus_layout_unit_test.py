import pytest

from tourbus.platform.exception.exceptions import DomainError
from tourbus.service.seating.domain.bus_unlock_policy import is_next_bus_unlocked, requires_unlock
from tourbus.service.seating.domain.value_object.bus_layout import (
    LAST_8_SEATS,
    SEAT_IDS,
    bus_ids,
    bus_index,
    normalize_seat_ids,
)


class TestBusLayout:
    def test_every_bus_has_forty_seats(self):
        assert len(SEAT_IDS) == 40
        assert SEAT_IDS[:4] == ('A1', 'A2', 'A3', 'A4')
        assert SEAT_IDS[-4:] == ('J', 'K', 'L', 'M')

    def test_last_eight_seats(self):
        assert LAST_8_SEATS == {'I1', 'I2', 'I3', 'I4', 'J', 'K', 'L', 'M'}

    def test_normalize_strips_upper_cases_and_dedupes(self):
        assert normalize_seat_ids([' a1', 'A1', 'j', 'B3']) == ['A1', 'J', 'B3']

    @pytest.mark.parametrize('seat_id', ['Z9', 'A5', 'N', ''])
    def test_normalize_rejects_unknown_seats(self, seat_id):
        with pytest.raises(DomainError):
            normalize_seat_ids([seat_id])

    def test_bus_ids_and_index(self):
        assert bus_ids(3) == ['1', '2', '3']
        assert bus_index('1') == 0
        assert bus_index('5') == 4

    @pytest.mark.parametrize('bus_id', ['0', 'x', '-1'])
    def test_bus_index_rejects_invalid_ids(self, bus_id):
        with pytest.raises(DomainError):
            bus_index(bus_id)


class TestBusUnlockPolicy:
    def test_unlocked_when_primary_bus_is_full(self):
        assert is_next_bus_unlocked([]) is True

    def test_unlocked_when_exactly_last_eight_remain(self):
        assert is_next_bus_unlocked(sorted(LAST_8_SEATS)) is True

    def test_locked_when_a_last_eight_seat_is_also_taken(self):
        remaining = sorted(LAST_8_SEATS - {'M'})
        assert is_next_bus_unlocked(remaining) is False

    def test_locked_when_another_seat_is_still_free(self):
        assert is_next_bus_unlocked(sorted(LAST_8_SEATS | {'A1'})) is False

    def test_locked_on_an_empty_bus(self):
        assert is_next_bus_unlocked(SEAT_IDS) is False

    def test_only_claims_on_secondary_buses_need_unlock(self):
        assert requires_unlock(bus_id='1', claiming=True) is False
        assert requires_unlock(bus_id='2', claiming=True) is True
        assert requires_unlock(bus_id='2', claiming=False) is False
