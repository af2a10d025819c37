"""
Unit tests for the in-process event broadcaster and the seat map / booking
status publishers built on it.
"""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from tourbus.platform.event.i_in_memory_broadcaster import (
    booking_status_channel,
    seat_map_channel,
)
from tourbus.platform.event.in_memory_broadcaster import InMemoryEventBroadcasterImpl
from tourbus.service.booking.domain.entity.booking_entity import Booking
from tourbus.service.booking.domain.enum.payment_method import PaymentMethod
from tourbus.service.booking.domain.value_object.customer_info import CustomerInfo
from tourbus.service.booking.domain.value_object.payment_reference import PaymentReference
from tourbus.service.booking.driven_adapter.broadcaster.booking_status_broadcaster_impl import (
    BookingStatusBroadcasterImpl,
)
from tourbus.service.seating.domain.entity.seat_entity import Seat
from tourbus.service.seating.driven_adapter.broadcaster.seat_map_broadcaster_impl import (
    SeatMapBroadcasterImpl,
)


NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


class TestInMemoryEventBroadcaster:
    @pytest.mark.asyncio
    async def test_every_subscriber_receives_the_event(self):
        broadcaster = InMemoryEventBroadcasterImpl()
        first = await broadcaster.subscribe(channel='c')
        second = await broadcaster.subscribe(channel='c')

        await broadcaster.broadcast(channel='c', event_data={'n': 1})

        assert first.receive_nowait() == {'n': 1}
        assert second.receive_nowait() == {'n': 1}

    @pytest.mark.asyncio
    async def test_broadcast_without_subscribers_is_a_no_op(self):
        broadcaster = InMemoryEventBroadcasterImpl()
        await broadcaster.broadcast(channel='nobody', event_data={'n': 1})
        assert broadcaster.subscriber_count(channel='nobody') == 0

    @pytest.mark.asyncio
    async def test_full_stream_drops_events_instead_of_blocking(self):
        broadcaster = InMemoryEventBroadcasterImpl(max_buffer_size=2)
        stream = await broadcaster.subscribe(channel='c')

        for n in range(5):
            await broadcaster.broadcast(channel='c', event_data={'n': n})

        assert stream.receive_nowait() == {'n': 0}
        assert stream.receive_nowait() == {'n': 1}
        assert stream.statistics().current_buffer_used == 0

    @pytest.mark.asyncio
    async def test_unsubscribe_removes_empty_channel(self):
        broadcaster = InMemoryEventBroadcasterImpl()
        stream = await broadcaster.subscribe(channel='c')

        await broadcaster.unsubscribe(channel='c', stream=stream)
        await broadcaster.unsubscribe(channel='unknown', stream=stream)

        assert broadcaster.subscriber_count(channel='c') == 0


class TestPublishers:
    @pytest.mark.asyncio
    async def test_seat_map_event_uses_camel_case(self):
        broadcaster = InMemoryEventBroadcasterImpl()
        channel = seat_map_channel(tour_id='t1', bus_id='2')
        stream = await broadcaster.subscribe(channel=channel)

        await SeatMapBroadcasterImpl(event_broadcaster=broadcaster).publish_seat_map(
            tour_id='t1',
            bus_id='2',
            seats=[Seat(id='A1', reserved_by='alice'), Seat(id='A2')],
        )

        event = stream.receive_nowait()
        assert channel == 'seat_map:t1:2'
        assert event['tourId'] == 't1'
        assert event['busId'] == '2'
        assert event['seats'][0] == {
            'id': 'A1',
            'isAvailable': False,
            'reservedBy': 'alice',
            'bookedBy': None,
        }
        assert event['seats'][1]['isAvailable'] is True

    @pytest.mark.asyncio
    async def test_publish_failure_is_swallowed(self):
        failing = AsyncMock()
        failing.broadcast = AsyncMock(side_effect=RuntimeError('boom'))

        await SeatMapBroadcasterImpl(event_broadcaster=failing).publish_seat_map(
            tour_id='t1', bus_id='1', seats=[]
        )

    @pytest.mark.asyncio
    async def test_booking_status_event(self):
        booking = Booking.create(
            id='bk-1',
            tour_id='t1',
            bus_id='1',
            user_id='alice',
            selected_seats=['A1'],
            persons=1,
            customer_info=CustomerInfo(name='Rahim', email='r@example.com', phone='017'),
            payment_reference=PaymentReference(transaction_id='TX-1'),
            payment_method=PaymentMethod.MANUAL,
            from_location='Dhaka',
            travel_date=date(2026, 4, 1),
            now=NOW,
            expiry=timedelta(minutes=30),
        )
        broadcaster = InMemoryEventBroadcasterImpl()
        stream = await broadcaster.subscribe(channel=booking_status_channel(booking_id='bk-1'))

        await BookingStatusBroadcasterImpl(event_broadcaster=broadcaster).publish_status(
            booking=booking.approve(now=NOW)
        )

        assert stream.receive_nowait() == {
            'bookingId': 'bk-1',
            'status': 'approved',
            'expiresAt': '2026-03-01T09:30:00+00:00',
        }
