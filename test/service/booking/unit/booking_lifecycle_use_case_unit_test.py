"""
Unit tests for the booking lifecycle use cases

Wires the real in-memory seat map store and booking repo; broadcasters are
mocked. Time is driven by a fake clock.

Covers:
1. Create: seats pinned to the booking, deadline set
2. Approve: seats booked; reject: seats released
3. Single winner when decisions race
4. Expiry by status poll and by the sweeper use case
"""

from datetime import date, timedelta
from unittest.mock import AsyncMock

import anyio
import pytest

from tourbus.platform.exception.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    SeatConflictError,
)
from tourbus.service.booking.app.command.approve_booking_use_case import ApproveBookingUseCase
from tourbus.service.booking.app.command.booking_transition_executor import (
    BookingTransitionExecutor,
)
from tourbus.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from tourbus.service.booking.app.command.expire_pending_bookings_use_case import (
    ExpirePendingBookingsUseCase,
)
from tourbus.service.booking.app.command.reject_booking_use_case import RejectBookingUseCase
from tourbus.service.booking.app.query.get_booking_status_use_case import (
    GetBookingStatusUseCase,
)
from tourbus.service.booking.domain.enum.booking_status import BookingStatus
from tourbus.service.booking.domain.enum.payment_method import PaymentMethod
from tourbus.service.booking.domain.value_object.customer_info import CustomerInfo
from tourbus.service.booking.domain.value_object.payment_reference import PaymentReference
from tourbus.service.booking.driven_adapter.repo.booking_repo_in_memory_impl import (
    BookingRepoInMemoryImpl,
)
from tourbus.service.booking.driving_adapter.background.booking_expiry_sweeper import (
    BookingExpirySweeper,
)
from tourbus.service.seating.domain.entity.tour_seating_entity import TourSeating
from tourbus.service.seating.driven_adapter.repo.tour_seating_repo_in_memory_impl import (
    TourSeatingRepoInMemoryImpl,
)
from tourbus.service.seating.driven_adapter.state.seat_map_store_in_memory_impl import (
    SeatMapStoreInMemoryImpl,
)


class BookingWorld:
    """Use cases sharing one set of in-memory adapters"""

    def __init__(self, clock) -> None:
        self.clock = clock
        self.seat_map_store = SeatMapStoreInMemoryImpl()
        self.booking_repo = BookingRepoInMemoryImpl()
        self.tour_seating_repo = TourSeatingRepoInMemoryImpl()
        self.seat_map_broadcaster = AsyncMock()
        self.booking_status_broadcaster = AsyncMock()

        self.executor = BookingTransitionExecutor(
            booking_repo=self.booking_repo,
            seat_map_store=self.seat_map_store,
            booking_status_broadcaster=self.booking_status_broadcaster,
            seat_map_broadcaster=self.seat_map_broadcaster,
            clock=clock,
        )
        self.create = CreateBookingUseCase(
            booking_repo=self.booking_repo,
            seat_map_store=self.seat_map_store,
            tour_seating_repo=self.tour_seating_repo,
            seat_map_broadcaster=self.seat_map_broadcaster,
            booking_status_broadcaster=self.booking_status_broadcaster,
            clock=clock,
        )
        common = {'booking_repo': self.booking_repo, 'transition_executor': self.executor}
        self.approve = ApproveBookingUseCase(clock=clock, **common)
        self.reject = RejectBookingUseCase(clock=clock, **common)
        self.status = GetBookingStatusUseCase(clock=clock, **common)
        self.expire = ExpirePendingBookingsUseCase(clock=clock, **common)

    async def create_booking(self, *, user_id: str = 'alice', seats=('A1', 'A2'), **overrides):
        kwargs = {
            'tour_id': 't1',
            'bus_id': '1',
            'user_id': user_id,
            'selected_seats': list(seats),
            'persons': len(seats) or 1,
            'customer_info': CustomerInfo(name='Rahim', email='rahim@example.com', phone='017'),
            'payment_reference': PaymentReference(transaction_id='TX-1'),
            'payment_method': PaymentMethod.MANUAL,
            'from_location': 'Dhaka',
            'travel_date': date(2026, 4, 1),
        }
        kwargs.update(overrides)
        return await self.create.create_booking(**kwargs)

    async def holder(self, seat_id: str, bus_id: str = '1'):
        now = self.clock()
        seat_map = await self.seat_map_store.get_seat_map(tour_id='t1', bus_id=bus_id, now=now)
        return seat_map.seats[seat_id].to_seat(now)


@pytest.fixture
def world(clock) -> BookingWorld:
    return BookingWorld(clock)


class TestCreateBooking:
    @pytest.mark.asyncio
    async def test_pins_seats_and_sets_deadline(self, world, clock):
        booking = await world.create_booking()

        assert booking.status is BookingStatus.PENDING
        assert booking.expires_at == clock.now + timedelta(minutes=30)
        assert (await world.booking_repo.get_by_id(booking_id=booking.id)) == booking
        seat_map = await world.seat_map_store.get_seat_map(tour_id='t1', bus_id='1', now=clock())
        assert seat_map.seats['A1'].booking_id == booking.id
        assert seat_map.seats['A1'].reserved_by == 'alice'
        world.booking_status_broadcaster.publish_status.assert_awaited_once()
        world.seat_map_broadcaster.publish_seat_map.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_seats_held_by_someone_else_conflict(self, world):
        await world.create_booking(user_id='bob', seats=('A2',))

        with pytest.raises(SeatConflictError) as exc_info:
            await world.create_booking()

        assert exc_info.value.seat_ids == ['A2']
        assert len(await world.booking_repo.list_bookings()) == 1

    @pytest.mark.asyncio
    async def test_pinned_seats_outlive_the_reservation_ttl(self, world, clock):
        await world.create_booking()
        clock.advance(minutes=20)

        assert (await world.holder('A1')).reserved_by == 'alice'

    @pytest.mark.asyncio
    async def test_locked_bus_is_refused(self, world):
        with pytest.raises(ForbiddenError):
            await world.create_booking(bus_id='2')

    @pytest.mark.asyncio
    async def test_amount_follows_tour_price(self, world):
        await world.tour_seating_repo.save(seating=TourSeating(tour_id='t1', price_per_person=1200))

        booking = await world.create_booking()

        assert booking.amount == 2400

    @pytest.mark.asyncio
    async def test_tour_without_seat_selection_pins_nothing(self, world):
        await world.tour_seating_repo.save(
            seating=TourSeating(tour_id='t1', has_bus_seat_selection=False)
        )

        booking = await world.create_booking(seats=('A1',), persons=4)

        assert booking.selected_seats == []
        assert (await world.holder('A1')).is_available

    @pytest.mark.asyncio
    async def test_failed_insert_releases_pinned_seats(self, world):
        world.booking_repo.create = AsyncMock(side_effect=RuntimeError('db down'))

        with pytest.raises(RuntimeError):
            await world.create_booking()

        assert (await world.holder('A1')).is_available
        assert (await world.holder('A2')).is_available


class TestDecisions:
    @pytest.mark.asyncio
    async def test_approve_books_seats(self, world):
        booking = await world.create_booking()

        approved = await world.approve.approve(booking_id=booking.id)

        assert approved.status is BookingStatus.APPROVED
        seat = await world.holder('A1')
        assert seat.booked_by == 'alice'
        stored = await world.booking_repo.get_by_id(booking_id=booking.id)
        assert stored.status is BookingStatus.APPROVED

    @pytest.mark.asyncio
    async def test_reject_releases_seats(self, world):
        booking = await world.create_booking()

        rejected = await world.reject.reject(booking_id=booking.id)

        assert rejected.status is BookingStatus.REJECTED
        assert (await world.holder('A1')).is_available

    @pytest.mark.asyncio
    async def test_second_decision_conflicts(self, world):
        booking = await world.create_booking()
        await world.approve.approve(booking_id=booking.id)

        with pytest.raises(ConflictError):
            await world.reject.reject(booking_id=booking.id)

        assert (await world.holder('A1')).booked_by == 'alice'

    @pytest.mark.asyncio
    async def test_racing_decisions_have_a_single_winner(self, world):
        booking = await world.create_booking()
        outcomes: list[str] = []

        async def decide(action) -> None:
            try:
                result = await action(booking_id=booking.id)
                outcomes.append(result.status.value)
            except ConflictError:
                outcomes.append('conflict')

        async with anyio.create_task_group() as tg:
            tg.start_soon(decide, world.approve.approve)
            tg.start_soon(decide, world.reject.reject)

        assert sorted(outcomes).count('conflict') == 1
        winner = next(o for o in outcomes if o != 'conflict')
        stored = await world.booking_repo.get_by_id(booking_id=booking.id)
        assert stored.status.value == winner

    @pytest.mark.asyncio
    async def test_unknown_booking_is_not_found(self, world):
        with pytest.raises(NotFoundError):
            await world.approve.approve(booking_id='missing')
        with pytest.raises(NotFoundError):
            await world.status.get_status(booking_id='missing')


class TestExpiry:
    @pytest.mark.asyncio
    async def test_status_poll_expires_overdue_booking(self, world, clock):
        booking = await world.create_booking()

        clock.advance(minutes=29)
        assert (await world.status.get_status(booking_id=booking.id)).status is BookingStatus.PENDING

        clock.advance(minutes=2)
        polled = await world.status.get_status(booking_id=booking.id)

        assert polled.status is BookingStatus.EXPIRED
        assert (await world.holder('A1')).is_available
        assert (await world.holder('A2')).is_available

    @pytest.mark.asyncio
    async def test_approve_after_deadline_expires_instead(self, world, clock):
        booking = await world.create_booking()
        clock.advance(minutes=31)

        with pytest.raises(ConflictError, match='expired'):
            await world.approve.approve(booking_id=booking.id)

        stored = await world.booking_repo.get_by_id(booking_id=booking.id)
        assert stored.status is BookingStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_sweeper_expires_only_overdue_bookings(self, world, clock):
        old = await world.create_booking(user_id='alice', seats=('A1',))
        clock.advance(minutes=20)
        fresh = await world.create_booking(user_id='bob', seats=('B1',))
        clock.advance(minutes=11)

        sweeper = BookingExpirySweeper(use_case=world.expire, interval_seconds=30)
        assert await sweeper.run_once() == [old.id]
        assert await sweeper.run_once() == []

        assert (await world.booking_repo.get_by_id(booking_id=old.id)).status is BookingStatus.EXPIRED
        assert (await world.booking_repo.get_by_id(booking_id=fresh.id)).status is BookingStatus.PENDING
        assert (await world.holder('A1')).is_available
        assert (await world.holder('B1')).reserved_by == 'bob'
