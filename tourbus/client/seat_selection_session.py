"""
Seat Selection Session

Client side of seat picking for one visitor on one bus of a tour. Every
accepted click sends the visitor's complete new selection to the server and
then re-reads the seat map; the server stays the only judge of who holds what.
"""

from typing import Dict, List, Optional

import anyio

from tourbus.client.errors import SeatConflictError, TransientApiError
from tourbus.client.models import SeatInfo, SeatViewState
from tourbus.client.seat_api_client import SeatApiClient
from tourbus.client.selection_cache import SelectionCache, selection_key
from tourbus.platform.logging.loguru_io import Logger


class SeatSelectionSession:
    def __init__(
        self,
        *,
        api: SeatApiClient,
        cache: SelectionCache,
        user_id: str,
        tour_id: str,
        persons: int,
        bus_id: str = '1',
    ) -> None:
        self.api = api
        self.cache = cache
        self.user_id = user_id
        self.tour_id = tour_id
        self.persons = persons
        self.bus_id = bus_id

        self.seats: Dict[str, SeatInfo] = {}
        self.selected: List[str] = cache.load_selection(tour_id, bus_id)
        self._issued_seq = 0
        self._applied_seq = 0
        self._remove_listener = cache.add_listener(self._on_cache_change)

    # ------------------------------------------------------------------ reads

    def seat_view_state(self, seat_id: str) -> SeatViewState:
        seat = self.seats.get(seat_id)
        if seat is not None and seat.booked_by is not None:
            return SeatViewState.BOOKED
        if seat is not None and seat.reserved_by not in (None, self.user_id):
            return SeatViewState.RESERVED_BY_OTHER
        if seat_id in self.selected:
            return SeatViewState.SELECTED
        return SeatViewState.AVAILABLE

    async def refresh(self) -> bool:
        """
        Fetch the seat map. Returns False when a newer response was already
        applied, in which case this one is dropped.
        """
        self._issued_seq += 1
        seq = self._issued_seq
        seats = await self.api.get_seats(tour_id=self.tour_id, bus_id=self.bus_id)
        return self._apply(seq, seats)

    def _apply(self, seq: int, seats: List[SeatInfo]) -> bool:
        if seq <= self._applied_seq:
            Logger.base.debug(f'[SEAT-SESSION] Dropped stale seat map #{seq}')
            return False
        self._applied_seq = seq
        self.seats = {seat.id: seat for seat in seats}

        # a hold of ours may have lapsed and been taken by someone else
        lost = [s for s in self.selected if self._taken_by_other(s)]
        if lost:
            Logger.base.info(f'⚠️ [SEAT-SESSION] Lost seats {lost} to other visitors')
            self._set_selected([s for s in self.selected if s not in lost])
        return True

    def _taken_by_other(self, seat_id: str) -> bool:
        return self.seat_view_state(seat_id) in (
            SeatViewState.BOOKED,
            SeatViewState.RESERVED_BY_OTHER,
        )

    # ----------------------------------------------------------------- writes

    async def toggle(self, seat_id: str) -> bool:
        """
        Select or deselect a seat. Returns False when the click was a no-op
        (seat taken by someone else, booked, or the persons limit reached).

        Raises:
            SeatConflictError: the server refused; selection is reconciled first
        """
        seat_id = seat_id.strip().upper()
        state = self.seat_view_state(seat_id)
        if state in (SeatViewState.BOOKED, SeatViewState.RESERVED_BY_OTHER):
            return False

        if state is SeatViewState.SELECTED:
            new_selection = [s for s in self.selected if s != seat_id]
        else:
            if len(self.selected) >= self.persons:
                return False
            new_selection = [*self.selected, seat_id]

        await self._submit(new_selection)
        return True

    async def deselect(self, seat_id: str) -> bool:
        seat_id = seat_id.strip().upper()
        if seat_id not in self.selected:
            return False
        await self._submit([s for s in self.selected if s != seat_id])
        return True

    async def clear(self) -> None:
        await self._submit([])

    async def _submit(self, new_selection: List[str]) -> None:
        try:
            await self.api.replace_selection(
                tour_id=self.tour_id,
                bus_id=self.bus_id,
                user_id=self.user_id,
                selected_seats=new_selection,
            )
        except SeatConflictError as e:
            Logger.base.info(f'⚔️ [SEAT-SESSION] Conflict on {e.conflicts}, re-syncing')
            await self.refresh()
            self._reconcile()
            raise

        self._set_selected(new_selection)
        await self.refresh()

    def _reconcile(self) -> None:
        """Keep only what the server says this visitor holds"""
        held = [s.id for s in self.seats.values() if s.reserved_by == self.user_id]
        kept = [s for s in self.selected if s in held]
        self._set_selected(kept + [s for s in held if s not in kept])

    def _set_selected(self, seats: List[str]) -> None:
        self.selected = list(seats)
        self.cache.save_selection(self.tour_id, self.bus_id, self.selected)

    def _on_cache_change(self, key: str, value: Optional[str]) -> None:
        if key != selection_key(self.tour_id, self.bus_id):
            return
        cached = self.cache.load_selection(self.tour_id, self.bus_id)
        if cached != self.selected:
            Logger.base.debug(f'[SEAT-SESSION] Selection synced from cache: {cached}')
            self.selected = cached

    # ---------------------------------------------------------------- polling

    async def poll(self, *, interval_seconds: float = 5.0, stop: Optional[anyio.Event] = None) -> None:
        """Refresh every `interval_seconds` until `stop` is set (or forever)"""
        while stop is None or not stop.is_set():
            try:
                await self.refresh()
            except TransientApiError as e:
                Logger.base.warning(f'⚠️ [SEAT-SESSION] Poll failed: {e}')
            await anyio.sleep(interval_seconds)

    def close(self) -> None:
        self._remove_listener()
