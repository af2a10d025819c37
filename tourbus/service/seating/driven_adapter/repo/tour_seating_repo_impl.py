from contextlib import AbstractAsyncContextManager
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.seating.app.interface.i_tour_seating_repo import ITourSeatingRepo
from tourbus.service.seating.domain.entity.tour_seating_entity import TourSeating
from tourbus.service.seating.driven_adapter.model.tour_seating_model import TourSeatingModel


class TourSeatingRepoImpl(ITourSeatingRepo):
    def __init__(
        self, *, session_factory: Callable[..., AbstractAsyncContextManager[AsyncSession]]
    ) -> None:
        self.session_factory = session_factory

    @staticmethod
    def _to_entity(db_seating: TourSeatingModel) -> TourSeating:
        return TourSeating(
            tour_id=db_seating.tour_id,
            bus_count=db_seating.bus_count,
            has_bus_seat_selection=db_seating.has_bus_seat_selection,
            price_per_person=db_seating.price_per_person,
        )

    @Logger.io
    async def get(self, *, tour_id: str) -> Optional[TourSeating]:
        async with self.session_factory() as session:
            db_seating = await session.get(TourSeatingModel, tour_id)
            return self._to_entity(db_seating) if db_seating else None

    @Logger.io
    async def save(self, *, seating: TourSeating) -> TourSeating:
        async with self.session_factory() as session:
            await session.merge(
                TourSeatingModel(
                    tour_id=seating.tour_id,
                    bus_count=seating.bus_count,
                    has_bus_seat_selection=seating.has_bus_seat_selection,
                    price_per_person=seating.price_per_person,
                )
            )
            await session.commit()
        return seating
