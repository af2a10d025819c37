import attrs

from tourbus.platform.config.core_setting import settings
from tourbus.platform.exception.exceptions import DomainError
from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.seating.domain.value_object.bus_layout import bus_ids


def _validate_bus_count(instance: 'TourSeating', attribute: attrs.Attribute, value: int) -> None:
    if not 1 <= value <= settings.MAX_BUS_COUNT:
        raise DomainError(f'busCount must be between 1 and {settings.MAX_BUS_COUNT}')


def _validate_price(instance: 'TourSeating', attribute: attrs.Attribute, value: int) -> None:
    if value < 0:
        raise DomainError('pricePerPerson must not be negative')


@attrs.define
class TourSeating:
    """Per tour seating configuration; tours without one use the defaults"""

    tour_id: str
    bus_count: int = attrs.field(
        factory=lambda: settings.DEFAULT_BUS_COUNT, validator=_validate_bus_count
    )
    has_bus_seat_selection: bool = True
    price_per_person: int = attrs.field(default=0, validator=_validate_price)

    @classmethod
    def default(cls, *, tour_id: str) -> 'TourSeating':
        return cls(tour_id=tour_id)

    @Logger.io
    def reconfigure(
        self,
        *,
        bus_count: int | None = None,
        has_bus_seat_selection: bool | None = None,
        price_per_person: int | None = None,
    ) -> 'TourSeating':
        return attrs.evolve(
            self,
            bus_count=self.bus_count if bus_count is None else bus_count,
            has_bus_seat_selection=(
                self.has_bus_seat_selection
                if has_bus_seat_selection is None
                else has_bus_seat_selection
            ),
            price_per_person=self.price_per_person if price_per_person is None else price_per_person,
        )

    @property
    def bus_ids(self) -> list[str]:
        return bus_ids(self.bus_count)

    def has_bus(self, bus_id: str) -> bool:
        return bus_id in self.bus_ids

    def amount_for(self, persons: int) -> int:
        return self.price_per_person * persons
