import attrs


@attrs.frozen
class BusStatus:
    bus_id: str
    unlocked: bool
    available_count: int
