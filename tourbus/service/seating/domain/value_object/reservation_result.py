from typing import List

import attrs


@attrs.frozen
class ReservationResult:
    """
    Outcome of one all-or-nothing seat map mutation

    When `conflicts` is non-empty nothing was changed.
    """

    conflicts: List[str] = attrs.field(factory=list)
    claimed: List[str] = attrs.field(factory=list)
    released: List[str] = attrs.field(factory=list)

    @property
    def ok(self) -> bool:
        return not self.conflicts
