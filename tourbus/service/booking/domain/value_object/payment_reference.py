from typing import Optional

import attrs


@attrs.frozen
class PaymentReference:
    """What the visitor submits as proof of payment; recorded, never verified"""

    transaction_id: Optional[str] = None
    payment_proof_file: Optional[str] = None

    @property
    def is_present(self) -> bool:
        return bool((self.transaction_id or '').strip() or (self.payment_proof_file or '').strip())
