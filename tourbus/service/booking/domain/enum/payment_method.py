from enum import StrEnum


class PaymentMethod(StrEnum):
    MANUAL = 'manual'
    BKASH = 'bkash'
