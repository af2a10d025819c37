from fastapi import APIRouter

from tourbus.platform.config.core_setting import settings
from tourbus.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    PaymentSettingsResponse,
)


router = APIRouter()


@router.get('')
async def get_payment_settings() -> PaymentSettingsResponse:
    return PaymentSettingsResponse(
        manual_payment=settings.MANUAL_PAYMENT_ENABLED,
        bkash_payment=settings.BKASH_PAYMENT_ENABLED,
    )
