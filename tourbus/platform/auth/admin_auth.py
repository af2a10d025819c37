import secrets
from typing import Optional

from fastapi import Header

from tourbus.platform.config.core_setting import settings
from tourbus.platform.exception.exceptions import AuthenticationError


async def require_admin(x_admin_token: Optional[str] = Header(default=None)) -> None:
    """Admin endpoints are guarded by a shared token sent as `X-Admin-Token`"""
    expected = settings.ADMIN_TOKEN.get_secret_value()
    if not x_admin_token or not secrets.compare_digest(x_admin_token, expected):
        raise AuthenticationError('Invalid admin token')
