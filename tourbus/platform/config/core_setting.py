from pathlib import Path
from typing import List, Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Tour Bus Booking'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Admin console
    ADMIN_TOKEN: SecretStr = SecretStr('test_admin_token_change_in_production')

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # Storage backends
    SEAT_STORE_BACKEND: Literal['memory', 'redis'] = 'memory'
    BOOKING_STORE_BACKEND: Literal['memory', 'postgres'] = 'memory'

    # Redis Configuration (seat map store)
    REDIS_HOST: str = 'localhost'
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str = ''
    REDIS_KEY_PREFIX: str = ''
    REDIS_POOL_MAX_CONNECTIONS: int = 50
    REDIS_POOL_SOCKET_TIMEOUT: int = 10  # Socket read/write timeout (seconds)
    REDIS_POOL_SOCKET_CONNECT_TIMEOUT: int = 10  # Connection timeout (seconds)
    REDIS_POOL_HEALTH_CHECK_INTERVAL: int = 30  # Health check interval (seconds)

    # PostgreSQL Configuration (bookings, tour seating)
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'tourbus'
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:'
            f'{self.POSTGRES_PASSWORD.get_secret_value()}@'
            f'{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # Seat reservation
    RESERVATION_TTL_SECONDS: int = 600  # idle hold of an un-booked reservation
    BOOKING_HOLD_GRACE_SECONDS: int = 60  # pinned seats outlive expires_at by this much
    DEFAULT_BUS_COUNT: int = 5
    MAX_BUS_COUNT: int = 5

    # Booking lifecycle
    BOOKING_EXPIRY_MINUTES: int = 30
    EXPIRY_SWEEP_INTERVAL_SECONDS: float = 30.0

    # Payment settings
    MANUAL_PAYMENT_ENABLED: bool = True
    BKASH_PAYMENT_ENABLED: bool = False


settings = Settings()  # type: ignore
