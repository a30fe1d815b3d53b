from typing import Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.platform.constant.path import ENV_EXAMPLE_FILE, ENV_FILE


_ENV_FILE = ENV_FILE if ENV_FILE.exists() else ENV_EXAMPLE_FILE


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Seat Booking Client'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production
    LOG_LEVEL: Optional[str] = None  # overrides the DEBUG-derived level
    LOG_JSON: bool = False  # serialize console records as JSON lines

    # Allocation service (remote priority + aging queue)
    BOOKING_API_BASE_URL: str = 'http://localhost:3000'
    BOOKING_API_TIMEOUT: Optional[float] = None  # None = no client-side request timeout

    # Booking lifecycle
    MIN_SEATS_PER_BOOKING: int = 1
    MAX_SEATS_PER_BOOKING: int = 7
    STATUS_POLL_INTERVAL: float = 2.0  # seconds between status queries
    STATUS_POLL_MAX_CONSECUTIVE_ERRORS: int = 0  # 0 = keep polling forever
    COACH_LAYOUT_POLL_INTERVAL: float = 3.0  # seconds between coach layout refreshes
    HISTORY_LIST_LIMIT: int = 10

    @field_validator('BOOKING_API_BASE_URL', mode='before')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip('/') if isinstance(v, str) else v

    # PostgreSQL (booking history + seat preference backend)
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'seat_booking'

    # Connection pool
    DB_POOL_SIZE: int = 5
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30  # seconds to wait for a pooled connection
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'


settings = Settings()  # type: ignore
