"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with PHONECALL_ prefix.
Both halves of the channel (notifier server and client bridge) read the
same Settings object, so one environment describes a whole deployment.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings

from phonecall.events.types import PHONE_CALL_IN

MALFORMED_POLICIES = ("log", "raise")


class Settings(BaseSettings):
    """All app configuration. Set via PHONECALL_* env vars."""

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Notification record pushed to every connecting client
    record_name: str = "Jonathan Linnestad"
    record_company: str = "Anleggsmannen"

    # Client bridge
    server_url: str = "ws://localhost:8000"
    inbound_port: str = PHONE_CALL_IN
    on_malformed: str = "log"  # "log" drops the frame, "raise" ends the bridge
    open_timeout: float = 10.0

    model_config = {"env_prefix": "PHONECALL_"}

    @field_validator("on_malformed")
    @classmethod
    def validate_on_malformed(cls, value: str) -> str:
        if value not in MALFORMED_POLICIES:
            raise ValueError(
                f"PHONECALL_ON_MALFORMED must be one of {MALFORMED_POLICIES}, got {value!r}"
            )
        return value

    @field_validator("server_url")
    @classmethod
    def validate_server_url(cls, value: str) -> str:
        if not value.startswith(("ws://", "wss://")):
            raise ValueError("PHONECALL_SERVER_URL must use the ws:// or wss:// scheme")
        return value


# Singleton — import this everywhere
settings = Settings()
