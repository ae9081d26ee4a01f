import os
from dataclasses import dataclass, field

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _env_int(name: str, default: int, *, minimum: int = 1) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass
class Settings:
    reset_clears_seats: bool = False
    push_buffer_size: int = 10
    session_id_length: int = 12
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.environ.get("TICTACTOE_CORS_ORIGINS", "*")
        return cls(
            reset_clears_seats=_env_bool("TICTACTOE_RESET_CLEARS_SEATS", False),
            push_buffer_size=_env_int("TICTACTOE_PUSH_BUFFER_SIZE", 10),
            session_id_length=_env_int("TICTACTOE_SESSION_ID_LENGTH", 12, minimum=4),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()] or ["*"],
            log_level=os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
            host=os.environ.get("HOST", "0.0.0.0").strip() or "0.0.0.0",
            port=_env_int("PORT", 8080),
        )
