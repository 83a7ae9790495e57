import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from gate import GateConfig, normalize_prefix


@dataclass(frozen=True)
class Settings:
    gate: GateConfig = field(default_factory=GateConfig)
    database_url: str = "sqlite:///storefront.db"
    allowed_origins: object = "*"
    secret_key: str = "devkey"
    log_level: str = "INFO"
    port: int = 5000


def parse_origins(value):
    # "*" stays a plain string, anything else becomes a tuple of origins
    value = (value or "*").strip()
    if value == "*":
        return "*"
    return tuple(o.strip() for o in value.split(",") if o.strip())


def load_settings(environ=None):
    """Read settings from the environment (and .env) once, at startup."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    secret = environ.get("ADMIN_PIN") or environ.get("NEXT_PUBLIC_ADMIN_PIN") or ""

    gate = GateConfig(
        secret=secret,
        prefix=normalize_prefix(environ.get("ADMIN_PREFIX", "/admin")),
        param=environ.get("ADMIN_KEY_PARAM") or "key",
    )

    port = environ.get("PORT", "5000")
    try:
        port = int(port)
    except ValueError:
        raise ValueError(f"PORT must be an integer, got {port!r}")

    return Settings(
        gate=gate,
        database_url=environ.get("DATABASE_URL") or "sqlite:///storefront.db",
        allowed_origins=parse_origins(environ.get("ALLOWED_ORIGINS")),
        secret_key=environ.get("SECRET_KEY", "devkey"),
        log_level=(environ.get("LOG_LEVEL") or "INFO").upper(),
        port=port,
    )
