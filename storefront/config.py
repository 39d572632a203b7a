from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]  # .../safari-storefront
load_dotenv(dotenv_path=ROOT_DIR / ".env")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int | None = None) -> int | None:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return int(v)


def _get_float(*keys: str, default: float | None = None) -> float | None:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return float(v)


def _get_path(*keys: str, default: str) -> str:
    v = _get_env(*keys, default=default)
    return str(v)


def _get_list(*keys: str, default: str) -> Tuple[str, ...]:
    v = _get_env(*keys, default=default) or ""
    return tuple(part.strip() for part in v.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    db_path: str
    cart_db_path: str
    api_url: str
    cache_ttl_seconds: int
    http_timeout: float
    app_name: str
    default_whatsapp_number: str
    country_code: str
    bot_token: str
    log_level: str
    cors_origins: Tuple[str, ...]


def load_settings() -> Settings:
    ttl = _get_int("CACHE_TTL_SECONDS", default=300)
    timeout = _get_float("HTTP_TIMEOUT", default=8.0)
    # TTL 0 = sin caché; el timeout tiene que acotar la espera
    if ttl is None or ttl < 0:
        raise ValueError(f"CACHE_TTL_SECONDS must be >= 0, got {ttl}")
    if timeout is None or timeout <= 0:
        raise ValueError(f"HTTP_TIMEOUT must be > 0, got {timeout}")

    return Settings(
        db_path=_get_path("DB_PATH", "DATABASE_PATH", default=str(ROOT_DIR / "data" / "safari.db")),
        cart_db_path=_get_path("CART_DB_PATH", default=str(ROOT_DIR / "data" / "carts.db")),
        api_url=_get_env("API_URL", "VITE_API_URL", default="http://127.0.0.1:3000/api") or "",
        cache_ttl_seconds=ttl,
        http_timeout=timeout,
        app_name=_get_env("APP_NAME", default="Safari Web") or "Safari Web",
        default_whatsapp_number=_get_env("WHATSAPP_DEFAULT_NUMBER", default="573000000000") or "",
        country_code=_get_env("COUNTRY_CODE", default="593") or "593",
        bot_token=_get_env("BOT_TOKEN", "TELEGRAM_BOT_TOKEN", default="") or "",
        log_level=(_get_env("LOG_LEVEL", default="INFO") or "INFO").upper(),
        cors_origins=_get_list("CORS_ORIGINS", default="*"),
    )


settings = load_settings()
