import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv


load_dotenv()

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def _env_number(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Config:
    """Server configuration loaded from environment variables.

    An empty ADMIN_KEY disables every admin action; nothing falls back to a
    default secret.
    """

    DATA_PATH: str = os.getenv("DATA_PATH", os.path.join("data", "db.json"))
    ADMIN_KEY: str = os.getenv("ADMIN_KEY", "").strip()
    ADMIN_TOKEN_TTL_MS: int = int(_env_number("ADMIN_TOKEN_TTL_MS", 1000 * 60 * 60 * 6))
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(_env_number("PORT", 3000))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING")
    MAX_BODY_BYTES: int = 2 * 1024 * 1024

    CORS_ORIGINS_ENV: str = os.getenv("CORS_ORIGINS", "")

    @property
    def admin_enabled(self) -> bool:
        return bool(self.ADMIN_KEY)

    @property
    def token_ttl_seconds(self) -> float:
        return self.ADMIN_TOKEN_TTL_MS / 1000.0

    def allowed_origins(self) -> List[str]:
        env_origins = [o.strip() for o in self.CORS_ORIGINS_ENV.split(",") if o.strip()]
        merged = env_origins or list(DEFAULT_CORS_ORIGINS)
        # Deduplicate while preserving order
        seen = set()
        result: List[str] = []
        for origin in merged:
            if origin not in seen:
                seen.add(origin)
                result.append(origin)
        return result


@dataclass(frozen=True)
class ClientConfig:
    """Settings for the site/admin client talking to the content API."""

    CONTENT_API_BASE_URL: str = os.getenv("CONTENT_API_BASE_URL", "http://localhost:3000")
    CONTENT_CACHE_DIR: str = os.getenv("CONTENT_CACHE_DIR", os.path.join(".cache", "vitae"))
    CONTENT_API_TIMEOUT: float = _env_number("CONTENT_API_TIMEOUT", 10.0)
