from dotenv import load_dotenv
import json
import os
from typing import Dict, List

load_dotenv()


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    REQUIRED = (
        "DATABASE_URL",
        "SECRET_KEY",
        "GOOGLE_FACT_CHECK_API_KEY",
        "GNEWS_API_KEY",
        "CLAIMBUSTER_API_KEY",
    )

    def __init__(self):
        self.DATABASE_URL = os.getenv("DATABASE_URL")
        self.SECRET_KEY = os.getenv("SECRET_KEY")
        self.ACCESS_TOKEN_EXPIRE_MINUTES = _get_int("ACCESS_TOKEN_EXPIRE_MINUTES", 60)
        self.REFRESH_TOKEN_EXPIRE_DAYS = _get_int("REFRESH_TOKEN_EXPIRE_DAYS", 30)

        self.GOOGLE_FACT_CHECK_API_KEY = os.getenv("GOOGLE_FACT_CHECK_API_KEY")
        self.GNEWS_API_KEY = os.getenv("GNEWS_API_KEY")
        self.CLAIMBUSTER_API_KEY = os.getenv("CLAIMBUSTER_API_KEY")

        self.RATE_LIMIT_MAX_REQUESTS = _get_int("RATE_LIMIT_MAX_REQUESTS", 15)
        self.RATE_LIMIT_WINDOW_SECONDS = _get_int("RATE_LIMIT_WINDOW_SECONDS", 3600)
        self.IMAGE_CACHE_MAX_ENTRIES = _get_int("IMAGE_CACHE_MAX_ENTRIES", 256)
        self.IMAGE_CACHE_TTL_SECONDS = _get_int("IMAGE_CACHE_TTL_SECONDS", 86400)

        self.PUBLIC_ASSET_BASE_URL = os.getenv("PUBLIC_ASSET_BASE_URL", "http://localhost:5173").rstrip("/")
        self.PROXY_BASE_URL = os.getenv("PROXY_BASE_URL", "").rstrip("/")
        self.PUBLISHER_IMAGES = self._load_publisher_images()

        self.CORS_ORIGINS: List[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
            if origin.strip()
        ]
        self.DEBUG = _get_bool("DEBUG")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    def _load_publisher_images(self) -> Dict[str, str]:
        """
        Static publisher logos used when a review page has no scrapable image.

        Keys are matched case-insensitively; a ``default`` entry is mandatory.
        ``PUBLISHER_IMAGES`` may hold a JSON object that replaces the built-in table.
        """
        raw = os.getenv("PUBLISHER_IMAGES")
        if raw:
            images = json.loads(raw)
        else:
            base = self.PUBLIC_ASSET_BASE_URL
            images = {
                "usa today": f"{base}/images/usa-today-logo.png",
                "aap": f"{base}/images/aap-logo.png",
                "full fact": f"{base}/images/full-fact-logo.png",
                "default": f"{base}/images/placeholder.png",
            }
        return {key.strip().lower(): value for key, value in images.items()}

    def missing(self) -> List[str]:
        return [name for name in self.REQUIRED if not getattr(self, name)]

    def validate(self) -> None:
        """Raise if required configuration is absent; called before the app serves traffic."""
        missing = self.missing()
        if missing:
            raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")
        if not self.PUBLISHER_IMAGES.get("default"):
            raise RuntimeError("PUBLISHER_IMAGES must define a 'default' image")


settings = Settings()
