import os
from typing import List, NamedTuple

import dotenv

dotenv.load_dotenv()

PLATFORMS = ("ios", "android", "web")


class ComposerSettings(NamedTuple):
    api_url: str
    platform: str  # ios, android or web
    media_dir: str
    frontend_url: str
    cors_origins: List[str]


def load_settings() -> ComposerSettings:
    """
    Reads the composer configuration from the environment.

    Example .env:
    API_URL=https://books.example.com/api
    APP_PLATFORM=android
    MEDIA_DIR=./media
    CORS_ORIGINS=http://localhost:8081,http://localhost:19006
    """
    platform = os.environ.get("APP_PLATFORM", "ios").lower()
    if platform not in PLATFORMS:
        raise ValueError(
            f"APP_PLATFORM must be one of {', '.join(PLATFORMS)}, got {platform!r}"
        )

    frontend_url = os.environ.get("FRONTEND_URL", "http://localhost:8081")
    origins = [
        o.strip()
        for o in os.environ.get("CORS_ORIGINS", frontend_url).split(",")
        if o.strip()
    ]

    return ComposerSettings(
        api_url=os.environ.get("API_URL", "http://localhost:3000/api").rstrip("/"),
        platform=platform,
        media_dir=os.environ.get("MEDIA_DIR", "./media"),
        frontend_url=frontend_url,
        cors_origins=origins,
    )
