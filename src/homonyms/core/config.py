"""
Runtime settings, read from the environment (and a .env file if present).
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


SCHOOL_DICTIONARY_URL = "https://www.dictionaryapi.com/api/v3/references/sd4/json/"
COLLEGIATE_DICTIONARY_URL = "https://www.dictionaryapi.com/api/v3/references/collegiate/json/"

DEFAULT_COLLECTION_NAME = "My Homonyms"


def _split(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


@dataclass
class Settings:
    backend: str = "sqlite"
    local_backend: str = "redis"
    database_path: str = "homonyms.db"

    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_prefix: str = "homonyms"

    dictionary_api_key: str = ""
    dictionary_base_url: str = SCHOOL_DICTIONARY_URL
    collegiate_api_key: str = ""
    collegiate_base_url: str = COLLEGIATE_DICTIONARY_URL
    lookup_timeout: float = 8.0

    api_url: str = "http://localhost:8000/api"
    allowed_origins: list[str] = field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )
    default_collection: str = DEFAULT_COLLECTION_NAME
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_file: bool = True) -> "Settings":
        if load_file:
            load_dotenv()
        env = os.environ
        defaults = cls()
        return cls(
            backend=env.get("HOMONYMS_BACKEND", defaults.backend).lower(),
            local_backend=env.get("HOMONYMS_LOCAL_BACKEND", defaults.local_backend).lower(),
            database_path=env.get("HOMONYMS_DB_PATH", defaults.database_path),
            redis_host=env.get("REDIS_HOST", defaults.redis_host),
            redis_port=int(env.get("REDIS_PORT", defaults.redis_port)),
            redis_db=int(env.get("REDIS_DB", defaults.redis_db)),
            redis_prefix=env.get("HOMONYMS_REDIS_PREFIX", defaults.redis_prefix),
            dictionary_api_key=env.get("MERRIAM_WEBSTER_API_KEY", ""),
            dictionary_base_url=env.get("MERRIAM_WEBSTER_API_BASE_URL", defaults.dictionary_base_url),
            collegiate_api_key=env.get("MERRIAM_WEBSTER_COLLEGIATE_API_KEY", ""),
            collegiate_base_url=env.get(
                "MERRIAM_WEBSTER_COLLEGIATE_BASE_URL", defaults.collegiate_base_url
            ),
            lookup_timeout=float(env.get("DICTIONARY_TIMEOUT", defaults.lookup_timeout)),
            api_url=env.get("HOMONYMS_API_URL", defaults.api_url).rstrip("/"),
            allowed_origins=_split(env["ALLOWED_ORIGINS"]) if env.get("ALLOWED_ORIGINS") else defaults.allowed_origins,
            default_collection=env.get("HOMONYMS_DEFAULT_COLLECTION", defaults.default_collection),
            log_level=env.get("HOMONYMS_LOG_LEVEL", defaults.log_level),
        )
