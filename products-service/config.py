import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Chargement des variables d'environnement (.env)
load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def normalize_prefix(prefix: str) -> str:
    """Turn ``api``, ``/api/`` or ``/api`` into ``/api``; blank stays ``""``."""
    prefix = prefix.strip().strip("/")
    return f"/{prefix}" if prefix else ""


@dataclass
class Settings:
    """Service settings. ``from_env`` reads them from the environment."""

    service_name: str = "products-service"
    environment: str = "production"
    api_prefix: str = ""
    host: str = "0.0.0.0"
    port: int = 8001
    log_level: str = "INFO"
    log_file: str = "logs.json"
    log_to_stderr: bool = False

    def __post_init__(self):
        self.api_prefix = normalize_prefix(self.api_prefix)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            service_name=os.getenv("SERVICE_NAME", "products-service"),
            environment=os.getenv("ENVIRONMENT", "production"),
            api_prefix=os.getenv("API_PREFIX", ""),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8001")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "logs.json"),
            log_to_stderr=_env_bool("LOG_TO_STDERR"),
        )

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in {"dev", "development"}


settings = Settings.from_env()
