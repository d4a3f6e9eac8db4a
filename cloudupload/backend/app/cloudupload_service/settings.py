import os
from dataclasses import dataclass


@dataclass(slots=True)
class Settings:
    backend_url: str
    timeout_seconds: float
    log_level: str
    db_url: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            backend_url=os.getenv(
                "CLOUDUPLOAD_BACKEND_URL", "http://localhost:5352"
            ).rstrip("/"),
            timeout_seconds=float(os.getenv("CLOUDUPLOAD_TIMEOUT_SECONDS", "30")),
            log_level=os.getenv("CLOUDUPLOAD_LOG_LEVEL", "INFO"),
            db_url=os.getenv("CLOUDUPLOAD_DB_URL", "sqlite:///./cloudupload.db"),
        )
