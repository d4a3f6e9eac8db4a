import logging

from dotenv import load_dotenv

from cloudupload_service.logging_config import configure_logging
from cloudupload_service.settings import Settings
from db import UploadJobRepository
from resources import UploadJobResource
from transport import CloudBackendClient

logger = logging.getLogger("cloudupload")


def load_settings() -> Settings:
    load_dotenv()
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return settings


def build_client(settings: Settings) -> CloudBackendClient:
    return CloudBackendClient(
        base_url=settings.backend_url, timeout=settings.timeout_seconds
    )


def build_resource(settings: Settings | None = None) -> UploadJobResource:
    settings = settings or load_settings()
    logger.info(
        "upload_job_resource_ready",
        extra={
            "backend_url": settings.backend_url,
            "timeout_seconds": settings.timeout_seconds,
        },
    )
    return UploadJobResource(build_client(settings))


def build_repository(settings: Settings | None = None) -> UploadJobRepository:
    settings = settings or load_settings()
    return UploadJobRepository(settings.db_url)
