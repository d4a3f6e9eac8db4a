import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from models import ResponseFormat, UploadJob
from transport import xmlhash
from transport.client import TransportClient
from transport.errors import TransportError, XmlDecodeError

logger = logging.getLogger("cloudupload.resource")

_JOB_ELEMENT = "clouduploadjob"


class UploadJobOwner(Protocol):
    @property
    def upload_job_ids(self) -> Sequence[str]: ...


def _wants_xml(format: ResponseFormat | str | None) -> bool:
    if format is None:
        return False
    value = format.value if isinstance(format, ResponseFormat) else str(format)
    return value.strip().lower() == ResponseFormat.XML.value


def _job_elements(xml: str) -> list[Mapping[str, Any]]:
    """Return the non-empty ``clouduploadjob`` elements of a listing, in order."""

    element = xmlhash.fetch(xmlhash.parse(xml), _JOB_ELEMENT)
    candidates = element if isinstance(element, list) else [element]
    return [item for item in candidates if isinstance(item, Mapping) and item]


class UploadJobResource:
    """Access to cloud upload jobs held by the backend.

    Transport failures and timeouts never reach the caller: ``create`` turns
    them into an invalid ``UploadJob`` and the read operations report them as
    "nothing found".
    """

    def __init__(self, client: TransportClient) -> None:
        self._client = client

    def create(self, params: Mapping[str, object]) -> UploadJob:
        try:
            xml = self._client.upload(params)
        except (TransportError, TimeoutError) as exc:
            logger.warning("upload_job_create_failed", extra={"error": str(exc)})
            return UploadJob(exception=str(exc))

        return UploadJob(xml=xml)

    def find(
        self, job_id: str, format: ResponseFormat | str | None = None
    ) -> UploadJob | str | None:
        # A failed call is reported exactly like an unknown job id.
        try:
            xml = self._client.fetch_jobs([job_id])
        except (TransportError, TimeoutError) as exc:
            logger.warning(
                "upload_job_find_failed", extra={"job_id": job_id, "error": str(exc)}
            )
            return None

        if _wants_xml(format):
            return xml

        try:
            elements = _job_elements(xml)
        except XmlDecodeError as exc:
            logger.warning(
                "upload_job_response_undecodable",
                extra={"job_id": job_id, "error": str(exc)},
            )
            return None

        if not elements:
            return None
        return UploadJob(fields=elements[0])

    def all(
        self, user: UploadJobOwner, format: ResponseFormat | str | None = None
    ) -> list[UploadJob] | str:
        job_ids = [str(job_id) for job_id in user.upload_job_ids]
        try:
            xml = self._client.fetch_jobs(job_ids)
        except (TransportError, TimeoutError) as exc:
            logger.warning(
                "upload_jobs_fetch_failed",
                extra={"job_count": len(job_ids), "error": str(exc)},
            )
            return []

        if _wants_xml(format):
            return xml

        try:
            elements = _job_elements(xml)
        except XmlDecodeError as exc:
            logger.warning(
                "upload_jobs_response_undecodable", extra={"error": str(exc)}
            )
            return []

        return [UploadJob(fields=element) for element in elements]
