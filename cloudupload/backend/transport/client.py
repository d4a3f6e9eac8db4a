import json
import logging
from collections.abc import Mapping, Sequence
from typing import Protocol

import httpx

from transport.errors import TransportError, TransportTimeoutError

logger = logging.getLogger("cloudupload.transport")

# Keys the backend expects in the query string, everything else is uploader
# specific and travels in the JSON body.
_UPLOAD_QUERY_KEYS = (
    "project",
    "package",
    "repository",
    "arch",
    "filename",
    "user",
    "target",
)


class TransportClient(Protocol):
    def upload(self, params: Mapping[str, object]) -> str: ...

    def fetch_jobs(self, job_ids: Sequence[str]) -> str: ...


def _split_upload_params(
    params: Mapping[str, object],
) -> tuple[dict[str, str], dict[str, object]]:
    query: dict[str, str] = {}
    body: dict[str, object] = {}

    for key, value in params.items():
        if value is None:
            continue
        if key in _UPLOAD_QUERY_KEYS:
            query[key] = str(value)
        else:
            body[key] = value

    return (query, body)


class CloudBackendClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        headers: Mapping[str, str] | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers=dict(headers or {}),
        )

    def __enter__(self) -> "CloudBackendClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _request(self, method: str, path: str, **kwargs: object) -> str:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning(
                "backend_request_timeout", extra={"method": method, "path": path}
            )
            raise TransportTimeoutError(str(exc) or "backend request timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "backend_request_rejected",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": exc.response.status_code,
                },
            )
            raise TransportError(
                exc.response.text or str(exc), status_code=exc.response.status_code
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "backend_request_failed",
                extra={"method": method, "path": path, "error": str(exc)},
            )
            raise TransportError(str(exc)) from exc

        return response.text

    def upload(self, params: Mapping[str, object]) -> str:
        query, body = _split_upload_params(params)
        return self._request(
            "POST",
            "/cloudupload",
            params=query,
            content=json.dumps(body, separators=(",", ":"), default=str),
            headers={"Content-Type": "application/json"},
        )

    def fetch_jobs(self, job_ids: Sequence[str]) -> str:
        return self._request(
            "GET",
            "/cloudupload",
            params=[("name", str(job_id)) for job_id in job_ids],
        )
