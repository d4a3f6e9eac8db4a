import logging
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from threading import Lock
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from models.validation import BASE, ValidationErrors
from transport import xmlhash
from transport.errors import XmlDecodeError

logger = logging.getLogger("cloudupload.models")

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _parse_int(value: object, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is not None:
            return int(match.group(1))
    return default


def _parse_timestamp(value: object) -> datetime:
    try:
        return datetime.fromtimestamp(_parse_int(value), tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return _EPOCH


class UploadJobFields(BaseModel):
    """Typed projection of a decoded ``clouduploadjob`` element."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str | None = None
    state: str | None = None
    details: str | None = None
    target: str | None = None
    user: str | None = None
    project: str | None = None
    package: str | None = None
    repository: str | None = None
    arch: str | None = None
    filename: str | None = None
    vpc_subnet_id: str | None = None
    size: str | None = None
    created: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def coerce_xml_value(cls, value: object) -> str | None:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, int | float):
            return str(value)
        # <details/> decodes to an empty mapping, nested structures carry no scalar
        if isinstance(value, Mapping) and not value:
            return ""
        return None


def _delegate(field_name: str) -> property:
    def getter(self: "UploadJob") -> str | None:
        return getattr(self._decoded(), field_name)

    getter.__name__ = field_name
    return property(getter)


class UploadJob:
    """Read-only view of one cloud upload job reported by the backend.

    A view is built from one of:

    * ``xml``: the raw ``clouduploadjob`` document, decoded on first field
      access and at most once per instance,
    * ``fields``: an already decoded element (mapping or ``UploadJobFields``),
    * ``exception``: the message of a failed backend call, in which case no
      fields are available and ``is_valid()`` is ``False``.
    """

    def __init__(
        self,
        xml: str | None = None,
        *,
        fields: Mapping[str, Any] | UploadJobFields | None = None,
        exception: str | None = None,
    ) -> None:
        self._xml = xml
        self._exception = exception
        self._errors = ValidationErrors()
        self._lock = Lock()
        self._fields: UploadJobFields | None
        if fields is None or isinstance(fields, UploadJobFields):
            self._fields = fields
        else:
            self._fields = UploadJobFields.model_validate(dict(fields))

    def __repr__(self) -> str:
        if self._exception:
            return f"UploadJob(exception={self._exception!r})"
        return f"UploadJob(id={self.id!r}, state={self.state!r})"

    @property
    def xml(self) -> str | None:
        return self._xml

    @property
    def exception(self) -> str | None:
        return self._exception

    @property
    def errors(self) -> ValidationErrors:
        return self._errors

    def _decoded(self) -> UploadJobFields:
        fields = self._fields
        if fields is not None:
            return fields

        with self._lock:
            if self._fields is None:
                self._fields = self._decode()
            return self._fields

    def _decode(self) -> UploadJobFields:
        if not self._xml:
            return UploadJobFields()

        try:
            return UploadJobFields.model_validate(xmlhash.parse(self._xml))
        except XmlDecodeError as exc:
            logger.warning("upload_job_decode_failed", extra={"error": str(exc)})
            return UploadJobFields()

    name = _delegate("name")
    state = _delegate("state")
    details = _delegate("details")
    target = _delegate("target")
    user = _delegate("user")
    project = _delegate("project")
    package = _delegate("package")
    repository = _delegate("repository")
    arch = _delegate("arch")
    filename = _delegate("filename")
    vpc_subnet_id = _delegate("vpc_subnet_id")
    size = _delegate("size")

    @property
    def id(self) -> str | None:
        return self.name

    @property
    def architecture(self) -> str | None:
        return self.arch

    @property
    def created(self) -> datetime:
        """Creation time in UTC; unparsable or missing values map to the epoch."""
        return _parse_timestamp(self._decoded().created)

    @property
    def created_at(self) -> datetime:
        return self.created

    def is_valid(self) -> bool:
        self._errors.clear()
        self._validate_exception()
        return not self._errors

    def _validate_exception(self) -> None:
        if not self._exception or not self._exception.strip():
            return

        try:
            summary = xmlhash.fetch(xmlhash.parse(self._exception), "summary")
        except XmlDecodeError:
            summary = None

        if not isinstance(summary, str) or not summary:
            summary = None
        self._errors.add(BASE, summary or self._exception)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = self._decoded().model_dump(mode="json")
        payload["id"] = self.id
        payload["architecture"] = self.architecture
        payload["created_at"] = self.created.isoformat()
        return payload
