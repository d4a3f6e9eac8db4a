from models.enums import ResponseFormat
from models.upload_job import UploadJob, UploadJobFields
from models.validation import BASE, ValidationError, ValidationErrors

__all__ = [
    "BASE",
    "ResponseFormat",
    "UploadJob",
    "UploadJobFields",
    "ValidationError",
    "ValidationErrors",
]
