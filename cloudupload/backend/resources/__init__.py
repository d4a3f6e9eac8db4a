from resources.upload_job import UploadJobOwner, UploadJobResource

__all__ = ["UploadJobOwner", "UploadJobResource"]
