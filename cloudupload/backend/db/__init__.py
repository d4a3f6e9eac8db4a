from db.repository import UploadJobRepository, UploadJobUser

__all__ = ["UploadJobRepository", "UploadJobUser"]
