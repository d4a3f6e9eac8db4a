from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import create_engine, delete, select
from sqlalchemy.orm import sessionmaker

from db.orm import Base, UserUploadJobRecord


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class UploadJobUser:
    login: str
    upload_job_ids: list[str] = field(default_factory=list)


class UploadJobRepository:
    """Remembers which backend upload jobs belong to which user."""

    def __init__(self, db_url: str) -> None:
        connect_args = (
            {"check_same_thread": False} if db_url.startswith("sqlite") else {}
        )
        self._engine = create_engine(db_url, future=True, connect_args=connect_args)
        Base.metadata.create_all(self._engine)
        self._session_factory = sessionmaker(
            bind=self._engine, autoflush=False, expire_on_commit=False
        )

    def close(self) -> None:
        self._engine.dispose()

    def add_upload_job(self, user_login: str, job_id: str) -> None:
        with self._session_factory.begin() as session:
            existing = session.scalar(
                select(UserUploadJobRecord.id).where(
                    UserUploadJobRecord.user_login == user_login,
                    UserUploadJobRecord.job_id == job_id,
                )
            )
            if existing is not None:
                return

            session.add(
                UserUploadJobRecord(
                    user_login=user_login, job_id=job_id, created_at=_utc_now()
                )
            )

    def remove_upload_job(self, user_login: str, job_id: str) -> bool:
        with self._session_factory.begin() as session:
            result = session.execute(
                delete(UserUploadJobRecord).where(
                    UserUploadJobRecord.user_login == user_login,
                    UserUploadJobRecord.job_id == job_id,
                )
            )
            return result.rowcount > 0

    def upload_job_ids(self, user_login: str) -> list[str]:
        with self._session_factory() as session:
            rows = session.scalars(
                select(UserUploadJobRecord.job_id)
                .where(UserUploadJobRecord.user_login == user_login)
                .order_by(UserUploadJobRecord.id)
            )
            return list(rows)

    def get_user(self, user_login: str) -> UploadJobUser:
        return UploadJobUser(
            login=user_login, upload_job_ids=self.upload_job_ids(user_login)
        )
