class TransportError(Exception):
    """Network, protocol or HTTP status failure talking to the backend."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class TransportTimeoutError(TransportError, TimeoutError):
    """The backend did not answer before the client deadline."""


class XmlDecodeError(ValueError):
    pass
