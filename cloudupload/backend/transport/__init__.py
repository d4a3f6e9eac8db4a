from transport.client import CloudBackendClient, TransportClient
from transport.errors import TransportError, TransportTimeoutError, XmlDecodeError
from transport.xmlhash import fetch, parse

__all__ = [
    "CloudBackendClient",
    "TransportClient",
    "TransportError",
    "TransportTimeoutError",
    "XmlDecodeError",
    "fetch",
    "parse",
]
