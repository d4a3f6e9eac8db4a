import json
from collections.abc import Callable

import httpx
import pytest

from models import BASE
from resources import UploadJobResource
from transport import CloudBackendClient
from transport.errors import TransportError, TransportTimeoutError

BASE_URL = "http://backend.test"


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> CloudBackendClient:
    http_client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return CloudBackendClient(base_url=BASE_URL, client=http_client)


def test_upload_splits_query_and_body() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, text='<clouduploadjob name="12"/>')

    client = _client(handler)
    xml = client.upload(
        {
            "project": "home:tom",
            "package": "appliance",
            "repository": "images",
            "arch": "x86_64",
            "filename": "appliance.raw.xz",
            "target": "ec2",
            "region": "us-east-1",
            "vpc_subnet_id": "subnet-1",
            "ami_name": None,
        }
    )

    assert xml == '<clouduploadjob name="12"/>'
    request = captured[0]
    assert request.method == "POST"
    assert request.url.path == "/cloudupload"
    assert request.url.params["project"] == "home:tom"
    assert request.url.params["target"] == "ec2"
    assert "region" not in request.url.params
    assert json.loads(request.content) == {
        "region": "us-east-1",
        "vpc_subnet_id": "subnet-1",
    }


def test_fetch_jobs_repeats_name_parameter() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, text="<clouduploadjobs/>")

    xml = _client(handler).fetch_jobs(["1", "2", "3"])

    assert xml == "<clouduploadjobs/>"
    assert captured[0].method == "GET"
    assert captured[0].url.params.get_list("name") == ["1", "2", "3"]


def test_http_error_status_carries_backend_body() -> None:
    body = "<status code='quota'><summary>quota exceeded</summary></status>"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text=body)

    with pytest.raises(TransportError) as excinfo:
        _client(handler).fetch_jobs(["1"])

    assert str(excinfo.value) == body
    assert excinfo.value.status_code == 400


def test_timeout_is_raised_as_timeout_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(TransportTimeoutError) as excinfo:
        _client(handler).fetch_jobs(["1"])

    assert isinstance(excinfo.value, TimeoutError)
    assert isinstance(excinfo.value, TransportError)


def test_connection_failure_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as excinfo:
        _client(handler).upload({"target": "ec2"})

    assert "connection refused" in str(excinfo.value)
    assert excinfo.value.status_code is None


def test_resource_create_over_http_reports_backend_summary() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            403, text="<status code='denied'><summary>quota exceeded</summary></status>"
        )

    job = UploadJobResource(_client(handler)).create({"target": "ec2"})

    assert job.is_valid() is False
    assert job.errors[BASE] == ["quota exceeded"]


def test_resource_find_over_http_timeout_is_not_found() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("connect timed out", request=request)

    assert UploadJobResource(_client(handler)).find("1") is None


def test_close_leaves_injected_client_open() -> None:
    http_client = httpx.Client(
        base_url=BASE_URL,
        transport=httpx.MockTransport(lambda request: httpx.Response(200)),
    )

    with CloudBackendClient(base_url=BASE_URL, client=http_client):
        pass

    assert http_client.is_closed is False
    http_client.close()
