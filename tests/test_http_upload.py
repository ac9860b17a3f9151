"""Tests for logcam.adapters.upload.http_upload using httpx.MockTransport."""

import json

import httpx
import pytest

from logcam.adapters.upload.http_upload import HttpUpload
from logcam.orchestrator.contracts import PixelBuffer
from logcam.orchestrator.errors import TransportError, UploadFailed
from logcam.pipeline import packager


@pytest.fixture
def payload(random_buffer: PixelBuffer):
    return packager.pack(random_buffer, 1700000000000)


def _uploader(status, handler, **kw) -> HttpUpload:
    return HttpUpload(status, base_url="http://upload.test/", transport=httpx.MockTransport(handler), **kw)


class TestRequest:
    @pytest.mark.asyncio
    async def test_posts_multipart_to_upload_path(self, status, payload) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["ctype"] = request.headers["content-type"]
            seen["body"] = request.content
            return httpx.Response(200, json={"ok": True, "message": "saved"})

        await _uploader(status, handler).send(payload)

        assert seen["method"] == "POST"
        assert seen["url"] == "http://upload.test/upload-raw"
        assert seen["ctype"].startswith("multipart/form-data")
        body = seen["body"]
        assert b'name="meta"' in body
        assert b'name="raw"; filename="capture_1700000000000.rgba"' in body
        assert b"application/octet-stream" in body
        assert json.dumps({"width": 64, "height": 48, "timestamp": 1700000000000, "format": "RGBA8"}).encode() in body
        assert payload.data in body

    @pytest.mark.asyncio
    async def test_custom_path(self, status, payload) -> None:
        urls = []

        def handler(request: httpx.Request) -> httpx.Response:
            urls.append(request.url.path)
            return httpx.Response(200, json={"ok": True})

        await _uploader(status, handler, path="ingest/raw").send(payload)
        assert urls == ["/ingest/raw"]


class TestResponse:
    @pytest.mark.asyncio
    async def test_success_message(self, status, payload) -> None:
        res = await _uploader(status, lambda r: httpx.Response(200, json={"ok": True, "message": "saved"})).send(payload)
        assert res.ok
        assert res.status_code == 200
        assert res.message == "saved"

    @pytest.mark.asyncio
    async def test_saved_field_fallback(self, status, payload) -> None:
        handler = lambda r: httpx.Response(201, json={"ok": True, "saved": "uploads/raw_saved_1.rgba"})
        res = await _uploader(status, handler).send(payload)
        assert res.message == "uploads/raw_saved_1.rgba"

    @pytest.mark.asyncio
    async def test_empty_object_defaults_to_ok(self, status, payload) -> None:
        res = await _uploader(status, lambda r: httpx.Response(200, json={})).send(payload)
        assert res.message == "ok"

    @pytest.mark.asyncio
    async def test_server_error_is_upload_failed(self, status, payload) -> None:
        handler = lambda r: httpx.Response(500, json={"ok": False, "message": "disk full"})
        with pytest.raises(UploadFailed) as exc:
            await _uploader(status, handler).send(payload)
        assert exc.value.status == 500
        assert "500" in str(exc.value)

    @pytest.mark.asyncio
    async def test_not_found_is_upload_failed(self, status, payload) -> None:
        with pytest.raises(UploadFailed) as exc:
            await _uploader(status, lambda r: httpx.Response(404, text="nope")).send(payload)
        assert exc.value.status == 404

    @pytest.mark.asyncio
    async def test_ok_false_with_2xx_is_not_a_failure(self, status, payload) -> None:
        handler = lambda r: httpx.Response(200, json={"ok": False, "message": "bad meta"})
        res = await _uploader(status, handler).send(payload)
        assert res.status_code == 200
        assert res.message == "bad meta"
        assert res.body == {"ok": False, "message": "bad meta"}
        assert "http_upload: 200 with ok=false in body" in status.logs

    @pytest.mark.asyncio
    async def test_non_json_body(self, status, payload) -> None:
        with pytest.raises(UploadFailed, match="not JSON"):
            await _uploader(status, lambda r: httpx.Response(200, text="<html>")).send(payload)


class TestTransportFailure:
    @pytest.mark.asyncio
    async def test_connect_error_is_transport_error(self, status, payload) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError) as exc:
            await _uploader(status, handler).send(payload)
        assert isinstance(exc.value.cause, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self, status, payload) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransportError):
            await _uploader(status, handler).send(payload)
