"""
HTTP adapter for the raw processing service.

Posts a RawPayload as multipart/form-data to the upload endpoint.
Default contract (matches scripts/fake_upload_server.py):
  Request:  POST /upload-raw   parts: meta (json), raw (octet-stream)
  Response: {"ok": true, "message": "saved", "meta": {...}}
            (or {"ok": false, "message": "..."} with HTTP 500)

No retry here; a failed upload is reported and the user re-triggers it.
"""

import httpx
from logcam.adapters.upload.base import UploadAdapter
from logcam.orchestrator.contracts import RawPayload, UploadResult
from logcam.orchestrator.errors import TransportError, UploadFailed
from logcam.pipeline.packager import multipart_files


class HttpUpload(UploadAdapter):
    def __init__(self, status_store, base_url: str = "http://127.0.0.1:3000",
                 path: str = "/upload-raw", timeout: float = 60.0,
                 transport: httpx.AsyncBaseTransport | None = None):
        self.status = status_store
        self.base_url = base_url.rstrip("/")
        self.path = path if path.startswith("/") else f"/{path}"
        self.timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.path}"

    async def send(self, payload: RawPayload) -> UploadResult:
        self.status.log(f"http_upload: POST {self.path} {payload.filename} ({len(payload.data)} bytes)")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.url, files=multipart_files(payload))
        except httpx.HTTPError as e:
            self.status.log(f"http_upload: no response: {e!r}")
            raise TransportError(e) from e

        if not resp.is_success:
            raise UploadFailed(resp.status_code)
        try:
            data = resp.json()
        except ValueError:
            raise UploadFailed(resp.status_code, "response is not JSON")
        if not isinstance(data, dict):
            raise UploadFailed(resp.status_code, "unexpected response body")
        if data.get("ok") is False:
            # HTTP status decides; the body only supplies the message
            self.status.log(f"http_upload: {resp.status_code} with ok=false in body")

        message = data.get("message") or data.get("saved") or "ok"
        self.status.log(f"http_upload: {self.path} done: {message}")
        return UploadResult(ok=True, status_code=resp.status_code, message=str(message), body=data)
