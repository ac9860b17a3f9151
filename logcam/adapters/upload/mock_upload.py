import asyncio
from logcam.adapters.upload.base import UploadAdapter
from logcam.orchestrator.contracts import RawPayload, UploadResult

# Simulated round trip — keep fast for mock testing
_ROUND_TRIP_S = 0.05


class MockUpload(UploadAdapter):
    def __init__(self, status_store):
        self.status = status_store
        self.received: list[RawPayload] = []

    async def send(self, payload: RawPayload) -> UploadResult:
        self.status.log(f"mock_upload: sending {payload.filename} ({_ROUND_TRIP_S}s)...")
        await asyncio.sleep(_ROUND_TRIP_S)
        self.received.append(payload)
        self.status.log("mock_upload: saved ✓")
        return UploadResult(ok=True, status_code=200, message="saved", body={"ok": True, "message": "saved"})
