from logcam.orchestrator.contracts import RawPayload, UploadResult


class UploadAdapter:
    async def send(self, payload: RawPayload) -> UploadResult:
        """Deliver one raw payload. Raises TransportError or UploadFailed."""
        raise NotImplementedError
