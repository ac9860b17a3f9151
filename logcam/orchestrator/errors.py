ERR_BUSY = "BUSY"
ERR_UNKNOWN = "UNKNOWN"
ERR_STOPPED = "STOPPED"


class CaptureError(Exception):
    error_code = "CAPTURE_ERROR"


class SourceUnavailable(CaptureError):
    """No active frame: camera not started, read failed or zero-sized frame."""
    error_code = "SOURCE_UNAVAILABLE"


class PermissionDenied(CaptureError):
    error_code = "PERMISSION_DENIED"


class DeviceUnavailable(CaptureError):
    error_code = "DEVICE_UNAVAILABLE"


class EncodeFailure(CaptureError):
    error_code = "ENCODE_FAILURE"


class TransportError(CaptureError):
    """Upload got no response at all (connect error, timeout, ...)."""
    error_code = "TRANSPORT_ERROR"

    def __init__(self, cause: Exception):
        super().__init__(f"{type(cause).__name__}: {cause}")
        self.cause = cause


class UploadFailed(CaptureError):
    error_code = "UPLOAD_FAILED"

    def __init__(self, status: int, reason: str | None = None):
        msg = f"upload failed: {status}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
        self.status = status
        self.reason = reason
