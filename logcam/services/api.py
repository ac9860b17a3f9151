import os
from contextlib import asynccontextmanager
from dataclasses import asdict
import uvicorn
from fastapi import FastAPI
from dotenv import load_dotenv
from logcam.services.models import CaptureResponse, StartResponse, StatusResponse
from logcam.services.status_store import StatusStore
from logcam.orchestrator.contracts import TARGET_WIDTH, TARGET_HEIGHT
from logcam.orchestrator.session import CaptureSession
from logcam.adapters.storage.local_dir import LocalDirSink

load_dotenv(dotenv_path="logcam/.env", override=False)

status = StatusStore()

# Camera adapter: CAMERA_ADAPTER env var (cv2 | mock, default: cv2)
camera_adapter = os.getenv("CAMERA_ADAPTER", "cv2").lower()
if camera_adapter == "mock":
    from logcam.adapters.camera.mock_camera import MockCamera
    camera = MockCamera(status)
else:
    from logcam.adapters.camera.cv2_camera import CV2Camera
    camera = CV2Camera(status)
status.log(f"camera adapter: {type(camera).__name__}")

# Upload adapter: UPLOAD_ADAPTER env var (http | mock, default: http)
upload_adapter = os.getenv("UPLOAD_ADAPTER", "http").lower()
if upload_adapter == "mock":
    from logcam.adapters.upload.mock_upload import MockUpload
    uploader = MockUpload(status)
    status.log("upload adapter: mock")
else:
    from logcam.adapters.upload.http_upload import HttpUpload
    uploader = HttpUpload(
        status,
        base_url=os.getenv("UPLOAD_BASE_URL", "http://127.0.0.1:3000"),
        path=os.getenv("UPLOAD_PATH", "/upload-raw"),
        timeout=float(os.getenv("UPLOAD_TIMEOUT_S", "60")),
    )
    status.log(f"upload adapter: http -> {uploader.url}")

sink = LocalDirSink(status)

session = CaptureSession(
    camera=camera,
    uploader=uploader,
    sink=sink,
    status_store=status,
    settle_s=float(os.getenv("RASTER_SETTLE_MS", "0")) / 1000.0,
    keep_raw_local=os.getenv("KEEP_RAW_LOCAL", "0") == "1",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # camera must not outlive the process
    session.stop()


app = FastAPI(title="logcam", lifespan=lifespan)


def _capture_out(rr) -> CaptureResponse:
    return CaptureResponse(**asdict(rr))


@app.get("/status", response_model=StatusResponse)
def get_status():
    w, h = status.negotiated or (None, None)
    last = _capture_out(status.last_result) if status.last_result else None
    return StatusResponse(
        state=session.state,
        busy=status.busy,
        streaming=status.streaming,
        message=status.message,
        negotiated_width=w,
        negotiated_height=h,
        target_width=TARGET_WIDTH,
        target_height=TARGET_HEIGHT,
        last_result=last,
        logs=status.logs,
    )


@app.post("/start", response_model=StartResponse)
async def start():
    """Start Camera (4K preferred)."""
    rr = await session.start()
    return StartResponse(**asdict(rr))


@app.post("/stop")
async def stop():
    session.stop()
    return {"ok": True, "message": status.message}


@app.post("/capture/png", response_model=CaptureResponse)
async def capture_png():
    """Lossless 3840x2160 PNG -> capture_<ts>.png"""
    return _capture_out(await session.capture_png())


@app.post("/capture/log", response_model=CaptureResponse)
async def capture_log():
    """Log-curve PNG -> capture_log_<ts>.png"""
    return _capture_out(await session.capture_log_png())


@app.post("/capture/raw", response_model=CaptureResponse)
async def capture_raw():
    """Raw RGBA8 bytes + metadata -> upload endpoint."""
    return _capture_out(await session.capture_raw_upload())


@app.get("/health")
def health():
    checks = {
        "api": True,
        "camera_adapter": type(camera).__name__,
        "camera_active": camera.is_active,
        "upload_adapter": type(uploader).__name__,
        "output_dir": str(sink.out_dir),
        "output_writable": sink.writable(),
    }
    if hasattr(uploader, "url"):
        checks["upload_url"] = uploader.url
    checks["all_ok"] = checks["api"] and checks["output_writable"]
    return checks


def main():
    uvicorn.run(app, host=os.getenv("LOGCAM_HOST", "127.0.0.1"), port=int(os.getenv("LOGCAM_PORT", "8000")))


if __name__ == "__main__":
    main()
