import asyncio
import time
from logcam.orchestrator.contracts import (
    CaptureMode, CaptureResult, EncodedImage, PixelBuffer, StartResult, VideoRequest,
)
from logcam.orchestrator import errors
from logcam.pipeline import encoder, packager, tone_curve
from logcam.pipeline.raster import rasterize

STOPPED = "stopped"
IDLE = "idle"
CAPTURING = "capturing"


def _now_ms() -> int:
    return int(time.time() * 1000)


class CaptureSession:
    """Owns one camera handle and serializes captures on it.

    Single-flight: while one export is in flight (busy), further capture
    requests return BUSY immediately; nothing is queued. The busy flag is
    tested and set without an await in between, so the check is atomic on
    one event loop.

    Use as `async with CaptureSession(...)` to guarantee the camera is
    released on every exit path.
    """

    def __init__(self, camera, uploader, sink, status_store,
                 request: VideoRequest | None = None, settle_s: float = 0.0,
                 keep_raw_local: bool = False, clock=_now_ms):
        self.camera = camera
        self.uploader = uploader
        self.sink = sink
        self.status = status_store
        self.request = request or VideoRequest()
        self.settle_s = settle_s
        self.keep_raw_local = keep_raw_local
        self.clock = clock
        self.buffer: PixelBuffer | None = None
        self._stop_gen = 0                     # bumped by every stop()

    @property
    def state(self) -> str:
        if self.status.busy:
            return CAPTURING
        return IDLE if self.camera.is_active else STOPPED

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.stop()

    # ── lifecycle ───────────────────────────────────────────────────────────

    async def start(self) -> StartResult:
        """Acquire the camera with the 4K request.

        On PermissionDenied / DeviceUnavailable the session is left without a
        handle until a later start() succeeds.
        """
        if self.status.busy:
            return StartResult(ok=False, duration_ms=0, error_code=errors.ERR_BUSY, message="busy")

        self.status.set_busy(True)
        t0 = time.time()
        gen = self._stop_gen
        try:
            self.status.set_message("requesting camera...")
            w, h = await asyncio.to_thread(self.camera.open, self.request)
        except errors.CaptureError as e:
            return self._fail_start(t0, e.error_code, f"camera error: {e}")
        except Exception as e:
            return self._fail_start(t0, errors.ERR_UNKNOWN, f"camera error: {type(e).__name__}: {e}")
        finally:
            self.status.set_busy(False)

        if gen != self._stop_gen:
            # stop() ran while the device was opening; it wins
            self.status.log(f"session: stop requested during start, releasing {w}x{h} handle")
            return self._fail_start(t0, errors.ERR_STOPPED, "camera stopped")

        self.status.streaming = True
        self.status.negotiated = (w, h)
        msg = f"camera ready (4K preferred). negotiated {w}x{h}"
        if (w, h) != (self.request.ideal_width, self.request.ideal_height):
            self.status.log(f"session: source is {w}x{h}, frames will be scaled to "
                            f"{self.request.ideal_width}x{self.request.ideal_height}")
        self.status.set_message(msg)
        return StartResult(ok=True, duration_ms=_dt(t0), width=w, height=h, message=msg)

    def _fail_start(self, t0: float, code: str, msg: str) -> StartResult:
        self.camera.release()
        self.status.streaming = False
        self.status.negotiated = None
        self.status.set_message(msg)
        return StartResult(ok=False, duration_ms=_dt(t0), error_code=code, message=msg)

    def stop(self):
        """Release the camera. Safe in any state and idempotent.

        An upload already in flight keeps running to completion; its result
        still lands in the status store. A start() still waiting on the device
        sees the stop once open returns and releases the handle it got.
        """
        self._stop_gen += 1
        self.camera.release()
        was_streaming = self.status.streaming
        self.status.streaming = False
        self.status.negotiated = None
        if was_streaming:
            self.status.set_message("camera stopped")

    # ── exports ─────────────────────────────────────────────────────────────

    async def capture_png(self) -> CaptureResult:
        return await self._run("png", "capturing regular PNG...", "capture failed", self._export_png)

    async def capture_log_png(self) -> CaptureResult:
        return await self._run("log", "capturing log-encoded PNG...", "log capture failed", self._export_log_png)

    async def capture_raw_upload(self) -> CaptureResult:
        return await self._run("raw", "capturing raw bytes and uploading...", "raw upload failed",
                               self._export_raw)

    async def _run(self, mode: CaptureMode, begin_msg: str, fail_prefix: str, step) -> CaptureResult:
        if self.status.busy:
            self.status.log(f"capture {mode} rejected: busy")
            return CaptureResult(ok=False, mode=mode, duration_ms=0, error_code=errors.ERR_BUSY, message="busy")

        self.status.set_busy(True)
        t0 = time.time()
        try:
            self.status.set_message(begin_msg)
            result = await step()
            result.duration_ms = _dt(t0)
            self.status.set_message(result.message)

        except errors.UploadFailed as e:
            result = CaptureResult(ok=False, mode=mode, duration_ms=_dt(t0), error_code=e.error_code,
                                   message=f"{fail_prefix}: {e}", http_status=e.status)
            self.status.set_message(result.message)
        except errors.CaptureError as e:
            result = CaptureResult(ok=False, mode=mode, duration_ms=_dt(t0), error_code=e.error_code,
                                   message=f"{fail_prefix}: {e}")
            self.status.set_message(result.message)
        except Exception as e:
            result = CaptureResult(ok=False, mode=mode, duration_ms=_dt(t0), error_code=errors.ERR_UNKNOWN,
                                   message=f"{fail_prefix}: {type(e).__name__}: {e}")
            self.status.set_message(result.message)
        finally:
            self.status.set_busy(False)

        self.status.last_result = result
        return result

    async def _rasterize(self) -> PixelBuffer:
        self.buffer = await rasterize(self.camera, self.status, settle_s=self.settle_s)
        return self.buffer

    async def _export_png(self) -> CaptureResult:
        buf = await self._rasterize()
        image = EncodedImage(data=encoder.encode(buf), filename=f"capture_{self.clock()}.png")
        self.sink.save(image.filename, image.data)
        return CaptureResult(ok=True, mode="png", duration_ms=0, message="regular PNG saved",
                             filename=image.filename)

    async def _export_log_png(self) -> CaptureResult:
        buf = await self._rasterize()
        tone_curve.apply(buf)
        image = EncodedImage(data=encoder.encode(buf), filename=f"capture_log_{self.clock()}.png")
        self.sink.save(image.filename, image.data)
        return CaptureResult(ok=True, mode="log", duration_ms=0, message="log PNG saved",
                             filename=image.filename)

    async def _export_raw(self) -> CaptureResult:
        buf = await self._rasterize()
        payload = packager.pack(buf, self.clock())
        if self.keep_raw_local:
            self.sink.save(payload.filename, payload.data)
        res = await self.uploader.send(payload)
        return CaptureResult(ok=True, mode="raw", duration_ms=0, message=f"upload complete: {res.message}",
                             filename=payload.filename, http_status=res.status_code)


def _dt(t0: float) -> int:
    return int((time.time() - t0) * 1000)
