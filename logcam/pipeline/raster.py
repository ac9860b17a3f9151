"""
Rasterizer: current camera frame -> fixed 3840x2160 RGBA buffer.

The frame is stretched to fill the target exactly; aspect ratio is not
preserved and no letterboxing is applied. A mismatch is logged so it shows
up in the status logs.

cv2.resize returns only once the output is written, so the draw is complete
when the call returns. settle_s is an optional wait before the frame is read,
for sources whose frames need time to stabilise; anything above zero is
timing dependent and can be flaky on slow devices. The camera may be stopped
during the wait, so it is checked again afterwards.
"""
import asyncio
import cv2
from logcam.orchestrator.contracts import PixelBuffer, TARGET_WIDTH, TARGET_HEIGHT
from logcam.orchestrator.errors import SourceUnavailable

_TO_RGBA = {
    1: cv2.COLOR_GRAY2RGBA,
    3: cv2.COLOR_BGR2RGBA,
    4: cv2.COLOR_BGRA2RGBA,
}


async def rasterize(camera, status_store=None, settle_s: float = 0.0,
                    width: int = TARGET_WIDTH, height: int = TARGET_HEIGHT) -> PixelBuffer:
    if camera is None or not camera.is_active:
        raise SourceUnavailable("video missing")
    await asyncio.sleep(settle_s)
    if not camera.is_active:
        raise SourceUnavailable("video missing")
    frame = camera.read_frame()
    if frame is None or frame.size == 0:
        raise SourceUnavailable("no active frame")

    channels = 1 if frame.ndim == 2 else frame.shape[2]
    code = _TO_RGBA.get(channels)
    if code is None:
        raise SourceUnavailable(f"unsupported frame layout {frame.shape}")

    src_h, src_w = frame.shape[:2]
    if status_store is not None and src_w * height != src_h * width:
        status_store.log(f"raster: stretching {src_w}x{src_h} to {width}x{height} (aspect not preserved)")

    scaled = cv2.resize(frame, (width, height), interpolation=cv2.INTER_LINEAR)
    rgba = cv2.cvtColor(scaled, code)
    return PixelBuffer(rgba)
