"""Lossless PNG encoding of RGBA buffers via OpenCV (which works in BGRA)."""
import cv2
import numpy as np
from logcam.orchestrator.contracts import PixelBuffer
from logcam.orchestrator.errors import EncodeFailure


def encode(buffer: PixelBuffer) -> bytes:
    if buffer.width == 0 or buffer.height == 0:
        raise EncodeFailure(f"cannot encode {buffer.width}x{buffer.height} buffer")
    try:
        bgra = cv2.cvtColor(buffer.pixels, cv2.COLOR_RGBA2BGRA)
        ok, buf = cv2.imencode(".png", bgra)
    except cv2.error as e:
        raise EncodeFailure(str(e)) from e
    if not ok:
        raise EncodeFailure("png encoder rejected buffer")
    return bytes(buf)


def decode(data: bytes) -> PixelBuffer:
    arr = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(arr, cv2.IMREAD_UNCHANGED)
    if img is None or img.ndim != 3 or img.shape[2] != 4:
        raise ValueError("not an RGBA png")
    return PixelBuffer(cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA))
