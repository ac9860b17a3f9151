"""
Simple log tone curve, simulating a log exposure curve on 8-bit pixels.

    out = round(255 * log10(1 + K * v) / log10(1 + K)),  v = in / 255

K = 9 gives a moderate curve resembling a basic log film curve: shadows are
lifted, highlights compressed, 0 and 255 stay put. Only R, G, B are mapped;
alpha is left as-is. Applying it twice curves the image twice.
"""
import math
import numpy as np
from logcam.orchestrator.contracts import PixelBuffer

K = 9.0
DENOM = math.log10(1 + K)


def curve(value: float) -> int:
    v = value / 255.0
    lv = math.log10(1 + K * v) / DENOM
    # half-up rounding, not Python's banker's rounding
    return int(math.floor(lv * 255 + 0.5))


def _build_lut() -> np.ndarray:
    lut = np.array([curve(i) for i in range(256)], dtype=np.uint8)
    lut.setflags(write=False)
    return lut


LUT = _build_lut()


def apply(buffer: PixelBuffer) -> PixelBuffer:
    rgb = buffer.pixels[..., :3]
    rgb[...] = LUT[rgb]
    return buffer
