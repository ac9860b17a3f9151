"""
Raw payload packaging: 8-bit RGBA bytes plus a small JSON metadata record,
sent as multipart/form-data with two parts:

  meta  application/json          {"width", "height", "format", "timestamp"}
  raw   application/octet-stream  capture_<timestamp>.rgba

The bytes are the buffer's pixels exactly as rasterized: no compression, no
channel reordering.
"""
import json
from dataclasses import asdict
from logcam.orchestrator.contracts import PixelBuffer, RawMeta, RawPayload


def raw_filename(timestamp: int) -> str:
    return f"capture_{timestamp}.rgba"


def pack(buffer: PixelBuffer, timestamp: int) -> RawPayload:
    meta = RawMeta(width=buffer.width, height=buffer.height, timestamp=timestamp)
    return RawPayload(meta=meta, data=buffer.tobytes(), filename=raw_filename(timestamp))


def meta_json(payload: RawPayload) -> bytes:
    return json.dumps(asdict(payload.meta)).encode("utf-8")


def multipart_files(payload: RawPayload) -> dict:
    """httpx `files=` mapping for the two named parts."""
    return {
        "meta": ("meta.json", meta_json(payload), "application/json"),
        "raw": (payload.filename, payload.data, "application/octet-stream"),
    }
