from pydantic import BaseModel
from typing import Literal, Optional


class CaptureResponse(BaseModel):
    ok: bool
    mode: Literal["png", "log", "raw"]
    duration_ms: int
    error_code: Optional[str] = None
    message: Optional[str] = None
    filename: Optional[str] = None
    http_status: Optional[int] = None      # upload endpoint status, raw mode only


class StartResponse(BaseModel):
    ok: bool
    duration_ms: int
    width: Optional[int] = None
    height: Optional[int] = None
    error_code: Optional[str] = None
    message: Optional[str] = None


class StatusResponse(BaseModel):
    state: Literal["stopped", "idle", "capturing"]
    busy: bool
    streaming: bool
    message: str
    negotiated_width: Optional[int] = None
    negotiated_height: Optional[int] = None
    target_width: int
    target_height: int
    last_result: Optional[CaptureResponse] = None
    logs: list[str]
