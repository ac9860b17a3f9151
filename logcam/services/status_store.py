import logging
from dataclasses import dataclass, field
from typing import Optional, List
from logcam.orchestrator.contracts import CaptureResult

logger = logging.getLogger("logcam")

MAX_LOGS = 200


@dataclass
class StatusStore:
    busy: bool = False
    streaming: bool = False
    message: str = "idle"                      # last user-facing status line
    negotiated: Optional[tuple[int, int]] = None
    last_result: Optional[CaptureResult] = None
    logs: List[str] = field(default_factory=list)

    def set_busy(self, v: bool):
        self.busy = v

    def set_message(self, msg: str):
        self.message = msg
        self.log(f"status: {msg}")

    def log(self, msg: str):
        logger.info(msg)
        self.logs.append(msg)
        if len(self.logs) > MAX_LOGS:
            self.logs = self.logs[-MAX_LOGS:]
