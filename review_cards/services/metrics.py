from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

from fastapi import Request

from review_cards.config import Settings
from review_cards.core.models import utcnow
from review_cards.services.repo.json_repo import _locked

logger = logging.getLogger(__name__)

DEVICE_HEADER = "X-Device-Id"
CORRELATION_HEADER = "X-Correlation-Id"


class MetricsLogger:
    """Append-only JSONL latency log in DATA_DIR/METRICS_FILE.

    One object per line: ts, kind="latency", name, origin ("backend" or
    "frontend"), duration_ms, plus user/corr from the request headers and an
    optional extra dict (provider, model, attempts, source, ...).
    """

    def __init__(self, settings: Settings) -> None:
        self.path = os.path.join(settings.data_dir, settings.metrics_file)

    def log_request(
        self,
        name: str,
        duration_ms: float,
        request: Optional[Request],
        origin: str = "backend",
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log a timing, tagged with the device and correlation ids the client sent."""
        headers = request.headers if request is not None else {}
        self.log_latency(
            name,
            duration_ms,
            origin=origin,
            extra=extra,
            user_id=headers.get(DEVICE_HEADER),
            corr_id=headers.get(CORRELATION_HEADER),
        )

    def log_latency(
        self,
        name: str,
        duration_ms: float,
        origin: str,
        extra: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None,
        corr_id: Optional[str] = None,
    ) -> None:
        entry: Dict[str, Any] = {
            "ts": utcnow().isoformat(),
            "kind": "latency",
            "name": name,
            "origin": origin,
            "duration_ms": round(float(duration_ms), 3),
        }
        if user_id:
            entry["user"] = user_id
        if corr_id:
            entry["corr"] = corr_id
        if extra:
            entry["extra"] = extra
        try:
            line = (json.dumps(entry, ensure_ascii=False, separators=(",", ":"), default=str) + "\n").encode("utf-8")
            with _locked(self.path) as f:
                f.seek(0, os.SEEK_END)
                f.write(line)
                f.flush()
        except Exception as e:
            # Metrics never break a request.
            logger.debug("Dropped metric %s: %s", name, e)
