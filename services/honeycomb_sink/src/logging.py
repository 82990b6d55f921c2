import json
import logging
import time
from typing import Optional, Tuple

from opentelemetry import trace

from ..common.context import get_message_id
from .config import service_settings

logging.basicConfig(level=service_settings.log_level)
_logger = logging.getLogger(service_settings.service_name)

SERVICE_NAME = service_settings.service_name

def _trace_ids() -> Tuple[Optional[str], Optional[str]]:
    ctx = trace.get_current_span().get_span_context()
    if not ctx.is_valid:
        return None, None
    return f"{ctx.trace_id:032x}", f"{ctx.span_id:016x}"

def jlog(event: str = "", severity: str = "INFO", **fields):
    """One JSON object per line, tagged with the current span and Pub/Sub message id."""
    trace_id, span_id = _trace_ids()
    record = {
        "event": event,
        "severity": severity,
        "service": SERVICE_NAME,
        "env": service_settings.environment,
        "ts": time.time(),
        "trace_id": trace_id,
        "span_id": span_id,
        "message_id": get_message_id(),
        **fields,
    }
    _logger.log(getattr(logging, severity, logging.INFO), json.dumps(record, ensure_ascii=False, default=str))
