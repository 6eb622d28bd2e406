import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import azure.functions as func

from .config import Settings
from .errors import CollectionProxyError

logger = logging.getLogger("collection_proxy")

_MASKED_HEADERS = ("authorization", "x-api-key", "cookie", "x-shopify-storefront-access-token")


def _sanitize_headers(h: Dict[str, str]) -> Dict[str, str]:
    masked = {}
    for k, v in h.items():
        if k.lower() in _MASKED_HEADERS:
            masked[k] = "***"
        else:
            masked[k] = v
    return masked


def log_request_debug(req: func.HttpRequest, settings: Settings, trace_id: str) -> None:
    if not settings.debug_request_log:
        return
    debug_payload = {
        "method": req.method,
        "url": req.url,
        "route_params": dict(req.route_params) if req.route_params else {},
        "query": dict(req.params) if req.params else {},
        "headers": _sanitize_headers(dict(req.headers) if req.headers else {}),
        "trace_id": trace_id,
    }
    logger.info("http_request_debug: " + json.dumps(debug_payload))


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC with milliseconds and a Z suffix, e.g. 2024-05-01T12:00:00.000Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def json_response(status_code: int, payload: Dict[str, Any], trace_id: Optional[str] = None) -> func.HttpResponse:
    headers = {"X-Trace-Id": trace_id} if trace_id else None
    return func.HttpResponse(
        status_code=status_code,
        mimetype="application/json",
        body=json.dumps(payload, ensure_ascii=False),
        headers=headers,
    )


def error_response(err: CollectionProxyError, trace_id: Optional[str] = None) -> func.HttpResponse:
    return json_response(err.status_code, err.envelope(), trace_id)
