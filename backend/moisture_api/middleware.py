"""
API Call Logger
===============

Logs every /api/* request on the way in and every response on the way out:

    [08:30:01] [API] → POST /api/readings
    [08:30:01] [API]    body={"value": 512, "deviceId": "field-3"}
    [08:30:01] [API] ← POST /api/readings 201 4ms

Query strings are logged as JSON. Bodies are only logged for non-GET JSON
requests, and never for uploads.
"""

import json
import logging
import time

from fastapi import Request

logger = logging.getLogger(__name__)

API_PREFIX = "/api/"
UPLOADS_PREFIX = "/api/uploads"


async def log_api_calls(request: Request, call_next):
    path = request.url.path
    if not path.startswith(API_PREFIX):
        return await call_next(request)

    start = time.perf_counter()
    method = request.method
    query = f" query={json.dumps(dict(request.query_params))}" if request.query_params else ""
    logger.info(f"[API] → {method} {path}{query}")

    content_type = request.headers.get("content-type", "")
    if method != "GET" and content_type.startswith("application/json"):
        if path.startswith(UPLOADS_PREFIX):
            preview = "{file: <binary>}"
        else:
            preview = (await request.body()).decode("utf-8", errors="replace")
        logger.info(f"[API]    body={preview}")

    response = await call_next(request)

    elapsed_ms = int((time.perf_counter() - start) * 1000)
    logger.info(f"[API] ← {method} {path} {response.status_code} {elapsed_ms}ms")
    return response
