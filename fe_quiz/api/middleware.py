"""
Request logging with a per-request correlation id.
"""
import time

from fastapi import Request

from fe_quiz.shared.telemetry import Telemetry

telemetry = Telemetry("API")


async def log_requests(request: Request, call_next):
    trace_id = Telemetry.start_trace()
    start = time.perf_counter()
    telemetry.log_info("Request", method=request.method, path=request.url.path)

    response = await call_next(request)

    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    telemetry.log_info(
        "Response", status=response.status_code, duration_ms=duration_ms
    )
    response.headers["X-Correlation-ID"] = trace_id
    return response
