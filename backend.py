"""LingoTales: AI-generated graded stories for language learners."""
import time
from collections import defaultdict, deque

from fastapi import FastAPI, Request

from log import get_logger
from db import init_db
from routes import router

logger = get_logger("lingotales.backend")

app = FastAPI(title="LingoTales")

# --- Request latency tracking ---
LATENCY_WINDOW = 200  # samples kept per endpoint
_latencies: dict = defaultdict(lambda: deque(maxlen=LATENCY_WINDOW))


@app.middleware("http")
async def track_latency(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    path = request.url.path
    if path.startswith("/api/"):
        _latencies[f"{request.method} {path}"].append(elapsed_ms)
        logger.info("request", extra={
            "endpoint": path, "status_code": response.status_code,
            "duration_ms": round(elapsed_ms, 1), "ip": request.client.host if request.client else None,
        })
    return response


def get_latency_stats() -> dict:
    stats = {}
    for endpoint, samples in _latencies.items():
        if not samples:
            continue
        ordered = sorted(samples)
        stats[endpoint] = {
            "count": len(ordered),
            "avg_ms": round(sum(ordered) / len(ordered), 1),
            "p95_ms": round(ordered[min(len(ordered) - 1, int(len(ordered) * 0.95))], 1),
            "max_ms": round(ordered[-1], 1),
        }
    return stats


@app.on_event("startup")
async def startup():
    init_db()
    logger.info("LingoTales started", extra={"component": "backend"})


app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8847)
