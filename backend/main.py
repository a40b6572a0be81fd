import sys
import logging
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from chartengine.api.routes import router, limiter
from chartengine.api.metrics import router as metrics_router
from chartengine.core.config import get_settings
from chartengine.core.errors import ErrorCodes, InvalidArgumentError, get_error_response
from chartengine.core.logging import configure_logging
from chartengine.core.middleware import CorrelationIDMiddleware, TimeoutMiddleware

# Load environment variables
load_dotenv()

# Load and validate configuration
try:
    settings = get_settings()
except Exception as e:
    logging.basicConfig(level=logging.ERROR)
    logging.getLogger(__name__).error(f"Failed to load configuration: {e}")
    sys.exit(1)

configure_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Chart Inference Engine API",
    description="Column typing, chart suggestion and series building for tabular data",
    version="1.0.0"
)

app.state.limiter = limiter
app.state.settings = settings


def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Handle rate limit exceeded with structured error response."""
    correlation_id = getattr(request.state, 'correlation_id', 'unknown')
    error_info = get_error_response(ErrorCodes.RATE_LIMIT_EXCEEDED)
    error_info['correlation_id'] = correlation_id
    return JSONResponse(
        status_code=429,
        content=error_info,
        headers={"Retry-After": "60", "X-Correlation-ID": correlation_id}
    )


def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
    """Caller sent rows or columns the engine cannot work with."""
    correlation_id = getattr(request.state, 'correlation_id', 'unknown')
    logger.warning(f"Rejected request: {exc.message}")
    error_info = get_error_response(exc.code, exc.message)
    error_info['correlation_id'] = correlation_id
    return JSONResponse(status_code=400, content=error_info, headers={"X-Correlation-ID": correlation_id})


app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
app.add_exception_handler(InvalidArgumentError, invalid_argument_handler)

# Last added runs first: correlation ids wrap everything else
app.add_middleware(TimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization", "X-Correlation-ID"],
    expose_headers=["X-Correlation-ID"]
)
app.add_middleware(CorrelationIDMiddleware)

logger.info(f"CORS allowed origins: {settings.allowed_origins_list}")

app.include_router(router, prefix="/api")
app.include_router(metrics_router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Chart Inference Engine API is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
