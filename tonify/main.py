import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from .errors import BadRequest, EmptyResultError, ToneError, UpstreamError
from .logger import get_logger, setup_logger
from .metrics import REQUESTS, LATENCY, UPSTREAM_FAILURES
from .providers import provider_from_settings
from .relay import ToneRelay
from .schemas import (
    ClassifyRequest,
    ErrorResponse,
    RewriteRequest,
    RewriteResult,
    ToneResult,
)
from .settings import Settings

logger = get_logger("api")

CLASSIFY_PATH = "/api/classifyTone"
REWRITE_PATH = "/api/rewriteTone"

# What a 400 says when the body itself does not parse
_MISSING_FIELDS = {
    CLASSIFY_PATH: "message is required",
    REWRITE_PATH: "message and targetTone are required",
}

_ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def create_app(relay: Optional[ToneRelay] = None, settings: Optional[Settings] = None) -> FastAPI:
    # Relay side only: a missing OPENAI_API_KEY fails here, at startup
    settings = settings or Settings()
    setup_logger(settings.LOG_LEVEL)
    relay = relay or ToneRelay(provider_from_settings(settings), model=settings.OPENAI_MODEL)

    app = FastAPI(title="Tonify Relay", version="1.0.0")
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ToneError)
    async def tone_error_handler(request: Request, exc: ToneError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = _MISSING_FIELDS.get(request.url.path, "invalid request body")
        return JSONResponse(status_code=400, content={"error": message})

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    @app.get("/metrics")
    def metrics():
        data = generate_latest()
        return Response(content=data, media_type=CONTENT_TYPE_LATEST)

    @app.post(CLASSIFY_PATH, response_model=ToneResult, responses=_ERROR_RESPONSES)
    def classify_tone(req: ClassifyRequest):
        REQUESTS.labels(CLASSIFY_PATH).inc()
        start = time.time()
        try:
            result = relay.classify_tone(req.message)
        except BadRequest:
            raise
        except Exception as e:
            UPSTREAM_FAILURES.labels(CLASSIFY_PATH).inc()
            logger.error("tone classification failed: %s", e)
            raise UpstreamError("Tone classification failed") from e
        finally:
            LATENCY.observe(time.time() - start)
        return result

    @app.post(REWRITE_PATH, response_model=RewriteResult, responses=_ERROR_RESPONSES)
    def rewrite_tone(req: RewriteRequest):
        REQUESTS.labels(REWRITE_PATH).inc()
        start = time.time()
        try:
            result = relay.rewrite_tone(req.message, req.targetTone)
        except BadRequest:
            raise
        except EmptyResultError:
            UPSTREAM_FAILURES.labels(REWRITE_PATH).inc()
            logger.warning("rewrite returned no suggestions for target tone %r", req.targetTone)
            raise
        except Exception as e:
            UPSTREAM_FAILURES.labels(REWRITE_PATH).inc()
            logger.error("tone rewriting failed: %s", e)
            raise UpstreamError("Tone rewriting failed") from e
        finally:
            LATENCY.observe(time.time() - start)
        return result

    logger.info("Tonify relay ready (model=%s, upstream=%s)", settings.OPENAI_MODEL, settings.OPENAI_BASE_URL)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=app.state.settings.HOST, port=app.state.settings.PORT)
