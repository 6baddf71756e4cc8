import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import sentry_sdk

from app.api.v1.health import root_router
from app.api.v1.health import router as health_router
from app.api.v1.resume import router as resume_router
from app.core.config import settings
from dotenv import load_dotenv
from app.core.lifespan import lifespan
from app.services.errors import GatewayMisconfigured, MissingCredential

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

logger = logging.getLogger(__name__)

app = FastAPI(title="Resume Analyzer API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_origin_regex=(settings.cors_allow_origin_regex or "").strip() or None,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def _gateway_misconfigured_handler(request: Request, exc: GatewayMisconfigured) -> JSONResponse:
    logger.error("llm_gateway_misconfigured path=%s kind=%s: %s", request.url.path, exc.kind, exc)
    if isinstance(exc, MissingCredential):
        detail = "missing AI provider credential"
    else:
        detail = "unsupported AI provider"
    return JSONResponse(
        status_code=500,
        content={"error": f"Resume analysis is not configured on the server: {detail}."},
    )


app.add_exception_handler(GatewayMisconfigured, _gateway_misconfigured_handler)

app.include_router(root_router, tags=["Health"])
app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(resume_router, tags=["Resume"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port)
