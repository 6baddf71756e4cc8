from contextlib import asynccontextmanager
import logging

from app.ai.factory import get_ai_client
from app.parsing.ocr import ocr_engine_available

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    # Raises GatewayMisconfigured and aborts startup when the provider key or name is invalid.
    client = get_ai_client()
    logger.info(
        "llm_gateway_ready provider=%s model=%s",
        type(client).__name__,
        getattr(client, "model", "unknown"),
    )

    if not ocr_engine_available():
        logger.warning("ocr_engine_missing: scanned resumes will fail until Tesseract is installed")

    yield
