"""
Notion AI Backend
Includes:
- Notion page content extraction (paginated block children)
- Action-specific prompts sent to Gemini
- Generated output appended back to the Notion page
- URL content fetching for web sources
- Logging for live visibility
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from clients import GeminiGenerator, HttpUrlFetcher, NotionDocumentStore
from config import cors_origins, listen_port, load_settings
from errors import ConfigurationError, PipelineError, ValidationError
from pipeline import ContentPipeline
from prompts import PromptBuilder
from schemas import ProcessRequest, ProcessResponse
from writer import DocumentWriter

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# -------------------------------------------------
# Wiring
# -------------------------------------------------

def build_pipeline(settings):
    """Construct the long-lived clients and the pipeline that uses them."""
    store = NotionDocumentStore.from_token(settings.notion_api_key)
    return ContentPipeline(
        store=store,
        generator=GeminiGenerator.from_settings(settings),
        prompt_builder=PromptBuilder(max_chars=settings.prompt_max_chars, enabled=settings.enabled_actions),
        writer=DocumentWriter(store, style=settings.output_block_style),
        url_fetcher=HttpUrlFetcher(proxy_prefix=settings.url_proxy_prefix),
        enabled_actions=settings.enabled_actions,
    )


def get_pipeline(app):
    if app.state.config_error is not None:
        raise ConfigurationError(app.state.config_error.message, cause=app.state.config_error.cause)
    if app.state.pipeline is None:
        raise ConfigurationError("Server API keys are not configured properly.")
    return app.state.pipeline


def format_validation_error(exc):
    fields = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        fields.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg"))
    return "; ".join(fields)


async def read_process_request(request):
    """Parse and validate the JSON body; every failure is a 400 ValidationError."""
    try:
        body = await request.json()
    except ValueError as e:
        raise ValidationError("Request body must be valid JSON.", cause=e) from e
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object.")

    try:
        return ProcessRequest.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError(f"Notion Page ID and action are required. {format_validation_error(e)}") from e


# -------------------------------------------------
# App factory
# -------------------------------------------------

def create_app(pipeline=None, settings=None):
    """Build the FastAPI app. Pass ``pipeline`` to skip loading settings."""

    @asynccontextmanager
    async def lifespan(app):
        store = None
        if app.state.pipeline is None and app.state.config_error is None:
            try:
                app.state.pipeline = build_pipeline(settings or load_settings())
                store = app.state.pipeline.store
            except ConfigurationError as e:
                logger.error(f"❌ Configuration error: {e.message}")
                app.state.config_error = e
        yield
        if store is not None:
            await store.aclose()

    app = FastAPI(title="Notion AI Backend", lifespan=lifespan)
    app.state.pipeline = pipeline
    app.state.config_error = None

    app.add_middleware(CORSMiddleware, allow_origins=cors_origins(), allow_methods=["*"], allow_headers=["*"])

    @app.get("/")
    def health():
        """API heartbeat check"""
        return {"status": "Notion AI Backend is running!"}

    @app.post("/process-notion-content", response_model=ProcessResponse)
    async def process_notion_content(request: Request):
        """Run an AI action over a Notion page and append the result"""
        try:
            req = await read_process_request(request)

            content = req.content or ""
            logger.info(f"📥 Received request for action: {req.action!r}, page: {req.page_id}")
            logger.info(f"📥 Content (first 200 chars): {content[:200] + '...' if content else 'No content provided.'}")

            result = await get_pipeline(request.app).process(req)
        except PipelineError as e:
            return JSONResponse(status_code=e.status_code, content=e.to_payload())

        if result.appended:
            message = "Content processed and added to Notion!"
        else:
            message = "Content processed!"
        return ProcessResponse(message=message, output=result.output, appended=result.appended)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = listen_port()
    logger.info(f"🚀 Notion AI Backend listening at http://localhost:{port}")
    uvicorn.run(app, host="0.0.0.0", port=port)
