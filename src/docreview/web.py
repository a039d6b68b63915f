import logging
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from .extraction import ExtractionFailed, extract_issues, resolve_outcome
from .llm_review import API_KEY_ENV, LLMReviewer, ReviewerConfig
from .personas import Persona

logger = logging.getLogger(__name__)

ANALYSIS_PATH = "/api/legal-analysis"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

# Every method is routed to the handler so it can answer 405 itself.
ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

ReviewerFactory = Callable[[ReviewerConfig], LLMReviewer]


def _json(status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


async def _read_body(request: Request) -> Optional[dict]:
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def create_app(
    config: Optional[ReviewerConfig] = None,
    reviewer_factory: ReviewerFactory = LLMReviewer,
) -> FastAPI:
    app = FastAPI(title="Document Review")
    app.state.config = config or ReviewerConfig.from_env()
    app.state.reviewer_factory = reviewer_factory

    @app.api_route(ANALYSIS_PATH, methods=ROUTED_METHODS)
    async def legal_analysis(request: Request):
        """Analyze document text with the requested persona."""
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        if request.method != "POST":
            return _json(405, {"error": "Method not allowed"})

        body = await _read_body(request)
        document_text = body.get("documentText") if body else None
        if not isinstance(document_text, str) or not document_text.strip():
            return _json(400, {"error": "Document text is required"})

        try:
            persona = Persona.parse(body.get("persona"))
        except ValueError as exc:
            return _json(400, {"error": "Unknown persona", "details": str(exc)})

        config: ReviewerConfig = request.app.state.config
        logger.info("Analyzing document (%d chars, persona=%s)", len(document_text), persona.value)
        logger.debug("API key available: %s", config.has_credentials)
        if not config.has_credentials:
            logger.error("Completion service credential is not configured")
            return _json(
                500,
                {
                    "error": "Configuration error",
                    "details": f"API key not configured. Please set the {API_KEY_ENV} environment variable.",
                },
            )

        try:
            reviewer = request.app.state.reviewer_factory(config)
            response_text = reviewer.review(persona.build_prompt(document_text))
        except Exception as exc:
            logger.exception("Error during analysis")
            return _json(500, {"error": "Analysis failed", "details": str(exc)})

        logger.debug("Model response: %s", response_text)
        outcome = extract_issues(response_text)
        if isinstance(outcome, ExtractionFailed):
            logger.warning("Failed to parse model response: %s", outcome.reason)

        return _json(200, resolve_outcome(outcome).to_dict())

    return app


app = create_app()
