from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.handler import SubmissionHandler, SubmissionRequest
from core.logging_config import configure_logging

# ==================== CONFIGURATION ====================

configure_logging()

SUBMIT_PATHS = ("/api/submit", "/submit")

# Every method reaches the handler so that it can answer 405 itself,
# with the CORS headers attached. Verbs not listed here are routed to
# it by the 405 exception handler below.
SUBMIT_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]

# ==================== APP FACTORY ====================

def create_app(handler: Optional[SubmissionHandler] = None) -> FastAPI:
    """
    Build the FastAPI app around a SubmissionHandler.

    Tests pass a handler wired with fake settings and a mocked Telegram
    transport; the deployed app uses the environment and the real API.
    """
    handler = handler or SubmissionHandler()

    app = FastAPI(
        title="Test Submission Notifier",
        description="Receives completed English test results and forwards them to Telegram",
        version="1.0.0"
    )

    @app.get("/")
    def root():
        """API health check"""
        return {
            "status": "healthy",
            "service": "Test Submission Notifier",
            "version": "1.0.0"
        }

    async def submit(request: Request) -> Response:
        result = await handler.handle(SubmissionRequest(
            method=request.method,
            headers=dict(request.headers),
            body=await request.body(),
        ))

        if result.body is None:
            return Response(status_code=result.status_code, headers=result.headers)
        return JSONResponse(result.body, status_code=result.status_code, headers=result.headers)

    for path in SUBMIT_PATHS:
        app.add_api_route(path, submit, methods=SUBMIT_METHODS, include_in_schema=path == SUBMIT_PATHS[0])

    @app.exception_handler(StarletteHTTPException)
    async def method_not_allowed(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code == 405 and request.url.path in SUBMIT_PATHS:
            return await submit(request)
        return await http_exception_handler(request, exc)

    return app


app = create_app()

# ==================== RUN SERVER ====================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
