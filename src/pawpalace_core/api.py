"""
HTTP surface of the reminder service.

Intended usage:
    pawpalace-reminders serve --host 0.0.0.0 --port 5000
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from . import __version__
from .exceptions import (
    MailDeliveryException,
    PawPalaceException,
    create_error_response,
)
from .runtime import ReminderRuntime
from .schemas.reminders import (
    ManualRunResponse,
    ReminderRunResponse,
    TestEmailRequest,
    TestEmailResponse,
)
from .utils.config import AppSettings

logger = logging.getLogger(__name__)

MANUAL_RUN_MESSAGE = "Vaccination reminder task executed (manual run)."


def _runtime(request: Request) -> ReminderRuntime:
    return request.app.state.runtime


def create_app(
    runtime: Optional[ReminderRuntime] = None,
    settings: Optional[AppSettings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Args:
        runtime: Prebuilt runtime; built from ``settings`` at startup when omitted
        settings: Application settings; read from the environment when omitted
    """
    settings = settings or AppSettings.from_environment()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "runtime", None) is None:
            app.state.runtime = ReminderRuntime.from_settings(settings)
        logger.info(f"Starting PawPalace reminder service {__version__}")
        app.state.runtime.scheduler.start()
        try:
            yield
        finally:
            await app.state.runtime.close()
            logger.info("PawPalace reminder service stopped")

    app = FastAPI(
        title="PawPalace Reminder Service",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.runtime = runtime

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=PlainTextResponse, tags=["system"])
    async def root() -> str:
        return "PawPalace server running"

    @app.get("/health", tags=["system"])
    async def health(request: Request) -> Dict[str, Any]:
        runtime = _runtime(request)
        status: Dict[str, Any] = {
            "status": "ok",
            "version": __version__,
            "scheduler_running": runtime.scheduler.is_running,
            "pass_in_flight": runtime.scheduler.in_flight,
            "mail": runtime.mail_queue.get_stats(),
        }
        if runtime.session_manager is not None:
            database = await runtime.session_manager.health_check()
            status["database"] = database["status"]
            if database["status"] != "healthy":
                status["status"] = "degraded"
        return status

    @app.get("/test-send-vaccination-reminders", tags=["reminders"])
    async def test_send_vaccination_reminders(request: Request) -> JSONResponse:
        """Run a reminder pass now."""
        result = await _runtime(request).scheduler.trigger(reason="manual")
        detail = ReminderRunResponse.model_validate(result.to_dict())

        if result.skipped:
            body = ManualRunResponse(success=False, message=result.message, result=detail)
            return JSONResponse(status_code=409, content=body.model_dump(mode="json"))
        if not result.success:
            body = ManualRunResponse(success=False, message=result.message, result=detail)
            return JSONResponse(status_code=500, content=body.model_dump(mode="json"))

        body = ManualRunResponse(success=True, message=MANUAL_RUN_MESSAGE, result=detail)
        return JSONResponse(status_code=200, content=body.model_dump(mode="json"))

    @app.post("/send-test-email", tags=["reminders"])
    async def send_test_email(
        payload: TestEmailRequest, request: Request
    ) -> JSONResponse:
        """Send one email synchronously through the configured transport."""
        sender = _runtime(request).mail_sender
        try:
            await asyncio.to_thread(
                sender.send, payload.to, payload.subject, payload.message
            )
        except MailDeliveryException as e:
            e.log_error(logger)
            body = TestEmailResponse(success=False, error=e.message)
            return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))

        body = TestEmailResponse(success=True, message="Email sent successfully")
        return JSONResponse(status_code=200, content=body.model_dump(exclude_none=True))

    @app.exception_handler(PawPalaceException)
    async def pawpalace_error_handler(
        request: Request, exc: PawPalaceException
    ) -> JSONResponse:
        exc.log_error(logger)
        return JSONResponse(status_code=500, content=create_error_response(exc))

    return app
