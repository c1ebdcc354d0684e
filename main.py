from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from config.context import AppContext
from config.settings import Settings
from middlewares.request_tracker import request_tracker_middleware
from routes.quiz_routes import router as quiz_router
from routes.system_routes import router as system_router
from utils.errors import QuizAppError
from utils.helper import error_response
from utils.logger import configure_logging, get_logger

logger = get_logger("app")


def create_app(context: Optional[AppContext] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or (context.settings if context else Settings.from_env())
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Connection is lazy, nothing is opened here
        if getattr(app.state, "context", None) is None:
            app.state.context = AppContext.from_settings(settings)
        yield
        app.state.context.close()

    app = FastAPI(title="AI Quiz Generator", lifespan=lifespan)
    app.state.context = context

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Quiz-Title"],
    )
    app.middleware("http")(request_tracker_middleware)

    @app.exception_handler(QuizAppError)
    async def quiz_app_error_handler(request: Request, exc: QuizAppError):
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = f"Invalid {location}: {first.get('msg')}" if location else "Invalid request."
        return error_response(400, message)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return error_response(500, "An error occurred on the server.")

    # Include Routers
    app.include_router(system_router)
    app.include_router(quiz_router)

    return app


app = create_app()
