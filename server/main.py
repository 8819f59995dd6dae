# server/main.py

import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import auth, categories, items, questions, users
from config import Settings, configure_logging, get_settings
from core.validation import ValidationFailed
from database import init_db


logger = logging.getLogger(__name__)


# -------------------------------
# Error handlers
# -------------------------------

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = "not found" if exc.status_code == 404 and exc.detail == "Not Found" else exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_failed_handler(request: Request, exc: ValidationFailed):
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.as_dict()))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        return JSONResponse(status_code=400, content={"error": "invalid json"})

    content = {
        "errors": [
            {
                "value": error.get("input"),
                "msg": error.get("msg"),
                "param": str(error["loc"][-1]) if error.get("loc") else "",
                "location": error["loc"][0] if error.get("loc") else "",
            }
            for error in errors
        ]
    }
    return JSONResponse(status_code=400, content=jsonable_encoder(content))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("error handling route %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": str(exc) or "internal server error"},
    )


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ValidationFailed, validation_failed_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


# -------------------------------
# Application
# -------------------------------

def index():
    return [
        {"href": "/login", "methods": ["POST"]},
        {"href": "/signup", "methods": ["POST"]},
        {"href": "/admin", "methods": ["GET"]},
        {"href": "/users", "methods": ["GET"]},
        {"href": "/users/me", "methods": ["GET", "PATCH"]},
        {"href": "/users/{userId}", "methods": ["GET", "PATCH", "DELETE"]},
        {"href": "/categories", "methods": ["GET", "POST"]},
        {"href": "/categories/{categoryId}", "methods": ["GET", "PATCH", "DELETE"]},
        {"href": "/items", "methods": ["GET", "POST"]},
        {"href": "/items/{itemId}", "methods": ["GET", "PATCH", "DELETE"]},
        {"href": "/questions", "methods": ["GET", "POST"]},
        {"href": "/questions/{questionId}", "methods": ["GET", "PATCH", "DELETE"]},
        {"href": "/questions/{questionId}/vote/{itemId}", "methods": ["POST"]},
    ]


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    init_db(settings.database_url)

    app = FastAPI(title="Vote API")
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.add_api_route("/", index, methods=["GET"])
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(categories.router)
    app.include_router(items.router)
    app.include_router(questions.router)

    logger.info("App configured (page size %s, token lifetime %ss)",
                settings.page_size, settings.token_lifetime)
    return app


app = create_app()


def run():
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
