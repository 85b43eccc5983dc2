"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.errors import ApiError
from app.repositories.memory import InMemoryStore
from app.repositories.refresh_tokens import RefreshTokenRegistry
from app.routes import auth_router, cards_router, groups_router, messages_router
from app.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

_OPENAPI_RESPONSE_CODES: dict[str, dict[str, set[str]]] = {
    "/register": {"post": {"200", "400", "500"}},
    "/register-admin": {"post": {"200", "400", "403", "500"}},
    "/login": {"post": {"200", "400", "500"}},
    "/token": {"post": {"200", "401", "403"}},
    "/logout": {"post": {"200", "401", "403"}},
    "/protected": {"get": {"200", "401", "403"}},
    "/groups": {"post": {"201", "400", "401", "403", "500"}, "get": {"200", "401", "403", "500"}},
    "/groups-all": {"get": {"200", "401", "403", "500"}},
    "/groups/{groupId}": {
        "get": {"200", "401", "403", "404", "500"},
        "delete": {"200", "401", "403", "404", "500"},
    },
    "/cards": {"post": {"201", "400", "401", "403", "404", "500"}, "get": {"200", "401", "403", "500"}},
    "/cards/{cardId}": {
        "get": {"200", "401", "403", "404", "500"},
        "patch": {"200", "400", "401", "403", "404", "500"},
    },
    "/messages": {"post": {"201", "400", "401", "403", "500"}, "get": {"200", "401", "403", "500"}},
}

_VALIDATION_MESSAGES: dict[tuple[str, str], str] = {
    ("POST", "/register"): "Username and password are required",
    ("POST", "/register-admin"): "Username and password are required",
    ("POST", "/login"): "Username and password are required",
    ("POST", "/groups"): "groupName is required",
    ("POST", "/cards"): "Word, translate, groupName, and groupId are required",
    ("PATCH", "/cards/{cardId}"): "Word and translate are required",
    ("POST", "/messages"): "Title and body are required",
}

_CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]
_CORS_HEADERS = ["Content-Type", "Authorization"]


def _apply_contract_response_codes(schema: dict) -> None:
    """Limit documented response codes to the published API contract."""
    error_ref = {"$ref": "#/components/schemas/ErrorResponse"}
    for path, methods in _OPENAPI_RESPONSE_CODES.items():
        path_item = schema.get("paths", {}).get(path)
        if not path_item:
            continue

        for method, allowed_codes in methods.items():
            operation = path_item.get(method)
            if not operation:
                continue

            responses = operation.setdefault("responses", {})
            for status_code in list(responses.keys()):
                if status_code not in allowed_codes:
                    responses.pop(status_code, None)

            for status_code in sorted(allowed_codes):
                entry = responses.setdefault(status_code, {"description": "See API contract"})
                if status_code.startswith(("4", "5")):
                    entry.setdefault("content", {"application/json": {"schema": error_ref}})


def _error_response(status_code: int, code: str, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    payload = ErrorResponse(error=message, code=code)
    return JSONResponse(status_code=status_code, content=payload.model_dump(), headers=headers)


def create_app() -> FastAPI:
    app = FastAPI(title="Lexicard API", version="1.0.0")
    app.state.store = InMemoryStore()
    app.state.refresh_tokens = RefreshTokenRegistry()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=_CORS_METHODS,
        allow_headers=_CORS_HEADERS,
    )

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.payload.model_dump())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        route = request.scope.get("route")
        route_path = getattr(route, "path", request.url.path)
        message = _VALIDATION_MESSAGES.get((request.method.upper(), route_path), "Invalid request payload")
        logger.info(
            "request.invalid method=%s path=%s errors=%s",
            request.method,
            route_path,
            len(exc.errors()),
        )
        return _error_response(400, "VALIDATION_ERROR", message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(_, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(exc.status_code, "HTTP_ERROR", str(exc.detail), headers=exc.headers)

    app.include_router(auth_router)
    app.include_router(groups_router)
    app.include_router(cards_router)
    app.include_router(messages_router)

    def custom_openapi() -> dict:
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        _apply_contract_response_codes(schema)
        app.openapi_schema = schema
        return app.openapi_schema

    app.openapi = custom_openapi

    return app


app = create_app()
