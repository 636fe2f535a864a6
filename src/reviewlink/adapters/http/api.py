"""FastAPI application exposing match discovery and link commit."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Final

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from reviewlink.adapters.http.identity import HeaderIdentityResolver, IdentityResolver
from reviewlink.adapters.http.schemas import (
    DiscoverRequestBody,
    DiscoverResponseBody,
    ErrorBody,
    LinkedOut,
    LinkRequestBody,
    LinkResponseBody,
    MatchOut,
)
from reviewlink.app import build_service
from reviewlink.domain.errors import InvalidInputError, ReconciliationError, UnauthorizedError
from reviewlink.domain.reconciliation import ConfirmedMatch, LinkRequest

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from reviewlink.app import ReconciliationService
    from reviewlink.config import ApiConfig, DatabaseConfig

log = logging.getLogger(__name__)

NO_STORE: Final[dict[str, str]] = {"Cache-Control": "no-store"}
_STATUS_BY_CODE: Final[dict[str, int]] = {
    InvalidInputError.code: 400,
    UnauthorizedError.code: 401,
}


def _error_response(error: ReconciliationError) -> JSONResponse:
    status = _STATUS_BY_CODE.get(error.code, 500)
    message = error.message if error.client_error else ReconciliationError.default_message
    body = ErrorBody(error=error.code, message=message)
    return JSONResponse(body.model_dump(by_alias=True), status_code=status, headers=NO_STORE)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ReconciliationError)
    async def _reconciliation_error(_request: Request, exc: ReconciliationError) -> JSONResponse:  # pyright: ignore[reportUnusedFunction]
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(_request: Request, exc: RequestValidationError) -> JSONResponse:  # pyright: ignore[reportUnusedFunction]
        log.debug("Rejected request body: %s", exc.errors())
        return _error_response(InvalidInputError("Invalid request body."))

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception) -> JSONResponse:  # pyright: ignore[reportUnusedFunction]
        log.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return _error_response(ReconciliationError())


def _register_routes(
    app: FastAPI,
    service: ReconciliationService | None,
    identity_resolver: IdentityResolver,
) -> None:
    def current_service() -> ReconciliationService:
        resolved = service or getattr(app.state, "service", None)
        if resolved is None:
            raise RuntimeError("Reconciliation service not configured")
        return resolved

    @app.get("/healthz")
    def healthz() -> dict[str, str]:  # pyright: ignore[reportUnusedFunction]
        return {"status": "ok"}

    @app.post(
        "/api/google/sync-gr-with-clients",
        response_model=DiscoverResponseBody,
        responses={400: {"model": ErrorBody}, 401: {"model": ErrorBody}, 500: {"model": ErrorBody}},
    )
    def sync_google_reviews_with_clients(  # pyright: ignore[reportUnusedFunction]
        body: DiscoverRequestBody,
        request: Request,
        response: Response,
    ) -> DiscoverResponseBody:
        result = current_service().discover(body.tenant_id, identity_resolver(request))
        response.headers.update(NO_STORE)
        return DiscoverResponseBody(
            tenant_id=result.business_id,
            match_count=result.match_count,
            matches=[
                MatchOut(
                    external_review_id=match.external_review_id,
                    client_id=match.client_id,
                    author_name=match.author_name,
                    client_display_name=match.client_display_name,
                )
                for match in result.matches
            ],
        )

    @app.post(
        "/api/google/link-gr-to-clients",
        response_model=LinkResponseBody,
        responses={400: {"model": ErrorBody}, 401: {"model": ErrorBody}, 500: {"model": ErrorBody}},
    )
    def link_google_reviews_to_clients(  # pyright: ignore[reportUnusedFunction]
        body: LinkRequestBody,
        request: Request,
        response: Response,
    ) -> LinkResponseBody:
        link_request = LinkRequest(
            business_id=body.tenant_id or "",
            matches=tuple(
                ConfirmedMatch(
                    external_review_id=match.external_review_id or "",
                    client_id=match.client_id or "",
                    author_name=match.author_name,
                    client_display_name=match.client_display_name,
                )
                for match in body.matches
            ),
        )
        result = current_service().link(link_request, identity_resolver(request))
        response.headers.update(NO_STORE)
        return LinkResponseBody(
            tenant_id=result.business_id,
            linked_count=result.linked_count,
            results=[
                LinkedOut(
                    external_review_id=linked.external_review_id,
                    client_id=linked.client_id,
                    internal_review_id=linked.internal_review_id,
                    author_name=linked.author_name,
                    client_display_name=linked.client_display_name,
                )
                for linked in result.results
            ],
        )


def create_app(
    service: ReconciliationService | None = None,
    *,
    identity_resolver: IdentityResolver | None = None,
    database: DatabaseConfig | None = None,
) -> FastAPI:
    """Build the API.

    With an explicit ``service`` the app uses it as-is. Otherwise the database
    is started in the lifespan handler and disposed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if service is not None:
            yield
            return
        app.state.service, db = build_service(database=database)
        log.info("Reconciliation API ready")
        try:
            yield
        finally:
            db.dispose()

    app = FastAPI(title="reviewlink", description="Review reconciliation API", lifespan=lifespan)
    _register_error_handlers(app)
    _register_routes(app, service, identity_resolver or HeaderIdentityResolver())
    return app


def create_app_from_config(config: ApiConfig) -> FastAPI:
    return create_app(identity_resolver=HeaderIdentityResolver(header=config.identity_header))
