"""bookshelf-api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from bookshelf.application.services.auth_service import AuthService
from bookshelf.application.services.book_service import BookService
from bookshelf.application.services.user_service import UserService
from bookshelf.config.settings import Settings, load_settings
from bookshelf.infrastructure.db.book_repository import SqlAlchemyBookRepository
from bookshelf.infrastructure.db.session import Database, create_database
from bookshelf.infrastructure.db.user_repository import SqlAlchemyUserRepository
from bookshelf.infrastructure.http.books_router import build_books_router
from bookshelf.infrastructure.http.middleware import (
    install_cors,
    install_request_logging,
    install_validation_error_handler,
)
from bookshelf.infrastructure.http.users_router import build_users_router
from bookshelf.infrastructure.logging import configure_logging
from bookshelf.infrastructure.security.password_hasher import build_password_hasher

BOOKSHELF_API_HOST = "0.0.0.0"
WELCOME_MESSAGE = "Welcome to the Bookshelf API"
logger = logging.getLogger(__name__)


def build_book_service(database: Database) -> BookService:
    """Build book service with SQLAlchemy-backed dependencies."""

    return BookService(books=SqlAlchemyBookRepository(database.session_factory))


def build_user_service(database: Database, *, settings: Settings) -> UserService:
    """Build registration/profile service with SQLAlchemy-backed dependencies."""

    return UserService(
        users=SqlAlchemyUserRepository(database.session_factory),
        password_hasher=build_password_hasher(iterations=settings.password_hash_iterations),
        password_min_length=settings.password_min_length,
    )


def build_auth_service(database: Database, *, settings: Settings) -> AuthService:
    """Build authentication service with SQLAlchemy-backed dependencies."""

    return AuthService(
        users=SqlAlchemyUserRepository(database.session_factory),
        password_hasher=build_password_hasher(iterations=settings.password_hash_iterations),
    )


def create_app(
    *,
    settings: Settings | None = None,
    database: Database | None = None,
    book_service: BookService | None = None,
    user_service: UserService | None = None,
    auth_service: AuthService | None = None,
) -> FastAPI:
    """Create FastAPI app for book and user endpoints."""

    if settings is None:
        settings = load_settings()
    configure_logging(level=settings.log_level)

    if database is None:
        database = create_database(settings.database_url)
    if book_service is None:
        book_service = build_book_service(database)
    if user_service is None:
        user_service = build_user_service(database, settings=settings)
    if auth_service is None:
        auth_service = build_auth_service(database, settings=settings)

    owned_database = database

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        await owned_database.create_schema()
        logger.info("bookshelf_api_started")
        try:
            yield
        finally:
            await owned_database.dispose()
            logger.info("bookshelf_api_stopped")

    app = FastAPI(title="Bookshelf API", lifespan=lifespan)
    install_cors(app, allow_origins=settings.cors_origin_list)
    install_request_logging(app)
    install_validation_error_handler(app)

    app.include_router(build_books_router(book_service=book_service))
    app.include_router(build_users_router(user_service=user_service, auth_service=auth_service))

    @app.get("/")
    async def landing() -> dict[str, str]:
        return {"message": WELCOME_MESSAGE}

    return app


def run_asgi_server(*, host: str = BOOKSHELF_API_HOST, port: int | None = None) -> None:
    """Run bookshelf-api as a long-lived ASGI process using application factory mode."""

    if port is None:
        port = load_settings().app_port
    uvicorn.run(
        "apps.bookshelf_api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Run bookshelf-api runtime process."""

    run_asgi_server()


if __name__ == "__main__":
    main()
