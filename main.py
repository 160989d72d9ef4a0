from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortlink_app.config import settings
from shortlink_app.context import AppContext
from shortlink_app.exceptions import ShortlinkError
from shortlink_app.log_config import configure_logging
from shortlink_app.api.v1 import links, redirect


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        context: Prebuilt collaborators (tests). When None, the context is
            built from settings at startup.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        ctx = context or AppContext.from_settings(settings)
        await ctx.start()
        app.state.context = ctx
        yield
        await ctx.close()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="A URL shortener service built with FastAPI",
        debug=settings.debug,
        lifespan=lifespan,
    )

    @app.exception_handler(ShortlinkError)
    async def shortlink_error_handler(request: Request, exc: ShortlinkError):
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return PlainTextResponse("Invalid request body", status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    @app.get("/")
    def read_root():
        """Root endpoint with API information"""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "docs": "/docs",
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "environment": settings.environment}

    ######## Include routers
    app.include_router(links.router)
    app.include_router(redirect.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port)
