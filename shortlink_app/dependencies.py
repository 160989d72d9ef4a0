"""
FastAPI dependencies for dependency injection.

Every collaborator comes from the AppContext that the application
lifespan stores on app.state, so tests inject a context built
from fakes instead of patching globals.
"""

from fastapi import Depends, Request

from shortlink_app.context import AppContext
from shortlink_app.services.link_registrar import LinkRegistrar
from shortlink_app.services.redirect_resolver import RedirectResolver
from shortlink_app.storage.strategies import LinkStore


def get_context(request: Request) -> AppContext:
    """Get the application context created at startup."""
    return request.app.state.context


def get_link_store(ctx: AppContext = Depends(get_context)) -> LinkStore:
    return ctx.store


def get_registrar(ctx: AppContext = Depends(get_context)) -> LinkRegistrar:
    return ctx.registrar()


def get_resolver(ctx: AppContext = Depends(get_context)) -> RedirectResolver:
    return ctx.resolver()


def get_base_url(request: Request, ctx: AppContext = Depends(get_context)) -> str:
    """
    Public address used in short URLs.

    The configured base_url wins; otherwise the address the request came in on.
    """
    return ctx.settings.base_url or str(request.base_url)
