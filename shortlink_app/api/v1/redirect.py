from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from shortlink_app.exceptions import InvalidInputError
from shortlink_app.services.redirect_resolver import RedirectResolver
from shortlink_app.dependencies import get_resolver

router = APIRouter(tags=["redirect"])


@router.get("/r/")
async def redirect_without_code():
    """A bare /r/ carries no code to resolve"""
    raise InvalidInputError("Invalid redirect code")


@router.get("/r/{redirect_code}")
async def redirect_to_destination(
    redirect_code: str,
    resolver: RedirectResolver = Depends(get_resolver)
):
    """
    Redirect to the destination URL.

    Flow:
    1. Resolve the code through the cache, falling back to the store
    2. Redirect immediately

    Cache backfill and the click increment are dispatched by the resolver
    and finish after the response has gone out.
    """
    destination = await resolver.resolve(redirect_code)
    return RedirectResponse(url=destination, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
