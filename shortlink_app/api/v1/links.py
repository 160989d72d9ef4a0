from fastapi import APIRouter, Depends
from shortlink_app.schemas.link import LinkOut, LinksResponse, ShortenRequest, ShortenResponse
from shortlink_app.services.link_registrar import LinkRegistrar, build_short_url
from shortlink_app.storage.strategies import LinkStore
from shortlink_app.dependencies import get_base_url, get_link_store, get_registrar

router = APIRouter(tags=["links"])


@router.post("/v1/shortener", response_model=ShortenResponse)
async def create_short_url(
    payload: ShortenRequest,
    registrar: LinkRegistrar = Depends(get_registrar),
    base_url: str = Depends(get_base_url)
):
    """Create a new short URL"""
    short_url = await registrar.register(payload.url, base_url)
    return ShortenResponse(short_url=short_url)


# Same contract, kept for the browser front-end
router.add_api_route(
    "/api/shorten",
    create_short_url,
    methods=["POST"],
    response_model=ShortenResponse,
    name="shorten_from_frontend",
)


@router.get("/v1/links", response_model=LinksResponse)
def list_links(
    store: LinkStore = Depends(get_link_store),
    base_url: str = Depends(get_base_url)
):
    """List every link, newest first"""
    links = [
        LinkOut(
            redirect_code=link.redirect_code,
            destiny_url=link.destiny_url,
            short_url=build_short_url(base_url, link.redirect_code),
            clicks=link.clicks,
            created_at=link.created_at,
        )
        for link in store.list_all()
    ]
    return LinksResponse(links=links)
