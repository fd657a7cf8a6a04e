import asyncio
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response

from feefo_schema.api.dependencies import get_renderer
from feefo_schema.services.head_injector import charset_from_content_type, inject_head_script_bytes
from feefo_schema.services.payload_renderer import PayloadRenderer

router = APIRouter(prefix="/datalayer", tags=["Data Layer"])

RendererDep = Annotated[PayloadRenderer, Depends(get_renderer)]


# Cache reads are blocking store calls, so these run in the threadpool
@router.get("")
def get_data_layer(renderer: RendererDep) -> dict[str, Any]:
    """Cached rating summary and reviews as pushed into ``window.dataLayer``."""
    return renderer.render().to_data_layer()


@router.get("/script", response_class=HTMLResponse)
def get_data_layer_script(renderer: RendererDep) -> str:
    """Script block to place in the head, before the tag manager snippet."""
    return renderer.render_script()


@router.post("/head", response_class=HTMLResponse)
async def inject_into_head(request: Request, renderer: RendererDep) -> Response:
    """
    Returns the posted HTML document with the data layer script injected after <head>.

    The document keeps the charset it was posted with.
    """
    charset = charset_from_content_type(request.headers.get("content-type"))
    document = await request.body()
    script = await asyncio.to_thread(renderer.render_script)
    return Response(
        content=inject_head_script_bytes(document, script, charset),
        media_type=f"text/html; charset={charset}",
    )
