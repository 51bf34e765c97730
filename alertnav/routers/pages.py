"""Browser pages"""
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from alertnav.page_renderer import get_edit_html, get_login_html, get_map_html

router = APIRouter()


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def map_page(request: Request):
    """Live map of the latest device locations"""
    return HTMLResponse(get_map_html(request.app.state.settings))


@router.get("/login", response_class=HTMLResponse, include_in_schema=False)
async def login_page(request: Request):
    return HTMLResponse(get_login_html(request.app.state.settings))


@router.get("/edit/{reading_id}", response_class=HTMLResponse, include_in_schema=False)
async def edit_page(reading_id: int, request: Request):
    return HTMLResponse(get_edit_html(request.app.state.settings, reading_id))
