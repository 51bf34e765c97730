import re

from alertnav.page_renderer import get_edit_html, get_login_html, get_map_html

PLACEHOLDER = re.compile(r"__[A-Z_]+__")


def test_map_page_embeds_settings(settings):
    page = get_map_html(settings)

    assert "const FALLBACK_CENTER = [39.9612, -82.9988];" in page
    assert "const POLL_INTERVAL = 5000;" in page
    assert "const ZOOM = 13;" in page
    assert "<title>AlertNAV</title>" in page
    assert "fetch('/api/data'" in page
    assert not PLACEHOLDER.search(page)


def test_map_page_inlines_assets(settings):
    page = get_map_html(settings)

    assert '<script src="/ui/map.js"></script>' not in page
    assert '<link rel="stylesheet" href="/ui/common.css">' not in page
    assert "<style>" in page
    assert "leaflet" in page


def test_map_page_uses_configured_interval_and_center(settings):
    custom = settings.model_copy(update={
        "map_poll_interval_seconds": 10,
        "map_center_lat": 51.5,
        "map_center_lon": -0.12,
    })

    page = get_map_html(custom)

    assert "const POLL_INTERVAL = 10000;" in page
    assert "const FALLBACK_CENTER = [51.5, -0.12];" in page


def test_app_name_is_escaped(settings):
    custom = settings.model_copy(update={"app_name": "<Alert & Nav>"})

    page = get_login_html(custom)

    assert "&lt;Alert &amp; Nav&gt;" in page
    assert "<Alert & Nav>" not in page


def test_edit_page_targets_reading(settings):
    page = get_edit_html(settings, 42)

    assert "const READING_ID = 42;" in page
    assert "Blocked Road" in page
    assert not PLACEHOLDER.search(page)


async def test_edit_page_route(client, login):
    await login("user@example.com")

    response = await client.get("/edit/7")

    assert response.status_code == 200
    assert "const READING_ID = 7;" in response.text


async def test_marker_icons_are_served(client):
    for name in ("pin", "construction", "road-barrier", "stop"):
        response = await client.get(f"/static/icons/{name}.svg")
        assert response.status_code == 200
        assert "<svg" in response.text


def test_scripts_return_to_login_when_session_expires(settings):
    # The gate answers expired API calls with a redirect to the login page
    assert "response.redirected" in get_map_html(settings)
    assert get_edit_html(settings, 1).count("response.redirected") == 2
