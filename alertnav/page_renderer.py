"""
HTML page generator for the map, login and edit views
"""
import html
import json
import os

from alertnav.config import Settings

UI_DIR = os.path.join(os.path.dirname(__file__), 'ui')


def _read_ui_file(filename: str) -> str:
    with open(os.path.join(UI_DIR, filename), 'r', encoding='utf-8') as f:
        return f.read()


def render_page(name: str, placeholders: dict) -> str:
    """
    Build a page from ui/<name>.html, embedding ui/<name>.js and the shared
    stylesheet inline and substituting __PLACEHOLDER__ tokens.

    Values are inserted as-is; callers escape them for their context.
    """
    html_text = _read_ui_file(f'{name}.html')
    css = _read_ui_file('common.css')
    js = _read_ui_file(f'{name}.js')

    for key, value in placeholders.items():
        token = f'__{key}__'
        html_text = html_text.replace(token, str(value))
        js = js.replace(token, str(value))

    # Embed CSS and JS inline
    html_text = html_text.replace(
        '<link rel="stylesheet" href="/ui/common.css">',
        f'<style>{css}</style>'
    )
    html_text = html_text.replace(
        f'<script src="/ui/{name}.js"></script>',
        f'<script>{js}</script>'
    )
    return html_text


def get_map_html(settings: Settings) -> str:
    """Map page polling /api/data"""
    return render_page('map', {
        'APP_NAME': html.escape(settings.app_name),
        'MAP_CENTER': json.dumps([settings.map_center_lat, settings.map_center_lon]),
        'MAP_ZOOM': int(settings.map_zoom),
        'POLL_INTERVAL': int(settings.map_poll_interval_seconds * 1000),
    })


def get_login_html(settings: Settings) -> str:
    """Email sign-in page"""
    return render_page('login', {
        'APP_NAME': html.escape(settings.app_name),
    })


def get_edit_html(settings: Settings, reading_id: int) -> str:
    """Edit form for the event and group of one reading"""
    return render_page('edit', {
        'APP_NAME': html.escape(settings.app_name),
        'READING_ID': int(reading_id),
    })
