"""Page shell for navigation requests that pass the access gate.

The frontend renders the page; this only confirms the route is reachable.
"""

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from melimou.core.config import get_settings

router = APIRouter()

PAGE_SHELL = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>{title}</title></head>
<body><div id="root" data-path="{path}"></div></body>
</html>
"""


@router.get("/{full_path:path}", response_class=HTMLResponse, include_in_schema=False)
async def page_shell(full_path: str, request: Request):
    # Unknown API paths must not fall through to the shell
    if full_path == "api" or full_path.startswith("api/"):
        raise HTTPException(status_code=404, detail="Not Found")
    return PAGE_SHELL.format(title=get_settings().app_name, path=request.url.path)
