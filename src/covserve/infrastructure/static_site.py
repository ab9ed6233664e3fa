from pathlib import Path
from typing import Final

from starlette.applications import Starlette
from starlette.routing import Mount
from starlette.staticfiles import StaticFiles

INDEX_DOCUMENT: Final[str] = "index.html"


def create_static_app(html_dir: Path) -> Starlette:
    # html=True makes StaticFiles answer directory requests with index.html.
    return Starlette(
        routes=[
            Mount("/", app=StaticFiles(directory=str(html_dir), html=True), name="htmlcov"),
        ]
    )
