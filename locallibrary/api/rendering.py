"""Turn catalog outcomes into HTTP responses."""
from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.responses import RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from locallibrary.services.outcomes import Outcome, Redirect

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(request: Request, view: str, data: dict[str, Any], status_code: int = 200) -> Response:
    """Render a view template with its data bag."""
    return templates.TemplateResponse(request, f"{view}.html", data, status_code=status_code)


def respond(request: Request, outcome: Outcome) -> Response:
    """Render or redirect, exactly once."""
    if isinstance(outcome, Redirect):
        # 303 so the browser follows a POST with a GET
        return RedirectResponse(outcome.url, status_code=303)
    return render(request, outcome.view, outcome.data)


async def read_form(request: Request) -> dict[str, Any]:
    """Submitted form fields; repeated fields become lists."""
    form = await request.form()
    data: dict[str, Any] = {}
    for key in form.keys():
        values = form.getlist(key)
        data[key] = values if len(values) > 1 else values[0]
    return data
