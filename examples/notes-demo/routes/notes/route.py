"""Note collection — list and create."""

from chirp import Request, Response

from warren import create_handler

from .. import _store


async def GET(request: Request) -> list[dict[str, str]]:
    return list(_store.NOTES.values())


async def require_json(request: Request, next):
    """Reject bodies that are not JSON before the handler runs."""
    if "application/json" not in request.headers.get("content-type", ""):
        return Response(body="expected application/json").with_status(415)
    return await next(request)


async def create_note(request: Request):
    data = await request.json()
    title = str(data.get("title", "")).strip()
    if not title:
        return Response(body="title is required").with_status(422)
    return _store.add(title, str(data.get("body", "")))


POST = create_handler(require_json, create_note)
