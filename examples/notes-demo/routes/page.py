"""Index page."""

from chirp import Request


async def default(request: Request) -> str:
    return "<h1>Notes</h1><p>Try <code>GET /notes</code>.</p>"
