async def GET(request) -> dict[str, str]:
    return {"status": "ok"}
