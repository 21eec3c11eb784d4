"""Notes demo — a JSON API assembled from the routes/ tree.

Run:
    python examples/notes-demo/server.py

Routes:
    GET    /                  routes/page.py
    GET    /health            routes/health/get.py
    GET    /notes             routes/notes/route.py
    POST   /notes             routes/notes/route.py (JSON body required)
    GET    /notes/{note_id}   routes/notes/{note_id}/get.py
    DELETE /notes/{note_id}   routes/notes/{note_id}/del.py
"""

import asyncio
import logging
from pathlib import Path

from warren import get_routes
from warren.observability import EventLog, ModuleSkipped

ROUTES = Path(__file__).parent.resolve() / "routes"


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    log = EventLog()
    app = asyncio.run(get_routes(ROUTES, event_log=log, missing_export="warn"))
    for event in log.query(event_type=ModuleSkipped):
        logging.getLogger("notes-demo").info("skipped %s (%s)", event.source, event.reason)
    app.run(host="127.0.0.1", port=8000)


if __name__ == "__main__":
    main()
