import logging

import azure.functions as func

from ..shared import json_response

logger = logging.getLogger("collection_proxy")

AVAILABLE_ROUTES = ["/api/collection/:collectionId"]


async def main(req: func.HttpRequest) -> func.HttpResponse:
    # Catch-all route; the host matches the literal collection route first.
    logger.info("route_not_found", extra={"method": req.method, "url": req.url})
    return json_response(
        404,
        {"success": False, "error": "Route not found", "availableRoutes": AVAILABLE_ROUTES},
    )
