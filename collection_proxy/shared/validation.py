from typing import Any

import azure.functions as func

from .errors import InvalidIdentifier, MissingIdentifier


def _body_collection_id(req: func.HttpRequest) -> Any:
    try:
        body = req.get_json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("collectionId")
    return None


def _is_set(value: Any) -> bool:
    # Empty containers count as set so they reach the type check.
    return value is not None and value != "" and value is not False and value != 0


def validate_collection_id(req: func.HttpRequest) -> str:
    """Return the trimmed collection id from the JSON body or the route.

    The body field wins when it is set; the route parameter is the fallback.
    """
    collection_id = _body_collection_id(req)
    if not _is_set(collection_id):
        collection_id = req.route_params.get("collectionId")
    if not _is_set(collection_id):
        raise MissingIdentifier()
    if not isinstance(collection_id, str) or not collection_id.strip():
        raise InvalidIdentifier()
    return collection_id.strip()
