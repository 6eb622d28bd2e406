"""Error types raised along the collection request pipeline.

Each error knows the HTTP status and JSON fields it maps to, so the function
boundary turns any of them into a response without looking at messages.
"""

from typing import Any, Dict


class CollectionProxyError(Exception):
    status_code = 500
    error = "Failed to fetch products"

    def envelope(self) -> Dict[str, Any]:
        return {"success": False, "error": self.error, "details": str(self)}


class _ClientInputError(CollectionProxyError):
    """Rejected request; the message itself is the public error text."""

    status_code = 400

    def __init__(self) -> None:
        super().__init__(self.error)

    def envelope(self) -> Dict[str, Any]:
        return {"success": False, "error": self.error}


class MissingIdentifier(_ClientInputError):
    error = "Collection ID is required as a URL parameter"


class InvalidIdentifier(_ClientInputError):
    error = "Collection ID must be a valid non-empty string"


class LimitExceeded(_ClientInputError):
    error = "Limit cannot exceed 50 products"


class ConfigurationError(CollectionProxyError):
    pass


class UpstreamProtocolError(CollectionProxyError):
    pass


class UpstreamHttpError(CollectionProxyError):
    status_code = 502
    error = "Failed to connect to GraphQL API"

    def __init__(self, upstream_status: int, reason: str) -> None:
        super().__init__(f"HTTP error! status: {upstream_status} - {reason}")
        self.upstream_status = upstream_status
        self.reason = reason


class UpstreamTransportError(CollectionProxyError):
    status_code = 502
    error = "Failed to connect to GraphQL API"


class UpstreamGraphQLError(CollectionProxyError):
    status_code = 400
    error = "GraphQL query error"

    def __init__(self, errors_json: str) -> None:
        super().__init__(f"GraphQL errors: {errors_json}")
        self.errors_json = errors_json


class CollectionNotFound(CollectionProxyError):
    status_code = 404
    error = "Collection not found"

    def __init__(self, collection_id: str) -> None:
        super().__init__(f"Collection not found: {collection_id}")
        self.collection_id = collection_id

    def envelope(self) -> Dict[str, Any]:
        return {"success": False, "error": self.error, "collectionId": self.collection_id}
