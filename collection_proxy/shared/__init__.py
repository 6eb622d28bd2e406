"""Shared utilities for the collection proxy function app.

Currently exposes:
    Settings - process configuration read once from the environment.
    validate_collection_id - pulls the collection id from body or route.
    fetch_products_by_collection - the single upstream GraphQL call.
    json_response / error_response - JSON envelopes with trace headers.
"""

from .collection_fetcher import check_limit, fetch_products_by_collection, parse_limit, to_global_id
from .common_proxy import error_response, json_response, log_request_debug, utc_timestamp
from .config import Settings
from .validation import validate_collection_id

__all__ = [
    "Settings",
    "check_limit",
    "error_response",
    "fetch_products_by_collection",
    "json_response",
    "log_request_debug",
    "parse_limit",
    "to_global_id",
    "utc_timestamp",
    "validate_collection_id",
]
