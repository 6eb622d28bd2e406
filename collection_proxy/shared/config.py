import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger("collection_proxy")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("invalid_setting", extra={"setting": name, "value": raw, "fallback": default})
        return default


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, read once when a worker imports the app.

    Missing upstream values are tolerated here and reported by the fetcher at
    call time, so a misconfigured app still answers with a JSON error.
    """

    graphql_endpoint: Optional[str] = None
    api_token: Optional[str] = None
    timeout_s: float = 10.0
    debug_request_log: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        endpoint = (os.getenv("GRAPHQL_ENDPOINT") or "").strip() or None
        token = (os.getenv("API_TOKEN") or "").strip() or None
        return cls(
            graphql_endpoint=endpoint,
            api_token=token,
            timeout_s=_env_float("UPSTREAM_TIMEOUT_S", 10.0),
            debug_request_log=_env_flag("DEBUG_REQUEST_LOG"),
        )
