import time
from typing import Any


def unix_timestamp_id() -> str:
    """Return the current unix time as a string, used as a data source id."""
    return str(int(time.time()))


def _safe_json_parse(response: Any):
    """Safely parse JSON response, returning dict or text on failure."""
    try:
        return response.json() if response.text else {}
    except ValueError:
        # Truncate for logging purposes only
        full_text = response.text if hasattr(response, "text") else str(response.content)
        return {"_raw_response": full_text[:2000], "_parse_error": "Not valid JSON"}
