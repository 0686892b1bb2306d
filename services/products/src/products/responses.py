import json
from decimal import Decimal
from typing import Any, Dict, Optional

from .errors import DEFAULT_STATUS

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Credentials": True,
}


def _json_default(o):
    if isinstance(o, Decimal):
        # si entier -> int, sinon -> float
        if o % 1 == 0:
            return int(o)
        return float(o)
    raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


def build_response(status_code: Optional[int], payload: Any) -> Dict[str, Any]:
    return {
        "statusCode": status_code if status_code is not None else DEFAULT_STATUS,
        "headers": dict(CORS_HEADERS),
        "body": json.dumps(payload, default=_json_default),
    }
