import json
import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from .config import Settings
from .errors import PreconditionFailedError, ProductError, StoreError
from .responses import build_response
from .service import ProductService

logger = logging.getLogger()

# réutilisé entre invocations "warm"
_service: Optional[ProductService] = None


def _get_service() -> ProductService:
    global _service
    if _service is None:
        settings = Settings.from_env()
        logger.setLevel(settings.log_level)
        _service = ProductService.from_settings(settings)
    return _service


def _path_param(event, name: str) -> Optional[str]:
    # API Gateway REST: pathParameters peut être None
    return (event.get("pathParameters") or {}).get(name)


def _reject_constant(name: str):
    raise ValueError(f"Unsupported JSON constant: {name}")


def _parse_body(event) -> Optional[Dict[str, Any]]:
    body = event.get("body") or ""
    try:
        # DynamoDB refuse les float: nombres en Decimal, NaN/Infinity rejetés
        payload = json.loads(body, parse_float=Decimal, parse_constant=_reject_constant) if body else {}
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    return payload


def _missing(name: str):
    logger.warning("Missing path parameter: %s", name)
    return build_response(400, {"error": "missing_path_parameter", "parameter": name})


def _error_response(err: ProductError):
    if isinstance(err, (StoreError, PreconditionFailedError)):
        logger.error("Store error %s (%s)", err.payload.get("code"), err.status_code)
    return build_response(err.status_code, err.payload)


def create_product(event, context):
    logger.debug("Event: %s", event)
    user_id = _path_param(event, "userId")
    if not user_id:
        return _missing("userId")

    # body illisible -> {} -> échoue à la validation
    payload = _parse_body(event) or {}
    try:
        product = _get_service().create_product(user_id, payload)
    except ProductError as err:
        return _error_response(err)
    return build_response(201, product)


def get_products_by_user_id(event, context):
    logger.debug("Event: %s", event)
    user_id = _path_param(event, "userId")
    if not user_id:
        return _missing("userId")

    try:
        products = _get_service().get_products_by_user_id(user_id)
    except ProductError as err:
        return _error_response(err)
    return build_response(200, products)


def get_product(event, context):
    logger.debug("Event: %s", event)
    product_id = _path_param(event, "id")
    if not product_id:
        return _missing("id")

    try:
        product = _get_service().get_product(product_id)
    except ProductError as err:
        return _error_response(err)
    return build_response(200, product)


def update_product(event, context):
    logger.debug("Event: %s", event)
    product_id = _path_param(event, "id")
    if not product_id:
        return _missing("id")

    payload = _parse_body(event)
    if payload is None:
        return build_response(400, {"error": "invalid_json"})

    try:
        attributes = _get_service().update_product(product_id, payload)
    except ProductError as err:
        return _error_response(err)
    return build_response(200, attributes)


def delete_product(event, context):
    logger.debug("Event: %s", event)
    product_id = _path_param(event, "id")
    if not product_id:
        return _missing("id")

    try:
        result = _get_service().delete_product(product_id)
    except ProductError as err:
        return _error_response(err)
    return build_response(200, result)
