from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

DEFAULT_STATUS = 500


class ProductError(Exception):
    def __init__(self, status_code: Optional[int], payload: Any):
        super().__init__(payload)
        self.status_code = status_code if status_code is not None else DEFAULT_STATUS
        self.payload = payload


class ValidationError(ProductError):
    def __init__(self, message: str):
        super().__init__(400, {"error": message})


class NotFoundError(ProductError):
    def __init__(self, message: str = "Product not found .."):
        super().__init__(404, {"error": message})


class PreconditionFailedError(ProductError):
    pass


class StoreError(ProductError):
    pass


def _client_error_payload(exc: ClientError) -> Dict[str, Any]:
    error = exc.response.get("Error", {})
    meta = exc.response.get("ResponseMetadata", {})
    return {
        "message": error.get("Message", str(exc)),
        "code": error.get("Code"),
        "statusCode": meta.get("HTTPStatusCode"),
        "requestId": meta.get("RequestId"),
    }


def store_error(exc: Exception) -> ProductError:
    # pas de retry, pas de réécriture du message
    if isinstance(exc, ClientError):
        payload = _client_error_payload(exc)
        if payload["code"] == "ConditionalCheckFailedException":
            return PreconditionFailedError(payload["statusCode"], payload)
        return StoreError(payload["statusCode"], payload)

    if isinstance(exc, BotoCoreError):
        # erreur levée avant l'appel réseau (ex: ParamValidationError)
        return StoreError(
            DEFAULT_STATUS,
            {"message": str(exc), "code": type(exc).__name__, "statusCode": None, "requestId": None},
        )

    raise TypeError(f"Not a store error: {type(exc).__name__}")
