import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import Settings
from .errors import NotFoundError, ValidationError, store_error
from .expressions import build_update_expression

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ["name", "imageUrl", "description", "price"]
REQUIRED_FIELDS_MESSAGE = "Product must contains: name, image url, description and price"
DELETED_MESSAGE = "Product has been deleted successfully!"


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or value.strip() == ""


class ProductService:
    def __init__(
        self,
        dynamodb,
        table_name: str,
        new_id: Callable[[], str] = _new_id,
        now: Callable[[], str] = _now,
    ):
        self.table = dynamodb.Table(table_name)
        self.table_name = table_name
        self._new_id = new_id
        self._now = now

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProductService":
        dynamodb = boto3.resource(
            "dynamodb",
            region_name=settings.region,
            endpoint_url=settings.endpoint_url,
        )
        return cls(dynamodb, settings.table_name)

    def create_product(self, user_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        invalid = [f for f in REQUIRED_FIELDS if _is_blank(body.get(f))]
        if invalid:
            logger.warning("Invalid product for user %s, bad fields: %s", user_id, invalid)
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)

        product = {
            "id": self._new_id(),
            "createdAt": self._now(),
            "userId": user_id,
            "name": body["name"],
            "imageUrl": body["imageUrl"],
            "description": body["description"],
            "price": body["price"],
        }

        try:
            self.table.put_item(Item=product)
        except (ClientError, BotoCoreError) as e:
            raise store_error(e) from e

        logger.info("Created product %s for user %s", product["id"], user_id)
        return product

    def get_products_by_user_id(self, user_id: str) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        scan_kwargs: Dict[str, Any] = {}

        try:
            while True:
                res = self.table.scan(**scan_kwargs)
                items.extend(res.get("Items", []))
                lek = res.get("LastEvaluatedKey")
                if not lek:
                    break
                scan_kwargs["ExclusiveStartKey"] = lek
        except (ClientError, BotoCoreError) as e:
            raise store_error(e) from e

        owned = [it for it in items if it.get("userId") == user_id]
        # tri par chaîne, plus récent en premier (createdAt peut avoir été écrasé par un nombre)
        owned.sort(key=lambda it: str(it.get("createdAt", "")), reverse=True)

        logger.info("Found %d products for user %s (scanned %d)", len(owned), user_id, len(items))
        return owned

    def get_product(self, product_id: str) -> Dict[str, Any]:
        try:
            res = self.table.get_item(Key={"id": product_id})
        except (ClientError, BotoCoreError) as e:
            raise store_error(e) from e

        item: Optional[Dict[str, Any]] = res.get("Item")
        if not item:
            logger.warning("Product %s not found", product_id)
            raise NotFoundError()
        return item

    def update_product(self, product_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        expression = build_update_expression(body)

        try:
            res = self.table.update_item(
                Key={"id": product_id},
                ConditionExpression="attribute_exists(id)",
                ReturnValues="UPDATED_NEW",
                **expression,
            )
        except (ClientError, BotoCoreError) as e:
            raise store_error(e) from e

        logger.info("Updated product %s, fields: %s", product_id, list(body))
        return res.get("Attributes", {})

    def delete_product(self, product_id: str) -> Dict[str, str]:
        try:
            self.table.delete_item(Key={"id": product_id})
        except (ClientError, BotoCoreError) as e:
            raise store_error(e) from e

        logger.info("Deleted product %s", product_id)
        return {"message": DELETED_MESSAGE}
