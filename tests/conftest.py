import copy
import itertools
import json

import pytest
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import ClientError

from products import app
from products.service import ProductService


def client_error(code, message, status=400, operation="UpdateItem"):
    return ClientError(
        {
            "Error": {"Code": code, "Message": message},
            "ResponseMetadata": {"HTTPStatusCode": status, "RequestId": "req-123"},
        },
        operation,
    )


_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def dynamodb_round_trip(values):
    # same conversion boto3 applies on the way in (float -> TypeError) and out (numbers -> Decimal)
    return {k: _deserializer.deserialize(_serializer.serialize(v)) for k, v in values.items()}


class FakeTable:
    """In-memory stand-in for a boto3 DynamoDB Table keyed by ``id``."""

    def __init__(self, page_size=None):
        self.items = {}
        self.page_size = page_size
        self.calls = []

    def put_item(self, Item):
        self.calls.append("put_item")
        self.items[Item["id"]] = dynamodb_round_trip(Item)
        return {}

    def get_item(self, Key):
        self.calls.append("get_item")
        item = self.items.get(Key["id"])
        return {"Item": copy.deepcopy(item)} if item else {}

    def scan(self, ExclusiveStartKey=None):
        self.calls.append("scan")
        ids = list(self.items)
        start = ids.index(ExclusiveStartKey["id"]) + 1 if ExclusiveStartKey else 0
        end = len(ids) if self.page_size is None else start + self.page_size
        page = [copy.deepcopy(self.items[i]) for i in ids[start:end]]
        res = {"Items": page, "Count": len(page)}
        if end < len(ids):
            res["LastEvaluatedKey"] = {"id": ids[end - 1]}
        return res

    def update_item(self, Key, UpdateExpression, ExpressionAttributeNames,
                    ExpressionAttributeValues, ConditionExpression, ReturnValues):
        self.calls.append("update_item")
        assert ConditionExpression == "attribute_exists(id)"
        assert ReturnValues == "UPDATED_NEW"
        ExpressionAttributeValues = dynamodb_round_trip(ExpressionAttributeValues)
        if not ExpressionAttributeNames:
            raise client_error("ValidationException", "Invalid UpdateExpression: Syntax error")
        if Key["id"] not in self.items:
            raise client_error("ConditionalCheckFailedException", "The conditional request failed")

        item = self.items[Key["id"]]
        updated = {}
        for clause in UpdateExpression[len("SET "):].split(", "):
            name, value = [part.strip() for part in clause.split("=")]
            field = ExpressionAttributeNames[name]
            item[field] = ExpressionAttributeValues[value]
            updated[field] = ExpressionAttributeValues[value]
        return {"Attributes": updated}

    def delete_item(self, Key):
        self.calls.append("delete_item")
        self.items.pop(Key["id"], None)
        return {}


class FakeDynamoDB:
    def __init__(self, table):
        self.table = table
        self.requested = []

    def Table(self, name):
        self.requested.append(name)
        return self.table


@pytest.fixture
def table():
    return FakeTable()


@pytest.fixture
def service(table):
    counter = itertools.count(1)
    clock = (f"2024-01-01T00:00:{s:02d}+00:00" for s in itertools.count(0))
    return ProductService(
        FakeDynamoDB(table),
        "products-test",
        new_id=lambda: f"prod-{next(counter)}",
        now=lambda: next(clock),
    )


@pytest.fixture
def handlers(service, monkeypatch):
    """The Lambda module, wired to the fake table."""
    monkeypatch.setattr(app, "_service", service)
    return app


def make_event(path_params=None, body=None):
    return {
        "pathParameters": path_params,
        "body": json.dumps(body) if isinstance(body, (dict, list)) else body,
    }


def body_of(response):
    return json.loads(response["body"])


VALID_PRODUCT = {
    "name": "Lamp",
    "imageUrl": "https://img.example.com/lamp.png",
    "description": "A desk lamp",
    "price": "24.50",
}
