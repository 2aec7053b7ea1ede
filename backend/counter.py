import json
import logging
from dataclasses import asdict, dataclass
from decimal import Decimal

from boto3.dynamodb.types import TypeDeserializer
from botocore.exceptions import BotoCoreError, ClientError

COUNTER_ID = "visitor-count"

logger = logging.getLogger(__name__)

_deserializer = TypeDeserializer()


class StoreOperationFailure(Exception):
    """The atomic increment did not complete."""


class ResponseDecodeFailure(Exception):
    """The store answered, but not with a usable counter record."""


@dataclass
class VisitorCount:
    id: str
    count: int

    def to_json(self):
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, text):
        data = json.loads(text)
        return cls(id=data["id"], count=int(data["count"]))

    @classmethod
    def from_item(cls, attributes):
        """Decode a DynamoDB attribute-value map such as
        ``{"id": {"S": "visitor-count"}, "count": {"N": "7"}}``.

        ``id`` may be absent (UPDATED_NEW only returns changed attributes);
        ``count`` must be a non-negative integer.
        """
        try:
            item = {k: _deserializer.deserialize(v) for k, v in attributes.items()}
            raw = item["count"]
        except KeyError as e:
            raise ResponseDecodeFailure(f"missing attribute {e}") from e
        except (TypeError, AttributeError, ValueError, ArithmeticError) as e:
            raise ResponseDecodeFailure(str(e)) from e

        if not isinstance(raw, Decimal):
            raise ResponseDecodeFailure(f"count is not a number: {raw!r}")
        if not raw.is_finite() or raw != raw.to_integral_value() or raw < 0:
            raise ResponseDecodeFailure(f"count is not a non-negative integer: {raw}")

        record_id = item.get("id", COUNTER_ID)
        if not isinstance(record_id, str):
            raise ResponseDecodeFailure(f"id is not a string: {record_id!r}")
        return cls(id=record_id, count=int(raw))


class DynamoCounterStore:
    def __init__(self, client, table_name):
        self.client = client
        self.table_name = table_name

    def increment(self, counter_id=COUNTER_ID):
        # ADD creates the item (and the attribute) from zero when missing.
        try:
            resp = self.client.update_item(
                TableName=self.table_name,
                Key={"id": {"S": counter_id}},
                UpdateExpression="ADD #count :inc",
                ExpressionAttributeNames={"#count": "count"},
                ExpressionAttributeValues={":inc": {"N": "1"}},
                ReturnValues="ALL_NEW",
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("update_item on %s failed: %s", self.table_name, e)
            raise StoreOperationFailure(str(e)) from e
        return resp.get("Attributes", {})
