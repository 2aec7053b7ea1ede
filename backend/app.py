import os, logging, boto3
from botocore.exceptions import BotoCoreError

from api_response import count_response, error_response
from counter import COUNTER_ID, DynamoCounterStore, ResponseDecodeFailure, StoreOperationFailure, VisitorCount

DEFAULT_TABLE_NAME = "VisitorCount"

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

_store = None


def table_name():
    return os.environ.get("TABLE_NAME") or DEFAULT_TABLE_NAME


def get_store():
    # Built on first use (cold start) and reused by later invocations.
    # A failed build is not cached, so the next invocation tries again.
    global _store
    if _store is None:
        try:
            client = boto3.client("dynamodb")
        except BotoCoreError as e:
            raise StoreOperationFailure(str(e)) from e
        _store = DynamoCounterStore(client, table_name())
    return _store


def set_store(store):
    global _store
    _store = store


def _update_failed(e):
    logger.error("Failed to update count: %s", e)
    return error_response(f"Failed to update count: {e}")


def handle(event, store):
    try:
        attributes = store.increment(COUNTER_ID)
    except StoreOperationFailure as e:
        return _update_failed(e)

    try:
        record = VisitorCount.from_item(attributes)
    except ResponseDecodeFailure as e:
        logger.error("Failed to parse count: %s", e)
        logger.warning("increment may have committed even though the response reports failure")
        return error_response(f"Failed to parse count: {e}")

    logger.info("visitor count is now %d", record.count)
    return count_response(record.count)


def handler(event, context):
    try:
        store = get_store()
    except StoreOperationFailure as e:
        return _update_failed(e)
    return handle(event, store)
