""" DynamoDB counter store.

One table holds every metric: the partition key is the metric name, the sort
key is the bucket key, and the counter lives in a numeric attribute updated
with ADD so concurrent increments never overwrite each other.
"""

import logging
import os
from decimal import Decimal
from typing import List, Optional

import boto3
from botocore.config import Config
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .base import CounterStore

logger = logging.getLogger(__name__)

# Client level retries for throttling. The TimeCounter itself never retries.
RETRY_CONFIG = Config(
    retries={
        "max_attempts": 3,
        "mode": "standard",
    },
    connect_timeout=5,
    read_timeout=10,
)

# DynamoDB rejects BatchGetItem requests with more keys than this
BATCH_GET_LIMIT = 100

# BatchGetItem calls per chunk before giving up on unprocessed keys
BATCH_GET_ATTEMPTS = 3


class UnprocessedKeysError(Exception):
    """ DynamoDB kept returning UnprocessedKeys after every attempt """
    def __init__(self, tableName: str, unprocessed: dict):
        self.Keys = unprocessed.get(tableName, {}).get("Keys", [])
        super().__init__("{0} keys still unprocessed in {1}".format(len(self.Keys), tableName))
        self.TableName = tableName
        self.Unprocessed = unprocessed


def GetDynamoResource(regionName: str = None):
    region = regionName or os.environ.get("AWS_DEFAULT_REGION") or os.environ.get("AWS_REGION")
    return boto3.resource("dynamodb", region_name=region, config=RETRY_CONFIG)


def CreateTable(tableName: str, resource=None, readCapacity: int = 1, writeCapacity: int = 1):
    """ Create the counter table and wait until it exists """
    if resource is None:
        resource = GetDynamoResource()
    table = resource.create_table(
        TableName=tableName,
        KeySchema=[
            {
                'AttributeName': DynamoStore.HashAttribute,
                'KeyType': 'HASH'
            },
            {
                'AttributeName': DynamoStore.FieldAttribute,
                'KeyType': 'RANGE'
            }
        ],
        AttributeDefinitions=[
            {
                'AttributeName': DynamoStore.HashAttribute,
                'AttributeType': 'S'
            },
            {
                'AttributeName': DynamoStore.FieldAttribute,
                'AttributeType': 'S'
            },
        ],
        ProvisionedThroughput={
            'ReadCapacityUnits': readCapacity,
            'WriteCapacityUnits': writeCapacity
        }
    )

    # Wait until the table exists.
    table.meta.client.get_waiter('table_exists').wait(TableName=tableName)
    logger.info("Created counter table %s", tableName)
    return table


class DynamoStore(CounterStore):
    HashAttribute = "metric"
    FieldAttribute = "bucket_id"
    ValueAttribute = "total"

    def __init__(self, tableName: str, resource=None):
        self.TableName = tableName
        self.Resource = resource if resource is not None else GetDynamoResource()
        self.Table = self.Resource.Table(tableName)

    def _key(self, hashName: str, field: str) -> dict:
        return {
            self.HashAttribute: hashName,
            self.FieldAttribute: field
        }

    def Increment(self, hashName: str, field: str, delta: int) -> None:
        # ADD creates the item and the attribute when missing
        self.Table.update_item(
            Key=self._key(hashName, field),
            UpdateExpression="ADD #v :d",
            ExpressionAttributeNames={"#v": self.ValueAttribute},
            ExpressionAttributeValues={":d": Decimal(delta)}
        )

    def ReadOne(self, hashName: str, field: str) -> Optional[int]:
        response = self.Table.get_item(
            Key=self._key(hashName, field),
            ConsistentRead=True
        )
        if 'Item' in response and self.ValueAttribute in response['Item']:
            return int(response['Item'][self.ValueAttribute])
        else:
            return None

    def ReadMany(self, hashName: str, fields: List[str]) -> List[Optional[int]]:
        unique = list(dict.fromkeys(fields))
        found = {}
        for offset in range(0, len(unique), BATCH_GET_LIMIT):
            chunk = unique[offset:offset + BATCH_GET_LIMIT]
            logger.debug("BatchGetItem %s: %d keys", self.TableName, len(chunk))
            found.update(self._batchGet(hashName, chunk))
        return [found.get(field) for field in fields]

    def _batchGet(self, hashName: str, chunk: List[str]) -> dict:
        found = {}
        request = {
            self.TableName: {
                'Keys': [self._key(hashName, field) for field in chunk],
                'ConsistentRead': True,
                'ProjectionExpression': '#f, #v',
                'ExpressionAttributeNames': {'#f': self.FieldAttribute, '#v': self.ValueAttribute}
            }
        }
        # Throttled keys come back unprocessed, only those are asked for again
        for attempt in _batchGetRetrying():
            with attempt:
                response = self.Resource.batch_get_item(RequestItems=request)
                for item in response['Responses'].get(self.TableName, []):
                    if self.ValueAttribute in item:
                        found[item[self.FieldAttribute]] = int(item[self.ValueAttribute])
                unprocessed = response.get('UnprocessedKeys')
                if unprocessed:
                    request = unprocessed
                    raise UnprocessedKeysError(self.TableName, unprocessed)
        return found


def _batchGetRetrying() -> Retrying:
    return Retrying(
        stop=stop_after_attempt(BATCH_GET_ATTEMPTS),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
        retry=retry_if_exception_type(UnprocessedKeysError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
