"""Data Access Object (DAO) implementation for managing short URL mappings in DynamoDB

Table layout:
    Partition key:  shortcode (S)
    Attributes:     target (S), target_hash (S)
    GSI:            target-index, partition key target_hash (S), projects all attributes

DynamoDB caps index key values at 2048 bytes, so the GSI is keyed on the
xxh128 digest of the target rather than on the target itself.

Uniqueness is enforced with a conditional put
(`ConditionExpression='attribute_not_exists(shortcode)'`), which DynamoDB
evaluates atomically with the write.

Example:
    >>> dao = ShortURLDynamoDBDAO(table_name='short-urls', region_name='eu-central-1')
    >>> dao.create_table()
    >>> dao.insert(ShortURLModel(target='https://example.com', shortcode='abc123'))
    <ShortURLDynamoDBDAO>
    >>> dao.get('abc123').target
    'https://example.com'
"""

import os
import logging
from typing import Any, Optional

import boto3
import xxhash
from beartype import beartype
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from shorturl.constants import ENV
from shorturl.models import ShortURLModel
from shorturl.dao.base import ShortURLBaseDAO
from shorturl.dao.dynamodb.helpers import (
    CONDITIONAL_CHECK_FAILED,
    RESOURCE_IN_USE,
    RESOURCE_NOT_FOUND,
    client_error_code,
    handle_dynamodb_errors,
)
from shorturl.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError


logger = logging.getLogger(__name__)

TARGET_INDEX_NAME = 'target-index'


def target_hash(target: str) -> str:
    return xxhash.xxh128_hexdigest(target.encode('utf-8'))


class ShortURLDynamoDBDAO(ShortURLBaseDAO):
    """DynamoDB-based Data Access Object (DAO) for managing short URL mappings

    Attributes:
        dynamodb (boto3.resources.base.ServiceResource):
            DynamoDB service resource.
        table_name (str):
            Name of the mapping table.
        table (boto3.resources.base.ServiceResource):
            DynamoDB Table resource for `table_name`.

    NOTE:
        - The target GSI is eventually consistent. A mapping created a moment
          ago may not be visible to `find_by_target()` yet, in which case a
          create without a shortcode allocates a fresh mapping.
        - When several mappings share a target, the GSI query returns any one
          of them.
    """

    def __init__(
        self,
        table_name: str = 'short-urls',
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        dynamodb_resource: Optional[Any] = None,
    ):
        """Initialize a DynamoDB-based DAO for short URL management

        Args:
            table_name (str):
                Name of the DynamoDB table. Defaults to 'short-urls'.
            region_name (Optional[str]):
                AWS region. Defaults to the boto3 session's region.
            endpoint_url (Optional[str]):
                Custom endpoint (e.g. LocalStack). Defaults to `LOCALSTACK_ENDPOINT` if set.
            dynamodb_resource (Optional[Any]):
                Pre-initialized boto3 DynamoDB resource. If None, a new one is created.
        """
        if dynamodb_resource is None:
            dynamodb_resource = boto3.resource(
                'dynamodb',
                region_name=region_name,
                endpoint_url=endpoint_url or os.getenv(ENV.LocalStack.ENDPOINT),
            )

        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table = self.dynamodb.Table(table_name)

    @handle_dynamodb_errors
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLDynamoDBDAO':
        """Insert a short URL mapping with a conditional put

        Raises:
            ShortURLAlreadyExistsError:
                If a short URL with the same shortcode already exists.
            DataStoreError:
                On any other DynamoDB failure.
        """
        try:
            self.table.put_item(
                Item={
                    'shortcode': short_url.shortcode,
                    'target': short_url.target,
                    'target_hash': target_hash(short_url.target),
                },
                ConditionExpression='attribute_not_exists(shortcode)',
            )
        except ClientError as e:
            if client_error_code(e) == CONDITIONAL_CHECK_FAILED:
                raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.") from e
            raise
        return self

    @handle_dynamodb_errors
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a short URL mapping by shortcode (strongly consistent read)

        Raises:
            ShortURLNotFoundError:
                If the short URL does not exist.
            DataStoreError:
                On DynamoDB failures.
        """
        response = self.table.get_item(Key={'shortcode': shortcode}, ConsistentRead=True)
        item = response.get('Item')
        if item is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")

        return ShortURLModel(target=item['target'], shortcode=item['shortcode'])

    @handle_dynamodb_errors
    @beartype
    def find_by_target(self, target: str, **kwargs) -> ShortURLModel:
        """Retrieve a short URL mapping by target URL via the target GSI

        Items sharing the digest are compared on the full target, so a digest
        collision never returns a mapping for another URL.

        Raises:
            ShortURLNotFoundError:
                If no mapping targets the URL.
            DataStoreError:
                On DynamoDB failures.
        """
        response = self.table.query(
            IndexName=TARGET_INDEX_NAME,
            KeyConditionExpression=Key('target_hash').eq(target_hash(target)),
        )
        for item in response.get('Items') or []:
            if item['target'] == target:
                return ShortURLModel(target=item['target'], shortcode=item['shortcode'])

        raise ShortURLNotFoundError(f"No short URL targets '{target}'.")

    @handle_dynamodb_errors
    def create_table(self, **kwargs) -> None:
        """Create the mapping table and its target GSI, then wait until it's active"""
        try:
            self.table = self.dynamodb.create_table(
                TableName=self.table_name,
                KeySchema=[{'AttributeName': 'shortcode', 'KeyType': 'HASH'}],
                AttributeDefinitions=[
                    {'AttributeName': 'shortcode', 'AttributeType': 'S'},
                    {'AttributeName': 'target_hash', 'AttributeType': 'S'},
                ],
                GlobalSecondaryIndexes=[
                    {
                        'IndexName': TARGET_INDEX_NAME,
                        'KeySchema': [{'AttributeName': 'target_hash', 'KeyType': 'HASH'}],
                        'Projection': {'ProjectionType': 'ALL'},
                    }
                ],
                BillingMode='PAY_PER_REQUEST',
            )
        except ClientError as e:
            if client_error_code(e) != RESOURCE_IN_USE:
                raise
            logger.info('DynamoDB table already exists.', extra={'table': self.table_name})
            return

        self.table.wait_until_exists()
        logger.info('Created DynamoDB table.', extra={'table': self.table_name})

    @handle_dynamodb_errors
    def drop_table(self, **kwargs) -> None:
        """Delete the mapping table, then wait until it's gone"""
        try:
            self.table.delete()
        except ClientError as e:
            if client_error_code(e) != RESOURCE_NOT_FOUND:
                raise
            logger.info('DynamoDB table does not exist.', extra={'table': self.table_name})
            return

        self.table.wait_until_not_exists()
        self.table = self.dynamodb.Table(self.table_name)
        logger.info('Dropped DynamoDB table.', extra={'table': self.table_name})
