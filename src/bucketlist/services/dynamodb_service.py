"""
DynamoDB storage adapter for the bucket list tracker.

This adapter persists each storage key (``activities``, ``settings``) as one
DynamoDB item holding the JSON payload. boto3 is blocking, so every call is
run in a worker thread to honour the async storage contract.

Classes:
    DynamoDBStorage: StorageAdapter backed by a DynamoDB table
"""

import asyncio
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError, NoCredentialsError

from ..config import AWS_REGION
from ..exceptions import PersistenceError

logger = logging.getLogger(__name__)


class DynamoDBStorage:
    """
    Key-value storage backed by a DynamoDB table.

    The table uses a single string partition key named ``key``. Each item
    stores the serialized payload in ``value`` and the time of the last
    write in ``updated_at``.

    Attributes:
        table_name: Name of the DynamoDB table
        dynamodb: Boto3 DynamoDB resource
        table: DynamoDB table resource

    Example:
        >>> storage = DynamoDBStorage("bucketlist-storage")
        >>> await storage.set_item("activities", "[]")
        >>> await storage.get_item("activities")
        '[]'
    """

    def __init__(self, table_name: Optional[str] = None, region_name: Optional[str] = None):
        """
        Initialize the DynamoDB storage adapter.

        Args:
            table_name: Optional table name override, uses BUCKETLIST_TABLE if not provided
            region_name: Optional AWS region override

        Raises:
            ValueError: If no table name is configured or the table does not exist
            NoCredentialsError: If AWS credentials are not configured
        """
        self.table_name = table_name or os.getenv("BUCKETLIST_TABLE")

        if not self.table_name:
            raise ValueError(
                "Table name must be provided either as parameter or BUCKETLIST_TABLE environment variable"
            )

        try:
            self.dynamodb = boto3.resource("dynamodb", region_name=region_name or AWS_REGION)
            self.table = self.dynamodb.Table(self.table_name)

            # Verify table exists by getting its description
            self.table.load()

        except ClientError as e:
            if e.response["Error"]["Code"] == "ResourceNotFoundException":
                raise ValueError(f"DynamoDB table '{self.table_name}' not found")
            raise

    async def get_item(self, key: str) -> Optional[str]:
        response = await self._call("get", key, self.table.get_item, Key={"key": key})
        item = response.get("Item")
        if item is None:
            return None
        return item.get("value")

    async def set_item(self, key: str, value: str) -> None:
        await self._call(
            "set",
            key,
            self.table.put_item,
            Item={
                "key": key,
                "value": value,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            },
        )

    async def remove_item(self, key: str) -> None:
        await self._call("remove", key, self.table.delete_item, Key={"key": key})

    async def _call(self, operation: str, key: str, func, **kwargs) -> Dict[str, Any]:
        try:
            return await asyncio.to_thread(func, **kwargs)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error("DynamoDB %s of %r failed (%s): %s", operation, key, code, e)
            raise PersistenceError(
                f"DynamoDB {operation} of {key!r} failed: {code}", key=key, operation=operation
            ) from e
        except NoCredentialsError as e:
            raise PersistenceError(
                "AWS credentials not found", key=key, operation=operation
            ) from e

    def health_check(self) -> Dict[str, Any]:
        """
        Perform a health check on the DynamoDB table.

        Returns:
            Dictionary with health check results
        """
        try:
            table_description = self.table.meta.client.describe_table(
                TableName=self.table_name
            )

            return {
                "status": "healthy",
                "backend": "dynamodb",
                "table_name": self.table_name,
                "table_status": table_description["Table"]["TableStatus"],
                "item_count": table_description["Table"].get("ItemCount", "unknown"),
                "region": self.dynamodb.meta.client.meta.region_name,
            }

        except Exception as e:
            return {
                "status": "unhealthy",
                "backend": "dynamodb",
                "error": str(e),
                "table_name": self.table_name,
            }
