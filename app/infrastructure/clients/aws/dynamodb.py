"""DynamoDB access for the channel store, delivery log and idempotency cache."""

from typing import Any, Dict, Optional, TYPE_CHECKING

from botocore.client import BaseClient  # type: ignore

from infrastructure.clients.aws.client import execute_aws_api_call, get_boto3_client
from infrastructure.operations.result import OperationResult

if TYPE_CHECKING:
    from infrastructure.configuration.integrations import AwsSettings


class DynamoDBClient:
    """Thin wrapper over the three DynamoDB calls the stores make.

    Keyword arguments use boto3's own casing (``Key``, ``Item``,
    ``KeyConditionExpression``) and are passed through untouched. The boto3
    client is built on first use so tests and the memory backend never
    touch AWS.

    Args:
        aws_settings: Region, endpoint override and timeouts
        client: Pre-built boto3 client, mostly for tests
    """

    def __init__(
        self,
        aws_settings: "AwsSettings",
        client: Optional[BaseClient] = None,
    ) -> None:
        self._settings = aws_settings
        self._client = client

    @property
    def client(self) -> BaseClient:
        if self._client is None:
            aws = self._settings
            self._client = get_boto3_client(
                "dynamodb",
                region_name=aws.AWS_REGION,
                endpoint_url=aws.ENDPOINT_URL,
                connect_timeout=aws.CONNECT_TIMEOUT_SECONDS,
                read_timeout=aws.READ_TIMEOUT_SECONDS,
            )
        return self._client

    def get_item(self, table_name: str, Key: Dict[str, Any], **kwargs) -> OperationResult:
        """``data["Item"]`` is absent when nothing is stored under ``Key``."""
        return execute_aws_api_call(
            self.client, "get_item", TableName=table_name, Key=Key, **kwargs
        )

    def put_item(
        self,
        table_name: str,
        Item: Dict[str, Any],
        treat_conflict_as_success: bool = False,
        **kwargs,
    ) -> OperationResult:
        """Write ``Item``.

        With a ``ConditionExpression`` and ``treat_conflict_as_success`` a
        rejected condition comes back as success with
        ``data={"conflict": True}``.
        """
        return execute_aws_api_call(
            self.client,
            "put_item",
            treat_conflict_as_success=treat_conflict_as_success,
            TableName=table_name,
            Item=Item,
            **kwargs,
        )

    def query(
        self, table_name: str, KeyConditionExpression: str, **kwargs
    ) -> OperationResult:
        return execute_aws_api_call(
            self.client,
            "query",
            TableName=table_name,
            KeyConditionExpression=KeyConditionExpression,
            **kwargs,
        )
