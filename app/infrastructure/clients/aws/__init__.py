"""Infrastructure AWS clients public API.

DI-friendly DynamoDB access for the notification stores and the
idempotency cache.

    from infrastructure.clients.aws import DynamoDBClient

    client = DynamoDBClient(settings.aws)
    result = client.get_item("notification_channels", {"user_id": {"S": "u1"}})
"""

from infrastructure.clients.aws.client import execute_aws_api_call, get_boto3_client
from infrastructure.clients.aws.dynamodb import DynamoDBClient

__all__ = [
    "DynamoDBClient",
    "execute_aws_api_call",
    "get_boto3_client",
]
