"""boto3 plumbing shared by the DynamoDB stores.

Nothing here reads settings; callers pass region, endpoint and timeouts.
Every call comes back as an OperationResult so stores never handle botocore
exceptions themselves.
"""

import time
from typing import Callable, Dict, Optional

import boto3  # type: ignore
from botocore.client import BaseClient  # type: ignore
from botocore.config import Config  # type: ignore
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore
import structlog

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

logger = structlog.get_logger()

# A failed ConditionExpression lands here: the item is already written
CONFLICT_ERROR_CODES = frozenset(
    {
        "ConditionalCheckFailedException",
        "ResourceAlreadyExistsException",
        "ConflictException",
    }
)

_STATUS_BY_ERROR_CODE: Dict[str, OperationStatus] = {
    "ThrottlingException": OperationStatus.TRANSIENT_ERROR,
    "RequestLimitExceeded": OperationStatus.TRANSIENT_ERROR,
    "ProvisionedThroughputExceededException": OperationStatus.TRANSIENT_ERROR,
    "InternalServerError": OperationStatus.TRANSIENT_ERROR,
    "AccessDeniedException": OperationStatus.UNAUTHORIZED,
    "UnauthorizedOperation": OperationStatus.UNAUTHORIZED,
    "ResourceNotFoundException": OperationStatus.NOT_FOUND,
}


def get_boto3_client(
    service_name: str,
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    connect_timeout: int = 5,
    read_timeout: int = 10,
) -> BaseClient:
    """Build a boto3 client with botocore retries disabled.

    Retries happen in ``execute_aws_api_call`` so they show up in our logs.
    """
    config = Config(
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        retries={"max_attempts": 0},
    )
    return boto3.Session(region_name=region_name).client(
        service_name, endpoint_url=endpoint_url, config=config
    )


def _result_for_client_error(
    e: ClientError, method: str, treat_conflict_as_success: bool
) -> OperationResult:
    error = e.response.get("Error", {})
    code = error.get("Code")
    message = error.get("Message", str(e))

    if code in CONFLICT_ERROR_CODES:
        logger.info("aws_api_conflict", method=method, code=code, message=message)
        if treat_conflict_as_success:
            return OperationResult.success(data={"conflict": True}, message=message)
        return OperationResult.permanent_error(message=message, error_code=code)

    status = _STATUS_BY_ERROR_CODE.get(code, OperationStatus.PERMANENT_ERROR)
    return OperationResult.error(status, message=message, error_code=code)


def _delay(attempt: int, backoff_factor: float) -> float:
    return backoff_factor * (2**attempt)


def execute_aws_api_call(
    client: BaseClient,
    method: str,
    max_retries: int = 3,
    backoff_factor: float = 0.5,
    treat_conflict_as_success: bool = False,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs,
) -> OperationResult:
    """Call ``client.<method>(**kwargs)`` and wrap the outcome.

    Throttling is retried up to ``max_retries`` times with exponential
    backoff. Connection problems are reported as transient without a retry.

    Args:
        client: boto3 client
        method: Client method name, e.g. ``put_item``
        max_retries: Retries after the first throttled attempt
        backoff_factor: Delay before the first retry, doubled each time
        treat_conflict_as_success: Report conflict codes as success with
            ``data={"conflict": True}``
        sleep: Injected in tests
        **kwargs: Passed through to boto3

    Returns:
        OperationResult whose ``data`` is the raw boto3 response
    """
    api_method = getattr(client, method)
    attempt = 0
    while True:
        try:
            response = api_method(**kwargs)
        except BotoCoreError as e:
            logger.error("aws_api_connection_error", method=method, error=str(e))
            return OperationResult.transient_error(
                message=str(e), error_code="CONNECTION_ERROR"
            )
        except ClientError as e:
            result = _result_for_client_error(e, method, treat_conflict_as_success)
            if result.status != OperationStatus.TRANSIENT_ERROR or attempt >= max_retries:
                if not result.is_success:
                    logger.error(
                        "aws_api_error_final",
                        method=method,
                        error_code=result.error_code,
                        attempts=attempt + 1,
                    )
                return result

            delay = _delay(attempt, backoff_factor)
            logger.warning(
                "aws_api_retry",
                method=method,
                attempt=attempt + 1,
                error_code=result.error_code,
                delay=delay,
            )
            sleep(delay)
            attempt += 1
            continue

        return OperationResult.success(data=response, message=f"{method} succeeded")
