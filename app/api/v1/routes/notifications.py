"""Notification delivery and channel management endpoints."""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.dependencies.rate_limits import get_limiter
from infrastructure.logging import get_module_logger
from infrastructure.notifications import (
    ChannelLookupError,
    ChannelNotFoundError,
    ChannelStoreError,
    ChannelType,
    DeliveryLogReadError,
    DeliveryResult,
    FailureReason,
    NotificationChannel,
    NotificationRequest,
)
from infrastructure.services import NotificationServiceDep, get_settings

logger = get_module_logger()
router = APIRouter(prefix="/notifications", tags=["Notifications"])
limiter = get_limiter()

FAILURE_STATUS_CODES = {
    FailureReason.NO_CHANNELS_CONFIGURED: 422,
    FailureReason.ALL_CHANNELS_EXHAUSTED: 502,
}


class AddChannelRequest(BaseModel):
    channel_type: ChannelType
    channel_value: str


def _send_rate_limit() -> str:
    return get_settings().server.RATE_LIMIT_SEND


@router.post("/send", response_model=DeliveryResult)
@limiter.limit(_send_rate_limit)
def send_notification(
    request: Request,  # pylint: disable=unused-argument
    body: NotificationRequest,
    service: NotificationServiceDep,
):
    """Deliver a notification through the user's channels.

    200 when delivered, 422 when the user has no verified channel, 502 when
    every channel failed. The body always carries the DeliveryResult.
    """
    try:
        result = service.send(body)
    except ChannelLookupError as e:
        logger.error("notification_send_lookup_failed", user_id=body.user_id, error=str(e))
        raise HTTPException(status_code=503, detail=str(e)) from e

    status_code = 200
    if not result.success and result.failure_reason is not None:
        status_code = FAILURE_STATUS_CODES[result.failure_reason]
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))


@router.get("/users/{user_id}/channels", response_model=List[NotificationChannel])
def list_channels(user_id: str, service: NotificationServiceDep):
    """List all channels for a user, verified or not."""
    try:
        return service.list_channels(user_id)
    except ChannelLookupError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e


@router.post(
    "/users/{user_id}/channels",
    response_model=NotificationChannel,
    status_code=201,
)
def add_channel(user_id: str, body: AddChannelRequest, service: NotificationServiceDep):
    """Register a contact method. The first channel becomes primary."""
    try:
        return service.add_channel(user_id, body.channel_type, body.channel_value)
    except (ChannelLookupError, ChannelStoreError) as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def _manage(action, user_id: str, channel_id: str) -> NotificationChannel:
    try:
        return action(user_id, channel_id)
    except ChannelNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except (ChannelLookupError, ChannelStoreError) as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.post(
    "/users/{user_id}/channels/{channel_id}/verify",
    response_model=NotificationChannel,
)
def verify_channel(user_id: str, channel_id: str, service: NotificationServiceDep):
    return _manage(service.verify_channel, user_id, channel_id)


@router.post(
    "/users/{user_id}/channels/{channel_id}/primary",
    response_model=NotificationChannel,
)
def set_primary_channel(user_id: str, channel_id: str, service: NotificationServiceDep):
    return _manage(service.set_primary, user_id, channel_id)


@router.post(
    "/users/{user_id}/channels/{channel_id}/deactivate",
    response_model=NotificationChannel,
)
def deactivate_channel(user_id: str, channel_id: str, service: NotificationServiceDep):
    return _manage(service.deactivate_channel, user_id, channel_id)


@router.get("/users/{user_id}/deliveries")
def list_deliveries(
    user_id: str,
    service: NotificationServiceDep,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
):
    """Newest-first delivery records for a user."""
    try:
        records = service.list_deliveries(user_id, limit=limit)
    except DeliveryLogReadError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    return [record.to_dict() for record in records]


@router.get("/users/{user_id}/deliveries/{record_key}")
def get_delivery(user_id: str, record_key: str, service: NotificationServiceDep):
    """One delivery record. 404 when the key belongs to another user."""
    try:
        record = service.get_delivery(record_key)
    except DeliveryLogReadError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    if record is None or record.user_id != user_id:
        raise HTTPException(status_code=404, detail=f"Delivery {record_key} not found")
    return record.to_dict()


@router.get("/health")
def notification_health(service: NotificationServiceDep):
    """Per-sender health. 503 when any sender is unhealthy."""
    health = service.health_check()
    status_code = 200 if health["healthy"] else 503
    return JSONResponse(status_code=status_code, content=health)
