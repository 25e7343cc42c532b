"""Channel senders: one per ChannelType, all sharing the ChannelSender contract."""

from infrastructure.notifications.senders.base import (
    ChannelSender,
    create_sender_breaker,
)
from infrastructure.notifications.senders.email import EmailSender
from infrastructure.notifications.senders.sms import SMSSender
from infrastructure.notifications.senders.whatsapp import WhatsAppSender

__all__ = [
    "ChannelSender",
    "EmailSender",
    "SMSSender",
    "WhatsAppSender",
    "create_sender_breaker",
]
