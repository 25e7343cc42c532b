"""WhatsApp sender using Twilio's WhatsApp addressing."""

from typing import Optional

from infrastructure.notifications.models import ChannelType, NotificationChannel
from infrastructure.notifications.senders.sms import SMSSender

WHATSAPP_PREFIX = "whatsapp:"


class WhatsAppSender(SMSSender):
    """Same transport and body as SMS; both ends use ``whatsapp:`` addresses."""

    @property
    def channel_type(self) -> ChannelType:
        return ChannelType.WHATSAPP

    def destination(self, channel: NotificationChannel) -> str:
        return f"{WHATSAPP_PREFIX}{channel.channel_value}"

    def sender_address(self) -> Optional[str]:
        if not self._from_number:
            return None
        return f"{WHATSAPP_PREFIX}{self._from_number}"
