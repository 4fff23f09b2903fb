"""
SMS gateway used to tell passengers their pickup details.

The production provider is not part of this service; the default gateway
only logs. Deployments plug a real one in through `get_sms_gateway`.
"""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger("shuttle.sms")


class SmsDeliveryError(Exception):
    """Raised by a gateway when a message could not be handed over."""


class SmsGateway(ABC):
    @abstractmethod
    async def send(self, phone: str, message: str) -> None:
        """Hand one message to the provider or raise SmsDeliveryError."""


class LoggingSmsGateway(SmsGateway):
    async def send(self, phone: str, message: str) -> None:
        logger.info("SMS to %s: %s", phone, message)


_default_gateway = LoggingSmsGateway()


async def get_sms_gateway() -> SmsGateway:
    """FastAPI dependency returning the configured gateway."""
    return _default_gateway
