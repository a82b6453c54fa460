from functools import lru_cache
import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from salonbot.core.config import settings
from salonbot.application.ports.booking_repository import BookingRepositoryPort
from salonbot.application.ports.message_platform import MessagePlatformPort
from salonbot.application.use_cases.booking import BookingUseCase
from salonbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from salonbot.application.use_cases.handle_turn import HandleTurnUseCase
from salonbot.application.use_cases.send_reply import SendReplyUseCase
from salonbot.domain.entities.catalog import SalonCatalog
from salonbot.infrastructure.catalog.catalog_store import load_catalog
from salonbot.infrastructure.mock_platform import MockMessagePlatform
from salonbot.infrastructure.msg91.msg91_platform import Msg91Platform
from salonbot.infrastructure.store.memory_store import MemoryBookingStore
from salonbot.infrastructure.store.sql_store import SqlBookingStore, build_engine
from salonbot.infrastructure.whatsapp.whatsapp_client import WhatsAppClient
from salonbot.infrastructure.whatsapp.whatsapp_platform import WhatsAppPlatform


logger = logging.getLogger(__name__)


@lru_cache
def get_repository() -> BookingRepositoryPort:
    if settings.STORE_PROVIDER.lower() == "sql":
        logger.info("Using SqlBookingStore")
        return SqlBookingStore(build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO))
    logger.info("Using MemoryBookingStore")
    return MemoryBookingStore()


@lru_cache
def get_catalog() -> SalonCatalog:
    return load_catalog(settings.CATALOG_PATH)


def get_timezone() -> ZoneInfo:
    try:
        return ZoneInfo(settings.BUSINESS_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown BUSINESS_TIMEZONE, falling back to UTC", extra={"reason": settings.BUSINESS_TIMEZONE})
        return ZoneInfo("UTC")


def get_booking_use_case() -> BookingUseCase:
    return BookingUseCase(
        repository=get_repository(),
        catalog=get_catalog(),
        first_booking_offer_enabled=settings.FIRST_BOOKING_OFFER_ENABLED,
        first_booking_counts_cancelled=settings.FIRST_BOOKING_COUNTS_CANCELLED,
    )


def get_handle_turn_use_case() -> HandleTurnUseCase:
    return HandleTurnUseCase(
        repository=get_repository(),
        catalog=get_catalog(),
        booking=get_booking_use_case(),
        timezone=get_timezone(),
    )


def _is_dev() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_whatsapp_platform() -> MessagePlatformPort:
    if settings.WHATSAPP_ACCESS_TOKEN and settings.WHATSAPP_PHONE_NUMBER_ID:
        logger.info("Using WhatsAppPlatform")
        client = WhatsAppClient(
            access_token=settings.WHATSAPP_ACCESS_TOKEN,
            phone_number_id=settings.WHATSAPP_PHONE_NUMBER_ID,
            api_version=settings.WHATSAPP_GRAPH_API_VERSION,
        )
        return WhatsAppPlatform(client=client)
    if _is_dev():
        logger.info("Using MockMessagePlatform (WhatsApp credentials missing, ENV=dev/local)")
        return MockMessagePlatform()
    raise ValueError("WHATSAPP_ACCESS_TOKEN and WHATSAPP_PHONE_NUMBER_ID are required to send WhatsApp replies.")


@lru_cache
def get_msg91_platform() -> MessagePlatformPort:
    if settings.MSG91_API_KEY:
        logger.info("Using Msg91Platform")
        return Msg91Platform(api_key=settings.MSG91_API_KEY, send_endpoint=settings.MSG91_SEND_ENDPOINT)
    if _is_dev():
        logger.info("Using MockMessagePlatform (MSG91_API_KEY missing, ENV=dev/local)")
        return MockMessagePlatform()
    raise ValueError("MSG91_API_KEY is required to send MSG91 replies.")


def _build_incoming_use_case(platform: MessagePlatformPort) -> HandleIncomingMessageUseCase:
    return HandleIncomingMessageUseCase(
        handle_turn=get_handle_turn_use_case(),
        send_reply=SendReplyUseCase(platform=platform, auto_reply_enabled=settings.AUTO_REPLY_ENABLED),
    )


def get_whatsapp_incoming_use_case() -> HandleIncomingMessageUseCase:
    return _build_incoming_use_case(get_whatsapp_platform())


def get_msg91_incoming_use_case() -> HandleIncomingMessageUseCase:
    return _build_incoming_use_case(get_msg91_platform())
