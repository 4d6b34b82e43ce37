"""Process-wide dependencies passed explicitly to every operation."""
import logging
from dataclasses import dataclass
from typing import Optional

from .config import Settings
from .gateway import Gateway
from .rest_gateway import RestGateway
from .sql_gateway import SqlGateway

logger = logging.getLogger("canvas-core.context")


class ConfigurationError(Exception):
    """Raised when the store connection cannot be configured."""


@dataclass(frozen=True)
class Context:
    """Gateway handle and default workspace, created once at startup."""

    gateway: Gateway
    default_workspace_id: Optional[str] = None


def build_gateway(settings: Settings) -> Gateway:
    """Pick the gateway from settings: DATABASE_URL wins over Supabase REST."""
    if settings.database_url:
        logger.info("Using SQL gateway")
        return SqlGateway.from_url(
            settings.database_url,
            create_tables=settings.database_url.startswith("sqlite"),
        )

    missing = [
        name
        for name, value in (
            ("SUPABASE_URL", settings.supabase_url),
            ("SUPABASE_SERVICE_ROLE_KEY", settings.supabase_service_role_key),
        )
        if not value
    ]
    if missing:
        raise ConfigurationError(
            f"{' and '.join(missing)} must be set (or set DATABASE_URL for direct SQL access)"
        )

    logger.info(f"Using Supabase REST gateway at {settings.supabase_url}")
    return RestGateway(
        settings.supabase_url,
        settings.supabase_service_role_key,
        timeout=settings.request_timeout,
    )


def build_context(settings: Settings) -> Context:
    return Context(
        gateway=build_gateway(settings),
        default_workspace_id=settings.default_workspace_id,
    )
