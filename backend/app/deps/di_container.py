"""
Dependency injection container using dependency-injector.
Wires process-wide services, integration clients, and controllers.
"""

from dependency_injector import containers, providers

from app.core.integrations.notifications.notification_client import NotificationClient
from app.services.health_service import HealthService
from app.controllers.health_controller import HealthController


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Configuration
    config = providers.Configuration()

    # Services
    health_service = providers.Singleton(
        HealthService,
    )

    # Integrations
    notification_client = providers.Singleton(
        NotificationClient,
        base_url=config.notifications_service_url,
        timeout=config.notifications_timeout,
    )

    # Controllers
    health_controller = providers.Factory(
        HealthController,
        health_service=health_service,
    )


# Global container instance
_container: Container = None


def build_container() -> Container:
    """Create a container configured from application settings."""
    from app.core.config import settings

    container = Container()
    container.config.from_dict({
        "notifications_service_url": settings.NOTIFICATIONS_SERVICE_URL,
        "notifications_timeout": settings.NOTIFICATIONS_TIMEOUT,
    })
    return container


def get_container() -> Container:
    """Get the global dependency injection container."""
    global _container
    if _container is None:
        _container = build_container()
    return _container
