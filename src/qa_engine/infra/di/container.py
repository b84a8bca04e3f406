# qa_engine/infra/di/container.py

from dependency_injector import containers, providers
from fastapi import Depends

from qa_engine.config import settings
from qa_engine.common.token_store import FileTokenStore, TokenStoreInterface
from qa_engine.application.services.qa_console_service import QaConsoleService
from qa_engine.application.services.automated_test_service import AutomatedTestService
from qa_engine.tools.api_probe import ApiProbeTool
from qa_engine.tools.categorizer import CrossSystemPolicy


class Container(containers.DeclarativeContainer):
    """Dependency injection container for the engine."""

    config = providers.Configuration()

    # Session
    token_store: providers.Singleton[TokenStoreInterface] = providers.Singleton(
        FileTokenStore, file_path=config.token_store_path
    )

    # Tools
    api_probe: providers.Singleton[ApiProbeTool] = providers.Singleton(
        ApiProbeTool,
        base_url=config.api_base_url,
        token_store=token_store,
        token_key=config.token_key,
        token=config.auth_token,
    )

    # Services
    qa_console_service: providers.Singleton[QaConsoleService] = providers.Singleton(
        QaConsoleService,
        probe=api_probe,
        export_dir=config.export_dir,
        policy=config.cross_system_policy,
    )

    automated_test_service: providers.Factory[AutomatedTestService] = providers.Factory(
        AutomatedTestService, probe=api_probe
    )


def container_config() -> dict:
    """Container configuration taken from the global settings."""
    return {
        "api_base_url": settings.API_BASE_URL,
        "token_store_path": settings.TOKEN_STORE_PATH,
        "token_key": settings.TOKEN_KEY,
        "auth_token": settings.AUTH_TOKEN,
        "export_dir": settings.EXPORT_DIR,
        "cross_system_policy": CrossSystemPolicy.EXPLICIT,
    }


# Global container instance
_container: Container = None


def get_container() -> Container:
    """Get the configured container instance."""
    global _container
    if _container is None:
        _container = Container()
        _container.config.from_dict(container_config())
    return _container


def reset_container() -> None:
    global _container
    _container = None


# Dependency functions for FastAPI routers


def get_qa_console_service() -> QaConsoleService:
    """Get QaConsoleService instance from DI container."""
    return get_container().qa_console_service()


def get_automated_test_service() -> AutomatedTestService:
    """Get AutomatedTestService instance from DI container."""
    return get_container().automated_test_service()


# FastAPI dependency providers
qa_console_service_dependency = Depends(get_qa_console_service)
automated_test_service_dependency = Depends(get_automated_test_service)
