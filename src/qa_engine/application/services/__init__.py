from qa_engine.application.services.qa_console_service import QaConsoleService
from qa_engine.application.services.automated_test_service import AutomatedTestService

__all__ = ["QaConsoleService", "AutomatedTestService"]
