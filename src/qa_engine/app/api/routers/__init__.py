from qa_engine.app.api.routers.health_router import router as health_router
from qa_engine.app.api.routers.qa_router import router as qa_router

__all__ = ["health_router", "qa_router"]
