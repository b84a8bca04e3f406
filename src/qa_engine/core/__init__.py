# qa_engine/core/__init__.py

from qa_engine.core.base_tool import BaseTool

__all__ = [
    "BaseTool",
]
