# qa_engine/common/token_store/__init__.py

from typing import Optional

from .token_store_interface import TokenStoreInterface
from .in_memory_token_store import InMemoryTokenStore
from .file_token_store import FileTokenStore


def resolve_token(
    store: TokenStoreInterface, key: str, override: Optional[str] = None
) -> Optional[str]:
    """Explicit token first, then the session store. Blank values count as absent."""
    token = override if override else store.get(key)
    if token and token.strip():
        return token.strip()
    return None


__all__ = [
    "TokenStoreInterface",
    "InMemoryTokenStore",
    "FileTokenStore",
    "resolve_token",
]
