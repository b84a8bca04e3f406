# qa_engine/common/token_store/in_memory_token_store.py

import threading
from typing import Dict, Optional

from .token_store_interface import TokenStoreInterface


class InMemoryTokenStore(TokenStoreInterface):
    """Process-local store, used by tests and by the HTTP server per request"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None
