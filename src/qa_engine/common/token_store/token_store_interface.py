# qa_engine/common/token_store/token_store_interface.py

from abc import ABC, abstractmethod
from typing import Optional


class TokenStoreInterface(ABC):
    """Key-value store holding the current session's credentials"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a value

        Args:
            key: Storage key, e.g. the session token key

        Returns:
            Stored value, or None when absent
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value under key"""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove key; returns whether something was removed"""
        pass

    def has(self, key: str) -> bool:
        return bool(self.get(key))
