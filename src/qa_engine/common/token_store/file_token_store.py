# qa_engine/common/token_store/file_token_store.py

import json
import threading
from pathlib import Path
from typing import Dict, Optional, Union

from .token_store_interface import TokenStoreInterface
from ..logger import LoggerFactory, LoggerType


class FileTokenStore(TokenStoreInterface):
    """JSON file holding a flat string -> string mapping"""

    def __init__(self, file_path: Union[str, Path]):
        """
        Initialize file token store

        Args:
            file_path: JSON file to read and write; created on first write
        """
        self.file_path = Path(file_path).expanduser()
        self._lock = threading.RLock()
        self.logger = LoggerFactory.get_logger(
            name="token_store", logger_type=LoggerType.STANDARD
        )

    def _load(self) -> Dict[str, str]:
        if not self.file_path.exists():
            return {}
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.warning(f"Ignoring unreadable token store {self.file_path}: {e}")
            return {}
        if not isinstance(data, dict):
            self.logger.warning(f"Token store {self.file_path} is not a JSON object")
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _save(self, data: Dict[str, str]) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.file_path.with_suffix(self.file_path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        tmp_path.replace(self.file_path)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._save(data)

    def delete(self, key: str) -> bool:
        with self._lock:
            data = self._load()
            if key not in data:
                return False
            del data[key]
            self._save(data)
            return True
