# meal_recommender/data/bandit_store.py
"""
Bandit state stores.

The engine reads a user's arms once at request start and writes changed
arms once at the end. Stores only need two operations:

    get(user_id) -> {arm_key: BanditArm}
    set(user_id, arm_key, alpha, beta)

JsonBanditStore keeps every user's arms in a single JSON document:

{
    "users": {
        "user_123": {
            "meal:abc": {"alpha": 3.0, "beta": 1.0},
            "cuisine:thai": {"alpha": 1.5, "beta": 1.0}
        }
    }
}
"""
import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Any

from meal_recommender.errors import StoreError
from meal_recommender.models import BanditArm


class BanditStore(ABC):
    """Read/write contract for per-user bandit arms."""

    @abstractmethod
    def get(self, user_id: str) -> Dict[str, BanditArm]:
        """
        Get all arms for a user.

        Returns:
            Arm key -> BanditArm (empty dict for unknown users)

        Raises:
            StoreError: If the store cannot be read
        """
        pass

    @abstractmethod
    def set(self, user_id: str, arm_key: str, alpha: float, beta: float) -> None:
        """
        Write one arm for a user.

        Raises:
            StoreError: If the store cannot be written
        """
        pass


class InMemoryBanditStore(BanditStore):
    """Dict-backed store for tests and single-process use."""

    def __init__(self, initial: Dict[str, Dict[str, BanditArm]] = None):
        self._arms: Dict[str, Dict[str, BanditArm]] = {
            user: dict(arms) for user, arms in (initial or {}).items()
        }
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Dict[str, BanditArm]:
        with self._lock:
            return dict(self._arms.get(user_id, {}))

    def set(self, user_id: str, arm_key: str, alpha: float, beta: float) -> None:
        with self._lock:
            self._arms.setdefault(user_id, {})[arm_key] = BanditArm(alpha, beta)


class JsonBanditStore(BanditStore):
    """
    Stores all users' arms in one JSON file.

    The file is created on first write. Every set() rewrites the file, so
    this store suits local runs and small deployments.
    """

    def __init__(self, filepath: Path):
        """
        Initialize JSON bandit store.

        Args:
            filepath: Path to bandit state JSON file
        """
        self.filepath = Path(filepath)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, Any]:
        if not self.filepath.exists():
            return {"users": {}}
        try:
            with open(self.filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StoreError(f"Invalid JSON in bandit store {self.filepath}: {e}") from e
        except OSError as e:
            raise StoreError(f"Error reading bandit store {self.filepath}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("users", {}), dict):
            raise StoreError(f"Bandit store {self.filepath} has unexpected structure")
        data.setdefault("users", {})
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        try:
            self.filepath.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.filepath.with_suffix(self.filepath.suffix + ".tmp")
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, sort_keys=True)
            tmp_path.replace(self.filepath)
        except OSError as e:
            raise StoreError(f"Error writing bandit store {self.filepath}: {e}") from e

    def get(self, user_id: str) -> Dict[str, BanditArm]:
        with self._lock:
            data = self._read()
        arms = data["users"].get(user_id, {})
        return {key: BanditArm.from_dict(value) for key, value in arms.items()}

    def set(self, user_id: str, arm_key: str, alpha: float, beta: float) -> None:
        with self._lock:
            data = self._read()
            data["users"].setdefault(user_id, {})[arm_key] = BanditArm(alpha, beta).to_dict()
            self._write(data)
