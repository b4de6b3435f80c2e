# meal_recommender/data/history_store.py
"""
Recommendation history stores (append-only).

CsvHistoryStore keeps one row per recommendation run, with the full
record serialized as JSON in the 'payload' column for later learning.
"""
import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

import pandas as pd

from meal_recommender.errors import StoreError
from meal_recommender.models import RecommendationHistoryRecord

HISTORY_COLUMNS = [
    'recommendation_date', 'user_id', 'meal_slot', 'request_id',
    'max_results', 'meal_ids', 'scores', 'payload',
]


class HistoryStore(ABC):
    """Append-only contract for recommendation history."""

    @abstractmethod
    def append(self, record: RecommendationHistoryRecord) -> None:
        """
        Append one record.

        Raises:
            StoreError: If the record cannot be written
        """
        pass


class InMemoryHistoryStore(HistoryStore):
    """List-backed history store for tests."""

    def __init__(self):
        self.records: List[RecommendationHistoryRecord] = []
        self._lock = threading.Lock()

    def append(self, record: RecommendationHistoryRecord) -> None:
        with self._lock:
            self.records.append(record)

    def for_user(self, user_id: str) -> List[RecommendationHistoryRecord]:
        with self._lock:
            return [r for r in self.records if r.user_id == user_id]


class CsvHistoryStore(HistoryStore):
    """
    Append-only CSV history file.

    Provides methods to append records and read them back as a DataFrame.
    """

    def __init__(self, filepath: Path):
        """
        Initialize history store.

        Args:
            filepath: Path to history CSV file (created on first append)
        """
        self.filepath = Path(filepath)
        self._lock = threading.Lock()

    def append(self, record: RecommendationHistoryRecord) -> None:
        """
        Append a record as one CSV row.

        Example:
            >>> store = CsvHistoryStore(Path("history.csv"))
            >>> store.append(record)
        """
        meals = record.recommended_meals
        row = {
            'recommendation_date': record.recommended_at.isoformat(),
            'user_id': record.user_id,
            'meal_slot': record.meal_slot,
            'request_id': record.request_id,
            'max_results': record.max_results,
            'meal_ids': "|".join(str(m.get("mealId", "")) for m in meals),
            'scores': "|".join(f"{m.get('score', 0):.4f}" for m in meals),
            'payload': json.dumps(record.to_dict(), sort_keys=True),
        }

        with self._lock:
            try:
                self.filepath.parent.mkdir(parents=True, exist_ok=True)
                write_header = not self.filepath.exists()
                pd.DataFrame([row], columns=HISTORY_COLUMNS).to_csv(
                    self.filepath, mode='a', header=write_header, index=False
                )
            except OSError as e:
                raise StoreError(f"Error writing history {self.filepath}: {e}") from e

    def load(self) -> pd.DataFrame:
        """
        Load all history rows.

        Returns:
            DataFrame with HISTORY_COLUMNS (empty if no history yet)
        """
        try:
            return pd.read_csv(self.filepath, dtype={'user_id': str, 'request_id': str})
        except FileNotFoundError:
            return pd.DataFrame(columns=HISTORY_COLUMNS)

    def get_entries_for_user(self, user_id: str) -> pd.DataFrame:
        """
        Get all history rows for a user.

        Returns:
            DataFrame of rows for that user (may be empty)
        """
        df = self.load()
        return df[df['user_id'].astype(str) == str(user_id)].copy()
