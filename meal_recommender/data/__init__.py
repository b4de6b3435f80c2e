"""
Data access: catalog and profile loaders, bandit and history stores.
"""
from .bandit_store import BanditStore, InMemoryBanditStore, JsonBanditStore
from .history_store import HistoryStore, InMemoryHistoryStore, CsvHistoryStore
from .catalog_loader import MealCatalogLoader
from .profile_loader import ProfileLoader

__all__ = [
    'BanditStore',
    'InMemoryBanditStore',
    'JsonBanditStore',
    'HistoryStore',
    'InMemoryHistoryStore',
    'CsvHistoryStore',
    'MealCatalogLoader',
    'ProfileLoader',
]
