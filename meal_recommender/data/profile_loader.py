# meal_recommender/data/profile_loader.py
"""
User profile loading.

Reads profiles.json, which holds one or more profiles in their wire form:

{
    "profiles": [
        {
            "userId": "user_123",
            "goals": ["weight_loss"],
            "dietaryPattern": ["vegetarian"],
            "allergies": ["peanut"],
            ...
        }
    ]
}

A file holding a single profile object (no "profiles" key) is accepted too.
"""
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from meal_recommender.models import UserProfile

logger = logging.getLogger(__name__)


class ProfileLoader:
    """
    Loads user profiles from JSON.

    Invalid entries are reported through validation_errors and skipped;
    the remaining profiles stay usable.
    """

    def __init__(self, filepath: Path):
        """
        Initialize profile loader.

        Args:
            filepath: Path to profiles JSON file
        """
        self.filepath = Path(filepath)
        self._profiles: Dict[str, UserProfile] = {}
        self._validation_errors: List[str] = []

    def load(self) -> bool:
        """
        Load profiles from disk.

        Returns:
            True if at least one profile loaded, False otherwise
        """
        self._profiles = {}
        self._validation_errors.clear()

        if not self.filepath.exists():
            self._validation_errors.append(f"Profile file not found: {self.filepath}")
            return False

        try:
            with open(self.filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            self._validation_errors.append(f"Invalid JSON in profiles: {e}")
            return False

        entries = data.get("profiles", [data]) if isinstance(data, dict) else data
        if not isinstance(entries, list):
            self._validation_errors.append("'profiles' must be a list")
            return False

        for index, entry in enumerate(entries):
            if not isinstance(entry, dict) or not entry.get("userId"):
                self._validation_errors.append(f"Profile #{index + 1} has no 'userId'")
                continue
            try:
                profile = UserProfile.from_dict(entry)
            except (TypeError, ValueError) as e:
                self._validation_errors.append(f"Profile '{entry['userId']}': {e}")
                continue
            self._profiles[profile.user_id] = profile

        for error in self._validation_errors:
            logger.warning("%s: %s", self.filepath, error)
        logger.debug("Loaded %d profile(s) from %s", len(self._profiles), self.filepath)
        return bool(self._profiles)

    @property
    def validation_errors(self) -> List[str]:
        """Get list of validation error messages."""
        return self._validation_errors.copy()

    @property
    def user_ids(self) -> List[str]:
        return list(self._profiles.keys())

    def get_profile(self, user_id: Optional[str] = None) -> Optional[UserProfile]:
        """
        Get a profile by user id.

        Args:
            user_id: User to look up; None returns the first profile

        Returns:
            UserProfile or None if not found
        """
        if user_id is None:
            return next(iter(self._profiles.values()), None)
        return self._profiles.get(user_id)
