# meal_recommender/data/catalog_loader.py
"""
Meal catalog loading.

Reads the catalog CSV into MealCandidate objects. List-valued columns
(meal_slots, tags, ingredients, allergens) hold '|'-separated values;
substitution_hints holds 'ingredient:alternative' pairs separated by '|'.

Example row:
    meal_id,title,meal_slots,kcal,protein_g,carbs_g,fat_g,fiber_g,sodium_mg,...
    m1,Thai Peanut Stir-fry,lunch|dinner,520,22,48,26,6,780,...
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from meal_recommender.models import MealCandidate, Serving

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['meal_id', 'title', 'meal_slots', 'kcal', 'protein_g', 'carbs_g', 'fat_g']

LIST_SEPARATOR = "|"
HINT_SEPARATOR = ":"


def split_list(value) -> List[str]:
    """Split a '|'-separated cell, treating blanks and NaN as empty."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return []
    return [part.strip() for part in str(value).split(LIST_SEPARATOR) if part.strip()]


def parse_hints(value) -> Dict[str, str]:
    """
    Parse a substitution hints cell.

    Examples:
        >>> parse_hints("butter:olive oil|cream:coconut milk")
        {'butter': 'olive oil', 'cream': 'coconut milk'}
    """
    hints = {}
    for pair in split_list(value):
        if HINT_SEPARATOR not in pair:
            continue
        ingredient, alternative = pair.split(HINT_SEPARATOR, 1)
        if ingredient.strip() and alternative.strip():
            hints[ingredient.strip()] = alternative.strip()
    return hints


def _optional_number(value) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


class MealCatalogLoader:
    """
    Loads and provides access to the meal catalog.

    The catalog is read lazily on first access and cached until reload().
    """

    def __init__(self, filepath: Path):
        """
        Initialize loader with path to catalog CSV.

        Args:
            filepath: Path to catalog CSV file
        """
        self.filepath = Path(filepath)
        self._df = None
        self._meals = None

    def load(self) -> pd.DataFrame:
        """
        Load catalog file from disk.

        Returns:
            DataFrame containing catalog rows

        Raises:
            FileNotFoundError: If catalog file doesn't exist
            ValueError: If required columns are missing
        """
        df = pd.read_csv(self.filepath, dtype={'meal_id': str})
        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise ValueError(f"Catalog {self.filepath} missing columns: {missing}")
        self._df = df
        self._meals = None
        return self._df

    def reload(self) -> pd.DataFrame:
        return self.load()

    @property
    def df(self) -> pd.DataFrame:
        """Get the catalog DataFrame (loads if needed)."""
        if self._df is None:
            self.load()
        return self._df

    @property
    def meals(self) -> List[MealCandidate]:
        """All catalog rows as MealCandidate objects, in file order."""
        if self._meals is None:
            self._meals = [self._row_to_meal(row) for _, row in self.df.iterrows()]
            logger.debug("Loaded %d meal(s) from %s", len(self._meals), self.filepath)
        return self._meals

    def candidates_for_slot(self, meal_slot: str) -> List[MealCandidate]:
        """
        Catalog meals valid for a slot.

        The engine filters by slot itself; this is a convenience for
        building a smaller candidate pool.
        """
        slot = meal_slot.lower()
        return [m for m in self.meals if slot in m.meal_slots]

    def get_meal(self, meal_id: str) -> Optional[MealCandidate]:
        """
        Look up a meal by id.

        Returns:
            MealCandidate or None if not found
        """
        for meal in self.meals:
            if meal.meal_id == meal_id:
                return meal
        return None

    def _row_to_meal(self, row: pd.Series) -> MealCandidate:
        try:
            serving = Serving(
                kcal=float(row['kcal']),
                protein_g=float(row['protein_g']),
                carbs_g=float(row['carbs_g']),
                fat_g=float(row['fat_g']),
                fiber_g=_optional_number(row.get('fiber_g')),
                sodium_mg=_optional_number(row.get('sodium_mg')),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid nutrition for meal '{row['meal_id']}': {e}") from e

        cuisine = row.get('cuisine')
        prep_time = _optional_number(row.get('prep_time_min'))

        return MealCandidate(
            meal_id=str(row['meal_id']),
            title=str(row['title']),
            meal_slots=tuple(s.lower() for s in split_list(row['meal_slots'])),
            serving=serving,
            tags=tuple(split_list(row.get('tags'))),
            cuisine="" if cuisine is None or pd.isna(cuisine) else str(cuisine),
            ingredients=tuple(split_list(row.get('ingredients'))),
            allergens=tuple(a.lower() for a in split_list(row.get('allergens'))),
            prep_time_min=prep_time or 0,
            substitution_hints=parse_hints(row.get('substitution_hints')),
        )
