# meal_recommender/config.py
"""
Configuration adapter for the recommendation engine.

Reads and validates the 'recommender' block from the engine config JSON,
providing typed access to all tunable parameters. Validates eagerly on
construction so configuration errors surface before a request is served.

Expected config.json structure (every key optional):
{
    "recommender": {
        "scoring_weights": {
            "goalAlignment": 0.25,
            "macroFit": 0.20,
            "tasteMatch": 0.10,
            "diversityBonus": 0.10,
            "explorationBonus": 0.30,
            "prepTimeBonus": 0.05
        },
        "slot_fractions": {"breakfast": 0.28, "lunch": 0.28,
                           "dinner": 0.28, "snack": 0.15},
        "min_candidates": 3,
        "overflow_tolerance": 1.2,
        "min_portion_multiplier": 0.6,
        "sodium_substitution_mg": 800,
        "biomarker_thresholds": {
            "bp_systolic": 140, "bp_diastolic": 90, "max_sodium_mg": 600,
            "ldl_mg_dl": 160, "sat_fat_fraction": 0.3, "max_sat_fat_g": 7,
            "hba1c_pct": 6.5, "max_carbs_g": 45
        }
    }
}
"""
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any

DEFAULT_WEIGHTS: Dict[str, float] = {
    "goalAlignment": 0.25,
    "macroFit": 0.20,
    "tasteMatch": 0.10,
    "diversityBonus": 0.10,
    "explorationBonus": 0.30,
    "prepTimeBonus": 0.05,
}

# Assumes three main meals plus one snack per day
DEFAULT_SLOT_FRACTIONS: Dict[str, float] = {
    "breakfast": 0.28,
    "lunch": 0.28,
    "dinner": 0.28,
    "snack": 0.15,
}


@dataclass
class BiomarkerThresholds:
    """Limits used by the biomarker safety rules."""
    bp_systolic: float = 140
    bp_diastolic: float = 90
    max_sodium_mg: float = 600
    ldl_mg_dl: float = 160
    sat_fat_fraction: float = 0.3
    max_sat_fat_g: float = 7
    hba1c_pct: float = 6.5
    max_carbs_g: float = 45

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BiomarkerThresholds':
        known = {k: float(v) for k, v in (data or {}).items()
                 if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass
class RecommenderConfig:
    """
    Typed access to the 'recommender' config block.

    All parameters have defaults, so RecommenderConfig() is the production
    configuration.
    """
    scoring_weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    slot_fractions: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_SLOT_FRACTIONS))
    min_candidates: int = 3
    overflow_tolerance: float = 1.2
    min_portion_multiplier: float = 0.6
    sodium_substitution_mg: float = 800
    biomarker_thresholds: BiomarkerThresholds = field(default_factory=BiomarkerThresholds)

    def __post_init__(self):
        self.validate()

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'RecommenderConfig':
        """
        Build from a config dict.

        Accepts either the full config dict (looks for 'recommender' key)
        or just the recommender sub-dict directly.

        Raises:
            ValueError: If any value is invalid
        """
        block = config.get("recommender", config) if config else {}
        if not isinstance(block, dict):
            raise ValueError(
                f"'recommender' config must be a dict, got {type(block).__name__}"
            )

        weights = dict(DEFAULT_WEIGHTS)
        weights.update(block.get("scoring_weights", {}))
        fractions = dict(DEFAULT_SLOT_FRACTIONS)
        fractions.update(block.get("slot_fractions", {}))

        return cls(
            scoring_weights={k: float(v) for k, v in weights.items()},
            slot_fractions={k: float(v) for k, v in fractions.items()},
            min_candidates=int(block.get("min_candidates", 3)),
            overflow_tolerance=float(block.get("overflow_tolerance", 1.2)),
            min_portion_multiplier=float(block.get("min_portion_multiplier", 0.6)),
            sodium_substitution_mg=float(block.get("sodium_substitution_mg", 800)),
            biomarker_thresholds=BiomarkerThresholds.from_dict(
                block.get("biomarker_thresholds", {})
            ),
        )

    @classmethod
    def from_file(cls, filepath: Path) -> 'RecommenderConfig':
        """
        Load from a JSON file. A missing file yields the defaults.

        Raises:
            ValueError: If the file is not valid JSON or has invalid values
        """
        filepath = Path(filepath)
        if not filepath.exists():
            return cls()
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {filepath}: {e}") from e
        return cls.from_config(data)

    def validate(self) -> None:
        """
        Check every parameter.

        Raises:
            ValueError: Describing the first invalid parameter
        """
        unknown = set(self.scoring_weights) - set(DEFAULT_WEIGHTS)
        if unknown:
            raise ValueError(f"Unknown scoring weights: {sorted(unknown)}")
        missing = set(DEFAULT_WEIGHTS) - set(self.scoring_weights)
        if missing:
            raise ValueError(f"Missing scoring weights: {sorted(missing)}")
        if any(w < 0 for w in self.scoring_weights.values()):
            raise ValueError(f"Scoring weights must be non-negative: {self.scoring_weights}")
        total = sum(self.scoring_weights.values())
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Scoring weights must sum to 1.0, got {total:.6f}")

        for slot, fraction in self.slot_fractions.items():
            if not 0 < fraction <= 1:
                raise ValueError(f"Slot fraction for '{slot}' must be in (0, 1], got {fraction}")

        if self.min_candidates < 1:
            raise ValueError(f"min_candidates must be >= 1, got {self.min_candidates}")
        if self.overflow_tolerance < 1.0:
            raise ValueError(f"overflow_tolerance must be >= 1.0, got {self.overflow_tolerance}")
        if not 0 < self.min_portion_multiplier <= 1.0:
            raise ValueError(
                f"min_portion_multiplier must be in (0, 1], got {self.min_portion_multiplier}"
            )

    def slot_fraction(self, meal_slot: str) -> float:
        return self.slot_fractions.get(meal_slot, DEFAULT_SLOT_FRACTIONS["snack"])
