"""
Configuration for the Meal Recommender REPL.

Toggle between PRODUCTION and DEVELOPMENT mode with the
MEAL_RECOMMENDER_MODE environment variable.
"""
import os
from pathlib import Path

# ==================== MODE SELECTION ====================
# Options: "PRODUCTION" or "DEVELOPMENT"
MODE = os.environ.get("MEAL_RECOMMENDER_MODE", "DEVELOPMENT").upper()
# ========================================================

# Base paths
PROJECT_ROOT = Path(__file__).parent
DEVELOPMENT_DATA_PATH = PROJECT_ROOT / "data"

# Select data path based on mode
if MODE == "PRODUCTION":
    production_path = os.environ.get("MEAL_RECOMMENDER_DATA")
    if not production_path:
        raise ValueError("PRODUCTION mode requires MEAL_RECOMMENDER_DATA to be set")
    DATA_PATH = Path(production_path)
elif MODE == "DEVELOPMENT":
    DATA_PATH = DEVELOPMENT_DATA_PATH
else:
    raise ValueError(f"Invalid MODE: {MODE}. Must be 'PRODUCTION' or 'DEVELOPMENT'")

# File paths
CATALOG_FILE = DATA_PATH / "meal_catalog.csv"
PROFILES_FILE = DATA_PATH / "profiles.json"
BANDIT_FILE = DATA_PATH / "bandit_state.json"
HISTORY_FILE = DATA_PATH / "recommendation_history.csv"
ENGINE_CONFIG_FILE = DATA_PATH / "engine_config.json"

# Application settings
LOG_LEVEL = os.environ.get("MEAL_RECOMMENDER_LOG_LEVEL", "WARNING").upper()
DEFAULT_MAX_RESULTS = 5


def verify_data_files():
    """Check that all required data files exist."""
    missing = []

    # Catalog and profiles are required
    for file_path in [CATALOG_FILE, PROFILES_FILE]:
        if not file_path.exists():
            missing.append(str(file_path))

    # Bandit state and history are created on first write;
    # engine config falls back to defaults

    if missing:
        raise FileNotFoundError(
            f"Missing data files in {MODE} mode:\n" +
            "\n".join(f"  - {f}" for f in missing)
        )

    return True


if __name__ == "__main__":
    print(f"\nMode: {MODE}")
    print(f"Data Path: {DATA_PATH}")
    print(f"Catalog File: {CATALOG_FILE}")
    print(f"Profiles File: {PROFILES_FILE}")
    print(f"Bandit File: {BANDIT_FILE}")
    print(f"History File: {HISTORY_FILE}")
    print(f"\nFiles exist: {verify_data_files()}")
