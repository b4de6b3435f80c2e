"""
Base command classes and registry.
"""
import itertools
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Type, Optional, List

from meal_recommender.config import RecommenderConfig
from meal_recommender.data import (
    CsvHistoryStore,
    JsonBanditStore,
    MealCatalogLoader,
    ProfileLoader,
)
from meal_recommender.engine import RecommendationEngine
from meal_recommender.filters import FilterTraceEntry
from meal_recommender.models import (
    BanditState,
    FeedbackEvent,
    MealCandidate,
    RecommendationResponse,
    UserProfile,
)

logger = logging.getLogger(__name__)


class CommandContext:
    """
    Shared context for all commands.

    Provides access to the catalog, profiles, the engine and session state
    (active user, queued feedback, last response).
    """

    def __init__(self, catalog_file: Path, profiles_file: Path,
                 bandit_file: Path = None, history_file: Path = None,
                 engine_config_file: Path = None, seed: Optional[int] = None):
        """
        Initialize command context.

        Args:
            catalog_file: Path to meal catalog CSV
            profiles_file: Path to profiles JSON
            bandit_file: Path to bandit state JSON (optional)
            history_file: Path to recommendation history CSV (optional)
            engine_config_file: Path to engine config JSON (optional)
            seed: Sampler seed for reproducible sessions (optional)
        """
        self.catalog = MealCatalogLoader(catalog_file)
        self.profiles = ProfileLoader(profiles_file)
        self.profiles.load()

        self.engine_config_file = engine_config_file
        self.bandit_store = JsonBanditStore(bandit_file) if bandit_file else None
        self.history_store = CsvHistoryStore(history_file) if history_file else None
        self.seed = seed
        self.engine = self._build_engine()

        # Session state
        self.active_user_id: Optional[str] = None
        first = self.profiles.get_profile()
        if first is not None:
            self.active_user_id = first.user_id
        self.pending_feedback: List[FeedbackEvent] = []
        self.last_response: Optional[RecommendationResponse] = None
        self.last_candidates: List[MealCandidate] = []
        self.last_trace: List[FilterTraceEntry] = []
        self.last_state: Optional[BanditState] = None
        self._request_counter = itertools.count(1)

    def _build_engine(self) -> RecommendationEngine:
        config = RecommenderConfig()
        if self.engine_config_file:
            config = RecommenderConfig.from_file(self.engine_config_file)
        return RecommendationEngine(
            bandit_store=self.bandit_store,
            history_store=self.history_store,
            config=config,
            rng=self.seed,
        )

    @property
    def profile(self) -> Optional[UserProfile]:
        """Profile of the active user."""
        if self.active_user_id is None:
            return None
        return self.profiles.get_profile(self.active_user_id)

    def next_request_id(self) -> str:
        return f"repl-{next(self._request_counter):04d}"

    def reload(self) -> None:
        """Reload catalog, profiles and engine config from disk."""
        self.catalog.reload()
        self.profiles.load()
        self.engine = self._build_engine()
        if self.profiles.get_profile(self.active_user_id or "") is None:
            first = self.profiles.get_profile()
            self.active_user_id = first.user_id if first else None


class Command(ABC):
    """
    Base class for all commands.

    Each command should override:
    - name: Command name(s) that trigger it
    - help_text: Short description
    - execute(): Command logic
    """

    # Command name(s) - can be string or tuple of strings
    name: str | tuple = ""

    # Help text shown in help command
    help_text: str = ""

    def __init__(self, context: CommandContext):
        """
        Initialize command with context.

        Args:
            context: Shared command context
        """
        self.ctx = context

    @abstractmethod
    def execute(self, args: str) -> None:
        """
        Execute the command.

        Args:
            args: Command arguments (everything after the command name)
        """
        pass

    def matches(self, cmd: str) -> bool:
        """Check if command matches this handler."""
        if isinstance(self.name, str):
            return cmd.lower() == self.name.lower()
        return cmd.lower() in [n.lower() for n in self.name]

    def _require_profile(self) -> Optional[UserProfile]:
        """Active profile, or None after printing why there is none."""
        profile = self.ctx.profile
        if profile is None:
            errors = self.ctx.profiles.validation_errors
            reason = errors[0] if errors else "no profiles loaded"
            print(f"\nNo active user: {reason}\n")
        return profile


class CommandRegistry:
    """
    Registry for all available commands.

    Commands register themselves and can be looked up by name.
    """

    def __init__(self):
        self._commands: Dict[str, Type[Command]] = {}

    def register(self, command_class: Type[Command]) -> None:
        """
        Register a command class.

        Args:
            command_class: Command class to register
        """
        if isinstance(command_class.name, str):
            names = [command_class.name]
        else:
            names = list(command_class.name)

        for name in names:
            self._commands[name.lower()] = command_class

    def get(self, cmd: str) -> Optional[Type[Command]]:
        """
        Get command class for a command name.

        Returns:
            Command class or None if not found
        """
        return self._commands.get(cmd.lower())

    def list_commands(self) -> List[str]:
        """Sorted list of all registered command names."""
        return sorted(set(self._commands.keys()))

    def get_all_commands(self) -> List[Type[Command]]:
        """List of unique command classes in registration order."""
        seen = set()
        commands = []
        for cmd_class in self._commands.values():
            if cmd_class not in seen:
                seen.add(cmd_class)
                commands.append(cmd_class)
        return commands


# Global registry
_registry = CommandRegistry()


def register_command(command_class: Type[Command]) -> Type[Command]:
    """
    Decorator to register a command.

    Usage:
        @register_command
        class MyCommand(Command):
            name = "mycommand"
            ...
    """
    _registry.register(command_class)
    return command_class


def get_registry() -> CommandRegistry:
    """Get the global command registry."""
    return _registry
