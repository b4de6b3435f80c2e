"""
Meal Recommender - Main Entry Point

Interactive REPL for exploring the recommendation engine against a local
catalog and profile set.
"""
import logging

from config import (
    BANDIT_FILE,
    CATALOG_FILE,
    ENGINE_CONFIG_FILE,
    HISTORY_FILE,
    LOG_LEVEL,
    MODE,
    PROFILES_FILE,
    verify_data_files,
)
from meal_recommender.commands import CommandContext, get_registry

logger = logging.getLogger(__name__)


def print_welcome(ctx: CommandContext):
    """Print welcome message."""
    print("=" * 70)
    print("  Meal Recommender")
    print(f"  Mode: {MODE}  |  Active user: {ctx.active_user_id or '(none)'}")
    print("  Type 'help' for commands, 'quit' to exit")
    print("=" * 70)
    print()


def repl():
    """
    Main Read-Eval-Print Loop.

    Handles user input and dispatches to registered commands.
    """
    try:
        verify_data_files()
    except FileNotFoundError as e:
        print(f"Error: {e}")
        print("\nPlease check your configuration and ensure data files exist.")
        return

    ctx = CommandContext(CATALOG_FILE, PROFILES_FILE, BANDIT_FILE,
                         HISTORY_FILE, ENGINE_CONFIG_FILE)
    print_welcome(ctx)

    registry = get_registry()

    while True:
        try:
            user_input = input("> ").strip()
            if not user_input:
                continue

            parts = user_input.split(maxsplit=1)
            cmd_name = parts[0].lower()
            args = parts[1] if len(parts) > 1 else ""

            cmd_class = registry.get(cmd_name)
            if cmd_class is None:
                print(f"Unknown command: '{cmd_name}'. Type 'help' for available commands.")
                continue

            try:
                cmd_class(ctx).execute(args)
            except SystemExit:
                raise
            except Exception as e:
                print(f"Error executing command: {e}")
                if MODE == "DEVELOPMENT":
                    logger.exception("Command '%s' failed", cmd_name)

        except (KeyboardInterrupt, EOFError):
            print("\nGoodbye!")
            break
        except SystemExit:
            break


def main():
    """Main entry point."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        repl()
    except KeyboardInterrupt:
        print("\nInterrupted. Goodbye!")
    except Exception as e:
        print(f"Fatal error: {e}")
        logger.exception("Fatal error")
        return 1

    return 0


if __name__ == "__main__":
    exit(main())
