"""
Basic commands: help, quit, reload, status, user.
"""
from .base import Command, register_command, get_registry


@register_command
class HelpCommand(Command):
    """Show help information."""

    name = ("help", "h", "?")
    help_text = "Show this help message"

    def execute(self, args: str) -> None:
        """Display help for all commands."""
        registry = get_registry()

        print("\nAvailable Commands:")
        print("=" * 70)

        commands = registry.get_all_commands()
        commands.sort(key=lambda c: c.name if isinstance(c.name, str) else c.name[0])

        for cmd_class in commands:
            if isinstance(cmd_class.name, str):
                names = cmd_class.name
            else:
                names = ", ".join(cmd_class.name)

            print(f"  {names:20} {cmd_class.help_text}")

        print("=" * 70)
        print()


@register_command
class QuitCommand(Command):
    """Exit the application."""

    name = ("quit", "exit", "q")
    help_text = "Exit the application"

    def execute(self, args: str) -> None:
        print("Goodbye!")
        raise SystemExit(0)


@register_command
class ReloadCommand(Command):
    """Reload catalog, profiles and engine config from disk."""

    name = "reload"
    help_text = "Reload catalog, profiles and engine config from disk"

    def execute(self, args: str) -> None:
        self.ctx.reload()
        print(f"Reloaded {len(self.ctx.catalog.meals)} meal(s) and "
              f"{len(self.ctx.profiles.user_ids)} profile(s).")


@register_command
class StatusCommand(Command):
    """Show session status."""

    name = "status"
    help_text = "Show active user, catalog size and queued feedback"

    def execute(self, args: str) -> None:
        ctx = self.ctx
        print(f"Active user: {ctx.active_user_id or '(none)'}")
        print(f"Catalog: {len(ctx.catalog.meals)} meal(s)")
        print(f"Profiles: {', '.join(ctx.profiles.user_ids) or '(none)'}")
        print(f"Queued feedback: {len(ctx.pending_feedback)} event(s)")
        if ctx.last_response is not None:
            print(f"Last request: {ctx.last_response.request_id} "
                  f"({len(ctx.last_response.recommendations)} recommendation(s))")


@register_command
class UserCommand(Command):
    """Switch the active user."""

    name = "user"
    help_text = "Switch active user (user <user_id>)"

    def execute(self, args: str) -> None:
        user_id = args.strip()
        if not user_id:
            print(f"Active user: {self.ctx.active_user_id or '(none)'}")
            return
        if self.ctx.profiles.get_profile(user_id) is None:
            print(f"Unknown user '{user_id}'. Known: {', '.join(self.ctx.profiles.user_ids)}")
            return
        self.ctx.active_user_id = user_id
        self.ctx.pending_feedback.clear()
        print(f"Active user: {user_id}")
