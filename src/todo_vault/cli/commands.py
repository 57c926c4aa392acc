# src/todo_vault/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_api import TaskValidationError
from ..tasks.task_models import TaskRecord, TaskStatus

CommandEmitter = Callable[[str], None]
CommandHandler3 = Callable[[AppState, list[str], str | None], str]
CommandHandler4 = Callable[[AppState, list[str], str | None, CommandEmitter | None], str]
CommandHandler = CommandHandler3 | CommandHandler4

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._raw: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        raw: bool = False,
    ) -> None:
        """raw=True: the handler gets the text after the command name as one untouched arg."""
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler
        if raw:
            self._raw.update(n.lower() for n in [name, *aliases])

    def handle(
        self,
        state: AppState,
        line: str,
        owner: str | None = None,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        owner defaults to the identity stored on the state (console login).
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""
        if name in self._raw:
            args = [rest] if rest.strip() else []
        else:
            args = rest.split()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        if owner is None:
            owner = state.owner or None

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 4

        try:
            if nparams >= 4:
                h4 = cast(CommandHandler4, handler)
                return h4(state, args, owner, emit)

            h3 = cast(CommandHandler3, handler)
            return h3(state, args, owner)
        except TaskValidationError as e:
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _fmt_ts(created_at_ns: int) -> str:
    return datetime.fromtimestamp(created_at_ns / 1e9).astimezone().strftime("%Y-%m-%d %H:%M")


def _fmt_task(t: TaskRecord) -> str:
    mark = "x" if t.completed else " "
    extra = f" ({len(t.comments)} comments)" if t.comments else ""
    return f"[{mark}] #{t.id} {t.title} - {t.description}{extra}"


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        task_id = int(args[0].lstrip("#"))
    except ValueError:
        return None
    return task_id if task_id > 0 else None


def cmd_help(
    state: AppState,
    args: list[str],
    owner: str | None,
    emit: CommandEmitter | None = None,
) -> str:
    return registry.build_help()


def cmd_whoami(state: AppState, args: list[str], owner: str | None) -> str:
    return f"You are: {task_api.who_am_i(state, owner)}"


def cmd_login(state: AppState, args: list[str], owner: str | None) -> str:
    """
    /login <identity>  -> act as <identity> for the rest of the session
    """
    if not args:
        return "Usage: /login <identity>"
    state.owner = args[0]
    logger.debug("Console identity switched to %s", state.owner)
    return f"Signed in as {state.owner}."


def cmd_add(state: AppState, args: list[str], owner: str | None) -> str:
    """
    /add <title> | <description>
    """
    title, sep, description = (args[0] if args else "").partition("|")
    if not sep:
        return "Usage: /add <title> | <description>"
    task_id = task_api.add_task(state, owner, title, description)
    return f"Added task #{task_id}."


def cmd_list(state: AppState, args: list[str], owner: str | None) -> str:
    """
    /list          -> all tasks
    /list done     -> completed only
    /list active   -> not completed only
    """
    if args:
        status = TaskStatus.parse(args[0])
        if status is None:
            return "Usage: /list [done|active]"
        tasks = task_api.list_tasks_by_status(state, owner, status is TaskStatus.COMPLETED)
    else:
        tasks = task_api.list_tasks(state, owner)

    if not tasks:
        return "No tasks."
    return "\n".join(_fmt_task(t) for t in tasks)


def cmd_show(state: AppState, args: list[str], owner: str | None) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /show <id>"
    t = task_api.get_task(state, owner, task_id)
    if t is None:
        return f"Task #{task_id} not found."
    lines = [
        _fmt_task(t),
        f"  status: {t.status}",
        f"  created: {_fmt_ts(t.created_at)}",
        f"  owner: {t.owner}",
    ]
    for i, c in enumerate(t.comments, start=1):
        lines.append(f"  {i}. {c}")
    return "\n".join(lines)


def cmd_done(state: AppState, args: list[str], owner: str | None) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /done <id>"
    if not task_api.toggle_task(state, owner, task_id):
        return f"Task #{task_id} not found."
    t = task_api.get_task(state, owner, task_id)
    status = t.status if t is not None else "?"
    return f"Task #{task_id} is now {status}."


def cmd_rm(state: AppState, args: list[str], owner: str | None) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /rm <id>"
    if not task_api.delete_task(state, owner, task_id):
        return f"Task #{task_id} not found."
    return f"Deleted task #{task_id}."


def cmd_clear(state: AppState, args: list[str], owner: str | None) -> str:
    removed = task_api.clear_completed(state, owner)
    if not removed:
        return "No completed tasks to clear."
    return f"Cleared {removed} completed task(s)."


def cmd_comment(state: AppState, args: list[str], owner: str | None) -> str:
    """
    /comment <id> <text>
    """
    parts = (args[0] if args else "").split(maxsplit=1)
    task_id = _parse_id(parts[:1])
    if task_id is None or len(parts) < 2:
        return "Usage: /comment <id> <text>"
    if not task_api.add_comment(state, owner, task_id, parts[1]):
        return f"Task #{task_id} not found."
    return f"Comment added to task #{task_id}."


def cmd_comments(state: AppState, args: list[str], owner: str | None) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /comments <id>"
    comments = task_api.list_comments(state, owner, task_id)
    if not comments:
        return f"No comments for task #{task_id}."
    return "\n".join(f"{i}. {c}" for i, c in enumerate(comments, start=1))


def cmd_stats(state: AppState, args: list[str], owner: str | None) -> str:
    s = task_api.task_stats(state, owner)
    return (
        "Stats:\n"
        f"  Total: {s.total}\n"
        f"  Completed: {s.completed}\n"
        f"  Pending: {s.pending}\n"
        f"  Progress: {s.percent_complete}%"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("whoami", cmd_whoami, help_text="Show the identity you act as.")
registry.register("login", cmd_login, help_text="Act as another identity: /login <identity>.")
registry.register("add", cmd_add, help_text="Add a task: /add <title> | <description>.", raw=True)
registry.register("list", cmd_list, help_text="List tasks: /list [done|active].", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one task with comments: /show <id>.")
registry.register("done", cmd_done, help_text="Toggle completed/active: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
registry.register("clear", cmd_clear, help_text="Delete all completed tasks.")
registry.register("comment", cmd_comment, help_text="Comment on a task: /comment <id> <text>.", raw=True)
registry.register("comments", cmd_comments, help_text="List comments: /comments <id>.")
registry.register("stats", cmd_stats, help_text="Show totals and progress.")
