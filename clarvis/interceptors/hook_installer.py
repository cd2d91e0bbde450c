"""Install and uninstall the clarvis Stop hook in Claude Code settings."""

import json
import logging
import shutil

from clarvis.config import CLAUDE_SETTINGS_PATH

logger = logging.getLogger(__name__)

# The command string used in hook entries. It doubles as the identifier
# that distinguishes clarvis hooks from user hooks.
HOOK_COMMAND: str = "clarvis"

# clarvis only speaks when the assistant finishes a turn.
_CLARVIS_HOOKS: dict = {
    "Stop": [
        {
            "matcher": "",
            "hooks": [
                {
                    "type": "command",
                    "command": HOOK_COMMAND,
                }
            ],
        }
    ],
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def install_hooks() -> None:
    """Install the clarvis hook into Claude Code settings.

    1. Read ``~/.claude/settings.json`` (creating it if absent).
    2. Merge the clarvis hook entry, preserving existing user hooks.
    3. Write the updated settings back.

    A ``.bak`` backup of the original settings file is created before
    any modification.
    """
    settings = _read_settings()
    _backup_settings()
    _merge_hooks(settings)
    _write_settings(settings)
    logger.info("clarvis hook installed in %s", CLAUDE_SETTINGS_PATH)


def uninstall_hooks() -> None:
    """Remove clarvis hook entries from Claude Code settings.

    Only entries whose ``command`` is ``HOOK_COMMAND`` are removed; all
    other user hooks are preserved.
    """
    if not CLAUDE_SETTINGS_PATH.exists():
        logger.info("No Claude settings file found — nothing to uninstall")
        return

    settings = _read_settings()
    _backup_settings()
    _remove_hooks(settings)
    _write_settings(settings)
    logger.info("clarvis hook removed from %s", CLAUDE_SETTINGS_PATH)


def are_hooks_installed() -> bool:
    """Return ``True`` if a clarvis hook is present in Claude settings."""
    if not CLAUDE_SETTINGS_PATH.exists():
        return False

    hooks = _read_settings().get("hooks", {})
    if not isinstance(hooks, dict):
        return False
    return any(
        isinstance(entries, list) and _list_contains_clarvis_entry(entries)
        for entries in hooks.values()
    )


# ---------------------------------------------------------------------------
# Settings file helpers
# ---------------------------------------------------------------------------


def _read_settings() -> dict:
    """Read and return ``~/.claude/settings.json``, or an empty dict."""
    if not CLAUDE_SETTINGS_PATH.exists():
        logger.debug("Settings file does not exist — starting fresh")
        return {}

    try:
        data = json.loads(CLAUDE_SETTINGS_PATH.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Could not read settings.json (%s) — starting fresh", exc)
        return {}

    if not isinstance(data, dict):
        logger.warning(
            "settings.json root is not an object (%s) — starting fresh",
            type(data).__name__,
        )
        return {}
    return data


def _write_settings(settings: dict) -> None:
    """Write *settings* to ``~/.claude/settings.json`` with pretty formatting."""
    CLAUDE_SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    CLAUDE_SETTINGS_PATH.write_text(
        json.dumps(settings, indent=2) + "\n",
        encoding="utf-8",
    )
    logger.debug("Wrote settings to %s", CLAUDE_SETTINGS_PATH)


def _backup_settings() -> None:
    """Create a ``.bak`` copy of the settings file if it exists."""
    if not CLAUDE_SETTINGS_PATH.exists():
        return

    backup = CLAUDE_SETTINGS_PATH.with_suffix(".json.bak")
    try:
        shutil.copy2(CLAUDE_SETTINGS_PATH, backup)
        logger.debug("Backed up settings to %s", backup)
    except OSError as exc:
        logger.warning("Could not create settings backup: %s", exc)


# ---------------------------------------------------------------------------
# Merge / remove logic
# ---------------------------------------------------------------------------


def _merge_hooks(settings: dict) -> None:
    """Merge clarvis hooks into *settings*, preserving user hooks."""
    hooks = settings.get("hooks")
    if not isinstance(hooks, dict):
        hooks = {}
        settings["hooks"] = hooks

    for event_name, clarvis_entries in _CLARVIS_HOOKS.items():
        existing = hooks.get(event_name, [])
        if not isinstance(existing, list):
            logger.warning(
                "hooks.%s is not a list (%s) — replacing it",
                event_name,
                type(existing).__name__,
            )
            existing = []

        if _list_contains_clarvis_entry(existing):
            logger.debug("clarvis hook for %s already present — skipping", event_name)
        else:
            existing.extend(json.loads(json.dumps(clarvis_entries)))
            logger.debug("Added clarvis hook entry for %s", event_name)

        hooks[event_name] = existing


def _remove_hooks(settings: dict) -> None:
    """Remove clarvis entries from *settings*; drop lists left empty."""
    hooks = settings.get("hooks")
    if not isinstance(hooks, dict):
        return

    for event_name in list(hooks):
        entries = hooks[event_name]
        if not isinstance(entries, list):
            continue
        filtered = [e for e in entries if not _entry_is_clarvis(e)]
        if filtered:
            hooks[event_name] = filtered
        else:
            del hooks[event_name]

    if not hooks:
        settings.pop("hooks", None)


def _entry_is_clarvis(entry: dict) -> bool:
    """Return ``True`` if any hook in *entry* runs ``HOOK_COMMAND``."""
    if not isinstance(entry, dict):
        return False
    inner_hooks = entry.get("hooks", [])
    if not isinstance(inner_hooks, list):
        return False
    return any(
        isinstance(h, dict) and h.get("command") == HOOK_COMMAND for h in inner_hooks
    )


def _list_contains_clarvis_entry(entries: list) -> bool:
    return any(_entry_is_clarvis(e) for e in entries)
