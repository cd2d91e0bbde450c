"""Pydantic models for hook events, control tags, and transcript messages."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr


class Context(str, Enum):
    """Kind of work the assistant was doing when it produced a message."""

    ASSISTANT = "assistant"
    DEVELOPMENT = "development"
    EXPLORATION = "exploration"
    WRITING = "writing"


class Intent(str, Enum):
    """What the assistant's message is trying to communicate."""

    NAVIGATION = "navigation"
    DISCUSSION = "discussion"
    COMPLETION = "completion"
    STATUS = "status"
    ERROR = "error"


class Style(str, Enum):
    """Verbosity profile controlling summarization depth and caching."""

    SILENT = "silent"
    TERSE = "terse"
    BRIEF = "brief"
    NORMAL = "normal"
    FULL = "full"
    BYPASS = "bypass"


class HookEvent(BaseModel):
    """The descriptor Claude Code writes to a hook's stdin.

    Fields are populated from their wire names only (``cwd``,
    ``hook_event_name``, ``stop_hook_active``); a payload spelling them with
    the Python attribute names is missing those fields. The four required
    fields must be strings or the descriptor is rejected.
    """

    model_config = ConfigDict(frozen=True)

    session_id: StrictStr
    transcript_path: StrictStr
    working_dir: StrictStr = Field(alias="cwd")
    event_name: StrictStr = Field(alias="hook_event_name")
    already_handled: StrictBool = Field(default=False, alias="stop_hook_active")


class ControlTag(BaseModel):
    """Routing metadata embedded by the assistant in its own message."""

    model_config = ConfigDict(frozen=True)

    context: Context
    intent: Intent
    project: str | None = Field(default=None, pattern=r"^[A-Za-z0-9_-]+$")


class AssistantMessage(BaseModel):
    """Most recent assistant text recovered from a transcript.

    ``text`` is empty when nothing usable was found; any control tag has
    already been stripped from it.
    """

    text: str = ""
    tag: ControlTag | None = None
