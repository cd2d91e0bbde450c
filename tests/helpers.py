"""Builders for transcript records and config text shared by the tests."""

import json


def assistant_record(text: str, *extra_blocks: dict) -> dict:
    """Build a transcript record for an assistant text turn."""
    return {
        "type": "assistant",
        "sessionId": "sess-001",
        "message": {
            "role": "assistant",
            "content": [*extra_blocks, {"type": "text", "text": text}],
        },
    }


def user_record(text: str) -> dict:
    return {
        "type": "user",
        "sessionId": "sess-001",
        "message": {"role": "user", "content": [{"type": "text", "text": text}]},
    }


def dump_records(records: list, raw_newlines: bool = False) -> str:
    """Serialize *records* as JSONL.

    With *raw_newlines*, escaped newlines inside strings are written as
    real line breaks, the way a transcript can end up on disk.
    """
    lines = []
    for record in records:
        line = json.dumps(record)
        if raw_newlines:
            line = line.replace("\\n", "\n")
        lines.append(line)
    return "\n".join(lines) + "\n"


FULL_CONFIG = """\
[contexts.assistant]
style = "brief"

[contexts.development]
style = "terse"
cache = true

[contexts.writing]
style = "silent"

[llm]
provider = "openai"
model = "gpt-4o-mini"
api_key = "sk-test-secret"
base_instruction = "You are JARVIS."

[llm.prompts]
terse = "One sentence."
brief = "Two sentences."

[voice]
provider = "elevenlabs"
voice_id = "voice-123"
api_key = "el-test-secret"
cache_threshold = 0.9

[debug]
enabled = true
log_path = "/tmp/clarvis-debug.log"
"""
