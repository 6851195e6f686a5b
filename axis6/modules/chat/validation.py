"""
Message content checks applied before anything is written to a room.
"""

import re

MAX_MESSAGE_LENGTH = 2000
DELETED_MESSAGE_CONTENT = "[Message deleted]"

SUSPICIOUS_PATTERNS = [
    re.compile(r"<script\b", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"\bon\w+\s*=", re.IGNORECASE),
]


def validate_message_content(content: str) -> str:
    """Return the trimmed content or raise ValueError with the reason it was rejected."""
    if not isinstance(content, str):
        raise ValueError("Content is required")
    trimmed = content.strip()
    if not trimmed:
        raise ValueError("Message cannot be empty")
    if len(trimmed) > MAX_MESSAGE_LENGTH:
        raise ValueError(f"Message too long (max {MAX_MESSAGE_LENGTH} characters)")
    for pattern in SUSPICIOUS_PATTERNS:
        if pattern.search(trimmed):
            raise ValueError("Message contains invalid content")
    return trimmed
