"""Markdown code-fence handling for model output.

Models are told to return raw HTML but regularly wrap it in ```html ... ```.
`strip_fences` cleans a complete document; `scan_leading_fence` answers the
same question for a prefix that is still growing, which is what the streaming
relay needs.
"""
import re
from enum import Enum
from typing import Tuple

FENCE = "```"

FENCE_LANGUAGES = ("html", "htm", "xhtml", "xml", "svg", "markup", "javascript", "js", "css")

_LANG_PATTERN = "|".join(sorted(FENCE_LANGUAGES, key=len, reverse=True))

LEADING_FENCE = re.compile(
    r"\s*```(?P<lang>(?:%s)(?![\w-]))?[ \t]*(?:\r?\n)?" % _LANG_PATTERN,
    re.IGNORECASE,
)
TRAILING_FENCE = re.compile(r"\r?\n?```\s*$")
LONE_FENCE = re.compile(r"\s*```\s*")


class FenceScan(Enum):
    PENDING = "pending"
    ABSENT = "absent"
    PRESENT = "present"


def _strip_once(text: str) -> str:
    stripped = text
    leading = LEADING_FENCE.match(stripped)
    if leading:
        stripped = stripped[leading.end():]
    trailing = TRAILING_FENCE.search(stripped)
    if trailing:
        stripped = stripped[:trailing.start()]
    if leading or trailing:
        return stripped.strip()
    return text


def strip_fences(text: str) -> str:
    """Remove a leading and a trailing fence marker from the ends of `text`.

    Interior content is left alone and text without an edge fence comes back
    unchanged. When a removal exposes another edge fence (```` ``````html ````)
    it is removed too, so the function is idempotent.
    """
    if not text:
        return text
    current = text
    while True:
        stripped = _strip_once(current)
        if stripped == current:
            return current
        current = stripped


def scan_leading_fence(text: str) -> Tuple[FenceScan, int]:
    """Decide whether a growing prefix opens with a fence.

    Returns (PRESENT, offset) with the offset where content starts, (ABSENT, 0)
    once no fence can appear, or (PENDING, 0) while more text is needed.
    """
    head = text.lstrip()
    if not head:
        return FenceScan.PENDING, 0
    if len(head) < len(FENCE):
        return (FenceScan.PENDING, 0) if FENCE.startswith(head) else (FenceScan.ABSENT, 0)

    match = LEADING_FENCE.match(text)
    if match is None:
        return FenceScan.ABSENT, 0

    end = match.end()
    if end == len(text) and not text.endswith("\n"):
        # the tag or the newline closing the fence line may still be arriving
        return FenceScan.PENDING, 0
    rest = text[end:]
    if match.group("lang") is None and "\n" not in rest:
        candidate = rest.rstrip(" \t").lower()
        if any(lang.startswith(candidate) for lang in FENCE_LANGUAGES):
            return FenceScan.PENDING, 0
    return FenceScan.PRESENT, end


def is_trailing_fence(text: str) -> bool:
    return bool(LONE_FENCE.fullmatch(text))
