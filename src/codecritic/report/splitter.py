"""Narrative/code splitting for report fields.

LLM feedback interleaves prose with code samples, sometimes inside a
triple-backtick fence and sometimes pasted inline.  :func:`split_narrative`
separates one field's text into the narrative before the code, the code
itself, and the narrative after it.

Detection order (first match wins):

1. A fenced block, with an optional language label on the fence line or,
   for an inline fence, a known language name before the first space.
2. The first function definition of the evaluated language, extended to the
   end of its balanced ``{ ... }`` body.
3. No code: the whole text is narrative.

A fence wins even when an unfenced definition precedes it, so that
definition stays in ``before`` and splitting ``before`` again extracts it.
Re-splitting is stable only when ``before`` holds no definition.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

FENCE = "```"
DEFAULT_LANGUAGE = "javascript"

_LANGUAGE_LABEL_RE = re.compile(r"[A-Za-z0-9_+#.\-]+")

_LANGUAGE_ALIASES: dict[str, str] = {
    "js": "javascript",
    "jsx": "javascript",
    "node": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "py": "python",
    "python3": "python",
    "golang": "go",
    "rs": "rust",
    "kt": "kotlin",
}

_JS_DEFINITION = r"\bfunction\b\s*\*?\s*[\w$]*\s*\("

# Definition patterns per language.  The match start is where code begins.
DEFINITION_PATTERNS: dict[str, re.Pattern[str]] = {
    "javascript": re.compile(_JS_DEFINITION),
    "typescript": re.compile(_JS_DEFINITION),
    "php": re.compile(_JS_DEFINITION),
    "python": re.compile(r"\bdef\s+\w+\s*\("),
    "go": re.compile(r"\bfunc\b\s*(?:\([^)]*\)\s*)?\w*\s*\("),
    "swift": re.compile(r"\bfunc\s+\w+"),
    "rust": re.compile(r"\bfn\s+\w+"),
    "kotlin": re.compile(r"\bfun\s+\w+"),
}

# Labels recognised when written inline, as in ```js code```.
INLINE_LABELS: frozenset[str] = frozenset(
    {
        *DEFINITION_PATTERNS,
        *_LANGUAGE_ALIASES,
        "java",
        "ruby",
        "cpp",
        "csharp",
        "json",
        "sql",
        "bash",
        "sh",
        "html",
        "css",
    }
)
_INLINE_LABEL_RE = re.compile(r"([A-Za-z0-9_+#.\-]+)[ \t]+")

OPEN_MARKER = "{"
CLOSE_MARKER = "}"


@dataclass(frozen=True)
class SplitResult:
    """Segments of one narrative field.

    ``language`` is set only when ``code`` is non-empty.
    """

    before: str = ""
    code: str = ""
    after: str = ""
    language: Optional[str] = None

    @property
    def has_code(self) -> bool:
        return bool(self.code)


def normalize_language(language: Optional[str]) -> str:
    """Map a user-facing language name to its canonical key."""
    if not language or not language.strip():
        return DEFAULT_LANGUAGE
    key = language.strip().lower()
    return _LANGUAGE_ALIASES.get(key, key)


def _result(before: str, code: str, after: str, language: str) -> SplitResult:
    code = code.strip()
    return SplitResult(
        before=before.strip(),
        code=code,
        after=after.strip(),
        language=language if code else None,
    )


def _split_fenced(text: str, default_language: str) -> Optional[SplitResult]:
    start = text.find(FENCE)
    if start < 0:
        return None

    body_start = start + len(FENCE)
    line_end = text.find("\n", body_start)
    language = default_language
    content_start = body_start

    if line_end >= 0:
        label = text[body_start:line_end].strip()
        if label and _LANGUAGE_LABEL_RE.fullmatch(label):
            language = label
            content_start = line_end + 1

    if content_start == body_start:
        inline = _INLINE_LABEL_RE.match(text, body_start)
        if inline is not None and inline.group(1).lower() in INLINE_LABELS:
            language = inline.group(1)
            content_start = inline.end()

    close = text.find(FENCE, content_start)
    if close < 0:
        # Unterminated fence: the rest of the text is code.
        return _result(text[:start], text[content_start:], "", language)

    return _result(
        text[:start],
        text[content_start:close],
        text[close + len(FENCE):],
        language,
    )


def find_balanced_end(text: str, start: int) -> Optional[int]:
    """Return the index just past the brace that closes the first ``{``.

    Counting begins at the first opening marker at or after *start*;
    closing markers seen before it are ignored.  Returns ``None`` when the
    markers never balance.
    """
    depth = 0
    opened = False
    for index in range(start, len(text)):
        char = text[index]
        if char == OPEN_MARKER:
            depth += 1
            opened = True
        elif char == CLOSE_MARKER and opened:
            depth -= 1
            if depth == 0:
                return index + 1
    return None


def _split_definition(text: str, language: str) -> Optional[SplitResult]:
    pattern = DEFINITION_PATTERNS.get(language, DEFINITION_PATTERNS[DEFAULT_LANGUAGE])
    match = pattern.search(text)
    if match is None:
        return None

    start = match.start()
    end = find_balanced_end(text, start)
    if end is None:
        return _result(text[:start], text[start:], "", language)
    return _result(text[:start], text[start:end], text[end:], language)


def split_narrative(text: Optional[str], language: Optional[str] = None) -> SplitResult:
    """Split *text* into narrative before, embedded code, and narrative after.

    Args:
        text: One narrative field of a report.
        language: Language of the evaluated code.  Selects the definition
            keyword for unfenced code and labels fences that carry none.

    Returns:
        A :class:`SplitResult` with whitespace-trimmed segments.
    """
    if not text:
        return SplitResult()

    canonical = normalize_language(language)
    result = _split_fenced(text, canonical)
    if result is None:
        result = _split_definition(text, canonical)
    if result is None:
        result = SplitResult(before=text.strip())
    return result
