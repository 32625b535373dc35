"""Best-effort mining of manual test case titles out of issue text.

Two independent heuristics feed one ordered, de-duplicated result:

* marker references such as ``QTest: Verify login`` or ``Test case - Checkout``
* bullet (``*``, ``-``, ``•``) or numbered (``1.``) list lines of a plausible
  title length

Neither heuristic is a grammar; over- and under-extraction are expected.
"""

import re
from typing import List, Optional

# "qtest" / "test case" marker, optional colon, then the rest of the line
MARKER_PATTERN = re.compile(
    r"(?:qtest|test[ \t]*case)[ \t]*:?[ \t]*([\w \t\-.,()\[\]]+)",
    re.IGNORECASE,
)
BULLET_LINE = re.compile(r"^[*\-•]\s+.+")
NUMBERED_LINE = re.compile(r"^\d+\.\s+.+")
LIST_MARKER = re.compile(r"^(?:[*\-•]|\d+\.)\s+")

MIN_LIST_TITLE_LENGTH = 10
MAX_LIST_TITLE_LENGTH = 200
# width of the stored title column
MAX_TITLE_LENGTH = 500


def extract_linked_test_cases(text: Optional[str]) -> List[str]:
    if not text or not text.strip():
        return []

    found: List[str] = []
    seen = set()

    def _add(candidate: str) -> None:
        title = candidate.strip()[:MAX_TITLE_LENGTH].rstrip()
        if title and title not in seen:
            seen.add(title)
            found.append(title)

    for match in MARKER_PATTERN.finditer(text):
        _add(match.group(1))

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not (BULLET_LINE.match(line) or NUMBERED_LINE.match(line)):
            continue
        title = LIST_MARKER.sub("", line, count=1).strip()
        if MIN_LIST_TITLE_LENGTH < len(title) < MAX_LIST_TITLE_LENGTH:
            _add(title)

    return found
