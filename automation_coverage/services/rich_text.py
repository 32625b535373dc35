from typing import Any, List


def flatten_rich_text(node: Any) -> str:
    """Flatten a structured-document node (Atlassian Document Format) to plain text.

    Leaf text values are collected depth-first and joined with single spaces.
    Plain strings pass through unchanged apart from trimming, so wiki-markup
    descriptions keep their line structure. Missing nodes give ``""``.
    """
    if node is None:
        return ""
    if isinstance(node, str):
        return node.strip()

    parts: List[str] = []
    _collect_text(node, parts)
    return " ".join(part for part in parts if part).strip()


def _collect_text(node: Any, parts: List[str]) -> None:
    if isinstance(node, list):
        for item in node:
            _collect_text(item, parts)
        return
    if not isinstance(node, dict):
        return

    text = node.get("text")
    if isinstance(text, str):
        parts.append(text)

    content = node.get("content")
    if isinstance(content, list):
        for child in content:
            _collect_text(child, parts)
