"""Platform categories for TikHub tools.

Tool names carry their platform as a prefix, e.g.
``xiaohongshu_web_search_notes`` belongs to ``xiaohongshu``. Categories are
used to filter the catalog and to group tools when listing them.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

# Known prefixes in match order. Earlier entries win when one prefix is a
# prefix of another.
CATEGORY_LABELS: dict[str, str] = {
    "xiaohongshu": "小红书",
    "tiktok": "TikTok",
    "douyin": "抖音",
    "instagram": "Instagram",
    "youtube": "YouTube",
    "twitter": "Twitter/X",
    "weibo": "微博",
    "kuaishou": "快手",
    "threads": "Threads",
    "lemon8": "Lemon8",
    "tikhub": "TikHub 通用",
    "health": "健康检查",
}

KNOWN_PREFIXES: tuple[str, ...] = tuple(CATEGORY_LABELS)

SEPARATOR = "_"


def get_category(tool_name: str) -> str:
    """Extract the platform category from a tool name.

    Args:
        tool_name: Remote tool name, e.g. "xiaohongshu_web_search_notes".

    Returns:
        The first known prefix the name starts with, otherwise the text
        before the first separator, otherwise the name itself.
    """
    for prefix in KNOWN_PREFIXES:
        if tool_name.startswith(prefix):
            return prefix

    idx = tool_name.find(SEPARATOR)
    return tool_name[:idx] if idx > 0 else tool_name


def category_label(category: str) -> str:
    """Return the display label for a category (raw key when unknown)."""
    return CATEGORY_LABELS.get(category, category)


def group_by_label(tools: Iterable[Mapping[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    """Group tool descriptors by category label.

    Groups appear in order of first occurrence and keep catalog order
    within each group.
    """
    groups: dict[str, list[dict[str, Any]]] = {}
    for tool in tools:
        label = category_label(get_category(tool["name"]))
        groups.setdefault(label, []).append(
            {"name": tool["name"], "description": tool.get("description", "")}
        )
    return groups


def count_by_category(tools: Iterable[Mapping[str, Any]]) -> dict[str, int]:
    """Count tools per category, in order of first occurrence."""
    counts: dict[str, int] = {}
    for tool in tools:
        category = get_category(tool["name"])
        counts[category] = counts.get(category, 0) + 1
    return counts


def format_category_counts(counts: Mapping[str, int]) -> str:
    """Render category counts as ``label(count), ...`` for log output."""
    return ", ".join(f"{category_label(cat)}({n})" for cat, n in counts.items())
