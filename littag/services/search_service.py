"""Filtering, sorting and paging of literature lists."""

from typing import Optional, Sequence, TypeVar

from littag.models.literature import LiteratureBase, LiteratureSummary

# Works on full records and on repository summaries alike
Item = TypeVar("Item", LiteratureBase, LiteratureSummary)


def filter_by_keywords(
    items: list[Item],
    keywords: list[str],
    mode: str = "or",
) -> list[Item]:
    """Filter by keywords in title and author names.

    Uses case-insensitive substring matching.

    Args:
        items: Literature records or summaries
        keywords: List of keyword strings
        mode: 'or' (any keyword matches) or 'and' (all keywords must match)

    Returns:
        Filtered list
    """
    keywords_lower = [k.lower() for k in keywords if k.strip()]
    if not keywords_lower:
        return items

    def haystack(item: Item) -> str:
        return " ".join([item.title or "", *item.authors]).lower()

    def matches(item: Item) -> bool:
        text = haystack(item)
        if mode == "and":
            return all(kw in text for kw in keywords_lower)
        return any(kw in text for kw in keywords_lower)

    return [i for i in items if matches(i)]


def filter_by_type(items: list[Item], types: Optional[Sequence[str]]) -> list[Item]:
    if not types:
        return items
    return [i for i in items if i.type in types]


def filter_by_year(
    items: list[Item],
    year_from: Optional[int],
    year_to: Optional[int],
) -> list[Item]:
    """Keep items with ``year_from <= year <= year_to`` (bounds optional)."""
    if year_from is None and year_to is None:
        return items
    return [
        i for i in items
        if (year_from is None or i.year >= year_from)
        and (year_to is None or i.year <= year_to)
    ]


def filter_by_attribute(
    items: list[Item],
    attribute_id: Optional[str],
    value: Optional[str] = None,
) -> list[Item]:
    """Keep items tagged with *attribute_id* (and *value*, when given)."""
    if not attribute_id:
        return items

    def matches(item: Item) -> bool:
        for application in item.attributes or []:
            if application.attribute_id != attribute_id:
                continue
            return value is None or value in application.values
        return False

    return [i for i in items if matches(i)]


def sort_literatures(items: list[Item], sort_by: str = "title", order: str = "asc") -> list[Item]:
    """Sort in place by 'title', 'year', 'type' or 'updated_at'.

    Returns:
        The same list, sorted in-place
    """
    reverse = order == "desc"

    if sort_by == "year":
        items.sort(key=lambda i: i.year, reverse=reverse)
    elif sort_by == "type":
        items.sort(key=lambda i: (i.type, (i.title or "").lower()), reverse=reverse)
    elif sort_by == "updated_at":
        # summaries have no timestamps; they sort as empty
        items.sort(key=lambda i: getattr(i, "updated_at", None) or "", reverse=reverse)
    else:  # 'title' or any unrecognized value
        items.sort(key=lambda i: (i.title or "").lower(), reverse=reverse)

    return items


def paginate(items: list[Item], page: int = 0, per_page: int = 10) -> list[Item]:
    """Zero-based page slice."""
    if per_page <= 0:
        return items
    start = max(page, 0) * per_page
    return items[start:start + per_page]
