# labels.py
import re

from assetmap.model.models import RenderEntity


def snake_to_title(text: str) -> str:
    """'predicted_failure' -> 'Predicted Failure' (hyphens count as separators too)."""
    text = re.sub(r"[_-]", " ", text)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text)


def format_large_number(number) -> str:
    """1000000 -> '1.0M', 2500000000 -> '2.5B'. '1,000,000' is accepted."""
    value = number
    if isinstance(value, str):
        m = re.match(r"\s*[-+]?\d+", value.replace(",", ""))
        if not m:
            return number
        value = int(m.group(0))
    if value >= 1_000_000_000:
        return f"{value / 1_000_000_000:.1f}B"
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    return str(value)


def describe(entity: RenderEntity) -> str:
    """Tooltip text."""
    if not entity.is_cluster:
        p = entity.point
        return f"{p.display_name or p.id} ({snake_to_title(p.status.value)})"
    parts = ", ".join(f"{snake_to_title(s.value)}: {n}" for s, n in entity.status_counts.items())
    return f"{format_large_number(entity.member_count)} assets - {parts}"
