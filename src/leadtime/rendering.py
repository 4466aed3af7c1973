from typing import List, Optional

from .models import Stats


def format_stats(group: Optional[str], stats: Stats) -> str:
    group_message = f"{group} " if group else ""
    return (
        f"- {stats.total} {group_message}successful deployments: "
        f"avg {stats.avg_duration_secs} secs, "
        f"min/max: {stats.min_duration_secs}/{stats.max_duration_secs} secs"
    )


def render_duration_histogram(durations: List[int], bins: int = 10) -> str:
    if not durations:
        return "No duration data."
    lo, hi = min(durations), max(durations)
    if hi <= lo:
        return f"Histogram: single value {lo}s"


    width = 40
    counts = [0] * bins
    for x in durations:
        j = int((x - lo) / (hi - lo) * bins)
        if j == bins:
            j -= 1
        counts[j] += 1


    peak = max(counts)
    lines = []
    for i, c in enumerate(counts):
        left = lo + (hi - lo) * (i / bins)
        right = lo + (hi - lo) * ((i + 1) / bins)
        bar = "#" * max(1, int((c / peak) * width)) if c else ""
        lines.append(f"{left:>8.0f}s - {right:>8.0f}s | {bar} ({c})")
    return "Lead Time Histogram\n" + "\n".join(lines)
