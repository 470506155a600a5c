# blocklayout/frame.py
import pandas as pd

from .models import Block, Week

COLUMNS = ["day", "idx", "label", "start", "end",
           "depth", "path_depth", "left", "width", "fixed"]


def week_to_frame(week: Week) -> pd.DataFrame:
    """One row per block with its interval and layout fields."""
    rows = []
    for day, blocks in week:
        for b in blocks:
            rows.append({
                "day": day,
                "idx": b.idx,
                "label": "" if b.payload is None else str(b.payload),
                "start": b.start_min,
                "end": b.end_min,
                "depth": b.depth,
                "path_depth": b.path_depth,
                "left": b.left,
                "width": b.width,
                "fixed": b.is_fixed,
            })
    if not rows:
        return pd.DataFrame(columns=COLUMNS)
    return pd.DataFrame(rows, columns=COLUMNS)


def frame_to_week(df: pd.DataFrame) -> Week:
    """Build a week from rows with ``day``, ``start``, ``end`` and optional ``label``."""
    week = Week()
    has_label = "label" in df.columns
    for _, r in df.iterrows():
        payload = r["label"] if has_label else None
        week.add(r["day"], Block(int(r["start"]), int(r["end"]), payload))
    return week
