# main.py
import logging

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from blocklayout import WEEKDAYS, LayoutEngine, LayoutOptions, Week
from blocklayout.frame import week_to_frame


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    week = Week()
    meetings = [
        ("CS 2150 Lecture", "MoWeFr 10:00AM - 10:50AM"),
        ("CS 2150 Lab", "Tu 9:30AM - 11:00AM"),
        ("APMA 3100", "MoWe 10:00AM - 11:15AM"),
        ("STAT 2120", "MoWeFr 10:00AM - 10:50AM"),
        ("ECON 2010", "MoWe 11:00AM - 12:15PM"),
        ("PHYS 1425", "TuTh 9:30AM - 10:45AM"),
        ("PHYS 1429 Workshop", "Th 10:00AM - 12:00PM"),
        ("Office Hours", "Mo 10:30AM - 12:30PM"),
        ("Club Meeting", "We 11:45AM - 1:00PM"),
    ]
    for label, meeting in meetings:
        week.place(meeting, payload=label)

    with LayoutEngine(LayoutOptions(strategy="exact", optimize=True)) as engine:
        reports = engine.layout_week(week)

    print("=== Layout ===")
    for day in WEEKDAYS:
        r = reports[day]
        print(f"{day}: {r.num_columns} columns, {r.num_fixed} fixed, "
              f"{r.components} components optimized={r.optimized} fallbacks={r.fallbacks}")
    df = week_to_frame(week)
    print(df)

    # Draw the boxes, one column per weekday
    fig, ax = plt.subplots(figsize=(10, 6))
    for _, row in df.iterrows():
        x = WEEKDAYS.index(row["day"]) + row["left"]
        ax.add_patch(Rectangle(
            (x, row["start"]), row["width"], row["end"] - row["start"],
            edgecolor="black", facecolor="#1f77b4" if not row["fixed"] else "#7f7f7f",
            alpha=0.6,
        ))
        ax.text(x + 0.02, row["start"] + 5, row["label"], fontsize=6, va="top")
    ax.set_xlim(0, len(WEEKDAYS))
    ax.set_ylim(df["end"].max() + 30, df["start"].min() - 30)
    ax.set_xticks([i + 0.5 for i in range(len(WEEKDAYS))])
    ax.set_xticklabels(WEEKDAYS)
    ax.set_ylabel("Minutes since midnight")
    ax.set_title("Weekly Block Layout")
    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
