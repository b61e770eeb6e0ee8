"""Demo script for agenda-engine."""

import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from agenda_engine.adapters.json_adapter import parse
from agenda_engine.month_view import build_month_layout
from agenda_engine.normalizer import normalize
from agenda_engine.ranges import visible_items


def main() -> None:
    snapshot = parse("examples/sample_snapshot.json")
    items = normalize(snapshot.events, snapshot.tasks)
    reference = date(2024, 3, 4)

    print("Week agenda:")
    for item in visible_items(items, "week", reference):
        print(f"  {item.start:%a %d %H:%M}  {item.title}")

    layout = build_month_layout(items, reference)
    print("Month bars:")
    for row in layout.weeks:
        for placed in row.layout.assignments:
            segment = placed.segment
            print(f"  week of {row.days[0]} lane {placed.lane}: {segment.item.title} [{segment.start_idx}-{segment.end_idx}]")


if __name__ == "__main__":
    main()
