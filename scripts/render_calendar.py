"""Render a day/week/month calendar layout from a JSON snapshot."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from agenda_engine import config as engine_config
from agenda_engine.adapters import json_adapter
from agenda_engine.export import list_view_to_dict, month_layout_to_dict
from agenda_engine.month_view import build_month_layout
from agenda_engine.normalizer import normalize
from agenda_engine.ranges import ViewMode, visible_items


def main() -> None:
    parser = argparse.ArgumentParser(description="Render agenda-engine calendar layout")
    parser.add_argument("--data", required=True, help="Path to JSON snapshot with events/task_lists/tasks")
    parser.add_argument("--mode", choices=[mode.value for mode in ViewMode], default=ViewMode.MONTH.value)
    parser.add_argument("--date", help="Reference date YYYY-MM-DD (default: today)")
    parser.add_argument("--config", help="Optional JSON config file")
    parser.add_argument("--out", help="Output path (default: outputs/calendar_<mode>.json)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = engine_config.load(args.config)
    zone = cfg.zone()
    reference = date.fromisoformat(args.date) if args.date else date.today()

    snapshot = json_adapter.parse(args.data)
    items = normalize(
        snapshot.events,
        snapshot.tasks,
        zone=zone,
        include_events=cfg.show_events,
        include_tasks=cfg.show_tasks,
    )

    if args.mode == ViewMode.MONTH.value:
        report = month_layout_to_dict(build_month_layout(items, reference, cfg.week_start, zone))
    else:
        report = list_view_to_dict(visible_items(items, args.mode, reference, cfg.week_start, zone), zone)
    report["mode"] = args.mode
    report["reference"] = reference.isoformat()

    print(json.dumps(report, indent=2, ensure_ascii=False))

    out_path = Path(args.out) if args.out else Path("outputs") / f"calendar_{args.mode}.json"
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"Saved calendar layout to {out_path}")


if __name__ == "__main__":
    main()
