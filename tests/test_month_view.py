from datetime import date

from dateutil import tz

from agenda_engine.export import list_view_to_dict, month_layout_to_dict
from agenda_engine.month_view import build_month_layout
from agenda_engine.normalizer import normalize
from agenda_engine.schema import Event, Task

NY = tz.gettz("America/New_York")


def sample_items():
    events = [
        Event("standup", "Standup", "2024-03-04T09:00:00", "2024-03-04T09:30:00"),
        Event("offsite", "Offsite", "2024-03-04", "2024-03-07", all_day=True),
        Event("conference", "Conference", "2024-03-05", "2024-03-09", all_day=True),
        Event("trip", "Trip", "2024-03-29", "2024-04-03", all_day=True),
        Event("season", "Season", "2024-02-20", "2024-04-10", all_day=True),
        Event("may", "May", "2024-05-02T09:00:00", "2024-05-02T10:00:00"),
    ]
    tasks = [Task("t1", "Report", "inbox", due="2024-03-05T18:00:00")]
    return normalize(events, tasks, NY)


def bars(row):
    return {p.segment.item.id: (p.segment.start_idx, p.segment.end_idx, p.lane) for p in row.layout.assignments}


def test_month_layout_weeks_and_cells():
    layout = build_month_layout(sample_items(), date(2024, 3, 15), zone=NY)
    assert layout.month == date(2024, 3, 1)
    assert len(layout.weeks) == 6

    week = layout.weeks[1]
    assert week.days[0] == date(2024, 3, 3)
    assert [item.id for item in week.cells[date(2024, 3, 4)]] == ["standup"]
    assert [item.id for item in week.cells[date(2024, 3, 5)]] == ["task-t1"]
    assert {"offsite", "conference", "trip", "season"} == set(layout.multi_day_ids)
    assert "offsite" in [item.id for item in layout.day_items(date(2024, 3, 5))]
    assert layout.day_items(date(2024, 5, 2)) == []


def test_month_layout_packs_each_week_independently():
    layout = build_month_layout(sample_items(), date(2024, 3, 15), zone=NY)
    assert bars(layout.weeks[1]) == {"season": (0, 6, 0), "offsite": (1, 3, 1), "conference": (2, 5, 2)}
    assert layout.weeks[1].layout.lane_count == 3
    assert bars(layout.weeks[4]) == {"season": (0, 6, 0), "trip": (5, 6, 1)}
    assert bars(layout.weeks[5]) == {"season": (0, 6, 0), "trip": (0, 2, 1)}
    for row in layout.weeks:
        assert "season" in bars(row)


def test_month_layout_export():
    layout = build_month_layout(sample_items(), date(2024, 3, 15), zone=NY)
    payload = month_layout_to_dict(layout)
    assert payload["month"] == "2024-03"
    assert len(payload["weeks"]) == 6
    assert payload["weeks"][1]["days"]["2024-03-04"] == ["standup"]
    assert payload["weeks"][1]["lane_count"] == 3
    assert payload["total_items"] == 6


def test_list_view_export():
    payload = list_view_to_dict(sample_items()[:2], NY)
    assert payload["total_items"] == 2
    offsite = payload["items"][1]
    assert (offsite["display_start"], offsite["display_end"]) == ("2024-03-04", "2024-03-06")
    assert offsite["kind"] == "event"
