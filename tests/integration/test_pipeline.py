from __future__ import annotations

import csv
import io

from trackdash.config import DATA_PATH
from trackdash.data import load_dashboard_data, prepare_context
from trackdash.debounce import Debouncer
from trackdash.export import export_visible_rows
from trackdash.filters import FilterCriteria, FilterEngine
from trackdash.notify import CollectingNotifier
from trackdash.table import paginate, sort_rows


def test_bundled_dataset_loads():
    ctx = load_dashboard_data(DATA_PATH)
    rows = ctx["rows"]
    assert len(rows) == 20
    assert rows["id"].tolist() == list(range(20))
    assert {"acoustic", "pop", "folk"}.issubset(ctx["genres"])


def test_search_to_export_flow():
    data_ctx = load_dashboard_data(DATA_PATH)
    rows = data_ctx["rows"]
    engine = FilterEngine()
    settled = []

    timers = []

    def factory(interval, fn):
        class _Timer:
            def start(self):
                timers.append(fn)

            def cancel(self):
                pass

        return _Timer()

    debouncer = Debouncer(settled.append, timer_factory=factory, initial="")
    for text in ["L", "Lo", "Lov", "Love"]:
        debouncer.push(text)
    for fire in timers:
        fire()
    assert settled == ["Love"]

    criteria = FilterCriteria(search=debouncer.settled, popularity_min=56, popularity_max=71)
    visible = engine.visible(rows, criteria)
    assert sorted(visible["track_name"]) == ["Can't Help Falling In Love", "Falling in Love at a Coffee Shop", "ily (i love you baby)"]

    page = paginate(sort_rows(visible), page=0, page_size=5)
    assert page.rows["popularity"].tolist() == [71.0, 58.0, 56.0]

    ctx = prepare_context(criteria, data_ctx)
    assert ctx["visible_count"] == len(visible)

    notifier = CollectingNotifier()
    exported = export_visible_rows(visible, notifier)
    parsed = list(csv.reader(io.StringIO(exported.content.decode("utf-8"))))
    assert len(parsed) - 1 == len(visible)
    assert parsed[0][0] == "track_id"
