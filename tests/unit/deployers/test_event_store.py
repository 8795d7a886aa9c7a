"""
Unit tests for EventStore and EventRenderer.
"""

import io

from stack_deployer.deployers.event_store import EventRenderer, EventStore


class TestEventStore:

    def test_record_filters_history(self, start_time, make_event):
        store = EventStore(start_time)

        added = store.record([make_event("old", -30), make_event("edge", 0), make_event("new", 5)])

        assert [e.event_id for e in added] == ["new"]
        assert "old" not in store
        assert "edge" not in store

    def test_record_deduplicates_by_event_id(self, start_time, make_event):
        store = EventStore(start_time)
        store.record([make_event("a", 1)])

        added = store.record([make_event("a", 1), make_event("b", 2), make_event("b", 2)])

        assert [e.event_id for e in added] == ["b"]
        assert len(store) == 2

    def test_record_sorts_by_timestamp(self, start_time, make_event):
        store = EventStore(start_time)

        added = store.record([make_event("c", 30), make_event("a", 10), make_event("b", 20)])

        assert [e.event_id for e in added] == ["a", "b", "c"]

    def test_unseen_keeps_first_occurrence_order(self, start_time, make_event):
        store = EventStore(start_time)
        store.record([make_event("a", 1)])

        unseen = store.unseen([make_event("c", 3), make_event("a", 1), make_event("b", 2), make_event("c", 3)])

        assert [e.event_id for e in unseen] == ["c", "b"]

    def test_pending_does_not_record(self, start_time, make_event):
        store = EventStore(start_time)
        store.record([make_event("a", 1)])

        pending = store.pending([make_event("c", 3), make_event("a", 1), make_event("old", -1), make_event("b", 2)])

        assert [e.event_id for e in pending] == ["b", "c"]
        assert "b" not in store
        assert len(store) == 1

    def test_is_empty(self, start_time, make_event):
        store = EventStore(start_time)
        assert store.is_empty

        store.record([make_event("a", 1)])
        assert not store.is_empty
        assert [e.event_id for e in store.shown_events] == ["a"]


def _render_lines(events):
    stream = io.StringIO()
    EventRenderer(stream=stream, width=200).render(events)
    return [line.rstrip() for line in stream.getvalue().splitlines()]


class TestEventRenderer:

    def test_table_has_fixed_columns_and_no_header(self, make_event):
        table = EventRenderer().build_table([make_event("a", 1), make_event("b", 2)])

        assert table.show_header is False
        assert len(table.columns) == 5
        assert table.row_count == 2

    def test_rows_have_fixed_column_order(self, make_event):
        event = make_event("a", 10, logical_id="DeploymentBucket", status="CREATE_COMPLETE",
                           resource_type="AWS::S3::Bucket", reason="Resource creation Initiated")

        lines = _render_lines([event])

        assert lines[0] == ""
        assert len(lines) == 2
        cells = lines[1].split()
        assert cells[0] == "CREATE_COMPLETE"
        assert cells[1] == "DeploymentBucket"
        assert cells[2] == "AWS::S3::Bucket"
        assert cells[3] == event.timestamp.isoformat()
        assert lines[1].endswith("Resource creation Initiated")
        assert "ResourceStatus" not in lines[1]

    def test_columns_are_aligned(self, make_event):
        events = [
            make_event("a", 1, logical_id="A", status="CREATE_IN_PROGRESS"),
            make_event("b", 2, logical_id="LongLogicalId", status="CREATE_COMPLETE"),
        ]

        rows = _render_lines(events)[1:]

        assert rows[0].index("AWS::S3::Bucket") == rows[1].index("AWS::S3::Bucket")

    def test_rows_sorted_by_timestamp(self, make_event):
        rows = _render_lines([make_event("late", 20, logical_id="Late"),
                              make_event("early", 10, logical_id="Early")])[1:]

        assert "Early" in rows[0]
        assert "Late" in rows[1]

    def test_missing_reason_renders_empty(self, make_event):
        rows = _render_lines([make_event("a", 1)])[1:]

        assert "None" not in rows[0]

    def test_reason_brackets_are_printed_verbatim(self, make_event):
        rows = _render_lines([make_event("a", 1, reason="[DeploymentBucket] failed: bold")])[1:]

        assert rows[0].endswith("[DeploymentBucket] failed: bold")

    def test_render_empty_batch_prints_nothing(self):
        stream = io.StringIO()

        EventRenderer(stream=stream).render([])

        assert stream.getvalue() == ""

    def test_render_defaults_to_stdout(self, make_event, capsys):
        EventRenderer().render([make_event("a", 1, logical_id="StdoutBucket")])

        assert "StdoutBucket" in capsys.readouterr().out
