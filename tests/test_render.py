from __future__ import annotations

import io

from pyfeedsync.models.delta import AddDelta, SyncDelta
from pyfeedsync.models.record import MessageRecord
from pyfeedsync.render import EMPTY_TEXT, TableRenderer, render_table
from pyfeedsync.state.store import ReplicaStore


def test_empty_replica_renders_placeholder() -> None:
    assert render_table({}) == EMPTY_TEXT == "No messages"


def test_table_has_header_and_one_row_per_record() -> None:
    text = render_table(
        {
            "a": {"From": "+100", "To": "+200", "Body": "hi"},
            "b": {"From": "+300", "To": "+400", "Body": "multi\nline"},
        }
    )
    lines = text.splitlines()

    assert lines[0].split(" | ") == ["From", "To  ", "Body      ", "Id"]
    assert set(lines[1]) <= {"-", "+"}
    assert lines[2].startswith("+100 | +200")
    assert lines[2].endswith("| a")
    assert "multi line" in lines[3]
    assert len(lines) == 4


def test_record_of_unknown_shape_still_renders() -> None:
    text = render_table({"z": {"foo": 1, "From": None}})
    assert text.splitlines()[-1].endswith("z")


def test_message_record_aliases_and_raw() -> None:
    record = {"from": "x", "To": "y", "Sid": "MG-1", "Extra": 3}
    msg = MessageRecord.from_record(record)

    assert (msg.sender, msg.recipient) == ("x", "y")
    assert msg.body == ""
    assert msg.raw == record


def test_renderer_rerenders_on_every_apply() -> None:
    stream = io.StringIO()
    renderer = TableRenderer(stream)
    store = ReplicaStore()
    store.subscribe(renderer)

    store.apply(SyncDelta(data={}))
    store.apply(AddDelta(id="a", data={"From": "x", "To": "y", "Body": "hi"}))

    assert renderer.renders == 2
    output = stream.getvalue()
    assert output.startswith("No messages\n\n")
    assert "x    | y  | hi   | a" in output
