import pytest
from app.api.schemas import ProgressEvent
from app.console.store import ProgressEntry, ProgressStore, UploadStatus, render
from app.console.view import ProgressView

def progress(name, count):
    return ProgressEvent(file=name, status="progress", bytes=count)

def done(name):
    return ProgressEvent(file=name, status="done")

def test_latest_event_wins_over_larger_earlier_value(store, view):
    store.apply_event(progress("F", 500))
    store.apply_event(progress("F", 200))

    assert len(store) == 1
    assert store.get("F").bytes_transferred == 200
    assert view.lines == ["F: 200 bytes"]

def test_first_sighting_renders_starting_before_event_update():
    seen = []
    view = ProgressView(on_change=lambda line: seen.append(line.text))
    store = ProgressStore(view)

    store.apply_event(done("report.pdf"))

    assert seen == ["report.pdf: starting", "report.pdf: complete"]

def test_first_progress_event_also_starts_entry():
    seen = []
    store = ProgressStore(ProgressView(on_change=lambda line: seen.append(line.text)))

    store.apply_event(progress("a.bin", 42))

    assert seen == ["a.bin: starting", "a.bin: 42 bytes"]

def test_done_renders_complete_regardless_of_bytes(store, view):
    store.apply_event(progress("F", 1024))
    store.apply_event(done("F"))

    assert store.get("F").status is UploadStatus.DONE
    assert view.lines == ["F: complete"]

def test_progress_after_done_is_applied(store, view):
    store.apply_event(done("F"))
    store.apply_event(progress("F", 7))

    assert store.get("F").status is UploadStatus.IN_PROGRESS
    assert view.lines == ["F: 7 bytes"]

def test_entries_keep_first_seen_order(store, view):
    store.apply_event(progress("b.txt", 1))
    store.apply_event(progress("a.txt", 1))
    store.apply_event(done("b.txt"))
    store.apply_event(progress("c.txt", 3))

    assert [entry.filename for entry in store.entries()] == ["b.txt", "a.txt", "c.txt"]
    assert view.lines == ["b.txt: complete", "a.txt: 1 bytes", "c.txt: 3 bytes"]

def test_filenames_are_case_sensitive(store):
    store.apply_event(progress("Report.txt", 1))
    store.apply_event(progress("report.txt", 2))

    assert len(store) == 2

def test_entry_keeps_its_render_handle(store):
    first = store.apply_event(progress("F", 1))
    element = first.element

    store.apply_event(done("F"))
    store.apply_event(progress("F", 3))

    assert store.get("F") is first
    assert store.get("F").element is element
    assert element.text == "F: 3 bytes"

def test_resubmission_reuses_existing_entry(store, view):
    store.apply_event(done("F"))

    store.ensure_entry("F")
    store.apply_event(progress("F", 10))

    assert len(view) == 1
    assert view.lines == ["F: 10 bytes"]

def test_ensure_entry_renders_starting(store, view):
    entry = store.ensure_entry("new.txt")

    assert entry.status is UploadStatus.STARTING
    assert "new.txt" in store
    assert view.lines == ["new.txt: starting"]

def test_unknown_status_only_creates_entry(store, view):
    store.apply_event(ProgressEvent(file="F", status="paused"))

    assert store.get("F").status is UploadStatus.STARTING
    assert view.lines == ["F: starting"]

def test_progress_without_bytes_keeps_previous_count(store, view):
    store.apply_event(progress("F", 30))
    store.apply_event(ProgressEvent(file="F", status="progress"))

    assert view.lines == ["F: 30 bytes"]

def test_failures_are_kept_apart_from_entries(store, view):
    store.apply_event(progress("F", 1))

    store.record_failure("a.txt (connection refused)")

    assert len(store) == 1
    assert "a.txt" not in store
    assert [line.text for line in store.failures] == ["upload failed: a.txt (connection refused)"]
    assert view.lines == ["F: 1 bytes", "upload failed: a.txt (connection refused)"]

@pytest.mark.parametrize("entry, text", [
    (ProgressEntry("x.bin"), "x.bin: starting"),
    (ProgressEntry("x.bin", UploadStatus.IN_PROGRESS, 99), "x.bin: 99 bytes"),
    (ProgressEntry("x.bin", UploadStatus.DONE, 99), "x.bin: complete"),
])
def test_render(entry, text):
    assert render(entry) == text
