from datetime import datetime

from xlibre_builder.build.build_tracker import BuildTracker


def fixed_clock():
    return datetime(2026, 10, 16, 9, 30, 5)


def make_tracker(tmp_path):
    return BuildTracker(tmp_path / "success.log", tmp_path / "failed.log", clock=fixed_clock)


def test_ledger_files_exist_from_the_start(tmp_path):
    make_tracker(tmp_path)
    assert (tmp_path / "success.log").read_text() == ""
    assert (tmp_path / "failed.log").read_text() == ""


def test_outcomes_append_timestamped_lines(tmp_path):
    tracker = make_tracker(tmp_path)
    tracker.record_built_package("xlibre-server")
    tracker.record_failed_package("xlibre-video-intel", reason="makepkg exit 2")
    tracker.record_built_package("xlibre-base")

    assert (tmp_path / "success.log").read_text() == (
        "[2026-10-16 09:30:05] xlibre-server\n"
        "[2026-10-16 09:30:05] xlibre-base\n"
    )
    assert (tmp_path / "failed.log").read_text() == "[2026-10-16 09:30:05] xlibre-video-intel\n"


def test_skipped_packages_are_counted_but_not_written(tmp_path):
    tracker = make_tracker(tmp_path)
    tracker.record_skipped_package("xlibre-video-vesa")

    assert tracker.skipped_packages == ["xlibre-video-vesa"]
    assert (tmp_path / "success.log").read_text() == ""
    assert (tmp_path / "failed.log").read_text() == ""


def test_existing_ledgers_are_appended_to(tmp_path):
    (tmp_path / "success.log").write_text("[2026-10-15 08:00:00] xlibre-server\n")
    tracker = make_tracker(tmp_path)
    tracker.record_built_package("xlibre-video-vesa")

    assert (tmp_path / "success.log").read_text().splitlines() == [
        "[2026-10-15 08:00:00] xlibre-server",
        "[2026-10-16 09:30:05] xlibre-video-vesa",
    ]


def test_summary_counts(tmp_path):
    tracker = make_tracker(tmp_path)
    tracker.record_built_package("a")
    tracker.record_failed_package("b")
    tracker.record_skipped_package("c")
    tracker.record_skipped_package("d")

    summary = tracker.get_summary()
    assert (summary["succeeded"], summary["failed"], summary["skipped"]) == (1, 1, 2)
    assert summary["elapsed"] >= 0
