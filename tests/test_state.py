import json

import pytest

from xlibre_builder.models import BuildOutcome
from xlibre_builder.orchestrator.state import RunState


def test_every_package_starts_pending():
    state = RunState(["a", "b"])
    assert state.pending() == ["a", "b"]
    assert not state.all_terminal(["a", "b"])


def test_transition_happens_once():
    state = RunState(["a"])
    state.set("a", BuildOutcome.FAILED)

    assert state.get("a") == "failed"
    with pytest.raises(ValueError):
        state.set("a", BuildOutcome.SUCCEEDED)
    assert state.get("a") == "failed"


def test_unknown_package_is_rejected():
    with pytest.raises(KeyError):
        RunState(["a"]).set("b", BuildOutcome.SKIPPED)


def test_all_terminal():
    state = RunState(["a", "b", "c"])
    state.set("a", BuildOutcome.SKIPPED)
    state.set("b", BuildOutcome.SUCCEEDED)
    assert state.all_terminal(["a", "b"])
    assert not state.all_terminal(["a", "b", "c"])
    assert not state.all_terminal(["missing"])


def test_state_file_follows_every_transition(tmp_path):
    state_file = tmp_path / "nested" / "build_state.json"
    state = RunState(["a", "b"], state_file=state_file)
    state.set("a", BuildOutcome.SUCCEEDED)

    data = json.loads(state_file.read_text())
    assert data["packages"] == {"a": "succeeded", "b": "pending"}
    assert "started" in data and "last_updated" in data
