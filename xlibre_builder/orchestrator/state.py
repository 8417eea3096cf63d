"""
Build state management
"""

import json
from datetime import datetime
from pathlib import Path

from ..models import BuildOutcome

PENDING = "pending"


class RunState:
    """Per-run package states: pending -> skipped | succeeded | failed, once"""

    def __init__(self, identifiers, state_file=None):
        self.state_file = Path(state_file) if state_file else None
        self.state = {name: PENDING for name in identifiers}
        self.started = datetime.now().isoformat()

    def set(self, pkg_name, outcome: BuildOutcome):
        current = self.state.get(pkg_name)
        if current is None:
            raise KeyError(f"{pkg_name} is not part of this run")
        if current != PENDING:
            raise ValueError(f"{pkg_name} already finished as {current}")
        self.state[pkg_name] = outcome.value
        self.save_state()

    def get(self, pkg_name, default=None):
        return self.state.get(pkg_name, default)

    def pending(self):
        return [name for name, value in self.state.items() if value == PENDING]

    def all_terminal(self, names) -> bool:
        return all(self.state.get(name) not in (None, PENDING) for name in names)

    def save_state(self):
        if self.state_file is None:
            return
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.state_file, 'w') as f:
            json.dump({
                'started': self.started,
                'last_updated': datetime.now().isoformat(),
                'packages': self.state,
            }, f, indent=2)
