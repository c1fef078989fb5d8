from __future__ import annotations
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List

@dataclass
class PlanAction:
    action: str
    target: str
    detail: str
    paths: Dict[str, str]
    will_change: bool
    severity: str = "info"  # info|warn|error

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass
class Plan:
    ok: bool = True
    actions: List[PlanAction] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    command: List[str] = field(default_factory=list)

    def add(self, action: PlanAction) -> None:
        if action.severity == "error":
            self.ok = False
        self.actions.append(action)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "actions": [a.to_dict() for a in self.actions],
            "notes": list(self.notes),
            "command": list(self.command),
        }
