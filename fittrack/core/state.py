from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List
from typing_extensions import TypedDict

from .audit import new_audit


class BaseGraphState(TypedDict, total=False):
    """Field chung của mọi graph: id request, input thô, issues/warnings, audit trail"""
    request_id: str
    raw_input: Dict[str, Any]
    issues: List[Dict[str, Any]]
    warnings: List[Dict[str, Any]]
    audit: Dict[str, Any]


@dataclass
class BaseResult:
    request_id: str
    issues: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[Dict[str, Any]] = field(default_factory=list)
    audit: Dict[str, Any] = field(default_factory=new_audit)

    @property
    def ok(self) -> bool:
        return not self.issues


def generate_request_id() -> str:
    return uuid.uuid4().hex
