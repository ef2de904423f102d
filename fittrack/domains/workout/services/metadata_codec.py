"""
Codec cho payload `[DATA:{...}]` nằm cuối cột notes của workout_logs.

Đây là "schema" thực tế của metadata completion khi bảng không có cột
duration / exercises_completed / total_exercises. Đổi shape là làm hỏng việc
đọc lại record cũ, nên key và thứ tự key phải giữ nguyên:

    {"exercisesCompleted": 8, "totalExercises": 10, "duration": 45, "userNotes": "Great!"}

Field không có giá trị thì bỏ hẳn key (không ghi null).
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

SENTINEL_OPEN = "[DATA:"
SENTINEL_CLOSE = "]"
SUMMARY_SEPARATOR = " | "
SUMMARY_HEADLINE = "AI workout completed"

# (attr, json key) theo đúng thứ tự serialize
_FIELDS = (
    ("exercises_completed", "exercisesCompleted"),
    ("total_exercises", "totalExercises"),
    ("duration", "duration"),
    ("user_notes", "userNotes"),
)

# right-anchored: payload phải kết thúc chuỗi notes
_TRAILING_SENTINEL = re.compile(r"\[DATA:(\{.*\})\]\s*\Z", re.DOTALL)


@dataclass(frozen=True)
class CompletionMetadata:
    exercises_completed: Optional[int] = None
    total_exercises: Optional[int] = None
    duration: Optional[int] = None
    user_notes: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for attr, key in _FIELDS:
            value = getattr(self, attr)
            if value is not None:
                out[key] = value
        return out

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "CompletionMetadata":
        values = {attr: payload.get(key) for attr, key in _FIELDS}
        return cls(**values)


def encode_payload(meta: CompletionMetadata) -> str:
    text = json.dumps(meta.to_payload(), separators=(",", ":"), ensure_ascii=False)
    # userNotes có thể chứa "[DATA:"; escape ':' bên trong JSON string để sentinel chỉ xuất hiện 1 lần
    return text.replace(SENTINEL_OPEN, "[DATA\\u003a")


def build_summary(meta: CompletionMetadata) -> str:
    parts: List[str] = [SUMMARY_HEADLINE]

    if meta.exercises_completed is not None and meta.total_exercises is not None:
        parts.append(f"{meta.exercises_completed}/{meta.total_exercises} exercises")
    elif meta.exercises_completed is not None:
        parts.append(f"{meta.exercises_completed} exercises completed")

    if meta.duration is not None:
        parts.append(f"Duration: {meta.duration} minutes")

    if meta.user_notes:
        parts.append(f"Notes: {meta.user_notes.replace(SENTINEL_OPEN, '[DATA ')}")

    return SUMMARY_SEPARATOR.join(parts)


def compose_notes(meta: CompletionMetadata) -> str:
    """Summary dễ đọc + sentinel `[DATA:<json>]` ở cuối chuỗi."""
    sentinel = f"{SENTINEL_OPEN}{encode_payload(meta)}{SENTINEL_CLOSE}"
    return SUMMARY_SEPARATOR.join([build_summary(meta), sentinel])


def extract_metadata(notes: Optional[str]) -> Optional[CompletionMetadata]:
    """
    Đọc payload cuối chuỗi notes.
    Không có sentinel (record cũ) hoặc JSON hỏng -> None, không raise.
    """
    if not notes or not isinstance(notes, str):
        return None

    # thử từng vị trí "[DATA:" từ trái sang; vị trí đầu tiên mà phần còn lại
    # là 1 sentinel hợp lệ chính là payload thật
    start = notes.find(SENTINEL_OPEN)
    while start != -1:
        m = _TRAILING_SENTINEL.match(notes, start)
        if m:
            try:
                payload = json.loads(m.group(1))
            except ValueError:
                payload = None
            if isinstance(payload, dict):
                return CompletionMetadata.from_payload(payload)
        start = notes.find(SENTINEL_OPEN, start + 1)

    logger.debug("[COMPLETION] no structured metadata in notes")
    return None
