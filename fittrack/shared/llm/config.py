from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

SUPPORTED_PROVIDERS = ("openai", "gemini")


@dataclass(frozen=True)
class LLMConfig:
    provider: str = "openai"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    temperature: float = 0.6
    max_retries: int = 2
    timeout_sec: float = 60.0

    @property
    def model(self) -> str:
        return self.gemini_model if self.provider == "gemini" else self.openai_model

    @property
    def api_key(self) -> Optional[str]:
        return self.gemini_api_key if self.provider == "gemini" else self.openai_api_key

    @staticmethod
    def from_env() -> "LLMConfig":
        # không raise khi thiếu key: chỉ lỗi lúc thật sự gọi provider
        return LLMConfig(
            provider=(os.getenv("LLM_PROVIDER") or "openai").strip().lower(),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_model=os.getenv("OPENAI_MODEL") or "gpt-4o-mini",
            gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL") or "gemini-1.5-flash",
            temperature=float(os.getenv("LLM_TEMPERATURE") or 0.6),
            max_retries=int(os.getenv("LLM_MAX_RETRIES") or 2),
            timeout_sec=float(os.getenv("LLM_TIMEOUT_SEC") or 60),
        )
