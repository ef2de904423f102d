from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from fittrack.shared.llm.config import SUPPORTED_PROVIDERS, LLMConfig

logger = logging.getLogger(__name__)


def _log_prompt_stats(provider: str, model: str, prompt: str) -> None:
    prompt = prompt or ""
    logger.info(
        "[LLM][%s:%s] prompt_chars=%s prompt_lines=%s approx_tokens~=%s",
        provider,
        model,
        len(prompt),
        prompt.count("\n") + 1,
        len(prompt) // 4,  # ước lượng thô
    )
    logger.debug("[LLM] prompt_head=%s", prompt[:300].replace("\n", "\\n"))


class LLMClient:
    """
    Structured-output client trên LangChain chat models.
    Trả dict đã dump từ schema pydantic (caller tự validate lại).
    """

    def __init__(self, cfg: Optional[LLMConfig] = None) -> None:
        self.cfg = cfg or LLMConfig.from_env()

    def generate_plan_json(self, prompt: str) -> Dict[str, Any]:
        from fittrack.domains.workout.schemas import GeneratedPlanDocument

        return self.generate_structured(prompt, GeneratedPlanDocument)

    def generate_structured(self, prompt: str, schema_model: Type[BaseModel]) -> Dict[str, Any]:
        if self.cfg.provider not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Unsupported LLM_PROVIDER={self.cfg.provider}")
        if not self.cfg.api_key:
            raise RuntimeError(f"Missing API key for LLM provider '{self.cfg.provider}'")

        _log_prompt_stats(self.cfg.provider, self.cfg.model, prompt)

        chat = self._chat_model()
        try:
            structured = chat.with_structured_output(schema_model, method="json_schema")
        except TypeError:
            # bản langchain cũ không nhận `method`
            structured = chat.with_structured_output(schema_model)

        result = structured.invoke(prompt)
        if isinstance(result, BaseModel):
            return result.model_dump(mode="json")
        return dict(result)

    def _chat_model(self) -> Any:
        if self.cfg.provider == "gemini":
            from langchain_google_genai import ChatGoogleGenerativeAI

            return ChatGoogleGenerativeAI(
                model=self.cfg.gemini_model,
                google_api_key=self.cfg.gemini_api_key,
                temperature=self.cfg.temperature,
                max_retries=self.cfg.max_retries,
                timeout=self.cfg.timeout_sec,
            )

        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=self.cfg.openai_model,
            api_key=self.cfg.openai_api_key,
            temperature=self.cfg.temperature,
            max_retries=self.cfg.max_retries,
            timeout=self.cfg.timeout_sec,
        )
