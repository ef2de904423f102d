from .config import LLMConfig
from .client import LLMClient

__all__ = ["LLMConfig", "LLMClient"]
