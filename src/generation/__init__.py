"""Generation module for streamed Gemini chat replies."""

from .llm_client import GeminiClient, GenerationError, GenerationResult
from .prompts import SYSTEM_PROMPT, build_contents

__all__ = [
    "GeminiClient",
    "GenerationError",
    "GenerationResult",
    "SYSTEM_PROMPT",
    "build_contents",
]
