"""
Gemini LLM Client module for chat replies.

Provides a wrapper around Google's GenAI API for generating replies
to a chat history, either streamed chunk by chunk or in one call.

Features:
- Streaming replies via generate_content_stream
- System instruction and sampling settings per client
- Uniform GenerationError for every streaming failure
"""

import time
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from google import genai
from google.genai import types

from src.utils.logger import LoggerMixin, log_processing_stats
from src.generation.prompts import SYSTEM_PROMPT, build_contents


class GenerationError(RuntimeError):
    """Raised when a streamed reply cannot be produced or is interrupted."""
    
    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


@dataclass
class GenerationResult:
    """
    Result of a non-streaming generation.
    
    Attributes:
        answer: Generated response text.
        model: Model used for generation.
        generation_time: Time taken for generation.
        success: Whether generation was successful.
        error: Error message if generation failed.
    """
    answer: str
    model: str = ""
    generation_time: float = 0.0
    success: bool = True
    error: str = ""


class GeminiClient(LoggerMixin):
    """
    Client for Google Gemini API interactions.
    
    Handles API configuration, request formatting and error handling
    for chat replies.
    
    Attributes:
        model_name: Name of the Gemini model to use.
        temperature: Temperature setting for generation.
        max_tokens: Maximum tokens for response.
        system_prompt: System instruction sent with every request.
    
    Example:
        >>> client = GeminiClient(api_key="your_key")
        >>> for chunk in client.stream(conversation.messages):
        ...     print(chunk, end="")
    """
    
    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.5-flash",
        temperature: float = 0.7,
        max_tokens: int = 1024,
        system_prompt: str = SYSTEM_PROMPT
    ) -> None:
        """
        Initialize the Gemini client.
        
        Args:
            api_key: Google Generative AI API key.
            model_name: Gemini model to use.
            temperature: Generation temperature.
            max_tokens: Maximum response tokens.
            system_prompt: System instruction for the model.
        
        Raises:
            ValueError: If API key is empty.
        """
        if not api_key:
            raise ValueError(
                "Google API key is required. "
                "Set GOOGLE_API_KEY in your .env file."
            )
        
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.system_prompt = system_prompt
        
        self.client = genai.Client(api_key=self.api_key)
        
        self.logger.info(
            f"GeminiClient initialized: model={model_name}, "
            f"temperature={temperature}"
        )
    
    def _create_generation_config(self) -> types.GenerateContentConfig:
        """
        Create generation configuration for the API.
        
        Returns:
            GenerateContentConfig object.
        """
        return types.GenerateContentConfig(
            system_instruction=self.system_prompt,
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
        )
    
    def stream(self, messages: Iterable) -> Iterator[str]:
        """
        Stream a reply to the chat history, one text chunk at a time.
        
        Args:
            messages: Chat history ending with the user's latest message.
        
        Yields:
            Non-empty text chunks in arrival order.
        
        Raises:
            GenerationError: If the request fails or the stream breaks.
        """
        contents = build_contents(messages)
        if not contents:
            raise GenerationError("Cannot request a reply to an empty conversation")
        
        start_time = time.time()
        chunk_count = 0
        
        self.logger.debug(f"Streaming reply for {len(contents)} messages")
        
        try:
            response = self.client.models.generate_content_stream(
                model=self.model_name,
                contents=contents,
                config=self._create_generation_config()
            )
            for chunk in response:
                text = chunk.text
                if not text:
                    continue
                chunk_count += 1
                yield text
        except GenerationError:
            raise
        except Exception as e:
            self.logger.error(f"Streaming error after {chunk_count} chunks: {e}")
            raise GenerationError(f"Failed to stream response: {e}", cause=e) from e
        
        log_processing_stats(
            self.logger,
            "Reply stream",
            chunk_count,
            time.time() - start_time,
            {"model": self.model_name}
        )
    
    def generate(self, messages: Iterable) -> GenerationResult:
        """
        Generate a complete reply in a single request.
        
        Args:
            messages: Chat history ending with the user's latest message.
        
        Returns:
            GenerationResult with answer and metadata.
        """
        start_time = time.time()
        contents = build_contents(messages)
        
        if not contents:
            return GenerationResult(
                answer="",
                success=False,
                error="Cannot request a reply to an empty conversation",
            )
        
        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=contents,
                config=self._create_generation_config()
            )
        except Exception as e:
            self.logger.error(f"Generation error: {e}")
            return GenerationResult(
                answer="",
                model=self.model_name,
                success=False,
                error=f"Failed to generate response: {e}",
                generation_time=time.time() - start_time
            )
        
        answer = response.text or "No response."
        generation_time = time.time() - start_time
        self.logger.info(f"Response generated in {generation_time:.2f}s")
        
        return GenerationResult(
            answer=answer,
            model=self.model_name,
            generation_time=generation_time,
        )


def create_client_from_config(config, settings=None) -> GeminiClient:
    """
    Create a GeminiClient from application config.
    
    User settings, when given, override the model, temperature and
    system prompt from the environment.
    
    Args:
        config: Config object with LLM settings.
        settings: Optional AppSettings from persistence.
    
    Returns:
        Configured GeminiClient instance.
    """
    return GeminiClient(
        api_key=config.google_api_key,
        model_name=settings.model_name if settings else config.llm_model,
        temperature=settings.temperature if settings else config.llm_temperature,
        max_tokens=config.llm_max_tokens,
        system_prompt=settings.system_prompt if settings else config.system_prompt
    )
