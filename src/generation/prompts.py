"""
Prompt and request-content helpers for Gemini chat requests.

Holds the default system instruction and maps chat history onto the
role/parts structure the Gemini API expects.
"""

from typing import Iterable

from google.genai import types


# System prompt tuned for very small displays
SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Be very concise: use short sentences, "
    "bullet points, and bold key terms. Avoid long paragraphs. "
    "Format for tiny screens."
)

# Quick replies offered after an answer, keyed by what the answer contained
SUGGESTION_CODE = "Explain the code"
SUGGESTION_MATH = "Show the steps"
SUGGESTION_SUMMARY = "Summarize"
SUGGESTION_MORE = "Tell me more"
SUGGESTION_EXAMPLE = "Give an example"


def build_contents(messages: Iterable) -> list[types.Content]:
    """
    Convert chat messages into Gemini request contents.
    
    Messages with blank text (e.g. a model reply that failed before
    its first chunk) are skipped, since the API rejects empty parts.
    
    Args:
        messages: Message objects with .role (MessageRole) and .text.
    
    Returns:
        List of Content objects in chat order.
    """
    contents: list[types.Content] = []
    for message in messages:
        if not message.text.strip():
            continue
        contents.append(
            types.Content(
                role=message.role.value,
                parts=[types.Part(text=message.text)],
            )
        )
    return contents
