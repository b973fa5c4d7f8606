"""LLM Service - Abstraction layer for AI model calls.

This module provides a unified interface for calling different LLM providers
(Gemini, OpenAI) with consistent error handling and response formatting.

Interface Contract:
- call(prompt, json_mode) -> str (raw text)
- chat(messages, system_prompt) -> str (next assistant reply)
- All methods raise LLMServiceError on failure
- Callers should not depend on specific LLM provider details
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Literal

import google.generativeai as genai
from openai import OpenAI

from config import DEFAULT_MODEL, LLM_PROVIDER, OPENAI_MODEL


class LLMServiceError(Exception):
    """Raised when LLM call fails."""
    pass


@dataclass
class ChatMessage:
    """One turn of a chat conversation."""
    role: Literal["user", "assistant"]
    content: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChatMessage":
        """Create from dictionary; raises ValueError for an unknown role."""
        role = data.get("role")
        if role not in ("user", "assistant"):
            raise ValueError(f"Invalid chat role: {role!r}")
        return cls(role=role, content=str(data.get("content", "")))


WEDDING_PLANNER_PROMPT = """
You are a friendly, empathetic wedding planning assistant helping couples plan their dream wedding in New South Wales, Australia.

Your goal is to gather the following information through natural conversation:
1. Wedding date (or preferred month/season if flexible)
2. Location (suburb/region in NSW)
3. Expected guest count (approximate is fine)
4. Total budget and category budgets (venue, catering, photography)
5. Wedding style and aesthetic preferences
6. Must-have requirements and deal-breakers
7. Dietary restrictions and accessibility needs

Guidelines:
- Be warm, empathetic, and genuinely excited for their wedding
- Ask ONE question at a time - don't overwhelm them
- If they provide vague answers, gently ask for more specifics
- Use Australian English spellings and references
- After gathering all required info, summarize everything and ask for confirmation
- Keep responses concise and conversational

When you've collected all necessary information, let them know you'll now search for vendors that match their requirements.
""".strip()


class BaseLLMService(ABC):
    """Abstract base class for LLM services."""

    @abstractmethod
    def call(self, prompt: str, *, json_mode: bool = False) -> str:
        """Call the LLM with a prompt.

        Args:
            prompt: The prompt to send to the LLM
            json_mode: If True, expect JSON response

        Returns:
            str: The LLM response text

        Raises:
            LLMServiceError: If the call fails
        """
        pass

    @abstractmethod
    def chat(self, messages: list[ChatMessage], *, system_prompt: str | None = None) -> str:
        """Continue a conversation.

        Args:
            messages: Conversation so far, oldest first; the last one is from the user
            system_prompt: Optional instructions for the assistant

        Returns:
            str: The assistant's reply

        Raises:
            LLMServiceError: If the call fails
        """
        pass


class GeminiService(BaseLLMService):
    """Google Gemini LLM service implementation."""

    def __init__(self, model: str = DEFAULT_MODEL):
        self.model = model
        self._configured = False

    def _configure(self) -> None:
        """Configure Gemini API (lazy initialization)."""
        if self._configured:
            return
        api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
        if not api_key:
            raise LLMServiceError("GEMINI_API_KEY or GOOGLE_API_KEY environment variable not set")
        genai.configure(api_key=api_key)
        self._configured = True

    def call(self, prompt: str, *, json_mode: bool = False) -> str:
        """Call Gemini model."""
        self._configure()
        try:
            gen_config = None
            if json_mode:
                gen_config = genai.GenerationConfig(
                    response_mime_type="application/json"
                )
            model = genai.GenerativeModel(self.model)
            response = model.generate_content(prompt, generation_config=gen_config)
            return response.text
        except Exception as e:
            raise LLMServiceError(f"Gemini call failed: {e}") from e

    def chat(self, messages: list[ChatMessage], *, system_prompt: str | None = None) -> str:
        """Call Gemini with the conversation history."""
        self._configure()
        try:
            model = genai.GenerativeModel(self.model, system_instruction=system_prompt)
            contents = [
                {"role": "model" if m.role == "assistant" else "user", "parts": [m.content]}
                for m in messages
            ]
            response = model.generate_content(contents)
            return response.text
        except Exception as e:
            raise LLMServiceError(f"Gemini chat failed: {e}") from e


class OpenAIService(BaseLLMService):
    """OpenAI LLM service implementation."""

    def __init__(self, model: str = OPENAI_MODEL):
        self.model = model
        self._client: OpenAI | None = None

    def _get_client(self) -> OpenAI:
        """Get or create OpenAI client (lazy initialization)."""
        if self._client is None:
            api_key = os.environ.get("OPENAI_API_KEY")
            if not api_key:
                raise LLMServiceError("OPENAI_API_KEY environment variable not set")
            self._client = OpenAI(api_key=api_key)
        return self._client

    def _complete(self, messages: list[dict[str, str]], *, json_mode: bool = False) -> str:
        client = self._get_client()
        kwargs: dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        response = client.chat.completions.create(
            model=self.model,
            messages=messages,
            **kwargs,
        )
        return response.choices[0].message.content or ""

    def call(self, prompt: str, *, json_mode: bool = False) -> str:
        """Call OpenAI model."""
        try:
            return self._complete([{"role": "user", "content": prompt}], json_mode=json_mode)
        except LLMServiceError:
            raise
        except Exception as e:
            raise LLMServiceError(f"OpenAI call failed: {e}") from e

    def chat(self, messages: list[ChatMessage], *, system_prompt: str | None = None) -> str:
        """Call OpenAI with the conversation history."""
        payload = []
        if system_prompt:
            payload.append({"role": "system", "content": system_prompt})
        payload.extend({"role": m.role, "content": m.content} for m in messages)
        try:
            return self._complete(payload)
        except LLMServiceError:
            raise
        except Exception as e:
            raise LLMServiceError(f"OpenAI chat failed: {e}") from e


# Default service instance (can be swapped for testing)
class LLMService:
    """Facade for LLM services with provider switching."""

    _instance: BaseLLMService | None = None

    @classmethod
    def get_instance(cls) -> BaseLLMService:
        """Get the configured LLM service instance."""
        if cls._instance is None:
            cls._instance = OpenAIService() if LLM_PROVIDER == "openai" else GeminiService()
        return cls._instance

    @classmethod
    def set_instance(cls, service: BaseLLMService) -> None:
        """Set a custom LLM service (useful for testing)."""
        cls._instance = service

    @classmethod
    def reset(cls) -> None:
        """Reset to default service."""
        cls._instance = None


def call_llm(prompt: str, *, json_mode: bool = False) -> str:
    """Call the default LLM service."""
    return LLMService.get_instance().call(prompt, json_mode=json_mode)
