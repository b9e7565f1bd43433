from abc import ABC, abstractmethod
from typing import Optional, Dict, List
import os
import logging

logger = logging.getLogger(__name__)

# One transcript entry: {"role": "user" | "model", "text": "..."}
HistoryEntry = Dict[str, str]


class LLMError(Exception):
    """Raised when the LLM provider call fails."""
    pass


class LLMClientInterface(ABC):
    @abstractmethod
    async def send(
        self,
        history: List[HistoryEntry],
        message: str,
        system_instruction: Optional[str] = None,
    ) -> str:
        """Continue a chat transcript with ``message`` and return the reply."""
        pass

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """Generate text from a single prompt."""
        pass


class GeminiAdapter(LLMClientInterface):
    """
    Adapter for Google Gemini API using google-generativeai SDK.
    Requires: pip install google-generativeai
    """
    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash"):
        self.api_key = api_key
        self.model_name = model_name
        self._client = None

    def _ensure_client(self):
        """Lazy initialization of the Gemini client."""
        if self._client is None:
            import google.generativeai as genai
            genai.configure(api_key=self.api_key)
            self._client = genai
            logger.info(f"Gemini client initialized with model: {self.model_name}")

    def _model(self, system_instruction: Optional[str] = None):
        # Chat answers are never blocked by the default safety filters
        from google.generativeai.types import HarmCategory, HarmBlockThreshold

        safety_settings = {
            HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_NONE,
            HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_NONE,
            HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_NONE,
            HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_NONE,
        }
        return self._client.GenerativeModel(
            self.model_name,
            safety_settings=safety_settings,
            system_instruction=system_instruction,
        )

    async def send(
        self,
        history: List[HistoryEntry],
        message: str,
        system_instruction: Optional[str] = None,
    ) -> str:
        self._ensure_client()

        try:
            chat = self._model(system_instruction).start_chat(
                history=[
                    {"role": entry["role"], "parts": [entry["text"]]}
                    for entry in history
                ]
            )
            response = await chat.send_message_async(message)
            result_text = response.text
            logger.debug(f"Gemini chat response length: {len(result_text)}")
            return result_text

        except Exception as e:
            logger.error(f"Gemini chat error: {e}")
            raise LLMError(str(e)) from e

    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        self._ensure_client()

        try:
            generation_config = {}
            if temperature is not None:
                generation_config["temperature"] = temperature

            response = await self._model(system_instruction).generate_content_async(
                prompt,
                generation_config=generation_config if generation_config else None,
            )
            result_text = response.text
            logger.debug(f"Gemini response length: {len(result_text)}")
            return result_text

        except Exception as e:
            logger.error(f"Gemini generation error: {e}")
            raise LLMError(str(e)) from e


class OpenAIAdapter(LLMClientInterface):
    """
    Adapter for OpenAI API using openai SDK.
    Requires: pip install openai
    """
    def __init__(self, api_key: str, model_name: str = "gpt-4o-mini"):
        self.api_key = api_key
        self.model_name = model_name
        self._client = None

    def _ensure_client(self):
        """Lazy initialization of the OpenAI client."""
        if self._client is None:
            from openai import AsyncOpenAI
            self._client = AsyncOpenAI(api_key=self.api_key)
            logger.info(f"OpenAI client initialized with model: {self.model_name}")

    async def _complete(self, messages: List[dict], temperature: Optional[float] = None) -> str:
        self._ensure_client()

        try:
            kwargs = {
                "model": self.model_name,
                "messages": messages,
            }
            if temperature is not None:
                kwargs["temperature"] = temperature

            response = await self._client.chat.completions.create(**kwargs)
            result_text = response.choices[0].message.content or ""
            logger.debug(f"OpenAI response length: {len(result_text)}")
            return result_text

        except Exception as e:
            logger.error(f"OpenAI generation error: {e}")
            raise LLMError(str(e)) from e

    async def send(
        self,
        history: List[HistoryEntry],
        message: str,
        system_instruction: Optional[str] = None,
    ) -> str:
        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        for entry in history:
            role = "user" if entry["role"] == "user" else "assistant"
            messages.append({"role": role, "content": entry["text"]})
        messages.append({"role": "user", "content": message})
        return await self._complete(messages)

    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": prompt})
        return await self._complete(messages, temperature=temperature)


class LLMFactory:
    @staticmethod
    def create_client(provider: str = "gemini", **kwargs) -> LLMClientInterface:
        """
        Factory method to create LLM clients.

        Args:
            provider: "gemini" or "openai"
            api_key: Optional API key (defaults to env var)
            model_name: Optional model name override
        """
        api_key = kwargs.get("api_key")
        model_name = kwargs.get("model_name")

        if provider == "gemini":
            key = api_key or os.getenv("GEMINI_API_KEY")
            if not key:
                raise ValueError("GEMINI_API_KEY not set")
            return GeminiAdapter(
                api_key=key,
                model_name=model_name or "gemini-2.5-flash"
            )
        elif provider == "openai":
            key = api_key or os.getenv("OPENAI_API_KEY")
            if not key:
                raise ValueError("OPENAI_API_KEY not set")
            return OpenAIAdapter(
                api_key=key,
                model_name=model_name or "gpt-4o-mini"
            )
        else:
            raise ValueError(f"Unknown LLM provider: {provider}")
