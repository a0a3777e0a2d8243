from abc import ABC, abstractmethod
import logging
from typing import Optional

import google.generativeai as genai
from google.generativeai.types import HarmCategory, HarmBlockThreshold # For safety settings
from openai import AsyncOpenAI

from video_summarizer.config import Settings

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    @abstractmethod
    async def generate_content_async(self, prompt: str, content: str) -> str:
        """
        Generate content based on system prompt and input content.
        Args:
            prompt: System prompt/instructions
            content: Input content to process
        Returns:
            Generated content from LLM
        """
        pass


class GeminiProvider(LLMProvider):
    def __init__(self, api_key: str, model_name: str) -> None:
        if not api_key:
            logger.error("GEMINI_API_KEY environment variable not set.")
            raise ValueError("GEMINI_API_KEY environment variable not set.")
        if not model_name:
            logger.error("GEMINI_MODEL environment variable not set.")
            raise ValueError("GEMINI_MODEL environment variable not set.")

        self.model_name = model_name
        # google-generativeai keeps the API key in module-level state, so every
        # GeminiProvider in the process shares the last key configured.
        genai.configure(api_key=api_key)

        # Block harassment and hate speech rated medium or above.
        self.safety_settings = {
            HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
            HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
        }
        self.model = genai.GenerativeModel(
            self.model_name, safety_settings=self.safety_settings
        )

    async def generate_content_async(self, prompt: str, content: str) -> str:
        full_prompt = f"{prompt}\n\n{content}"
        try:
            response = await self.model.generate_content_async(full_prompt)
            return response.text
        except Exception as e:
            logger.error(f"Gemini generation error: {e}")
            # Surface the block reason when the prompt itself was rejected
            feedback = getattr(getattr(e, "response", None), "prompt_feedback", None)
            if feedback is not None and feedback.block_reason:
                raise ValueError(
                    f"Content generation blocked. Reason: {feedback.block_reason.name}"
                ) from e
            raise


class OpenAIProvider(LLMProvider):
    def __init__(self, api_key: str, model_name: str, base_url: Optional[str] = None):
        if not api_key:
            logger.error("OPENAI_API_KEY environment variable not set.")
            raise ValueError("OPENAI_API_KEY environment variable not set.")
        if not model_name:
            logger.error("OPENAI_MODEL environment variable not set.")
            raise ValueError("OPENAI_MODEL environment variable not set.")

        self.model_name = model_name
        self.async_llm = AsyncOpenAI(api_key=api_key, base_url=base_url)

    async def generate_content_async(self, prompt: str, content: str) -> str:
        try:
            response = await self.async_llm.chat.completions.create(
                model=self.model_name,
                messages=[
                    {"role": "system", "content": prompt},
                    {"role": "user", "content": content},
                ],
            )
            return response.choices[0].message.content
        except Exception as e:
            logger.error(f"OpenAI generation error: {e}")
            raise


def get_llm_provider(settings: Settings) -> LLMProvider:
    provider_name = settings.llm_provider.lower()
    logger.info(f"Attempting to initialize LLM provider: {provider_name}")
    if provider_name == "gemini":
        return GeminiProvider(settings.gemini_api_key, settings.gemini_model)
    elif provider_name == "openai":
        return OpenAIProvider(
            settings.openai_api_key, settings.openai_model, settings.openai_base_url
        )
    else:
        logger.error(f"Unsupported LLM provider: {provider_name}")
        raise ValueError(f"Unsupported LLM provider: {provider_name}")
