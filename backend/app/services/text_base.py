"""
Text Generation Service Abstract Interface

Provides unified interface for different text generation providers (Gemini / OpenAI GPT).
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class GenerationOptions:
    """Sampling options passed to every provider call"""
    model: str
    temperature: float = 0.7
    max_tokens: int = 1000


class TextGenerator(ABC):
    """Text Generation Service Abstract Base Class"""

    @abstractmethod
    async def generate_text(self, prompt: str, options: GenerationOptions) -> str:
        """
        Generate text for a prompt

        Parameters:
        - prompt: Full prompt text
        - options: Model name and sampling bounds

        Returns:
        - str: Raw generated text

        Raises:
        - GenerationError: Provider call failed or returned no text
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider credentials are configured"""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., "Google Gemini")"""
        pass

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Model used when the caller does not pick one"""
        pass
