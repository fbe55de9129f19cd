"""
Conversation Text Generation (cache-first)

Flow:
1. Derive the cache path from wordId
2. Cache hit -> return the stored conversation untouched
3. Cache miss -> prompt the text generator, parse, apply the 3-5 turn rule
4. Write the new conversation back to the cache

Concurrent misses for the same wordId each generate and each write; the last
write wins and both writers produce equivalent records. There is no lock or
in-flight deduplication.
"""
import asyncio
import logging
from typing import Optional

from pydantic import ValidationError

from app.core.errors import GenerationError, GenerationTimeout, InfrastructureError, ProviderError
from app.core.hashing import conversation_id, conversation_text_path
from app.core.metrics import CacheMetrics
from app.schemas.conversation import Conversation, utc_now_iso
from .blob_cache import JSON_CONTENT_TYPE, BlobCache
from .conversation_parser import parse_conversation_text
from .prompt import build_conversation_prompt
from .text_base import GenerationOptions, TextGenerator

logger = logging.getLogger("uvicorn.error")


class ConversationGenerator:
    """Cache-first text generation for vocabulary conversations"""

    def __init__(
        self,
        cache: BlobCache,
        text_generator: TextGenerator,
        options: GenerationOptions,
        timeout_sec: Optional[float] = None,
        metrics: Optional[CacheMetrics] = None,
    ):
        self.cache = cache
        self.text_generator = text_generator
        self.options = options
        self.timeout_sec = timeout_sec
        self.metrics = metrics or CacheMetrics()

    async def generate_text(
        self,
        word_id: str,
        word: str,
        generator_version: str,
        timeout: Optional[float] = None,
    ) -> Conversation:
        """
        Return the conversation for word_id, generating it on a cache miss

        Raises:
        - InfrastructureError: Cache lookup failed
        - GenerationError / GenerationTimeout: Text provider failed or timed out
        """
        path = conversation_text_path(word_id)

        cached = await self._load_cached(path, generator_version)
        if cached is not None:
            self.metrics.record_hit()
            logger.info("[convo] cache hit: %s", path)
            return cached

        self.metrics.record_miss()
        logger.info("[convo] cache miss: %s, generating for word=%s (%s)", path, word, word_id)

        prompt = build_conversation_prompt(word)
        raw_text = await self._call_generator(prompt, timeout)

        outcome = parse_conversation_text(raw_text)
        if outcome.dropped_line_count:
            logger.info("[convo] dropped %d unparsable lines for %s", outcome.dropped_line_count, word_id)
        if outcome.used_fallback:
            logger.warning("[convo] not enough turns generated for %s, using fallback conversation", word_id)
        elif outcome.truncated_count:
            logger.info("[convo] truncated %d extra turns for %s", outcome.truncated_count, word_id)

        conversation = Conversation(
            id=conversation_id(word_id),
            wordId=word_id,
            word=word,
            generatorVersion=generator_version,
            prompt=prompt,
            turns=outcome.turns,
            generatedAt=utc_now_iso(),
        )
        logger.info("[convo] generated %d turns for %s", len(conversation.turns), conversation.id)

        try:
            await self.cache.write(path, conversation.to_json_bytes(), JSON_CONTENT_TYPE)
        except InfrastructureError as e:
            # The generated conversation is still this response's answer
            logger.error("[convo] failed to cache %s: %s", path, e)
        else:
            logger.info("[convo] cached: %s", path)

        return conversation

    async def _load_cached(self, path: str, generator_version: str) -> Optional[Conversation]:
        """Stored conversation at path, or None on a miss (corrupt entries count as misses)"""
        if not await self.cache.exists(path):
            return None

        data = await self.cache.read(path)
        try:
            conversation = Conversation.from_json_bytes(data)
        except ValidationError as e:
            logger.warning("[convo] discarding malformed cache entry %s: %s", path, e)
            return None

        if conversation.generatorVersion != generator_version:
            # The key does not include the version, so older records are served as-is
            logger.warning(
                "[convo] serving %s generated by %s (requested %s)",
                path, conversation.generatorVersion, generator_version,
            )
        return conversation

    async def _call_generator(self, prompt: str, timeout: Optional[float]) -> str:
        timeout = timeout if timeout is not None else self.timeout_sec
        try:
            return await asyncio.wait_for(
                self.text_generator.generate_text(prompt, self.options),
                timeout=timeout or None,
            )
        except asyncio.TimeoutError as e:
            logger.error("[convo] %s timed out after %ss", self.text_generator.name, timeout)
            raise GenerationTimeout(f"{self.text_generator.name} timed out after {timeout}s") from e
        except ProviderError as e:
            logger.error("[convo] %s failed: %s", self.text_generator.name, e)
            raise
        except Exception as e:
            logger.exception("[convo] %s raised an unexpected error", self.text_generator.name)
            raise GenerationError(f"{self.text_generator.name} failed: {e}") from e
