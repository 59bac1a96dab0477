"""
Completion Relay - streams tutor replies from Azure OpenAI via LiteLLM

Flow per request:
1. Drop blank or malformed turns
2. Fetch learner memory (never fails)
3. Prepend the tutoring system prompt with that memory
4. Stream the provider's reply chunk by chunk to the caller
5. Schedule a memory write of the accumulated reply once the stream ends
   (also after a client disconnect); drain() waits for it
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict, List, Optional, Set

import litellm
from langchain_litellm import ChatLiteLLM
from langchain_core.messages import SystemMessage, HumanMessage, AIMessage

from algosensei.config import settings
from algosensei.core.exceptions import ConfigurationError, UpstreamProviderError
from algosensei.prompts import PromptBuilder
from algosensei.services.memory_service import MemoryService

# Configure litellm to automatically drop unsupported parameters
litellm.drop_params = True

logger = logging.getLogger(__name__)

REQUIRED_PROVIDER_SETTINGS = (
    "AZURE_OPENAI_ENDPOINT",
    "AZURE_OPENAI_KEY",
    "AZURE_OPENAI_DEPLOYMENT",
    "AZURE_OPENAI_API_VERSION",
)


def _normalize_part(part: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(part, dict):
        return None

    if part.get("type") == "image_url":
        image_url = part.get("image_url")
        url = image_url.get("url") if isinstance(image_url, dict) else image_url
        if not isinstance(url, str) or not url.strip():
            return None
        return {"type": "image_url", "image_url": {"url": url.strip(), "detail": "auto"}}

    if part.get("type") == "text":
        text = part.get("text")
        if isinstance(text, str) and text.strip():
            return {"type": "text", "text": text.strip()}

    return None


def normalize_messages(messages: List[Any]) -> List[Dict[str, Any]]:
    """
    Keep only turns worth sending upstream

    A turn is dropped when it has no role, or its content is blank: an
    empty string, or a part list with no non-blank text and no image.
    Roles other than "user" are sent as "assistant".

    Returns:
        Provider-format messages: {"role": ..., "content": str | list of parts}
    """
    normalized = []
    for message in messages or []:
        if not isinstance(message, dict):
            continue
        role = message.get("role")
        if not isinstance(role, str) or not role:
            continue
        role = "user" if role == "user" else "assistant"

        content = message.get("content")
        if isinstance(content, str):
            if content.strip():
                normalized.append({"role": role, "content": content.strip()})
        elif isinstance(content, list):
            parts = [p for p in (_normalize_part(part) for part in content) if p]
            if parts:
                normalized.append({"role": role, "content": parts})

    return normalized


def _to_langchain(message: Dict[str, Any]):
    if message["role"] == "user":
        return HumanMessage(content=message["content"])
    return AIMessage(content=message["content"])


def _chunk_text(chunk: Any) -> str:
    content = getattr(chunk, "content", None)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            p.get("text", "") if isinstance(p, dict) else str(p)
            for p in content
        )
    return ""


class CompletionRelay:
    """
    Relay between the browser and the LLM provider

    No retries and no buffering: each provider chunk is yielded as soon as
    it arrives.
    """

    def __init__(self, memory_service: Optional[MemoryService] = None, prompt_builder: Optional[PromptBuilder] = None):
        self.memory_service = memory_service or MemoryService()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self._pending_writes: Set[asyncio.Task] = set()

    def _create_llm(self) -> ChatLiteLLM:
        """
        Build the Azure OpenAI chat model

        Raises:
            ConfigurationError: If any provider setting is missing (before any network call)
        """
        missing = [name for name in REQUIRED_PROVIDER_SETTINGS if not getattr(settings, name)]
        if missing:
            raise ConfigurationError(
                "Missing environment variable(s): " + ", ".join(f'"{name}"' for name in missing)
            )

        model_string = f"azure/{settings.AZURE_OPENAI_DEPLOYMENT}"
        logger.info(f"Creating LLM for request: model={model_string}")
        return ChatLiteLLM(
            model=model_string,
            api_key=settings.AZURE_OPENAI_KEY,
            api_base=settings.AZURE_OPENAI_ENDPOINT,
            temperature=settings.CHAT_TEMPERATURE,
            max_tokens=settings.CHAT_MAX_TOKENS,
            timeout=settings.LLM_TIMEOUT,
            streaming=True,
            max_retries=1,  # single attempt
            model_kwargs={"api_version": settings.AZURE_OPENAI_API_VERSION},
        )

    async def converse(
        self,
        owner: str,
        messages: List[Any],
        session_id: Optional[str] = None
    ) -> AsyncGenerator[str, None]:
        """
        Stream the tutor's reply to a conversation

        Args:
            owner: Authenticated user's email
            messages: Conversation so far, oldest first (raw dicts)
            session_id: Optional correlation id stored with the memory

        Yields:
            Text chunks in provider order

        Raises:
            ConfigurationError: Provider settings missing
            UpstreamProviderError: Provider failed before the first chunk.
                Failures after that end the stream quietly.
        """
        valid_messages = normalize_messages(messages)
        llm = self._create_llm()

        memories = await self.memory_service.fetch_context(owner)
        system_prompt = self.prompt_builder.build_system_prompt(memories)

        lc_messages = [SystemMessage(content=system_prompt)]
        lc_messages.extend(_to_langchain(m) for m in valid_messages)

        logger.info(
            f"Streaming completion: {len(valid_messages)} turns "
            f"({len(messages or []) - len(valid_messages)} dropped), {len(memories)} memories"
        )

        full_response = ""
        try:
            async for chunk in llm.astream(lc_messages):
                delta = _chunk_text(chunk)
                if delta:
                    full_response += delta
                    yield delta
        except Exception as e:
            if not full_response:
                logger.error(f"LLM provider error: {e}")
                raise UpstreamProviderError(f"Error processing your request: {e}") from e
            logger.error(f"LLM stream ended early after {len(full_response)} chars: {e}")
        finally:
            # Runs in the background; drain() awaits it
            if full_response:
                self._schedule_memory_write(
                    owner=owner,
                    session_id=session_id,
                    content=full_response,
                    tags=["assistant-reply"],
                    metadata={
                        "timestamp": datetime.now(timezone.utc).isoformat(),
                        "message_count": len(valid_messages),
                    },
                )

    def _schedule_memory_write(self, **kwargs) -> None:
        task = asyncio.create_task(self.memory_service.store_summary(**kwargs))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    @property
    def pending_writes(self) -> int:
        """Number of memory writes still in flight"""
        return len(self._pending_writes)

    async def drain(self) -> None:
        """
        Wait for scheduled memory writes to finish

        Run after the response body is complete. Write failures are
        logged here and never raised.
        """
        if not self._pending_writes:
            return
        results = await asyncio.gather(*list(self._pending_writes), return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                logger.warning(f"Memory write failed: {result}")

