"""
Memory Service - best-effort long-term learner memory

Talks to a mem0-compatible HTTP API. Disabled (no-op) when MEM0_API_KEY is
unset. No method ever raises: every failure is logged and discarded.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from algosensei.config import settings

logger = logging.getLogger(__name__)


class MemoryService:
    """Fetch and store learner summaries for personalization"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.base_url = (base_url or settings.MEM0_BASE_URL).rstrip("/")
        self.api_key = settings.MEM0_API_KEY if api_key is None else api_key
        self.timeout = timeout or settings.MEM0_TIMEOUT

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def fetch_context(self, owner: str) -> List[Dict[str, Any]]:
        """
        Read prior memories for a learner

        Returns:
            List of memory dicts (each with a "content" string), or [] on any failure
        """
        if not self.enabled:
            return []

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    f"{self.base_url}/v1/memory/search",
                    params={"userId": owner},
                    headers=self._headers(),
                )
            if response.status_code >= 400:
                logger.warning(f"Memory search returned HTTP {response.status_code}")
                return []

            results = (response.json() or {}).get("results") or []
            return [
                item for item in results
                if isinstance(item, dict) and isinstance(item.get("content"), str)
            ]
        except Exception as e:
            logger.warning(f"Memory search failed: {e}")
            return []

    async def store_summary(
        self,
        owner: str,
        content: str,
        session_id: Optional[str] = None,
        tags: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Write a summary of an exchange; failures are logged and discarded"""
        if not self.enabled:
            return

        payload = {
            "userId": owner,
            "sessionId": session_id,
            "content": content,
            "tags": tags or [],
            "metadata": metadata or {},
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/v1/memory",
                    json=payload,
                    headers=self._headers(),
                )
            if response.status_code >= 400:
                logger.warning(f"Memory upsert returned HTTP {response.status_code}")
        except Exception as e:
            logger.warning(f"Memory upsert failed: {e}")
