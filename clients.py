"""
Remote collaborators: the Notion document store, the Gemini generator and a
plain URL fetcher.

The pipeline only depends on the protocols below, so tests can hand it
simple fakes.
"""

import logging
from typing import Protocol
from urllib.parse import quote

import httpx
from langchain_core.output_parsers import StrOutputParser
from langchain_google_genai import ChatGoogleGenerativeAI
from notion_client import AsyncClient

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    async def list_children(self, block_id: str, cursor: str | None = None, page_size: int = 100) -> dict: ...

    async def append_children(self, block_id: str, children: list[dict]) -> None: ...


class Generator(Protocol):
    async def generate(self, prompt: str) -> str: ...


class UrlFetcher(Protocol):
    async def fetch(self, url: str) -> str: ...


class NotionDocumentStore:
    """Thin async wrapper over notion_client's block children endpoints."""

    def __init__(self, client: AsyncClient):
        self.client = client

    @classmethod
    def from_token(cls, token: str):
        return cls(AsyncClient(auth=token))

    async def list_children(self, block_id, cursor=None, page_size=100):
        params = {"block_id": block_id, "page_size": page_size}
        if cursor:
            params["start_cursor"] = cursor
        return await self.client.blocks.children.list(**params)

    async def append_children(self, block_id, children):
        await self.client.blocks.children.append(block_id=block_id, children=children)

    async def aclose(self):
        await self.client.aclose()


class GeminiGenerator:
    """Runs a prompt through a Gemini chat model: prompt → llm → string."""

    def __init__(self, llm):
        self.llm = llm
        self.chain = llm | StrOutputParser()

    @classmethod
    def from_settings(cls, settings):
        logger.info(f"Initialising Gemini model={settings.gemini_model}, temp={settings.gemini_temperature}")
        llm = ChatGoogleGenerativeAI(
            model=settings.gemini_model,
            google_api_key=settings.gemini_api_key,
            temperature=settings.gemini_temperature,
        )
        return cls(llm)

    async def generate(self, prompt):
        return await self.chain.ainvoke(prompt)


class HttpUrlFetcher:
    """Fetches web content, optionally through a CORS proxy prefix."""

    def __init__(self, proxy_prefix="", timeout=30, transport=None):
        self.proxy_prefix = proxy_prefix
        self.timeout = timeout
        self.transport = transport

    def target(self, url):
        if not self.proxy_prefix:
            return url
        return f"{self.proxy_prefix}{quote(url, safe='')}"

    async def fetch(self, url):
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True, transport=self.transport) as client:
            resp = await client.get(self.target(url))
            resp.raise_for_status()
            return resp.text
