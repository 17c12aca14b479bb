"""Pytest fixtures: in-memory stand-ins for Notion and the generator."""

import pytest


def paragraph(text, block_type="paragraph"):
    return {
        "object": "block",
        "type": block_type,
        block_type: {"rich_text": [{"type": "text", "plain_text": text}]},
    }


class FakeStore:
    """Serves ``pages`` as a cursor chain and records every call."""

    def __init__(self, pages=None, list_error=None, append_error=None):
        self.pages = pages or [[]]
        self.list_error = list_error
        self.append_error = append_error
        self.list_calls = []
        self.append_calls = []

    async def list_children(self, block_id, cursor=None, page_size=100):
        self.list_calls.append((block_id, cursor, page_size))
        if self.list_error is not None:
            raise self.list_error
        index = int(cursor[1:]) if cursor else 0
        next_cursor = f"c{index + 1}" if index + 1 < len(self.pages) else None
        return {"results": self.pages[index], "next_cursor": next_cursor, "has_more": next_cursor is not None}

    async def append_children(self, block_id, children):
        self.append_calls.append((block_id, children))
        if self.append_error is not None:
            raise self.append_error


class FakeGenerator:
    def __init__(self, output="Summary.", error=None):
        self.output = output
        self.error = error
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.output


class FakeFetcher:
    def __init__(self, text="Fetched page text", error=None):
        self.text = text
        self.error = error
        self.urls = []

    async def fetch(self, url):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def two_page_store():
    return FakeStore(pages=[[paragraph("Hello ")], [paragraph("world")]])


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture(autouse=True)
def clear_api_keys(monkeypatch):
    monkeypatch.delenv("NOTION_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
