"""Flatten a Notion page's child blocks into plain text."""

import logging

from errors import ExtractionFailed

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


def rich_text_plain(block, key):
    return "".join(span.get("plain_text", "") for span in block.get(key, {}).get("rich_text", []))


def _text_line(block, key):
    return rich_text_plain(block, key) + "\n"


# block type -> renderer; anything not listed contributes nothing
BLOCK_RENDERERS = {
    "paragraph": _text_line,
    "heading_1": _text_line,
    "heading_2": _text_line,
    "heading_3": _text_line,
}


def block_text(block):
    block_type = block.get("type")
    render = BLOCK_RENDERERS.get(block_type)
    if render is None:
        return ""
    return render(block, block_type)


async def iter_block_pages(store, page_id, page_size=PAGE_SIZE, max_pages=None):
    """Yield each page of child blocks until the cursor runs out.

    A fresh call starts over from the first page. ``max_pages`` stops early
    when given; by default every page is fetched.
    """
    cursor = None
    fetched = 0
    while max_pages is None or fetched < max_pages:
        resp = await store.list_children(page_id, cursor=cursor, page_size=page_size)
        fetched += 1
        yield resp.get("results", [])
        cursor = resp.get("next_cursor")
        if not cursor:
            break


async def extract_page_text(store, page_id, page_size=PAGE_SIZE):
    """Return the plain text of every recognized block on ``page_id``.

    Raises ExtractionFailed if any page fetch fails; no partial text is
    returned.
    """
    parts = []
    pages = 0
    try:
        async for blocks in iter_block_pages(store, page_id, page_size=page_size):
            pages += 1
            parts.extend(block_text(block) for block in blocks)
    except Exception as e:
        logger.error(f"❌ Error fetching Notion page content for {page_id}: {e}")
        raise ExtractionFailed(page_id, cause=e) from e

    text = "".join(parts)
    logger.info(f"📄 Extracted {len(text)} chars from {page_id} across {pages} page(s)")
    return text
