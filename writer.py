"""Turn generated text into Notion blocks and append them to a page."""

import logging

from errors import AppendFailed
from schemas import ActionKind

logger = logging.getLogger(__name__)

# Notion caps a single rich text object's content and the spans per block
MAX_SPAN_CHARS = 2000
MAX_SPANS = 100


def text_spans(text, bold=False):
    spans = []
    for start in range(0, len(text), MAX_SPAN_CHARS):
        span = {"type": "text", "text": {"content": text[start:start + MAX_SPAN_CHARS]}}
        if bold:
            span["annotations"] = {"bold": True}
        spans.append(span)
        if len(spans) == MAX_SPANS:
            break
    return spans or [{"type": "text", "text": {"content": ""}}]


def header_block(action):
    try:
        label = ActionKind(action).label
    except ValueError:
        label = str(action).replace("_", " ")
    return {
        "object": "block",
        "type": "paragraph",
        "paragraph": {"rich_text": text_spans(f"AI Output ({label}):", bold=True)},
    }


def body_block(text, style="code"):
    if style == "code":
        return {
            "object": "block",
            "type": "code",
            "code": {"rich_text": text_spans(text), "language": "markdown"},
        }
    return {"object": "block", "type": "paragraph", "paragraph": {"rich_text": text_spans(text)}}


def build_blocks(text, action=None, style="code"):
    blocks = []
    if action:
        blocks.append(header_block(action))
    blocks.append(body_block(text, style))
    return blocks


class DocumentWriter:
    def __init__(self, store, style="code"):
        self.store = store
        self.style = style

    async def append(self, page_id, text, action=None):
        blocks = build_blocks(text, action=action, style=self.style)
        try:
            await self.store.append_children(page_id, blocks)
        except Exception as e:
            logger.error(f"❌ Append to {page_id} failed: {e}")
            raise AppendFailed(page_id, cause=e) from e
        logger.info(f"✅ Appended {len(blocks)} block(s) to Notion page {page_id}")
