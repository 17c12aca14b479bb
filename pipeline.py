"""
Content pipeline: resolve content → build prompt → generate → append.

Each request walks the stages in order. Any failure stops the walk and is
raised as exactly one PipelineError kind tagged with the stage it hit.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from errors import ContentFetchFailed, EmptyContent, GenerationFailed, PipelineError
from notion_text import extract_page_text
from prompts import PromptBuilder, normalize_actions, parse_action
from schemas import ActionKind
from writer import DocumentWriter

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    START = "start"
    RESOLVE_CONTENT = "resolve_content"
    BUILD_PROMPT = "build_prompt"
    GENERATE = "generate"
    APPEND = "append"
    RETURN = "return"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineResult:
    output: str = ""
    appended: bool = False
    stages: list = field(default_factory=list)


def is_url(text):
    return text.startswith("http://") or text.startswith("https://")


class ContentPipeline:
    def __init__(self, store, generator, prompt_builder=None, writer=None, url_fetcher=None, enabled_actions=None):
        self.store = store
        self.generator = generator
        self.enabled_actions = normalize_actions(enabled_actions)
        self.prompt_builder = prompt_builder or PromptBuilder(enabled=self.enabled_actions)
        self.writer = writer or DocumentWriter(store)
        self.url_fetcher = url_fetcher

    async def process(self, request):
        result = PipelineResult()
        stage = Stage.START
        try:
            result.stages.append(stage)
            action = parse_action(request.action, self.enabled_actions)

            stage = Stage.RESOLVE_CONTENT
            result.stages.append(stage)
            text = await self.resolve_content(request)

            stage = Stage.BUILD_PROMPT
            result.stages.append(stage)
            question = (request.question or request.content) if action is ActionKind.ASK_QUESTION else None
            prompt = self.prompt_builder.build(action, text, question=question)

            stage = Stage.GENERATE
            result.stages.append(stage)
            result.output = await self.generate(prompt)

            if request.append:
                stage = Stage.APPEND
                result.stages.append(stage)
                await self.writer.append(request.page_id, result.output, action=action)
                result.appended = True
            else:
                stage = Stage.RETURN
                result.stages.append(stage)
        except PipelineError as e:
            e.stage = stage
            if stage is Stage.APPEND:
                e.output = result.output
            result.stages.append(Stage.FAILED)
            logger.error(f"❌ {e.kind} during {stage.value} for page {request.page_id}: {e.message}")
            raise

        result.stages.append(Stage.DONE)
        return result

    async def resolve_content(self, request):
        content = request.content or ""
        if content.strip():
            if self.url_fetcher is not None and is_url(content.strip()):
                text = await self.fetch_url(content.strip())
            else:
                text = content
        else:
            text = await extract_page_text(self.store, request.page_id)

        if not text.strip():
            raise EmptyContent("No textual content found to process.")
        return text

    async def fetch_url(self, url):
        logger.info(f"🌐 Fetching content from URL: {url}")
        try:
            return await self.url_fetcher.fetch(url)
        except Exception as e:
            raise ContentFetchFailed(url, cause=e) from e

    async def generate(self, prompt):
        logger.info("🤖 Sending prompt to generator...")
        try:
            output = await self.generator.generate(prompt)
        except Exception as e:
            raise GenerationFailed(f"Text generation failed: {e}", cause=e) from e
        logger.info(f"🤖 Generator response received ({len(output)} chars)")
        return output
