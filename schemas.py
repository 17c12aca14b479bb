from enum import Enum

from pydantic import AliasChoices, BaseModel, Field, field_validator


class ActionKind(str, Enum):
    SUMMARIZE = "summarize"
    BRAINSTORM = "brainstorm"
    ACTION_ITEMS = "action_items"
    EXPAND = "expand"
    REWRITE = "rewrite"
    NOTES = "notes"
    QUIZ = "quiz"
    ASK_QUESTION = "ask_question"
    IMPROVE_WRITING = "improve_writing"
    REPHRASE = "rephrase"

    @property
    def label(self):
        return self.value.replace("_", " ")


class ProcessRequest(BaseModel):
    page_id: str = Field(validation_alias=AliasChoices("pageId", "notionPageId", "page_id"))
    action: str
    content: str | None = None
    question: str | None = None
    append: bool = True

    @field_validator("page_id", "action")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class ProcessResponse(BaseModel):
    success: bool = True
    message: str
    output: str
    appended: bool
