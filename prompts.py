"""
Action-to-prompt templating.

Each action has exactly one template. Source text is inserted verbatim after
an optional prefix cut to ``max_chars``.
"""

from errors import ConfigurationError, InvalidAction, ValidationError
from schemas import ActionKind

DEFAULT_MAX_CHARS = 15000

TEMPLATES = {
    ActionKind.SUMMARIZE: (
        "Provide a concise, high-level summary of the main points and key takeaways from the following text. "
        "Keep it to 3-5 bullet points or a short paragraph. Format using Notion-compatible markdown."
    ),
    ActionKind.BRAINSTORM: (
        "Based on the following text, brainstorm 3-5 creative ideas, applications, or related concepts. "
        "Present them as a Notion-compatible markdown bulleted list."
    ),
    ActionKind.ACTION_ITEMS: (
        "Extract every concrete action item, task, or follow-up from the following text. "
        "Present them as a Notion-compatible markdown to-do list, noting owners and due dates where stated."
    ),
    ActionKind.EXPAND: (
        "Expand on the following text, adding relevant detail, examples, and explanation while keeping its "
        "original intent. Format using Notion-compatible markdown."
    ),
    ActionKind.REWRITE: (
        "Rewrite the following text from scratch so that it reads naturally and is well organized, "
        "preserving every key point. Format using Notion-compatible markdown."
    ),
    ActionKind.NOTES: (
        "Extract the most important facts, key concepts, and structured notes from the following text. "
        "Present them clearly using Notion-compatible markdown-formatted bulleted or numbered lists."
    ),
    ActionKind.QUIZ: (
        "Generate one challenging multiple-choice question with 4 options (A, B, C, D) and clearly indicate "
        'the correct answer at the end (e.g., "Correct Answer: B") based on the following text. '
        "Format using Notion-compatible markdown."
    ),
    ActionKind.ASK_QUESTION: (
        'Based on the following text, answer the question: "{question}". If the answer is not in the '
        "provided content, state that. Format using Notion-compatible markdown."
    ),
    ActionKind.IMPROVE_WRITING: (
        "Improve the following writing, focusing on clarity, conciseness, and impact, while retaining the "
        "original meaning. Format using Notion-compatible markdown."
    ),
    ActionKind.REPHRASE: (
        "Rephrase the following text in a clear, concise, and slightly more formal tone, preserving its "
        "meaning. Format using Notion-compatible markdown."
    ),
}


def normalize_actions(enabled):
    """Turn a collection of action names into a frozenset of ActionKind; None stays None."""
    if enabled is None:
        return None
    actions = set()
    for item in enabled:
        try:
            actions.add(ActionKind(item))
        except ValueError as e:
            raise ConfigurationError(f"Unknown action in enabled set: {item!r}.", cause=e) from e
    return frozenset(actions)


def parse_action(value, enabled=None):
    """Map a raw action string onto ActionKind, honouring a deployment's enabled set."""
    try:
        action = ActionKind(value)
    except ValueError:
        raise InvalidAction(value) from None
    enabled = normalize_actions(enabled)
    if enabled is not None and action not in enabled:
        raise InvalidAction(value)
    return action


def truncate(text, max_chars):
    if not max_chars:
        return text
    return text[:max_chars]


class PromptBuilder:
    def __init__(self, max_chars=DEFAULT_MAX_CHARS, enabled=None):
        self.max_chars = max_chars
        self.enabled = normalize_actions(enabled)

    def build(self, action, text, question=None):
        action = parse_action(action, self.enabled)
        instruction = TEMPLATES[action]
        if action is ActionKind.ASK_QUESTION:
            if not question or not question.strip():
                raise ValidationError("A question is required for the ask_question action.")
            # the question goes in as-is, like the source text
            instruction = instruction.replace("{question}", question)
        return f"{instruction}\n---\n{truncate(text, self.max_chars)}"
