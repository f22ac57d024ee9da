from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from walk_buddy.errors import ValidationError

from .engine import EngineRegistry, default_registry
from .normalizer import normalize

MASK_PLACEHOLDER = "[masked]"

_WHITESPACE = re.compile(r"\s+")


class Category(str, Enum):
    CLEAN = "CLEAN"
    PROFANITY = "PROFANITY"


@dataclass(frozen=True)
class Classification:
    category: Category = Category.CLEAN

    @property
    def is_profane(self) -> bool:
        return self.category is Category.PROFANITY

    def as_dict(self) -> dict:
        return {"category": self.category.value}


CLEAN = Classification(Category.CLEAN)
PROFANITY = Classification(Category.PROFANITY)


class ContentFilter:
    """
    Classifies and masks free text.

    Matching always runs on normalize(text); what gets stored or shown is the
    caller's original text, masked by the engine only when something matched.
    """

    def __init__(self, registry: EngineRegistry | None = None, engine=None):
        if engine is not None:
            registry = EngineRegistry(engine)
        self.registry = registry or default_registry

    @property
    def engine(self):
        return self.registry.get()

    def detect(self, text) -> tuple[str, bool]:
        if not isinstance(text, str):
            return "", False

        normalized = normalize(text)
        if not normalized:
            return normalized, False

        return normalized, bool(self.engine.check(normalized))

    def classify(self, text) -> Classification:
        _, detected = self.detect(text)
        return PROFANITY if detected else CLEAN

    def clean(self, text):
        if not isinstance(text, str):
            return text

        _, detected = self.detect(text)
        if not detected:
            return text

        masked = self.engine.clean(text)
        if isinstance(masked, str) and masked != text:
            return masked

        return MASK_PLACEHOLDER

    def sanitize_message_content(self, message) -> str:
        if not isinstance(message, str):
            raise ValidationError("Message must be a string.")

        collapsed = _WHITESPACE.sub(" ", message).strip()
        if not collapsed:
            raise ValidationError("Message content is required.")

        return self.clean(collapsed)


def get_content_filter() -> ContentFilter:
    return ContentFilter(default_registry)
