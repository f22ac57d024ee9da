from __future__ import annotations

from functools import wraps
from typing import Callable, Optional

from django.http import QueryDict

from loguru import logger

from .content_filter import CLEAN, ContentFilter, get_content_filter

MESSAGE_FIELD = "message"


def default_get_text(request):
    data = getattr(request, "data", None)
    if hasattr(data, "get"):
        return data.get(MESSAGE_FIELD)
    return None


def default_set_masked_text(request, masked_text):
    data = getattr(request, "data", None)
    if isinstance(data, QueryDict):
        mutable = data._mutable
        data._mutable = True
        data[MESSAGE_FIELD] = masked_text
        data._mutable = mutable
    elif isinstance(data, dict):
        data[MESSAGE_FIELD] = masked_text


def log_review(entry: dict) -> None:
    logger.info("Moderation review: category={category} action={action}", **entry)


class ModerationGate:
    """
    Runs ContentFilter in front of a request handler.

    The gate always leaves its verdict on request.profanity_review. Profane
    text is masked in place unless on_profanity is given, in which case that
    callback decides what happens and receives the continuation.
    """

    def __init__(
        self,
        content_filter: Optional[ContentFilter] = None,
        get_text: Callable = default_get_text,
        set_masked_text: Optional[Callable] = default_set_masked_text,
        logger: Optional[Callable[[dict], None]] = log_review,
        on_profanity: Optional[Callable] = None,
    ):
        self.content_filter = content_filter
        self.get_text = get_text
        self.set_masked_text = set_masked_text
        self.logger = logger
        self.on_profanity = on_profanity

    @property
    def filter(self) -> ContentFilter:
        if self.content_filter is None:
            self.content_filter = get_content_filter()
        return self.content_filter

    def _log(self, category: str, action: str) -> None:
        if callable(self.logger):
            self.logger({"category": category, "action": action})

    def __call__(self, request, next_handler):
        source_text = self.get_text(request) if callable(self.get_text) else None

        if not isinstance(source_text, str):
            request.profanity_review = CLEAN
            self._log("CLEAN", "skipped")
            return next_handler(request)

        classification = self.filter.classify(source_text)
        request.profanity_review = classification

        if not classification.is_profane:
            self._log("CLEAN", "passed")
            return next_handler(request)

        if callable(self.on_profanity):
            return self.on_profanity(
                request=request,
                next_handler=next_handler,
                clean=self.filter.clean,
                classification=classification,
            )

        masked_text = self.filter.clean(source_text)
        if callable(self.set_masked_text):
            self.set_masked_text(request, masked_text)
        self._log("PROFANITY", "masked")
        return next_handler(request)


def moderated(gate: ModerationGate):
    """Put a ModerationGate in front of an APIView handler method."""

    def decorator(handler):
        @wraps(handler)
        def wrapper(view, request, *args, **kwargs):
            return gate(request, lambda req: handler(view, req, *args, **kwargs))

        return wrapper

    return decorator
