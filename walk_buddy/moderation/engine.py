from __future__ import annotations

import threading
from typing import Iterable, Optional, Protocol, runtime_checkable

from django.conf import settings
from django.utils.module_loading import import_string

from loguru import logger

from walk_buddy.errors import ConfigurationError

from .normalizer import normalize, parse_terms

REQUIRED_CAPABILITIES = ("check", "clean")

BUNDLED_WORDLIST = "profanity_wordlist.txt"
MIN_NORMALIZED_TERM_LENGTH = 5


@runtime_checkable
class DetectionEngine(Protocol):
    def check(self, text: str) -> bool: ...

    def clean(self, text: str) -> str: ...


def validate_engine(engine) -> DetectionEngine:
    missing = [name for name in REQUIRED_CAPABILITIES if not callable(getattr(engine, name, None))]
    if engine is None or missing:
        raise ConfigurationError(
            "A detection engine with check(text) -> bool and clean(text) -> str methods is required "
            f"(missing: {', '.join(missing or REQUIRED_CAPABILITIES)})."
        )
    return engine


def apply_runtime_terms(engine, source) -> list[str]:
    """Normalize runtime terms and hand them to engine.add(), when the engine supports it."""
    terms = [t for t in (normalize(term) for term in parse_terms(source)) if t]
    add = getattr(engine, "add", None)
    if terms and callable(add):
        add(terms)
        logger.info("Added {} runtime term(s) to the detection dictionary", len(terms))
    return terms


def normalized_wordlist(words: Iterable[str], min_length: int = MIN_NORMALIZED_TERM_LENGTH) -> list[str]:
    """
    Return the words plus their normalized forms.

    check() only ever sees normalized text, where "asshole" has become
    "ashole", so the list has to carry that spelling too. The raw words stay
    in for clean(), which masks the caller's original text. Normalized forms
    shorter than min_length are left out: "ass" and "boob" collapse to "as"
    and "bob".
    """
    result = []
    seen = set()
    for word in words:
        candidates = [word.lower()]
        normalized = normalize(word)
        if len(normalized) >= min_length:
            candidates.append(normalized)
        for candidate in candidates:
            if candidate and candidate not in seen:
                seen.add(candidate)
                result.append(candidate)
    return result


class BetterProfanityEngine:
    """Adapter exposing better_profanity's word list through check/clean/add."""

    def __init__(self, censor_char: str = "*"):
        try:
            from better_profanity import Profanity
            from better_profanity.utils import get_complete_path_of_file, read_wordlist
        except ImportError as exc:
            raise ConfigurationError(
                "No detection engine is configured. Install better-profanity or call "
                "EngineRegistry.configure() with an object exposing check() and clean()."
            ) from exc

        bundled = read_wordlist(get_complete_path_of_file(BUNDLED_WORDLIST))
        self._profanity = Profanity(normalized_wordlist(bundled))
        self.censor_char = censor_char

    def check(self, text: str) -> bool:
        return bool(self._profanity.contains_profanity(text))

    def clean(self, text: str) -> str:
        return self._profanity.censor(text, self.censor_char)

    def add(self, terms: Iterable[str]) -> None:
        self._profanity.add_censor_words(list(terms))


class EngineRegistry:
    """
    Holds the detection engine for a process.

    configure() installs an engine up front; otherwise the first get() builds
    the default one (settings.PROFANITY_ENGINE factory, else better_profanity)
    and keeps it for later calls.
    """

    def __init__(self, engine=None, extra_terms=None):
        self._engine: Optional[DetectionEngine] = None
        self._lock = threading.Lock()
        if engine is not None:
            self.configure(engine, extra_terms=extra_terms)

    @property
    def is_configured(self) -> bool:
        return self._engine is not None

    def configure(self, engine, extra_terms=None) -> DetectionEngine:
        validate_engine(engine)
        source = extra_terms if extra_terms is not None else getattr(settings, "EXTRA_PROFANITY", "")
        apply_runtime_terms(engine, source)
        self._engine = engine
        return engine

    def get(self) -> DetectionEngine:
        if self._engine is None:
            with self._lock:
                if self._engine is None:
                    self.configure(self._load_default())
        return self._engine

    def reset(self) -> None:
        self._engine = None

    def _load_default(self):
        factory_path = getattr(settings, "PROFANITY_ENGINE", "")
        if not factory_path:
            return BetterProfanityEngine()

        try:
            factory = import_string(factory_path)
        except ImportError as exc:
            raise ConfigurationError(
                f"PROFANITY_ENGINE={factory_path!r} could not be imported; expected a dotted path to a "
                "callable returning an object with check() and clean()."
            ) from exc

        return factory()


default_registry = EngineRegistry()
