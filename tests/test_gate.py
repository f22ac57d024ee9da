from types import SimpleNamespace

from walk_buddy.moderation.content_filter import CLEAN, PROFANITY, ContentFilter
from walk_buddy.moderation.engine import EngineRegistry
from walk_buddy.moderation.gate import ModerationGate, moderated

from .helpers import FakeProfanityEngine


def make_request(data):
    return SimpleNamespace(data=data)


class Recorder:
    def __init__(self):
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return "handled"


class TestModerationGate:

    def setup_method(self):
        self.entries = []
        self.next_handler = Recorder()

    def make_gate(self, content_filter, **kwargs):
        return ModerationGate(content_filter, logger=self.entries.append, **kwargs)

    def test_masks_profane_input_and_records_category(self, content_filter):
        request = make_request({"message": "maskedterm moment"})

        result = self.make_gate(content_filter)(request, self.next_handler)

        assert result == "handled"
        assert request.data["message"] == "[masked] moment"
        assert request.profanity_review == PROFANITY
        assert self.entries[-1] == {"category": "PROFANITY", "action": "masked"}
        assert self.next_handler.requests == [request]

    def test_clean_content_passes_unchanged(self, content_filter):
        request = make_request({"message": "Encouraging words only"})

        self.make_gate(content_filter)(request, self.next_handler)

        assert request.data["message"] == "Encouraging words only"
        assert request.profanity_review == CLEAN
        assert self.entries[-1] == {"category": "CLEAN", "action": "passed"}
        assert len(self.next_handler.requests) == 1

    def test_request_without_text_is_skipped(self, content_filter):
        request = make_request({})

        self.make_gate(content_filter)(request, self.next_handler)

        assert request.profanity_review == CLEAN
        assert self.entries[-1]["action"] == "skipped"
        assert len(self.next_handler.requests) == 1

    def test_custom_on_profanity_handler_decides(self):
        engine = FakeProfanityEngine(mask_with_replacement=False)
        content_filter = ContentFilter(EngineRegistry(engine, extra_terms=["maskedterm"]))
        seen = []

        def on_profanity(request, next_handler, clean, classification):
            seen.append(classification.category.value)
            request.reviewed = True
            return next_handler(request)

        request = make_request({"message": "M45kedterm alert"})
        self.make_gate(content_filter, on_profanity=on_profanity)(request, self.next_handler)

        assert request.data["message"] == "M45kedterm alert"
        assert request.reviewed is True
        assert seen == ["PROFANITY"]
        assert len(self.next_handler.requests) == 1
        assert self.entries == []

    def test_custom_text_accessors(self, content_filter):
        request = SimpleNamespace(payload={"body": "maskedterm"})
        gate = self.make_gate(
            content_filter,
            get_text=lambda req: req.payload["body"],
            set_masked_text=lambda req, text: req.payload.update(body=text),
        )

        gate(request, self.next_handler)

        assert request.payload["body"] == "[masked]"


class TestModeratedDecorator:

    def test_wraps_view_method(self, content_filter):
        gate = ModerationGate(content_filter, logger=None)

        class View:
            @moderated(gate)
            def post(self, request, pk):
                return request.data["message"], pk

        request = make_request({"message": "maskedterm moment"})

        assert View().post(request, 3) == ("[masked] moment", 3)
        assert request.profanity_review == PROFANITY
