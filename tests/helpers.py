import re

from walk_buddy.routing.polyline import encode


class FakeProfanityEngine:
    """Flags any added term that appears as a substring; clean() swaps it for [masked]."""

    def __init__(self, mask_with_replacement=True):
        self.mask_with_replacement = mask_with_replacement
        self.flagged = set()
        self.checked = []

    def add(self, terms):
        self.flagged.update(t for t in terms if t)

    def check(self, text):
        self.checked.append(text)
        return any(term in text for term in self.flagged)

    def clean(self, text):
        if not self.mask_with_replacement:
            return text
        for term in self.flagged:
            text = re.sub(re.escape(term), "[masked]", text, flags=re.IGNORECASE)
        return text


def osrm_payload(points, duration=603.4, distance=1570.6):
    return {
        "code": "Ok",
        "routes": [
            {
                "geometry": encode(points),
                "duration": duration,
                "distance": distance,
                "legs": [
                    {
                        "steps": [
                            {"maneuver": {"type": "depart", "modifier": "straight"}, "name": "Library Mall"},
                            {"maneuver": {"type": "arrive"}, "name": ""},
                        ]
                    }
                ],
            }
        ],
    }


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def json(self):
        if self.payload is None:
            raise ValueError("No JSON object could be decoded")
        return self.payload
