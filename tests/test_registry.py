import pytest

from mail_boundary.detectors.registry import DetectorRegistry
from mail_boundary.detectors.types import Confidence, DetectionResult, EmbeddedEmail, Sender


class _FakeDetector:
    def __init__(
        self,
        name: str,
        priority: int,
        *,
        message: str | None = None,
        sender: Sender | None = None,
        found: bool = True,
    ) -> None:
        self.name = name
        self.priority = priority
        self.calls: list[str] = []
        self._result = (
            DetectionResult(
                found=True,
                confidence=Confidence.MEDIUM,
                email=EmbeddedEmail(sender=sender or Sender("Jane Doe", "jane@x.com"), body="body"),
                message=message,
            )
            if found
            else DetectionResult.not_found()
        )

    def detect(self, text: str) -> DetectionResult:
        self.calls.append(text)
        return self._result


def _registry(*detectors: _FakeDetector) -> DetectorRegistry:
    return DetectorRegistry(detectors=detectors)


def test_default_detectors_in_priority_order() -> None:
    assert DetectorRegistry().get_detector_names() == [
        "forwarded",
        "outlook",
        "outlook_fr",
        "outlook_intl",
        "reply",
    ]


def test_custom_detectors_sorted_among_builtins() -> None:
    registry = DetectorRegistry([_FakeDetector("custom", 15)])
    assert registry.get_detector_names() == [
        "forwarded",
        "outlook",
        "outlook_fr",
        "custom",
        "outlook_intl",
        "reply",
    ]


def test_register_resorts_by_priority_and_keeps_duplicates() -> None:
    late = _FakeDetector("late", 50)
    registry = _registry(late)
    registry.register(_FakeDetector("early", 1))
    registry.register(late)

    assert registry.get_detector_names() == ["early", "late", "late"]

    registry.detect("text")
    assert late.calls == ["text", "text"]


def test_register_rejects_objects_without_detector_capabilities() -> None:
    with pytest.raises(TypeError):
        DetectorRegistry(detectors=()).register(object())


def test_every_detector_sees_original_text() -> None:
    first = _FakeDetector("first", 0, found=False)
    second = _FakeDetector("second", 1, found=False)
    raw = "\ufeffRaw\r\ntext "

    _registry(first, second).detect(raw)

    assert first.calls == [raw]
    assert second.calls == [raw]


def test_no_usable_result_returns_not_found() -> None:
    result = _registry(_FakeDetector("miss", 0, found=False)).detect("text")

    assert not result.found
    assert result.confidence == Confidence.LOW
    assert result.detector is None


def test_match_without_identifiable_sender_is_discarded() -> None:
    anonymous = _FakeDetector("anonymous", 0, message="x", sender=Sender("  ", ""))

    result = _registry(anonymous).detect("text")

    assert not result.found


def test_unusable_match_does_not_block_later_detector() -> None:
    anonymous = _FakeDetector("anonymous", 0, sender=Sender("", " "))
    named = _FakeDetector("named", 5, message="some preceding text")

    result = _registry(anonymous, named).detect("text")

    assert result.found
    assert result.detector == "named"


def test_earliest_boundary_wins_over_priority() -> None:
    preferred = _FakeDetector("preferred", 0, message="a much longer preceding message")
    fallback = _FakeDetector("fallback", 50, message="short")

    result = _registry(preferred, fallback).detect("text")

    assert result.detector == "fallback"
    assert result.message == "short"


def test_position_tie_goes_to_lower_priority_number() -> None:
    low = _FakeDetector("low", 9, message="same")
    high = _FakeDetector("high", 1, message="same")

    result = _registry(low, high).detect("text")

    assert result.detector == "high"


def test_equal_priority_tie_keeps_registration_order() -> None:
    first = _FakeDetector("first", 5, message="same")
    second = _FakeDetector("second", 5, message="same")

    assert _registry(first, second).detect("text").detector == "first"
    assert _registry(second, first).detect("text").detector == "second"


def test_missing_message_counts_as_position_zero() -> None:
    top = _FakeDetector("top", 20, message=None)
    later = _FakeDetector("later", 0, message="x")

    result = _registry(later, top).detect("text")

    assert result.detector == "top"
    assert result.match_index == 0


def test_registry_sets_detector_name_on_a_copy() -> None:
    fake = _FakeDetector("fake", 0, message="m")

    result = _registry(fake).detect("text")

    assert result.detector == "fake"
    assert fake.detect("text").detector is None


def test_builtin_registry_on_reply_header() -> None:
    result = DetectorRegistry().detect("Hello\nOn Jan 1, 2024, Jane Doe <jane@x.com> wrote:\nBody text")

    assert result.found
    assert result.detector == "reply"
    assert result.message == "Hello"
    assert result.email.sender == Sender("Jane Doe", "jane@x.com")
    assert result.email.body == "Body text"


def test_builtin_registry_prefers_earlier_reply_over_outlook_block() -> None:
    text = (
        "Top\n"
        "On Jan 1, 2024, Jane Doe <jane@x.com> wrote:\n"
        "> From: Bob <bob@y.com>\n"
        "> Sent: Sunday\n"
        "> older"
    )

    result = DetectorRegistry().detect(text)

    assert result.detector == "reply"
    assert result.message == "Top"


def test_builtin_registry_prefers_forward_separator() -> None:
    text = (
        "FYI\n"
        "\n"
        "---------- Forwarded message ---------\n"
        "From: Jane Doe <jane@x.com>\n"
        "Date: Mon, Jan 1, 2024 at 10:00 AM\n"
        "Subject: Numbers\n"
        "\n"
        "Body"
    )

    result = DetectorRegistry().detect(text)

    assert result.detector == "forwarded"
    assert result.confidence == Confidence.HIGH
    assert result.message == "FYI"


def test_builtin_registry_without_marker() -> None:
    assert not DetectorRegistry().detect("Lunch at noon?\n\nCheers").found


def test_result_as_dict_shape() -> None:
    result = DetectorRegistry().detect("Hello\nOn Jan 1, 2024, Jane Doe <jane@x.com> wrote:\nBody text")

    assert result.as_dict() == {
        "found": True,
        "confidence": "medium",
        "detector": "reply",
        "message": "Hello",
        "email": {
            "from": {"name": "Jane Doe", "address": "jane@x.com"},
            "date": "Jan 1, 2024",
            "body": "Body text",
        },
    }
    assert DetectionResult.not_found().as_dict() == {"found": False, "confidence": "low"}
