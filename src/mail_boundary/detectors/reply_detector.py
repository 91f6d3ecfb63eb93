from __future__ import annotations

import re

from mail_boundary.detectors.base import PatternDetector
from mail_boundary.detectors.types import Confidence

# Candidates reach these patterns with quote markers removed and whitespace
# collapsed to single spaces. Free-text groups are length-bounded so a failed
# match does a bounded amount of backtracking.
_DATE = r"(?P<date>.{1,100})"
_LAZY_DATE = r"(?P<date>.{1,100}?)"
# Address inside <>, [] or () or a doubled pair such as (<addr>), optional mailto:.
_ADDRESS = (
    r"(?: ?[<\[(]{1,2} ?(?:mailto:)?(?P<from_address>[^<>\[\]()\s]{0,254}) ?[>\])]{1,2})?"
)
# Display name, optionally quoted ("", «», „”); never spans a bracket.
_SENDER = r"[\"«„“]?(?P<from_name>[^\"«»„“”<>\[\]()]{0,100}?)[\"»”]?" + _ADDRESS
_QUOTED_SENDER = r"[\"«„“](?P<from_name>[^\"«»„“”]{0,100})[\"»”]" + _ADDRESS
_COLON = r" ?:"
_LINE_END_COLON = r" ?:$"


def _pattern(body: str) -> re.Pattern[str]:
    return re.compile(body, re.IGNORECASE)


REPLY_PATTERNS: tuple[re.Pattern[str], ...] = (
    # cs
    _pattern(rf"Dne {_DATE}, {_SENDER} napsal(?:\(a\))?{_COLON}"),
    # da
    _pattern(rf"D\. {_LAZY_DATE} skrev {_SENDER}{_COLON}"),
    # de
    _pattern(rf"Am {_LAZY_DATE} (?:um (?P<time>\S{{1,20}}(?: Uhr)?) )?schrieb {_SENDER}{_COLON}"),
    # en
    _pattern(rf"On {_DATE}, {_QUOTED_SENDER} wrote{_COLON}"),
    _pattern(rf"On {_LAZY_DATE} at (?P<time>[^,]{{1,40}}), {_SENDER} wrote{_COLON}"),
    _pattern(rf"On {_DATE}, {_SENDER} wrote{_COLON}"),
    _pattern(rf"On {_DATE} {_SENDER} wrote{_COLON}"),
    # es
    _pattern(rf"El {_DATE}, {_SENDER} escribió{_COLON}"),
    # fr
    _pattern(rf"Le {_DATE}, {_SENDER} a écrit{_COLON}"),
    # fi
    _pattern(rf"{_SENDER} kirjoitti {_DATE}{_LINE_END_COLON}"),
    # hu
    _pattern(rf"{_DATE} időpontban {_SENDER} ezt írta{_COLON}"),
    # it
    _pattern(
        rf"Il giorno {_LAZY_DATE},? alle(?: ore)? (?P<time>\d{{1,2}}[:.]\d{{2}}),? "
        rf"{_SENDER} ha scritto{_COLON}"
    ),
    _pattern(rf"Il giorno {_LAZY_DATE},? {_QUOTED_SENDER} ha scritto{_COLON}"),
    # nl
    _pattern(
        rf"Op {_LAZY_DATE} (?:om (?P<time>\S{{1,20}}) )?heeft {_SENDER}"
        rf" (?:het volgende )?geschreven{_COLON}"
    ),
    _pattern(rf"Op {_LAZY_DATE} (?:om (?P<time>\S{{1,20}}) )?schreef {_SENDER}{_COLON}"),
    # no
    _pattern(rf"{_SENDER} skrev følgende den {_DATE}{_LINE_END_COLON}"),
    # pl
    _pattern(rf"Dnia {_LAZY_DATE},? {_QUOTED_SENDER} napisał(?:\(a\))?{_COLON}"),
    _pattern(rf"Dnia {_DATE} {_SENDER} napisał(?:\(a\))?{_COLON}"),
    # pt
    _pattern(rf"Em {_DATE}, {_SENDER} escreveu{_COLON}"),
    # ru
    _pattern(rf"{_LAZY_DATE},? пользователь {_SENDER} написал(?:\(а\))?{_COLON}"),
    # sk
    _pattern(rf"{_LAZY_DATE},? používateľ {_SENDER} napísal{_COLON}"),
    # sv
    _pattern(rf"Den {_LAZY_DATE} skrev {_SENDER}(?: följande)?{_COLON}"),
    # tr
    _pattern(rf"{_SENDER}, {_LAZY_DATE} tarihinde şunu yazdı{_COLON}"),
)


class ReplyDetector(PatternDetector):
    """Reply attribution lines such as "On <date>, <name> <address> wrote:"."""

    name = "reply"
    priority = 150
    confidence = Confidence.MEDIUM
    patterns = REPLY_PATTERNS
