from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence

from mail_boundary.detectors.types import Confidence, DetectionResult, EmbeddedEmail, Sender
from mail_boundary.services.cleaner import Cleaner, default_cleaner
from mail_boundary.services.sender import resolve_sender, split_sender

logger = logging.getLogger(__name__)

DEFAULT_LINE_WINDOW = 30
# Longest candidate string handed to the regex engine; keeps worst-case
# backtracking bounded on hostile input.
DEFAULT_MAX_CANDIDATE_LENGTH = 600
DEFAULT_MAX_HEADER_LINES = 12

_QUOTE_PREFIX = re.compile(r"^[>\s]+")
_WHITESPACE = re.compile(r"\s+")


def match_candidate(line: str) -> str:
    """Drops leading quote markers and collapses whitespace runs to one space."""
    return _WHITESPACE.sub(" ", _QUOTE_PREFIX.sub("", line)).strip()


class LineWindowDetector:
    """Scans the first `line_window` lines for the start of an embedded mail.

    Subclasses implement `_match_at`, returning a result when line `index`
    opens a boundary and None otherwise.
    """

    name = ""
    priority = 100
    confidence = Confidence.MEDIUM

    def __init__(
        self,
        *,
        line_window: int = DEFAULT_LINE_WINDOW,
        max_candidate_length: int = DEFAULT_MAX_CANDIDATE_LENGTH,
        cleaner: Cleaner | None = None,
    ) -> None:
        self.line_window = max(1, int(line_window))
        self.max_candidate_length = max(1, int(max_candidate_length))
        self.cleaner = cleaner or default_cleaner

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, priority={self.priority})"

    def detect(self, text: str) -> DetectionResult:
        normalized = self.cleaner.normalize(text)
        if not normalized:
            return DetectionResult.not_found()

        lines = normalized.split("\n")
        for index in range(min(len(lines), self.line_window)):
            if not lines[index].strip():
                continue
            result = self._match_at(lines, index)
            if result is not None:
                return result
        return DetectionResult.not_found()

    def _match_at(self, lines: Sequence[str], index: int) -> DetectionResult | None:
        raise NotImplementedError

    def _fits(self, candidate: str) -> bool:
        return len(candidate) <= self.max_candidate_length

    def _build_result(
        self,
        lines: Sequence[str],
        index: int,
        last_header_index: int,
        sender: Sender,
        *,
        date: str | None = None,
        subject: str | None = None,
        to: str | None = None,
    ) -> DetectionResult:
        body = self.cleaner.extract_body(lines, last_header_index)
        if lines[index].strip().startswith(">"):
            body = self.cleaner.strip_quotes(body)

        message = "\n".join(lines[:index]).strip() if index > 0 else ""
        return DetectionResult(
            found=True,
            confidence=self.confidence,
            email=EmbeddedEmail(sender=sender, body=body, date=date, subject=subject, to=to),
            message=message or None,
        )


class PatternDetector(LineWindowDetector):
    """Matches one line (or one line joined with the next) against an ordered pattern table.

    Patterns use the named groups `from_name`, `from_address`, `date` and
    optionally `time`; any of them may be absent from a given pattern.
    """

    patterns: tuple[re.Pattern[str], ...] = ()

    def _match_at(self, lines: Sequence[str], index: int) -> DetectionResult | None:
        line = match_candidate(lines[index])
        if not line:
            return None
        next_line = match_candidate(lines[index + 1]) if index + 1 < len(lines) else ""

        match = self._search(line)
        spans_two_lines = False
        if match is None and next_line:
            match = self._search(f"{line} {next_line}")
            spans_two_lines = match is not None
        if match is None:
            return None

        groups = match.groupdict()
        date = (groups.get("date") or "").strip()
        time = (groups.get("time") or "").strip()
        full_date = f"{date} {time}".strip() if time else date
        name, address = resolve_sender(groups.get("from_name"), groups.get("from_address"))

        logger.debug(
            "Pattern detector matched",
            extra={
                "event": "detector_pattern_matched",
                "detector": self.name,
                "line_index": index,
                "pattern": match.re.pattern[:80],
                "spans_two_lines": spans_two_lines,
            },
        )
        return self._build_result(
            lines,
            index,
            index + 1 if spans_two_lines else index,
            Sender(name=name, address=address),
            date=full_date or None,
        )

    def _search(self, candidate: str) -> re.Match[str] | None:
        if not self._fits(candidate):
            return None
        for pattern in self.patterns:
            match = pattern.match(candidate)
            if match is not None:
                return match
        return None


def compile_separator(phrases: Iterable[str]) -> re.Pattern[str]:
    alternation = "|".join(re.escape(phrase) for phrase in sorted(set(phrases), key=len, reverse=True))
    return re.compile(
        rf"^(?:-{{2,}} ?)?(?:{alternation}) ?(?:-{{2,}})? ?:?$",
        re.IGNORECASE,
    )


class HeaderBlockDetector(LineWindowDetector):
    """Recognizes a block of `Key: value` header lines (Outlook, forwarded-message style).

    `field_keys` maps a canonical field (`from`, `date`, `to`, `cc`,
    `subject`) to the header labels used for it. When `separators` is set the
    block must follow one of those separator lines and the separator marks
    the boundary; otherwise the first header line does.
    """

    field_keys: Mapping[str, Sequence[str]] = {}
    separators: tuple[re.Pattern[str], ...] = ()
    require_date = True
    max_header_lines = DEFAULT_MAX_HEADER_LINES

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._key_to_field = {
            key.lower(): field for field, keys in self.field_keys.items() for key in keys
        }
        alternation = "|".join(
            re.escape(key) for key in sorted(self._key_to_field, key=len, reverse=True)
        )
        self._header_re = re.compile(
            rf"^\** ?(?P<key>{alternation}) ?\** ?: ?\** ?(?P<value>.*)$",
            re.IGNORECASE,
        )

    def _match_at(self, lines: Sequence[str], index: int) -> DetectionResult | None:
        line = match_candidate(lines[index])
        if not line or not self._fits(line):
            return None

        start = index
        if self.separators:
            if not any(separator.match(line) for separator in self.separators):
                return None
            start = index + 1
            while start < len(lines) and not lines[start].strip():
                start += 1
            if start >= len(lines):
                return None

        headers, last_header_index = self._read_header_block(lines, start)
        if "from" not in headers:
            return None
        if self.require_date and "date" not in headers:
            return None

        name, address = split_sender(headers["from"])
        logger.debug(
            "Header block matched",
            extra={
                "event": "detector_header_block_matched",
                "detector": self.name,
                "line_index": index,
                "fields": sorted(headers),
            },
        )
        return self._build_result(
            lines,
            index,
            last_header_index,
            Sender(name=name, address=address),
            date=headers.get("date") or None,
            subject=headers.get("subject") or None,
            to=headers.get("to") or None,
        )

    def _read_header_block(self, lines: Sequence[str], start: int) -> tuple[dict[str, str], int]:
        headers: dict[str, str] = {}
        last_header_index = start - 1
        for position in range(start, min(len(lines), start + self.max_header_lines)):
            candidate = match_candidate(lines[position])
            if not candidate or not self._fits(candidate):
                break
            match = self._header_re.match(candidate)
            if match is None:
                break
            field = self._key_to_field[match.group("key").lower()]
            headers.setdefault(field, match.group("value").strip("* "))
            last_header_index = position
        return headers, last_header_index
