from __future__ import annotations

import logging
from collections.abc import Iterable

from mail_boundary.detectors.header_detectors import (
    ForwardedMessageDetector,
    LocalizedHeaderDetector,
    OutlookFrDetector,
    OutlookHeaderDetector,
)
from mail_boundary.detectors.reply_detector import ReplyDetector
from mail_boundary.detectors.types import DetectionResult, ForwardDetector

logger = logging.getLogger(__name__)


def default_detectors(**options) -> list[ForwardDetector]:
    return [
        ForwardedMessageDetector(**options),
        OutlookHeaderDetector(**options),
        OutlookFrDetector(**options),
        LocalizedHeaderDetector(**options),
        ReplyDetector(**options),
    ]


class DetectorRegistry:
    """Runs every registered detector and keeps the earliest usable boundary.

    Position decides first: the result whose preceding `message` is shortest
    wins. Priority (lower first) only settles exact ties, because detectors
    are iterated in priority order and a later result must be strictly
    earlier to replace the current best.
    """

    def __init__(
        self,
        custom_detectors: Iterable[ForwardDetector] = (),
        *,
        detectors: Iterable[ForwardDetector] | None = None,
    ) -> None:
        self._detectors: list[ForwardDetector] = []
        for detector in default_detectors() if detectors is None else detectors:
            self.register(detector)
        for detector in custom_detectors:
            self.register(detector)

    def register(self, detector: ForwardDetector) -> None:
        if not isinstance(detector, ForwardDetector):
            raise TypeError(f"{detector!r} does not implement name/priority/detect")
        self._detectors.append(detector)
        # sorted() is stable: equal priorities keep registration order
        self._detectors = sorted(self._detectors, key=lambda item: item.priority)

    def get_detector_names(self) -> list[str]:
        return [detector.name for detector in self._detectors]

    def detect(self, text: str) -> DetectionResult:
        best: DetectionResult | None = None
        best_index: int | None = None

        for detector in self._detectors:
            result = detector.detect(text)
            if not result.found:
                continue
            if not result.is_usable:
                logger.debug(
                    "Discarding match without identifiable sender",
                    extra={"event": "detector_match_unusable", "detector": detector.name},
                )
                continue

            match_index = result.match_index
            logger.debug(
                "Detector produced usable match",
                extra={"event": "detector_match", "detector": detector.name, "match_index": match_index},
            )
            if best_index is None or match_index < best_index:
                best_index = match_index
                best = result.with_detector(detector.name)

        if best is None:
            logger.debug("No embedded message detected", extra={"event": "detection_not_found"})
            return DetectionResult.not_found()

        logger.info(
            "Embedded message detected",
            extra={"event": "detection_found", "detector": best.detector, "match_index": best_index},
        )
        return best
