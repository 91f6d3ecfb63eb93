from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache
from typing import TYPE_CHECKING

from mail_boundary.config import get_settings
from mail_boundary.detectors.registry import DetectorRegistry, default_detectors
from mail_boundary.detectors.types import DetectionResult, ForwardDetector
from mail_boundary.services.cleaner import Cleaner

if TYPE_CHECKING:
    from mail_boundary.config import Settings


def build_registry(
    settings: "Settings",
    custom_detectors: Iterable[ForwardDetector] = (),
) -> DetectorRegistry:
    cleaner = Cleaner(cache_limit=settings.normalize_cache_limit)
    detectors = default_detectors(
        line_window=settings.detection_line_window,
        max_candidate_length=settings.detection_max_candidate_length,
        cleaner=cleaner,
    )
    return DetectorRegistry(custom_detectors, detectors=detectors)


@lru_cache(maxsize=1)
def get_registry() -> DetectorRegistry:
    return build_registry(get_settings())


def detect(raw_text: str) -> DetectionResult:
    return get_registry().detect(raw_text)
