"""Waste classification: Google Cloud Vision labels with a heuristic fallback."""

from __future__ import annotations

import base64
import io
import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import requests
from PIL import Image, UnidentifiedImageError

from sularchi import config
from sularchi.categories import (
    CATEGORY_INFO,
    CATEGORY_KEYWORDS,
    HEURISTIC_CATEGORIES,
    CategoryInfo,
    WasteCategory,
    parse_category,
)

logger = logging.getLogger(__name__)

UNMATCHED_CONFIDENCE = 0.5

Label = Tuple[str, float]


class ClassificationError(RuntimeError):
    """Raised when the vision service cannot produce a usable classification."""


@dataclass(frozen=True)
class ClassificationResult:
    category: WasteCategory
    confidence: float
    label: str
    description: str
    disposal_tip: str
    recyclable: bool
    icon: str
    color: str
    source: str = "heuristic"

    @classmethod
    def from_info(
        cls,
        info: CategoryInfo,
        confidence: float,
        description: Optional[str] = None,
        source: str = "heuristic",
    ) -> "ClassificationResult":
        return cls(
            category=info.category,
            confidence=confidence,
            label=info.label,
            description=description if description is not None else info.description,
            disposal_tip=info.disposal_tip,
            recyclable=info.recyclable,
            icon=info.icon,
            color=info.color,
            source=source,
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "confidence": self.confidence,
            "label": self.label,
            "description": self.description,
            "disposalTip": self.disposal_tip,
            "recyclable": self.recyclable,
            "icon": self.icon,
            "color": self.color,
            "source": self.source,
        }


def _round2(value: float) -> float:
    return math.floor(value * 100 + 0.5) / 100


@dataclass
class _CategoryTally:
    count: int = 0
    max_score: float = 0.0
    best_label: str = ""


def map_labels_to_category(labels: List[Label]) -> Tuple[WasteCategory, float, str]:
    """Pick the category with the most keyword hits, breaking ties on best score.

    Returns ``(category, confidence, best_label)``. With no hits the result is
    ``unknown`` at 0.5 confidence, labelled with the first returned label.
    """
    tallies = {category: _CategoryTally() for category, _ in CATEGORY_KEYWORDS}

    for description, score in labels:
        normalized = description.lower()
        for category, keywords in CATEGORY_KEYWORDS:
            if any(keyword in normalized for keyword in keywords):
                tally = tallies[category]
                tally.count += 1
                if score > tally.max_score:
                    tally.max_score = score
                    tally.best_label = description

    best = WasteCategory.UNKNOWN
    best_tally = _CategoryTally()
    for category, _ in CATEGORY_KEYWORDS:
        tally = tallies[category]
        if tally.count > best_tally.count or (
            tally.count == best_tally.count and tally.max_score > best_tally.max_score
        ):
            best = category
            best_tally = tally

    if best_tally.count == 0:
        first_label = labels[0][0] if labels else ""
        return WasteCategory.UNKNOWN, UNMATCHED_CONFIDENCE, first_label

    confidence = min(1.0, max(0.0, _round2(best_tally.max_score)))
    return best, confidence, best_tally.best_label


def _read_image_bytes(image_ref: str) -> bytes:
    path = image_ref[len("file://"):] if image_ref.startswith("file://") else image_ref
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError as error:
        raise ClassificationError(f"Unable to read image '{image_ref}': {error}") from error


def encode_image(image_ref: str) -> str:
    """Downscale and JPEG-encode the referenced image, returning base64 text."""
    image_bytes = _read_image_bytes(image_ref)
    try:
        image = Image.open(io.BytesIO(image_bytes)).convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as error:
        raise ClassificationError(f"Unsupported image '{image_ref}': {error}") from error

    image.thumbnail((config.VISION_MAX_IMAGE_SIDE, config.VISION_MAX_IMAGE_SIDE))
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=config.VISION_JPEG_QUALITY)
    return base64.b64encode(buffer.getvalue()).decode("ascii")


def _annotation_pairs(annotations: Any, text_field: str) -> List[Label]:
    pairs: List[Label] = []
    if not isinstance(annotations, list):
        return pairs
    for annotation in annotations:
        if not isinstance(annotation, dict):
            continue
        text = annotation.get(text_field)
        score = annotation.get("score")
        if not isinstance(text, str) or not text:
            continue
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            continue
        pairs.append((text, float(score)))
    return pairs


def extract_labels(payload: Any) -> List[Label]:
    """Merge label and localized-object annotations into (description, score) pairs.

    Entries without a description or a numeric score are skipped.
    """
    if not isinstance(payload, dict):
        raise ClassificationError(f"Unexpected Vision API response: {type(payload).__name__}")
    responses = payload.get("responses")
    if not isinstance(responses, list) or not responses or not isinstance(responses[0], dict):
        raise ClassificationError("Vision API response has no annotations")
    annotations = responses[0]

    return _annotation_pairs(annotations.get("labelAnnotations"), "description") + _annotation_pairs(
        annotations.get("localizedObjectAnnotations"), "name"
    )


def request_labels(image_ref: str, api_key: str, timeout: Optional[float] = None) -> List[Label]:
    """Call the Vision annotate endpoint for label and object annotations."""
    payload = {
        "requests": [
            {
                "image": {"content": encode_image(image_ref)},
                "features": [
                    {"type": "LABEL_DETECTION", "maxResults": config.VISION_MAX_LABELS},
                    {"type": "OBJECT_LOCALIZATION", "maxResults": config.VISION_MAX_OBJECTS},
                ],
            }
        ]
    }

    try:
        response = requests.post(
            config.VISION_API_URL,
            params={"key": api_key},
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as error:
        raise ClassificationError(f"Vision API request failed: {error}") from error

    labels = extract_labels(data)
    if not labels:
        raise ClassificationError("Vision API returned no labels")
    return labels


def classify_labels(labels: List[Label]) -> ClassificationResult:
    category, confidence, best_label = map_labels_to_category(labels)
    info = CATEGORY_INFO[category]
    return ClassificationResult.from_info(
        info,
        confidence,
        description=f"Detected: {best_label}. {info.description}",
        source="vision",
    )


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def image_features(image_ref: str) -> Tuple[int, float, float]:
    """Derive (hue, brightness, saturation) from a stable hash of the reference string."""
    digest = 0
    for char in image_ref:
        digest = _to_int32((digest << 5) - digest + ord(char))
    normalized = abs(digest)
    hue = normalized % 360
    brightness = (normalized % 100) / 100
    # Shift and remainder follow 32-bit signed semantics.
    saturation = math.fmod(_to_int32(normalized) >> 8, 100) / 100
    return hue, brightness, saturation


def heuristic_classify(image_ref: str) -> ClassificationResult:
    """Content-independent, deterministic classification of an image reference."""
    hue, brightness, saturation = image_features(image_ref)
    index = int(hue / 360 * len(HEURISTIC_CATEGORIES))
    category = HEURISTIC_CATEGORIES[index] if index < len(HEURISTIC_CATEGORIES) else WasteCategory.UNKNOWN
    confidence = min(0.95, max(0.60, 0.70 + saturation * 0.2 + brightness * 0.1))
    return ClassificationResult.from_info(CATEGORY_INFO[category], _round2(confidence))


def classify_waste(
    image_ref: str,
    api_key: Optional[str] = None,
    delay: Optional[float] = None,
) -> ClassificationResult:
    """Classify the referenced image; never raises for service failures."""
    key = config.GOOGLE_VISION_API_KEY if api_key is None else api_key
    if key:
        try:
            labels = request_labels(image_ref, key, timeout=config.VISION_API_TIMEOUT)
            return classify_labels(labels)
        except ClassificationError as error:
            logger.warning(f"Vision API classification failed, falling back to heuristic: {error}")
    else:
        logger.warning("No Google Vision API key configured. Using heuristic fallback.")

    pause = config.HEURISTIC_DELAY_SECONDS if delay is None else delay
    if pause > 0:
        time.sleep(pause)
    return heuristic_classify(image_ref)


def get_waste_categories() -> List[ClassificationResult]:
    return [ClassificationResult.from_info(info, 0.0) for info in CATEGORY_INFO.values()]


def get_disposal_info(category: Any) -> ClassificationResult:
    return ClassificationResult.from_info(CATEGORY_INFO[parse_category(category)], 0.0)
