"""Opportunity stage label table: normalized label -> canonical tag."""

import re
from pathlib import Path
from typing import Literal, Optional

import yaml

from contract_enrichment.exceptions import ConfigError

StageTag = Literal["won", "install"]

STAGE_TAGS: tuple[StageTag, ...] = ("won", "install")

# Label variants seen in the CRM, per canonical tag
DEFAULT_STAGE_LABELS: dict[StageTag, tuple[str, ...]] = {
    "won": (
        "Closed Won",
        "계약완료",
        "계약 완료",
    ),
    "install": (
        "설치진행",
        "계약진행",
        "재견적",
        "출고진행",
        "Installation In Progress",
    ),
}

_WHITESPACE = re.compile(r"\s+")


def normalize_stage(label: Optional[str]) -> str:
    """Lower-case and drop all whitespace."""
    return _WHITESPACE.sub("", str(label or "")).lower()


class StageTable:
    """Maps stage labels to canonical tags. New variants are added as data."""

    def __init__(self, labels: Optional[dict[str, list[str] | tuple[str, ...]]] = None):
        self._tags: dict[str, StageTag] = {}
        for tag, variants in DEFAULT_STAGE_LABELS.items():
            self.add(tag, *variants)
        for tag, variants in (labels or {}).items():
            self.add(tag, *variants)

    def add(self, tag: str, *labels: str) -> None:
        """Register label variants for a tag."""
        stage_tag = next((t for t in STAGE_TAGS if t == tag), None)
        if stage_tag is None:
            raise ConfigError(f"Unknown stage tag: {tag!r}. Expected one of {list(STAGE_TAGS)}")
        for label in labels:
            key = normalize_stage(label)
            if key:
                self._tags[key] = stage_tag

    def classify(self, label: Optional[str]) -> Optional[StageTag]:
        """Canonical tag for a label, or None when the label is not tracked."""
        return self._tags.get(normalize_stage(label))

    def is_won(self, label: Optional[str]) -> bool:
        return self.classify(label) == "won"

    def is_install(self, label: Optional[str]) -> bool:
        return self.classify(label) == "install"

    def labels(self, tag: StageTag) -> list[str]:
        """Normalized labels registered for a tag."""
        return sorted(k for k, v in self._tags.items() if v == tag)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "StageTable":
        """
        Load extra label variants from YAML, on top of the defaults:

            won: ["Closed Won", ...]
            install: ["설치진행", ...]
        """
        try:
            data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Stage label file is not valid YAML: {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Stage label file must be a mapping: {path}")
        labels: dict[str, list[str]] = {}
        for tag, variants in data.items():
            if isinstance(variants, str):
                variants = [variants]
            if not isinstance(variants, list):
                raise ConfigError(f"Labels for {tag!r} must be a list in {path}")
            labels[str(tag)] = [str(v) for v in variants]
        return cls(labels)
