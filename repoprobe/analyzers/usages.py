"""Cross-file classification of lines that use a PHP class."""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Pattern, Tuple

from ..config import ProbeConfig
from ..logging import get_logger
from ..models import UsageHit, UsageReport
from ..walker import TreeWalker

CATEGORIES = ("imports", "extends", "implements", "references")

logger = get_logger("analyzers.usages")


def short_name(class_name: str) -> str:
    """Return the last namespace segment of a (possibly qualified) class name."""
    return class_name.rsplit("\\", 1)[-1]


@dataclass(frozen=True)
class UsagePatterns:
    """Four independent, case-insensitive line patterns for one short name."""

    imports: Pattern[str]
    extends: Pattern[str]
    implements: Pattern[str]
    references: Pattern[str]

    @classmethod
    def for_name(cls, name: str) -> "UsagePatterns":
        escaped = re.escape(name)
        return cls(
            imports=re.compile(rf"use\s+.*\b{escaped}\b", re.IGNORECASE),
            extends=re.compile(rf"extends\s+.*\b{escaped}\b", re.IGNORECASE),
            implements=re.compile(rf"implements\s+.*\b{escaped}\b", re.IGNORECASE),
            references=re.compile(
                rf"(new\s+{escaped}\b|\b{escaped}::|:\s*{escaped}\b)", re.IGNORECASE
            ),
        )

    def classify(self, line: str) -> List[str]:
        """Return every category whose pattern matches `line`."""
        return [category for category in CATEGORIES if getattr(self, category).search(line)]


class UsageFinder:
    """Finds imports, parents, interfaces and references of a class across PHP files."""

    def __init__(self, config: ProbeConfig, walker: TreeWalker) -> None:
        self.config = config
        self.walker = walker

    def find(self, class_name: str) -> UsageReport:
        name = short_name(class_name)
        patterns = UsagePatterns.for_name(name)
        root = self.config.root
        walk = self.walker.collect_files(root, self.config.source_extensions)

        def _scan(rel_path: str) -> List[Tuple[str, UsageHit]]:
            try:
                text = (root / rel_path).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.debug("Skipping unreadable file %s: %s", rel_path, exc)
                return []
            hits: List[Tuple[str, UsageHit]] = []
            for line_number, line in enumerate(text.split("\n"), start=1):
                for category in patterns.classify(line):
                    hits.append(
                        (category, UsageHit(file=rel_path, line=line_number, content=line.strip()))
                    )
            return hits

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            per_file = list(executor.map(_scan, walk.files))

        buckets: Dict[str, List[UsageHit]] = {category: [] for category in CATEGORIES}
        for hits in per_file:
            for category, hit in hits:
                buckets[category].append(hit)

        return UsageReport(class_name=class_name, short_name=name, **buckets)


__all__ = ["CATEGORIES", "UsageFinder", "UsagePatterns", "short_name"]
