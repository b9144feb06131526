"""Line-oriented text search across the project with ranking and truncation."""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Pattern, Sequence

from .config import ProbeConfig
from .errors import InvalidPattern
from .logging import get_logger
from .models import FileMatches, LineMatch, SearchReport
from .walker import TreeWalker

logger = get_logger("search")


def compile_query(query: str, *, case_sensitive: bool = False, regex: bool = False) -> Pattern[str]:
    """Compile `query` as literal text unless `regex` asks for pattern semantics."""
    if not query:
        raise InvalidPattern("Search query must not be empty")
    source = query if regex else re.escape(query)
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(source, flags)
    except re.error as exc:
        raise InvalidPattern(f"Invalid search pattern {query!r}: {exc}") from exc


def scan_file(
    path: Path, rel_path: str, pattern: Pattern[str], max_line_length: int
) -> Optional[FileMatches]:
    """Return the matching lines of one file, or None when it has none or is unreadable."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Skipping unreadable file %s: %s", rel_path, exc)
        return None

    matches = [
        LineMatch(line=index, content=line.strip()[:max_line_length])
        for index, line in enumerate(text.split("\n"), start=1)
        if pattern.search(line)
    ]
    if not matches:
        return None
    return FileMatches(file=rel_path, matches=matches)


def rank_results(results: Sequence[FileMatches]) -> List[FileMatches]:
    """Order files by descending match count; ties keep their incoming order."""
    return sorted(results, key=lambda item: item.match_count, reverse=True)


class SearchEngine:
    """Scans candidate files concurrently and builds a bounded, ranked report."""

    def __init__(self, config: ProbeConfig, walker: TreeWalker) -> None:
        self.config = config
        self.walker = walker

    def search(
        self,
        query: str,
        extensions: Optional[Sequence[str]] = None,
        *,
        case_sensitive: bool = False,
        regex: bool = False,
    ) -> SearchReport:
        pattern = compile_query(query, case_sensitive=case_sensitive, regex=regex)
        root = self.config.root
        walk = self.walker.collect_files(root, extensions or self.config.extensions)
        logger.debug(
            "Searching %d files for %r (%d directories skipped)",
            len(walk.files),
            query,
            walk.skipped_count,
        )

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            scanned = list(
                executor.map(
                    lambda rel: scan_file(root / rel, rel, pattern, self.config.max_line_length),
                    walk.files,
                )
            )

        results = rank_results([item for item in scanned if item is not None])
        total = sum(item.match_count for item in results)
        return SearchReport(
            query=query,
            total_matches=total,
            file_count=len(results),
            results=results[: self.config.max_result_files],
        )


__all__ = ["SearchEngine", "compile_query", "rank_results", "scan_file"]
