"""
Statistics tracking for a sorting run.
"""

from typing import Dict


class StatsManager:
    """Counts what happened to each file during a run."""

    def __init__(self):
        self._stats = {
            'photos': 0,
            'videos': 0,
            'converted': 0,
            'sidecars_deleted': 0,
            'skipped': 0,
            'failed': 0,
        }

    def increment_photos(self) -> None:
        self._stats['photos'] += 1

    def increment_videos(self) -> None:
        self._stats['videos'] += 1

    def increment_converted(self) -> None:
        """Increment when an image was converted before filing."""
        self._stats['converted'] += 1

    def increment_sidecars_deleted(self) -> None:
        self._stats['sidecars_deleted'] += 1

    def increment_skipped(self) -> None:
        """Increment when no creation date could be resolved for a file."""
        self._stats['skipped'] += 1

    def increment_failed(self) -> None:
        """Increment when a file could not be processed and was left in place."""
        self._stats['failed'] += 1

    def get_stats(self) -> Dict[str, int]:
        """Get a copy of current statistics."""
        return self._stats.copy()

    def get_total_files(self) -> int:
        """Get total count of photos and videos filed into the output tree."""
        return self._stats['photos'] + self._stats['videos']

    def has_errors(self) -> bool:
        return self._stats['failed'] > 0

    def get_photos(self) -> int:
        return self._stats['photos']

    def get_videos(self) -> int:
        return self._stats['videos']

    def get_converted(self) -> int:
        return self._stats['converted']

    def get_sidecars_deleted(self) -> int:
        return self._stats['sidecars_deleted']

    def get_skipped(self) -> int:
        return self._stats['skipped']

    def get_failed(self) -> int:
        return self._stats['failed']
