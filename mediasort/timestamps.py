"""Creation date resolution from embedded metadata and filesystem attributes."""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from .classifier import MediaKind, classify
from .constants import (FILE_DATE_OFFSET, PHOTO_ORIGINAL_DATE_TAG, PHOTO_PRIMARY_DATE_TAG,
                        VIDEO_CREATION_DATE_TAG, VIDEO_DATE_OFFSET, get_logger)
from .errors import MetadataReadError
from .metadata import MetadataSource


logger = get_logger()

# Handles raw EXIF (2023:05:14 10:00:00.745+02:00) and ISO 8601 (2023-05-14T10:00:00Z)
_DATETIME_PATTERN = re.compile(
    r'(\d{4}[-:]\d{2}[-:]\d{2})[T ](\d{2}:\d{2}:\d{2})(?:\.(\d+))?\s*(Z|[+-]\d{2}:?\d{2})?')


def parse_exif_datetime(timestamp_str: str) -> Optional[datetime]:
    """Parse an EXIF or ISO 8601 date-time string into a naive local datetime.

    Values carrying a zone offset are converted to the system's local zone.
    Values without one are taken as local already. Returns None for strings
    that are not a valid date-time, such as the ``0000:00:00 00:00:00``
    placeholder some cameras write.
    """
    match = _DATETIME_PATTERN.match(timestamp_str.strip())
    if not match:
        return None

    date_part = match.group(1).replace(':', '-')
    time_part = match.group(2)
    fractional_part = match.group(3)
    timezone_part = match.group(4)

    try:
        base_dt = datetime.strptime(f"{date_part} {time_part}", "%Y-%m-%d %H:%M:%S")
    except ValueError:
        return None

    if fractional_part:
        base_dt = base_dt.replace(microsecond=int(fractional_part.ljust(6, '0')[:6]))

    if not timezone_part:
        return base_dt

    if timezone_part == 'Z':
        tz = timezone.utc
    else:
        tz_str = timezone_part.replace(':', '')
        sign = 1 if tz_str[0] == '+' else -1
        offset_minutes = sign * (int(tz_str[1:3]) * 60 + int(tz_str[3:5]))
        tz = timezone(timedelta(minutes=offset_minutes))

    # Convert to the local zone and drop the tzinfo again
    return base_dt.replace(tzinfo=tz).astimezone().replace(tzinfo=None)


class OutcomeStatus(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    READ_ERROR = "read_error"


@dataclass(frozen=True)
class DateOutcome:
    """Result of a metadata date lookup."""
    status: OutcomeStatus
    value: Optional[datetime] = None
    detail: Optional[str] = None

    @classmethod
    def found(cls, value: datetime) -> "DateOutcome":
        return cls(OutcomeStatus.FOUND, value=value)

    @classmethod
    def not_found(cls) -> "DateOutcome":
        return cls(OutcomeStatus.NOT_FOUND)

    @classmethod
    def read_error(cls, detail: str) -> "DateOutcome":
        return cls(OutcomeStatus.READ_ERROR, detail=detail)


class MetadataDateReader:
    """Looks up the creation date tags of photos and videos."""

    def __init__(self, source: MetadataSource):
        self.source = source

    def read_date(self, file_path: Path, kind: MediaKind) -> DateOutcome:
        """Read the embedded creation date of a file of the given kind.

        Photos try the IFD0 date/time first, then the ExifIFD date/time
        original. Videos use the QuickTime creation date, shifted by the
        fixed video offset. Only the first lookup can report a read error;
        a failing fallback lookup is reported as not found.
        """
        if kind is MediaKind.PHOTO:
            outcome = self._lookup(file_path, PHOTO_PRIMARY_DATE_TAG, first=True)
            if outcome.status is OutcomeStatus.NOT_FOUND:
                outcome = self._lookup(file_path, PHOTO_ORIGINAL_DATE_TAG, first=False)
            return outcome

        if kind is MediaKind.VIDEO:
            outcome = self._lookup(file_path, VIDEO_CREATION_DATE_TAG, first=True)
            if outcome.status is OutcomeStatus.FOUND:
                return DateOutcome.found(outcome.value + VIDEO_DATE_OFFSET)
            return outcome

        return DateOutcome.not_found()

    def _lookup(self, file_path: Path, tag: Tuple[str, str], first: bool) -> DateOutcome:
        try:
            container = self.source.read_container(file_path)
        except MetadataReadError as e:
            if first:
                logger.error(f"Error in processing file {file_path}: {e}")
                return DateOutcome.read_error(str(e))
            logger.debug(f"Ignoring metadata error on fallback lookup of {file_path}: {e}")
            return DateOutcome.not_found()

        value = container.get_tag(*tag)
        if value is None:
            return DateOutcome.not_found()

        parsed = parse_exif_datetime(value)
        if parsed is None:
            logger.debug(f"Unparsable {tag[0]}:{tag[1]} value {value!r} in {file_path}")
            return DateOutcome.not_found()

        logger.debug(f"Metadata date: {file_path}[{tag[0]}:{tag[1]}] = {parsed}")
        return DateOutcome.found(parsed)


def get_file_times(file_path: Path) -> Tuple[datetime, datetime]:
    """Return the (creation, modification) times of a file as local datetimes.

    Creation time is the birth time where the platform records one and the
    inode change time otherwise.
    """
    stat = file_path.stat()
    created = getattr(stat, "st_birthtime", None) or stat.st_ctime
    return datetime.fromtimestamp(created), datetime.fromtimestamp(stat.st_mtime)


def file_system_date(file_path: Path) -> datetime:
    """Earlier of the file's creation and modification times, plus the fixed offset."""
    created, modified = get_file_times(file_path)
    return min(created, modified) + FILE_DATE_OFFSET


class DateResolver:
    """Resolves one creation date per file: metadata first, filesystem second."""

    def __init__(self, reader: MetadataDateReader):
        self.reader = reader

    def resolve(self, file_path: Path) -> Optional[datetime]:
        """Return the resolved date, or None for files that are not photos or videos.

        Raises MetadataReadError when the file's metadata container is corrupt.
        """
        kind = classify(file_path)
        if kind not in (MediaKind.PHOTO, MediaKind.VIDEO):
            logger.debug(f"Unknown file: {file_path}")
            return None

        outcome = self.reader.read_date(file_path, kind)
        if outcome.status is OutcomeStatus.READ_ERROR:
            raise MetadataReadError(outcome.detail)
        if outcome.status is OutcomeStatus.FOUND:
            return outcome.value

        logger.warning(f"No metadata date entry: {file_path}")
        return file_system_date(file_path)
