"""Parser for ``ls -la`` output captured from a browse container."""

from __future__ import annotations

from datetime import datetime
import logging

from app.models.operations import FileRecord

logger = logging.getLogger(__name__)

MIN_FIELDS = 9
TIMESTAMP_FORMAT = "%b %d %H:%M"


def parse_long_listing(
    output: str,
    current_path: str,
    now: datetime | None = None,
) -> list[FileRecord]:
    """Turn long-listing lines into file records, in listing order.

    Short lines, lines with a standalone ``total`` token and the ``.``/``..``
    entries are dropped. The listing only carries a year for old files, so parsed
    timestamps are placed in the current year.
    """
    now = now or datetime.now()
    records: list[FileRecord] = []

    for raw_line in output.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        fields = line.split()
        if "total" in fields:
            continue
        if len(fields) < MIN_FIELDS:
            logger.debug("Skipping short listing line: %s", line)
            continue

        permissions = fields[0]
        name = " ".join(fields[8:])
        if name in (".", ".."):
            continue

        try:
            size = int(fields[4])
        except ValueError:
            logger.debug("Unparseable size %r for %s", fields[4], name)
            size = 0

        records.append(
            FileRecord(
                name=name,
                path=_join(current_path, name),
                is_dir=permissions.startswith("d"),
                size=size,
                mode=permissions,
                mod_time=_parse_timestamp(" ".join(fields[5:8]), now),
                permissions=permissions,
            )
        )

    return records


def _parse_timestamp(text: str, now: datetime) -> datetime:
    # The year goes into the parsed string so Feb 29 resolves in leap years.
    try:
        return datetime.strptime(f"{text} {now.year}", f"{TIMESTAMP_FORMAT} %Y")
    except ValueError:
        return now


def _join(current_path: str, name: str) -> str:
    if current_path == "/":
        return "/" + name
    return current_path + "/" + name
