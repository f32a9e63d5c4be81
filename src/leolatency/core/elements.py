"""Orbital element sets (two-line elements) and their ingestion.

Element sets are validated structurally when they are built. Text
ingestion is tolerant: a malformed record is logged and skipped so that one
bad entry never removes the rest of the catalog.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from sgp4.api import Satrec, WGS72

logger = logging.getLogger(__name__)

_LINE_LENGTH = 69


@dataclass(frozen=True)
class ElementSet:
    """A parsed two-line element set for one tracked satellite.

    Attributes:
        name: Satellite name (line 0, if provided).
        line1: Raw element line 1.
        line2: Raw element line 2.
        norad_id: NORAD catalog number.
        epoch: Epoch as a UTC datetime.
        inclination_deg: Orbital inclination in degrees.
        mean_motion_rev_per_day: Mean motion in revolutions per day.
        satrec: Underlying sgp4 Satrec object for propagation.
    """

    name: str
    line1: str
    line2: str
    norad_id: int
    epoch: datetime
    inclination_deg: float
    mean_motion_rev_per_day: float
    satrec: Satrec = field(repr=False, compare=False)

    @classmethod
    def from_lines(cls, line1: str, line2: str, name: str = "") -> ElementSet:
        """Build an element set from two (or three) lines.

        Args:
            line1: Element line 1 (69 characters).
            line2: Element line 2 (69 characters).
            name: Optional satellite name (line 0).

        Returns:
            A parsed ElementSet.

        Raises:
            ValueError: If the lines are structurally invalid.
        """
        line1 = line1.strip()
        line2 = line2.strip()

        if len(line1) != _LINE_LENGTH or not line1.startswith("1 "):
            logger.error("Invalid element line 1: %r", line1)
            raise ValueError(f"Invalid element line 1: {line1!r}")
        if len(line2) != _LINE_LENGTH or not line2.startswith("2 "):
            logger.error("Invalid element line 2: %r", line2)
            raise ValueError(f"Invalid element line 2: {line2!r}")
        if line1[2:7] != line2[2:7]:
            logger.error("Catalog number mismatch: %r vs %r", line1[2:7], line2[2:7])
            raise ValueError(
                f"Catalog number mismatch between lines: {line1[2:7]!r} != {line2[2:7]!r}"
            )

        try:
            norad_id = int(line1[2:7].strip())
            year = int(line1[18:20])
            day_of_year = float(line1[20:32])
            sat = Satrec.twoline2rv(line1, line2, WGS72)
        except ValueError as exc:
            logger.error("Unparseable element set %r: %s", name.strip() or line1[2:7], exc)
            raise ValueError(f"Unparseable element set: {exc}") from exc

        year = year + 2000 if year < 57 else year + 1900
        epoch = datetime(year, 1, 1, tzinfo=timezone.utc) + timedelta(
            days=day_of_year - 1
        )

        logger.debug("Parsed element set for NORAD %d (epoch %s)", norad_id, epoch.isoformat())

        return cls(
            name=name.strip(),
            line1=line1,
            line2=line2,
            norad_id=norad_id,
            epoch=epoch,
            inclination_deg=math.degrees(sat.inclo),
            mean_motion_rev_per_day=sat.no_kozai * 1440 / (2 * math.pi),
            satrec=sat,
        )

    @property
    def label(self) -> str:
        """Name if known, otherwise the catalog number."""
        return self.name or str(self.norad_id)

    def __str__(self) -> str:
        header = f"{self.name}\n" if self.name else ""
        return f"{header}{self.line1}\n{self.line2}"


def parse_elements(text: str, limit: int | None = None) -> list[ElementSet]:
    """Parse element sets from catalog text, skipping malformed records.

    Handles both 2-line and 3-line (with name) formats.

    Args:
        text: Raw text, one or more element sets separated by newlines.
        limit: Keep at most this many valid element sets.

    Returns:
        A list of ElementSet objects in input order.
    """
    lines = [l.rstrip() for l in text.strip().splitlines() if l.strip()]
    sets: list[ElementSet] = []
    rejected = 0
    i = 0

    while i < len(lines):
        if limit is not None and len(sets) >= limit:
            break

        if lines[i].startswith("1 ") and i + 1 < len(lines) and lines[i + 1].startswith("2 "):
            name, line1, line2 = "", lines[i], lines[i + 1]
            i += 2
        elif (
            not lines[i].startswith("1 ")
            and not lines[i].startswith("2 ")
            and i + 2 < len(lines)
            and lines[i + 1].startswith("1 ")
            and lines[i + 2].startswith("2 ")
        ):
            name, line1, line2 = lines[i], lines[i + 1], lines[i + 2]
            i += 3
        else:
            i += 1  # skip unrecognized lines
            continue

        try:
            sets.append(ElementSet.from_lines(line1, line2, name=name))
        except ValueError:
            rejected += 1
            logger.warning("Skipping malformed element set %r", name.strip() or line1[:7])

    logger.debug("Parsed %d element sets from text (%d rejected)", len(sets), rejected)
    return sets
