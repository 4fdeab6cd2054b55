"""Data access helpers for loading the location catalog."""

from __future__ import annotations

import csv
import io
import logging
import math
from pathlib import Path
from typing import Iterable, Iterator, Optional

import httpx

from ..config import settings
from ..errors import DataLoadError
from ..models.domain import Location, MapBounds
from ..services.geospatial import is_within_bounds

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("name", "lat", "lng")


def _coerce_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    try:
        parsed = float(value.strip())
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


class LocationCatalog:
    """Read-only list of candidate locations for one session."""

    def __init__(self, locations: Iterable[Location] = (), bounds: MapBounds | None = None) -> None:
        self._locations = tuple(locations)
        self._by_id = {location.id: location for location in self._locations}
        self.bounds = bounds or MapBounds.from_tuple(settings.map_bounds)

    @property
    def locations(self) -> tuple[Location, ...]:
        return self._locations

    def get(self, location_id: int) -> Location | None:
        return self._by_id.get(location_id)

    def search(self, term: str | None) -> list[Location]:
        """Case-insensitive substring match on location name."""
        if not term:
            return list(self._locations)
        needle = term.strip().lower()
        return [location for location in self._locations if needle in location.name.lower()]

    def out_of_bounds(self) -> list[Location]:
        return [
            location
            for location in self._locations
            if not is_within_bounds(location.lat, location.lng, self.bounds)
        ]

    def __len__(self) -> int:
        return len(self._locations)

    def __iter__(self) -> Iterator[Location]:
        return iter(self._locations)


def parse_locations(text: str) -> tuple[Location, ...]:
    """Parse CSV text with a ``name,lat,lng`` header into locations.

    Rows missing a field or carrying an unparsable coordinate are skipped.
    Ids are 1-based positions among the accepted rows.
    """
    try:
        return _parse_rows(csv.DictReader(io.StringIO(text)))
    except csv.Error as exc:
        raise DataLoadError(f"Location source is not valid CSV: {exc}") from exc


def _parse_rows(reader: csv.DictReader) -> tuple[Location, ...]:
    if not reader.fieldnames:
        raise DataLoadError("Location source is missing a header row.")
    columns = {name.strip().lower(): name for name in reader.fieldnames if name}
    missing_columns = set(REQUIRED_COLUMNS) - set(columns)
    if missing_columns:
        raise DataLoadError(f"Location source missing columns: {', '.join(sorted(missing_columns))}")

    locations: list[Location] = []
    for line_no, row in enumerate(reader, start=2):
        name = (row.get(columns["name"]) or "").strip()
        raw_lat = row.get(columns["lat"])
        raw_lng = row.get(columns["lng"])
        if not name or not (raw_lat or "").strip() or not (raw_lng or "").strip():
            continue  # ignore incomplete records
        lat = _coerce_float(raw_lat)
        lng = _coerce_float(raw_lng)
        if lat is None or lng is None:
            logger.warning(f"Skipping location '{name}' on line {line_no}: invalid coordinates ({raw_lat!r}, {raw_lng!r})")
            continue
        locations.append(Location(id=len(locations) + 1, name=name, lat=lat, lng=lng))
    return tuple(locations)


def _read_source(source: str | Path) -> str:
    source_str = str(source)
    if source_str.startswith(("http://", "https://")):
        try:
            response = httpx.get(source_str, timeout=10.0)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise DataLoadError(f"Failed to fetch location source {source_str}: {exc}") from exc
        return response.text

    csv_path = Path(source_str).expanduser()
    if not csv_path.exists():
        raise DataLoadError(f"Location file not found: {csv_path}")
    try:
        return csv_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise DataLoadError(f"Unable to read location file {csv_path}: {exc}") from exc


def load_catalog(source: str | Path | None = None, bounds: MapBounds | None = None) -> LocationCatalog:
    """Load the location catalog from a CSV path or URL."""

    text = _read_source(source or settings.location_file)
    catalog = LocationCatalog(parse_locations(text.lstrip("\ufeff")), bounds=bounds)
    flagged = catalog.out_of_bounds()
    if flagged:
        logger.warning(
            f"{len(flagged)} location(s) fall outside the map bounds: {', '.join(loc.name for loc in flagged)}"
        )
    logger.info(f"Loaded {len(catalog)} locations")
    return catalog


def load_catalog_or_empty(
    source: str | Path | None = None, bounds: MapBounds | None = None
) -> tuple[LocationCatalog, str | None]:
    """Load the catalog, falling back to an empty one.

    Returns the catalog and a notice describing the load failure, if any.
    """

    try:
        return load_catalog(source, bounds=bounds), None
    except DataLoadError as exc:
        logger.warning(f"Location catalog unavailable, continuing with an empty catalog: {exc}")
        return LocationCatalog((), bounds=bounds), str(exc)
