"""Center catalog loader with database-first approach, falling back to an Excel file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import Center, Coordinate

logger = logging.getLogger(__name__)

CENTERS_TABLE = "centers"
REQUIRED_COLUMNS = {"SiteId", "SiteName", "SiteLocation", "Latitude", "Longitude", "IsCenter"}


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return float(value)


def _coerce_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_flag(value: Any) -> bool:
    if value is None or value == "":
        return False
    if isinstance(value, bool):
        return value
    return int(value) == 1


def _cell(row: Sequence[Any], header_map: Mapping[str, int], column: str) -> Any:
    # Read-only sheets may return short rows when trailing cells are empty.
    idx = header_map[column]
    return row[idx] if idx < len(row) else None


def _build_center(site_id: Any, name: Any, address: Any, lat: Any, lon: Any, flag: Any) -> Center:
    latitude = _coerce_float(lat)
    longitude = _coerce_float(lon)
    coordinates = (
        Coordinate(latitude=latitude, longitude=longitude)
        if latitude is not None and longitude is not None
        else None
    )
    return Center(
        site_id=int(site_id),
        name=_coerce_text(name),
        address=_coerce_text(address),
        coordinates=coordinates,
        is_flagship=_coerce_flag(flag),
    )


def _center_from_row(row: Mapping[str, Any]) -> Center:
    return _build_center(
        row["id"],
        row.get("site_name"),
        row.get("site_location"),
        row.get("latitude"),
        row.get("longitude"),
        row.get("is_center"),
    )


def _load_centers_from_database() -> tuple[Center, ...] | None:
    """Load centers from Supabase. Returns None if the database is not available or empty."""
    supabase = get_supabase_client()
    if not supabase:
        return None

    try:
        response = (
            supabase.table(CENTERS_TABLE)
            .select("id, site_name, site_location, latitude, longitude, is_center")
            .order("id")
            .execute()
        )
    except Exception as e:
        logger.error(f"Error retrieving centers from database: {e}")
        return None

    if not response.data:
        return None

    centers: list[Center] = []
    for row in response.data:
        try:
            centers.append(_center_from_row(row))
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Skipping invalid center row: {e}")
    return tuple(centers) if centers else None


def _load_centers_from_file(source: Path | None = None) -> tuple[Center, ...]:
    """Load centers from the Excel workbook."""
    workbook_path = source or settings.centers_file
    if not workbook_path.exists():
        raise FileNotFoundError(f"Center workbook not found: {workbook_path}")

    wb = load_workbook(workbook_path, data_only=True, read_only=True)
    try:
        sheet = wb.active
        rows = sheet.iter_rows(min_row=1, values_only=True)
        header = next(rows, None)
        if header is None:
            raise ValueError(f"Center workbook '{workbook_path}' is empty.")

        header_map = {str(name).strip(): idx for idx, name in enumerate(header) if name is not None}
        missing_columns = REQUIRED_COLUMNS - set(header_map)
        if missing_columns:
            raise ValueError(f"Center workbook missing columns: {', '.join(sorted(missing_columns))}")

        centers: list[Center] = []
        for row in rows:
            site_id = _cell(row, header_map, "SiteId")
            if site_id is None or site_id == "":
                continue
            try:
                centers.append(
                    _build_center(
                        site_id,
                        _cell(row, header_map, "SiteName"),
                        _cell(row, header_map, "SiteLocation"),
                        _cell(row, header_map, "Latitude"),
                        _cell(row, header_map, "Longitude"),
                        _cell(row, header_map, "IsCenter"),
                    )
                )
            except (ValueError, TypeError) as e:
                logger.warning(f"Skipping invalid center row {site_id!r}: {e}")
        return tuple(centers)
    finally:
        wb.close()


def list_centers(source: Path | None = None) -> tuple[Center, ...]:
    """Get centers from the database first, falling back to the workbook.

    Read failures are logged and produce an empty tuple; callers treat that as
    "no centers available".
    """
    db_centers = _load_centers_from_database()
    if db_centers:
        return db_centers

    try:
        return _load_centers_from_file(source)
    except (OSError, ValueError, BadZipFile, InvalidFileException) as e:
        logger.error(f"Error retrieving centers from file: {e}")
        return tuple()
