"""GeoJSON file import and export.

- ``export_filename``: ``{sanitised-project}_aois_{YYYY-MM-DD}.geojson``
- ``read_geojson_file``: read an import file as UTF-8 text; a file that
  does not look like GeoJSON is logged, not rejected
- ``write_geojson_file``: write a pretty-printed export document
"""

from __future__ import annotations

import logging
import os
import re
from typing import TYPE_CHECKING

from mgrs_mapper.core.constants import (
    EXPORT_FILENAME_TEMPLATE,
    GEOJSON_EXTENSION,
    GEOJSON_MEDIA_TYPE,
)
from mgrs_mapper.core.exceptions import PermanentError
from mgrs_mapper.interchange.geojson import dumps_geojson
from mgrs_mapper.utils.helpers import iso_day, utc_now

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date, datetime

    from mgrs_mapper.models.aoi import AOI

logger = logging.getLogger("mgrs_mapper.interchange.files")

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9]")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class FileReadError(PermanentError):
    """Raised when an import file cannot be read."""

    default_stage = "interchange"
    default_code = "FILE_READ_FAILED"


class FileWriteError(PermanentError):
    """Raised when an export file cannot be written."""

    default_stage = "interchange"
    default_code = "FILE_WRITE_FAILED"


# ---------------------------------------------------------------------------
# Filenames
# ---------------------------------------------------------------------------


def sanitize_project_name(project_name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9]`` with ``_`` and lower-case."""
    return _UNSAFE_FILENAME_CHARS.sub("_", project_name).lower()


def export_filename(project_name: str, day: date | datetime) -> str:
    """Return the export filename for *project_name* on *day*.

    ``export_filename("Test Zone #1", date(2024, 6, 1))`` gives
    ``"test_zone__1_aois_2024-06-01.geojson"``.
    """
    return EXPORT_FILENAME_TEMPLATE.format(
        project=sanitize_project_name(project_name),
        day=iso_day(day),
    )


def looks_like_geojson(path: str, media_type: str | None = None) -> bool:
    """Whether *path* has the ``.geojson`` extension or *media_type* is GeoJSON."""
    return path.lower().endswith(GEOJSON_EXTENSION) or media_type == GEOJSON_MEDIA_TYPE


# ---------------------------------------------------------------------------
# Read / write
# ---------------------------------------------------------------------------


def read_geojson_file(path: str, media_type: str | None = None) -> str:
    """Read an import file as UTF-8 text.

    Args:
        path: File chosen by the user.
        media_type: Media type reported by the picker, if any.

    Raises:
        FileReadError: If the file cannot be opened or is not UTF-8 text.
    """
    if not looks_like_geojson(path, media_type):
        logger.warning(
            "Unexpected file type | media_type=%s | filename=%s",
            media_type,
            os.path.basename(path),
        )
    try:
        with open(path, encoding="utf-8") as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Error reading file {path}: {exc}"
        raise FileReadError(msg) from exc
    logger.debug("Import file read | path=%s | chars=%d", path, len(text))
    return text


def write_geojson_file(
    directory: str,
    aois: Iterable[AOI],
    project_name: str,
    export_date: datetime | None = None,
) -> str:
    """Write every AOI as one FeatureCollection file into *directory*.

    Returns:
        Path of the written file.

    Raises:
        FileWriteError: If the directory or file cannot be written.
    """
    moment = export_date or utc_now()
    text = dumps_geojson(aois, project_name, moment)
    path = os.path.join(directory, export_filename(project_name, moment))
    try:
        os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)
    except OSError as exc:
        msg = f"Error exporting GeoJSON file {path}: {exc}"
        raise FileWriteError(msg) from exc
    logger.info("GeoJSON exported | path=%s | bytes=%d", path, len(text.encode("utf-8")))
    return path
