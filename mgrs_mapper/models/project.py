"""Data model for a mapping project.

A project is a thin wrapper: a user-editable name (persisted under its
own store key) and the ordered AOI collection owned by the repository.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mgrs_mapper.core.constants import DEFAULT_PROJECT_NAME

if TYPE_CHECKING:
    from mgrs_mapper.models.aoi import AOI


@dataclass(slots=True)
class Project:
    """A named, ordered collection of AOIs.

    Attributes:
        name: Project name shown in the panel and used for export filenames.
        aois: AOIs in display (insertion) order.
    """

    name: str = DEFAULT_PROJECT_NAME
    aois: list[AOI] = field(default_factory=list)

    def rename(self, new_name: str) -> bool:
        """Set the trimmed *new_name*; an empty name keeps the current one.

        Returns:
            ``True`` if the name changed.
        """
        trimmed = new_name.strip()
        if not trimmed or trimmed == self.name:
            return False
        self.name = trimmed
        return True

    @property
    def aoi_count(self) -> int:
        """Number of AOIs in the project."""
        return len(self.aois)
