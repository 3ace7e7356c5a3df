"""Map session: one project's AOIs, selection and persistence wired together.

``MapSession`` mirrors the user actions of the mapping panel (draw,
enter an MGRS reference, rename, delete, import, export) so front-ends
only deal with one object::

    config = MapperConfig.from_env()
    session = MapSession.open(config)
    session.add_from_mgrs("15TVK1234567890")
    session.export_to_directory()

Opening a session builds store -> persistence adapter -> repository ->
selection machine and hydrates the AOIs and project name from the store.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mgrs_mapper.coordinates import InvalidCoordinateError, to_mgrs
from mgrs_mapper.core.config import MapperConfig
from mgrs_mapper.interchange import (
    dumps_geojson,
    export_filename,
    loads_geojson,
    read_geojson_file,
    write_geojson_file,
)
from mgrs_mapper.models.project import Project
from mgrs_mapper.state import (
    AOIRepository,
    EditInProgressError,
    LayerRegistry,
    SelectionStateMachine,
    render_polygons,
)
from mgrs_mapper.storage import PersistenceAdapter, get_store
from mgrs_mapper.utils.helpers import new_aoi_id, utc_now

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from mgrs_mapper.models.aoi import AOI
    from mgrs_mapper.models.events import DrawEvent
    from mgrs_mapper.state import RenderPolygon
    from mgrs_mapper.storage import KeyValueStore

logger = logging.getLogger("mgrs_mapper.session")


class MapSession:
    """Facade over the state, storage and interchange layers.

    Use :meth:`open` rather than the constructor.
    """

    def __init__(
        self,
        config: MapperConfig,
        persistence: PersistenceAdapter,
        repository: AOIRepository,
        selection: SelectionStateMachine,
        *,
        project_name: str,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_aoi_id,
    ) -> None:
        self._config = config
        self._persistence = persistence
        self._repository = repository
        self._selection = selection
        self._project_name = project_name
        self._clock = clock
        self._id_factory = id_factory

    @classmethod
    def open(
        cls,
        config: MapperConfig | None = None,
        store: KeyValueStore | None = None,
        *,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_aoi_id,
    ) -> MapSession:
        """Build a session and load its state from the durable store.

        Args:
            config: Mapper configuration; read from the environment if omitted.
            store: Store to use instead of the one ``config.store`` names.
            clock: Current-time source for timestamps.
            id_factory: Fresh AOI id source.

        Raises:
            StorageUnavailableError: If ``config.store`` names an unknown backend.
        """
        config = config or MapperConfig.from_env()
        if store is None:
            store = get_store(config.store, config)

        persistence = PersistenceAdapter(store)
        repository = AOIRepository(
            persistence,
            clock=clock,
            id_factory=id_factory,
            mgrs_precision=config.mgrs_precision,
            layers=LayerRegistry(),
        )
        selection = SelectionStateMachine(repository)

        repository.hydrate(persistence.load())
        project_name = persistence.load_project_name() or config.default_project_name

        logger.info(
            "Session opened | store=%s | project=%s | aois=%d",
            store.name if store is not None else "none",
            project_name,
            len(repository),
        )
        return cls(
            config,
            persistence,
            repository,
            selection,
            project_name=project_name,
            clock=clock,
            id_factory=id_factory,
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> MapperConfig:
        return self._config

    @property
    def repository(self) -> AOIRepository:
        return self._repository

    @property
    def selection(self) -> SelectionStateMachine:
        return self._selection

    @property
    def persistence(self) -> PersistenceAdapter:
        return self._persistence

    @property
    def project_name(self) -> str:
        return self._project_name

    @property
    def aois(self) -> tuple[AOI, ...]:
        return self._repository.aois

    @property
    def project(self) -> Project:
        """Snapshot of the project name and AOIs."""
        return Project(name=self._project_name, aois=list(self._repository.aois))

    # ------------------------------------------------------------------
    # AOI actions
    # ------------------------------------------------------------------

    def add_from_mgrs(self, text: str, name: str | None = None) -> AOI:
        """Add a square AOI around a manually entered MGRS reference.

        Raises:
            EditInProgressError: If an AOI is being edited.
            InvalidMGRSFormatError: If *text* is malformed.
        """
        if not self._selection.mgrs_entry_enabled:
            msg = "MGRS entry is disabled while an AOI boundary is being edited"
            raise EditInProgressError(msg)
        return self._repository.create_from_mgrs(
            text,
            self._config.square_half_width_deg,
            name,
        )

    def handle_draw_event(self, event: DrawEvent) -> AOI | None:
        """Forward a draw-surface completion event to the selection machine."""
        return self._selection.handle(event)

    def rename_aoi(self, aoi_id: str, new_name: str) -> AOI:
        return self._repository.rename(aoi_id, new_name)

    def delete_aoi(self, aoi_id: str) -> AOI:
        """Delete one AOI; confirmation is the caller's concern."""
        return self._repository.delete(aoi_id)

    def delete_all(self) -> int:
        return self._repository.delete_all()

    # ------------------------------------------------------------------
    # Project
    # ------------------------------------------------------------------

    def rename_project(self, new_name: str) -> bool:
        """Rename the project; a name that trims to empty keeps the current one.

        Returns:
            ``True`` if the name changed.
        """
        project = Project(name=self._project_name)
        if not project.rename(new_name):
            return False
        self._project_name = project.name
        self._persistence.save_project_name(project.name)
        logger.info("Project renamed | name=%s", project.name)
        return True

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def import_text(self, text: str) -> list[AOI]:
        """Import every Polygon Feature of a GeoJSON document.

        Nothing is added unless the whole document converts.

        Raises:
            GeoJSONFormatError, NoImportableFeaturesError,
            InvalidCoordinateError, AOIGeometryError: On invalid input.
        """
        aois = loads_geojson(text, id_factory=self._id_factory, now=self._clock)
        added = self._repository.append(aois)
        logger.info("GeoJSON imported | aois=%d", len(added))
        return added

    def import_file(self, path: str, media_type: str | None = None) -> list[AOI]:
        """Read and import a GeoJSON file.

        Raises:
            FileReadError: If the file cannot be read.
        """
        return self.import_text(read_geojson_file(path, media_type))

    def export_document(self, export_date: datetime | None = None) -> str:
        """Return the project as pretty-printed GeoJSON text."""
        return dumps_geojson(self._repository.aois, self._project_name, export_date or self._clock())

    def export_filename(self, export_date: datetime | None = None) -> str:
        return export_filename(self._project_name, export_date or self._clock())

    def export_to_directory(
        self,
        directory: str | None = None,
        export_date: datetime | None = None,
    ) -> str:
        """Write the export file and return its path.

        Args:
            directory: Target directory; defaults to ``config.export_dir``.

        Raises:
            FileWriteError: If the file cannot be written.
        """
        return write_geojson_file(
            directory or self._config.export_dir,
            self._repository.aois,
            self._project_name,
            export_date or self._clock(),
        )

    # ------------------------------------------------------------------
    # Map surface
    # ------------------------------------------------------------------

    def cursor_mgrs(self, lat: float, lon: float) -> str | None:
        """MGRS readout for a pointer position; ``None`` outside MGRS coverage."""
        try:
            return to_mgrs(lat, lon, self._config.mgrs_precision)
        except InvalidCoordinateError:
            return None

    def render_polygons(self) -> list[RenderPolygon]:
        return render_polygons(self._repository.aois, self._selection)

    def extent(self, aoi_id: str | None = None) -> tuple[float, float, float, float] | None:
        """Bounding box of one AOI, or of every AOI for zoom-to-all."""
        return self._repository.extent(aoi_id)

    def zoom_target(self) -> tuple[float, float, float, float] | None:
        """Bounds the map should fit: the selected AOI, ``None`` with no selection."""
        selected_id = self._selection.selected_id
        if selected_id is None:
            return None
        return self._repository.extent(selected_id)
