"""Selection and edit state machine.

States::

    IDLE --click AOI--> SELECTED(id) --context on id--> EDITING(id)
      ^                   |   ^                            |
      +--click map / -----+   +--Edited / EditCancelled ---+
         re-click id               / stop_edit

- At most one AOI is selected; the AOI in edit mode is the selected one.
- While ``EDITING``, map clicks, AOI clicks and context actions are
  ignored: edit mode must be left explicitly (an ``Edited`` or
  ``EditCancelled`` event, or ``stop_edit``).
- Manual MGRS entry and drawing new polygons are disabled while editing.
- Deleting the selected AOI (directly, via delete-all or by a reload
  that drops it) returns the machine to ``IDLE``.

Draw-surface completion events are consumed by ``handle`` with an
exhaustive ``match`` over the ``DrawEvent`` union.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from mgrs_mapper.core.exceptions import ValidationError
from mgrs_mapper.models.events import Created, DrawEvent, EditCancelled, Edited

if TYPE_CHECKING:
    from mgrs_mapper.models.aoi import AOI
    from mgrs_mapper.state.repository import AOIRepository

logger = logging.getLogger("mgrs_mapper.state.selection")


class SelectionState(enum.Enum):
    """Interaction state of the AOI collection."""

    IDLE = "idle"
    SELECTED = "selected"
    EDITING = "editing"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class EditInProgressError(ValidationError):
    """Raised when an action conflicts with the current edit mode."""

    default_stage = "state"
    default_code = "EDIT_IN_PROGRESS"


class NoSelectionError(ValidationError):
    """Raised when edit mode is requested with nothing selected."""

    default_stage = "state"
    default_code = "NO_SELECTION"


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class SelectionStateMachine:
    """Tracks which AOI is selected or being edited.

    Args:
        repository: Collection the selected ids refer to.  The machine
            registers itself as a removal listener.
    """

    def __init__(self, repository: AOIRepository) -> None:
        self._repository = repository
        self._state = SelectionState.IDLE
        self._selected_id: str | None = None
        repository.add_removal_listener(self._on_removed)

    # ------------------------------------------------------------------
    # State inspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def selected_id(self) -> str | None:
        """Id of the selected (or edited) AOI, ``None`` when idle."""
        return self._selected_id

    @property
    def editing_id(self) -> str | None:
        """Id of the AOI in edit mode, ``None`` otherwise."""
        return self._selected_id if self._state is SelectionState.EDITING else None

    @property
    def is_editing(self) -> bool:
        return self._state is SelectionState.EDITING

    @property
    def mgrs_entry_enabled(self) -> bool:
        """Whether the manual MGRS entry input and its add action are enabled."""
        return not self.is_editing

    @property
    def can_draw(self) -> bool:
        """Whether the "draw a new polygon" affordance is offered."""
        return not self.is_editing

    @property
    def can_edit(self) -> bool:
        """Whether the "edit the selected polygon" affordance is offered."""
        return self._state is SelectionState.SELECTED

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------

    def click_map(self) -> SelectionState:
        """Click on empty map area: clear the selection unless editing."""
        if self.is_editing:
            logger.debug("Map click ignored while editing | id=%s", self._selected_id)
            return self._state
        self._go_idle()
        return self._state

    def click_aoi(self, aoi_id: str) -> SelectionState:
        """Click on an AOI: select it, or deselect it if it is already selected.

        Raises:
            AOINotFoundError: If *aoi_id* is not in the repository.
        """
        if self.is_editing:
            logger.debug("AOI click ignored while editing | id=%s", self._selected_id)
            return self._state
        self._repository.get(aoi_id)
        if self._selected_id == aoi_id:
            self._go_idle()
        else:
            self._select(aoi_id)
        return self._state

    def context_aoi(self, aoi_id: str) -> SelectionState:
        """Secondary action on an AOI: edit it if selected, otherwise select it.

        Raises:
            AOINotFoundError: If *aoi_id* is not in the repository.
        """
        if self.is_editing:
            logger.debug("Context action ignored while editing | id=%s", self._selected_id)
            return self._state
        self._repository.get(aoi_id)
        if self._selected_id == aoi_id:
            self._enter_edit()
        else:
            self._select(aoi_id)
        return self._state

    def start_edit(self) -> SelectionState:
        """Enter edit mode on the selected AOI.

        Raises:
            NoSelectionError: If nothing is selected.
        """
        if self.is_editing:
            return self._state
        if self._selected_id is None:
            msg = "Select an AOI before editing its boundary"
            raise NoSelectionError(msg)
        self._enter_edit()
        return self._state

    def stop_edit(self) -> SelectionState:
        """Leave edit mode; the edited AOI stays selected."""
        if self.is_editing:
            self._state = SelectionState.SELECTED
            logger.info("Edit mode left | id=%s", self._selected_id)
        return self._state

    # ------------------------------------------------------------------
    # Draw surface events
    # ------------------------------------------------------------------

    def handle(self, event: DrawEvent) -> AOI | None:
        """Apply a draw-surface completion event.

        Returns:
            The created or reshaped AOI; ``None`` for ``EditCancelled``.

        Raises:
            EditInProgressError: If a polygon is created while editing, or
                an edit reports an AOI other than the one in edit mode.
            InvalidCoordinateError, AOIGeometryError: From the repository;
                the state is left unchanged.
        """
        match event:
            case Created(vertices=vertices, name=name):
                if self.is_editing:
                    msg = f"Cannot create a new AOI while AOI {self._selected_id} is being edited"
                    raise EditInProgressError(msg)
                return self._repository.create(vertices, name)
            case Edited(aoi_id=aoi_id, vertices=vertices):
                self._require_editing(aoi_id)
                aoi = self._repository.update_boundary(aoi_id, vertices)
                self._state = SelectionState.SELECTED
                return aoi
            case EditCancelled(aoi_id=aoi_id):
                self._require_editing(aoi_id)
                self._state = SelectionState.SELECTED
                logger.info("Edit cancelled | id=%s", aoi_id)
                return None
            case _:
                msg = f"Unknown draw event: {event!r}"
                raise TypeError(msg)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_editing(self, aoi_id: str) -> None:
        if self.editing_id != aoi_id:
            msg = f"AOI {aoi_id} is not in edit mode (editing: {self.editing_id})"
            raise EditInProgressError(msg)

    def _select(self, aoi_id: str) -> None:
        self._selected_id = aoi_id
        self._state = SelectionState.SELECTED
        logger.debug("AOI selected | id=%s", aoi_id)

    def _enter_edit(self) -> None:
        self._state = SelectionState.EDITING
        logger.info("Edit mode entered | id=%s", self._selected_id)

    def _go_idle(self) -> None:
        if self._selected_id is not None:
            logger.debug("Selection cleared | id=%s", self._selected_id)
        self._selected_id = None
        self._state = SelectionState.IDLE

    def _on_removed(self, aoi_ids: frozenset[str]) -> None:
        if self._selected_id in aoi_ids:
            self._go_idle()
