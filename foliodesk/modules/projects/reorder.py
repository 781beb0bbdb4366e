"""
Drag-and-drop reordering for the project list.

``ProjectBoard`` follows one drag gesture at a time:

    IDLE -> DRAGGING -> IDLE                      (dropped where it started)
                     -> REORDERING -> PERSISTING -> IDLE
                                               -> PERSIST_FAILED -> RESYNC -> IDLE

The local list is only an optimistic view. When persisting fails the board
reloads the order from the store instead of keeping what it moved locally.
"""

import logging

from foliodesk.core.errors import FolioDeskError
from .database import get_project_order, persist_priorities

logger = logging.getLogger(__name__)

IDLE = 'idle'
DRAGGING = 'dragging'
REORDERING = 'reordering'
PERSISTING = 'persisting'
PERSIST_FAILED = 'persist_failed'
RESYNC = 'resync'


class BoardStateError(Exception):
    """Gesture event received in a state that does not accept it"""


def move_item(items, old_index, new_index):
    """Return a copy of items with the element at old_index moved to new_index"""
    if not 0 <= old_index < len(items) or not 0 <= new_index < len(items):
        raise IndexError('Position out of range')
    moved = list(items)
    moved.insert(new_index, moved.pop(old_index))
    return moved


class ProjectBoard:
    def __init__(self, db):
        self.db = db
        self.items = []
        self.state = IDLE
        self.history = []
        self._drag_from = None

    def _enter(self, state):
        self.state = state
        self.history.append(state)

    def load(self):
        """Replace the local list with the store's order"""
        self.items = get_project_order(self.db)
        return self.items

    @property
    def ids(self):
        return [item['id'] for item in self.items]

    def start_drag(self, index):
        if self.state != IDLE:
            raise BoardStateError(f'Cannot start a drag while {self.state}')
        if not 0 <= index < len(self.items):
            raise IndexError('Position out of range')
        self._drag_from = index
        self._enter(DRAGGING)

    def cancel(self):
        if self.state != DRAGGING:
            raise BoardStateError(f'Nothing to cancel while {self.state}')
        self._drag_from = None
        self._enter(IDLE)

    def drop(self, index):
        """
        Finish the gesture at ``index``. Returns True when a new order was
        persisted, False when the item was dropped where it started.

        Persistence errors are re-raised after the board has resynced.
        """
        if self.state != DRAGGING:
            raise BoardStateError(f'Cannot drop while {self.state}')

        old_index, self._drag_from = self._drag_from, None
        if index == old_index:
            self._enter(IDLE)
            return False

        self._enter(REORDERING)
        self.items = move_item(self.items, old_index, index)

        self._enter(PERSISTING)
        try:
            self.items = persist_priorities(self.db, self.ids)
        except FolioDeskError as e:
            self._enter(PERSIST_FAILED)
            logger.warning("Reorder failed, reloading order from store: %s", e.message)
            self._enter(RESYNC)
            self.load()
            self._enter(IDLE)
            raise

        self._enter(IDLE)
        return True
