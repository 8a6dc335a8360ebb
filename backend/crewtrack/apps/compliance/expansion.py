# backend/crewtrack/apps/compliance/expansion.py

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Union

from .enums import ViewMode
from .hierarchy import KEY_SEP


@dataclass
class UnknownViewError(Exception):
    view: str

    def __str__(self) -> str:
        return f"Unknown grouping view: {self.view!r}"


def prune_by_prefix(keys: Set[str], prefix: str) -> Set[str]:
    return {k for k in keys if not k.startswith(prefix)}


class ExpansionState:
    """
    Open node keys of one grouping view.

    Safe to share between request threads: every access to the key set
    happens under `_lock`.
    """

    def __init__(self) -> None:
        self._open: Set[str] = set()
        self._lock = threading.Lock()

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._open

    def toggle(self, key: str) -> bool:
        """
        Open or close `key`; returns True when the node is now open.

        Closing also forgets every open descendant, so re-opening the node
        later starts from a collapsed subtree.
        """
        with self._lock:
            if key in self._open:
                self._open.discard(key)
                self._open = prune_by_prefix(self._open, f"{key}{KEY_SEP}")
                return False
            self._open.add(key)
            return True

    def expand_all(self, keys: Iterable[str]) -> None:
        new_keys = list(keys)
        with self._lock:
            self._open.update(new_keys)

    def collapse_all(self) -> None:
        with self._lock:
            self._open = set()

    @property
    def open_keys(self) -> List[str]:
        with self._lock:
            return sorted(self._open)

    def __len__(self) -> int:
        with self._lock:
            return len(self._open)


ViewName = Union[ViewMode, str]


def coerce_view(view: ViewName) -> ViewMode:
    if isinstance(view, ViewMode):
        return view
    try:
        return ViewMode(view)
    except ValueError:
        raise UnknownViewError(view=str(view)) from None


class ExpansionStore:
    """
    One ExpansionState per grouping view.

    Switching views only changes which state the shorthand methods act on;
    the other views keep their open keys untouched.
    """

    def __init__(self, active: ViewName = ViewMode.LIST) -> None:
        self._states: Dict[ViewMode, ExpansionState] = {v: ExpansionState() for v in ViewMode}
        self._active = coerce_view(active)

    @property
    def active(self) -> ViewMode:
        return self._active

    def switch(self, view: ViewName) -> ViewMode:
        self._active = coerce_view(view)
        return self._active

    def state(self, view: Optional[ViewName] = None) -> ExpansionState:
        if view is None:
            return self._states[self._active]
        return self._states[coerce_view(view)]

    def toggle(self, key: str, view: Optional[ViewName] = None) -> bool:
        return self.state(view).toggle(key)

    def expand_all(self, keys: Iterable[str], view: Optional[ViewName] = None) -> None:
        self.state(view).expand_all(keys)

    def collapse_all(self, view: Optional[ViewName] = None) -> None:
        self.state(view).collapse_all()

    def has(self, key: str, view: Optional[ViewName] = None) -> bool:
        return self.state(view).has(key)

    def open_keys(self, view: Optional[ViewName] = None) -> List[str]:
        return self.state(view).open_keys

    def reset(self) -> None:
        for state in self._states.values():
            state.collapse_all()
