# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Full-screen image gallery for a post.

States are ``Closed`` and ``Open(index)``. The images come from an
``ImageRegistry`` that the renderer fills, in first-seen order, while it
converts a post body. Opening the gallery locks page scrolling and closing it
releases the lock, exactly once per transition.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class GalleryEntry:
    url: str
    caption: str = ""

@dataclass(frozen=True)
class GalleryState:
    is_open: bool = False
    current_index: int = 0

CLOSED = GalleryState()

class ImageRegistry:
    """Images encountered while rendering a post body, without duplicate URLs."""

    def __init__(self):
        self._entries: List[GalleryEntry] = []
        self._positions: Dict[str, int] = {}

    def register(self, url: str, caption: Optional[str] = None) -> int:
        """Add an image and return its position. A URL seen before keeps its first position and caption."""
        if url in self._positions:
            return self._positions[url]
        self._positions[url] = len(self._entries)
        self._entries.append(GalleryEntry(url, caption or ""))
        return self._positions[url]

    def index_of(self, url: str) -> int:
        """Position of ``url``, or 0 when it was never registered."""
        return self._positions.get(url, 0)

    @property
    def entries(self) -> List[GalleryEntry]:
        return list(self._entries)

    def clear(self):
        self._entries.clear()
        self._positions.clear()

    def __len__(self):
        return len(self._entries)

    def __getitem__(self, index: int) -> GalleryEntry:
        return self._entries[index]

class ScrollLock(Protocol):
    def lock(self, scrollbar_width: int) -> None: ...
    def unlock(self) -> None: ...

class PageScrollLock:
    """Scroll lock for server-rendered pages: the lock becomes the page body's inline style."""

    def __init__(self):
        self.locked = False
        self.scrollbar_width = 0

    def lock(self, scrollbar_width: int) -> None:
        self.locked = True
        self.scrollbar_width = max(0, int(scrollbar_width))

    def unlock(self) -> None:
        self.locked = False
        self.scrollbar_width = 0

    @property
    def body_style(self) -> str:
        if not self.locked:
            return ""
        # padding stands in for the scrollbar that disappears with overflow: hidden
        return f"overflow: hidden; padding-right: {self.scrollbar_width}px;"

class GalleryController:
    def __init__(self, registry: ImageRegistry, scroll_lock: ScrollLock,
                 measure_scrollbar_width: Callable[[], int] = lambda: 0):
        self.registry = registry
        self.scroll_lock = scroll_lock
        self.measure_scrollbar_width = measure_scrollbar_width
        self._state = CLOSED

    @property
    def state(self) -> GalleryState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    @property
    def current(self) -> Optional[GalleryEntry]:
        if not self._state.is_open:
            return None
        return self.registry[self._state.current_index]

    def _move_to(self, index: int):
        if not self._state.is_open:
            self.scroll_lock.lock(self.measure_scrollbar_width())
        self._state = GalleryState(is_open=True, current_index=index)

    def activate(self, url: str):
        """An image in the post body was clicked."""
        if not len(self.registry):
            logger.debug("Ignoring activation of %s: no images registered", url)
            return
        self._move_to(self.registry.index_of(url))

    def open_at(self, index: int):
        if not 0 <= index < len(self.registry):
            raise IndexError(f"gallery index {index} out of range for {len(self.registry)} images")
        self._move_to(index)

    def next(self):
        if self._state.is_open and len(self.registry):
            self._move_to((self._state.current_index + 1) % len(self.registry))

    def previous(self):
        if self._state.is_open and len(self.registry):
            self._move_to((self._state.current_index - 1) % len(self.registry))

    def neighbours(self) -> Optional[tuple]:
        """``(previous, next)`` indices around the open image, or None when closed."""
        if not self._state.is_open:
            return None
        count = len(self.registry)
        index = self._state.current_index
        return ((index - 1) % count, (index + 1) % count)

    def close(self):
        if not self._state.is_open:
            return
        self._state = CLOSED
        self.scroll_lock.unlock()

    def image_failed(self, url: str):
        """The displayed image could not be loaded: give up on the gallery."""
        current = self.current
        if current is None or current.url != url:
            return
        logger.warning("Gallery image %s failed to load; closing the gallery", url)
        self.close()

    def teardown(self):
        self.close()
        self.registry.clear()
