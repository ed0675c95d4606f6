# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import frontmatter
import yaml

from .errors import PostLoadError, PostNotFoundError, PostsDirectoryNotFoundError
from .models import Post

logger = logging.getLogger(__name__)

POST_EXTENSION = ".md"

# Front-matter keys used by the existing posts: titulo (title), data (date), hora (hour)
DEFAULT_FRONT_MATTER_KEYS = {
    "title": "titulo",
    "date": "data",
    "hour": "hora",
}

def _normalize_value(value: Any) -> Any:
    """Undo YAML turning unquoted ``2024-03-05`` into a ``date``."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value

def _normalize_hour(value: Any) -> Any:
    """Undo YAML 1.1 reading unquoted ``14:30`` as the base-60 integer ``870``."""
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value < 24 * 60:
        hours, minutes = divmod(value, 60)
        return f"{hours:02d}:{minutes:02d}"
    return value

class PostStore:
    """Reads posts from a flat directory of ``<id>.md`` files."""

    def __init__(self, directory, front_matter_keys: Optional[Dict[str, str]] = None, max_workers: Optional[int] = None):
        self.directory = Path(directory)
        self.front_matter_keys = {**DEFAULT_FRONT_MATTER_KEYS, **(front_matter_keys or {})}
        self.max_workers = max_workers

    def _ensure_directory(self):
        if not self.directory.is_dir():
            raise PostsDirectoryNotFoundError(self.directory)

    def path_for(self, post_id: str) -> Path:
        return self.directory / f"{post_id}{POST_EXTENSION}"

    def list_post_ids(self) -> List[str]:
        """One id per Markdown file (file name without the extension), in file name order."""
        self._ensure_directory()
        return sorted(
            path.name[:-len(POST_EXTENSION)]
            for path in self.directory.iterdir()
            if path.is_file() and path.name.endswith(POST_EXTENSION)
        )

    def load_post(self, post_id: str) -> Post:
        """Load one post. Raises PostNotFoundError if no ``<post_id>.md`` exists."""
        self._ensure_directory()

        # ids are bare file names; anything that could leave the directory does not exist
        if not post_id or "/" in post_id or "\\" in post_id or post_id in (".", ".."):
            raise PostNotFoundError(post_id)

        path = self.path_for(post_id)
        if not path.is_file():
            raise PostNotFoundError(post_id)

        try:
            document = frontmatter.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise PostLoadError(post_id, f"unreadable file: {e}") from e
        except (yaml.YAMLError, ValueError) as e:
            raise PostLoadError(post_id, f"malformed front-matter: {e}") from e

        metadata = document.metadata if isinstance(document.metadata, dict) else {}
        metadata = {key: _normalize_value(value) for key, value in metadata.items()}
        hour_key = self.front_matter_keys["hour"]
        if hour_key in metadata:
            metadata[hour_key] = _normalize_hour(metadata[hour_key])

        post = Post.from_front_matter(post_id, metadata, document.content, self.front_matter_keys)
        for field_name, key in self.front_matter_keys.items():
            if key not in metadata:
                logger.debug("Post %s has no %r (%s) in its front-matter", post_id, key, field_name)
        return post

    def load_all(self) -> List[Post]:
        """Load every post concurrently, returned in listing order."""
        post_ids = self.list_post_ids()
        if not post_ids:
            return []

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="post-reader") as pool:
            posts = list(pool.map(self.load_post, post_ids))

        logger.debug("Loaded %d posts from %s", len(posts), self.directory)
        return posts
