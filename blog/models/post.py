# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

@dataclass(frozen=True)
class Post:
    """A blog post loaded from one Markdown file in the posts directory."""
    id: str
    title: Optional[str] = None
    date: Optional[str] = None
    hour: Optional[str] = None
    content: str = ""
    content_html: Optional[str] = None
    # not recommended to use directly, use the fields instead
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_front_matter(cls, post_id: str, metadata: Dict[str, Any], content: str,
                          keys: Dict[str, str]) -> "Post":
        """Build a post, mapping the front-matter keys in ``keys`` onto title/date/hour.

        Missing keys stay ``None``.
        """
        return cls(
            id=post_id,
            title=metadata.get(keys["title"]),
            date=metadata.get(keys["date"]),
            hour=metadata.get(keys["hour"]),
            content=content,
            raw=dict(metadata),
        )

    def with_html(self, content_html: str) -> "Post":
        return replace(self, content_html=content_html)

    def __repr__(self):
        body_bytes = len(self.content.encode('utf-8'))
        return f"<Post id=\"{self.id}\" title=\"{self.title}\" date=\"{self.date}\" hour=\"{self.hour}\", bodyBytes={body_bytes}>"
