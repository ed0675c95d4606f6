# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

class BlogError(Exception):
    """Base class for errors raised while loading or rendering posts."""

class PostsDirectoryNotFoundError(BlogError):
    """The configured posts directory does not exist."""

    def __init__(self, directory):
        self.directory = directory
        super().__init__(f"Posts directory not found: {directory}")

class PostNotFoundError(BlogError, LookupError):
    """No Markdown file matches the requested post id."""

    def __init__(self, post_id: str):
        self.post_id = post_id
        super().__init__(f"Post not found: {post_id!r}")

class PostLoadError(BlogError):
    """A post file exists but could not be read or parsed."""

    def __init__(self, post_id: str, reason: str):
        self.post_id = post_id
        self.reason = reason
        super().__init__(f"Could not load post {post_id!r}: {reason}")
