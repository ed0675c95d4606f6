# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

from typing import Callable, Optional

from .gallery import GalleryController, ImageRegistry, PageScrollLock
from .models import Post
from .rendering import PostRenderer

class PostView:
    """State owned by one rendering of a post detail page.

    The gallery registry lives here rather than at module level so that
    concurrent requests never see each other's images. Call ``mount`` when the
    page is rendered and ``unmount`` when it is torn down.
    """

    def __init__(self, gallery_url: Optional[Callable[[int], str]] = None,
                 measure_scrollbar_width: Callable[[], int] = lambda: 0):
        self.registry = ImageRegistry()
        self.scroll_lock = PageScrollLock()
        self.gallery = GalleryController(self.registry, self.scroll_lock, measure_scrollbar_width)
        self.renderer = PostRenderer(self.registry, gallery_url)
        self.post: Optional[Post] = None

    @property
    def mounted(self) -> bool:
        return self.post is not None

    def mount(self, post: Post) -> Post:
        # rendering rebuilds the registry, so an open index could point past its end
        self.gallery.close()
        self.post = post.with_html(self.renderer.render(post.content))
        return self.post

    def unmount(self):
        self.gallery.teardown()
        self.post = None
