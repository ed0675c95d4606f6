# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

import logging
import xml.etree.ElementTree as etree
from typing import Callable, Iterator, Optional, Sequence, Tuple

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from .gallery import ImageRegistry

logger = logging.getLogger(__name__)

# must run after the "inline" tree processor (priority 20), which creates <img> and <a>
TREEPROCESSOR_PRIORITY = 15

DEFAULT_EXTENSIONS = ("fenced_code", "tables")

def _walk(parent: etree.Element) -> Iterator[Tuple[etree.Element, int, etree.Element]]:
    """(parent, position, child) for every element below ``parent``, in document order."""
    for position, child in enumerate(parent):
        yield parent, position, child
        yield from _walk(child)

def _is_image_only_paragraph(element: etree.Element) -> bool:
    return (
        element.tag == "p"
        and len(element) == 1
        and element[0].tag == "img"
        and not (element.text or "").strip()
        and not (element[0].tail or "").strip()
    )

class PostBodyTreeprocessor(Treeprocessor):
    """Sends image-only paragraphs through the gallery and opens links in a new tab."""

    def __init__(self, md, registry: ImageRegistry, gallery_url: Optional[Callable[[int], str]]):
        super().__init__(md)
        self.registry = registry
        self.gallery_url = gallery_url

    def run(self, root: etree.Element):
        for link in root.iter("a"):
            link.set("target", "_blank")
            link.set("rel", "noopener noreferrer")

        for parent, position, child in list(_walk(root)):
            if _is_image_only_paragraph(child):
                parent[position] = self._figure(child[0])

    def _figure(self, image: etree.Element) -> etree.Element:
        url = image.get("src", "")
        caption = image.get("title") or ""
        index = self.registry.register(url, caption)
        logger.debug("Registered gallery image %d: %s", index, url)

        figure = etree.Element("figure", {"class": "post-image"})
        container = figure
        if self.gallery_url is not None:
            container = etree.SubElement(figure, "a", {"class": "gallery-link", "href": self.gallery_url(index)})

        image.tail = None
        image.set("data-gallery-index", str(index))
        container.append(image)

        if caption:
            figcaption = etree.SubElement(figure, "figcaption")
            figcaption.text = caption
        return figure

class PostBodyExtension(Extension):
    def __init__(self, registry: ImageRegistry, gallery_url: Optional[Callable[[int], str]] = None, **kwargs):
        self.registry = registry
        self.gallery_url = gallery_url
        super().__init__(**kwargs)

    def extendMarkdown(self, md):
        md.treeprocessors.register(
            PostBodyTreeprocessor(md, self.registry, self.gallery_url),
            "post_body",
            TREEPROCESSOR_PRIORITY,
        )

class PostRenderer:
    """Markdown body to HTML, registering the body's gallery images as it goes.

    ``gallery_url`` maps a gallery index to the URL that opens the gallery on
    that image; without it images are rendered without a gallery link.
    """

    def __init__(self, registry: ImageRegistry, gallery_url: Optional[Callable[[int], str]] = None,
                 extensions: Sequence[str] = DEFAULT_EXTENSIONS):
        self.registry = registry
        self.gallery_url = gallery_url
        self.extensions = list(extensions)

    def render(self, text: str) -> str:
        self.registry.clear()
        md = markdown.Markdown(
            extensions=self.extensions + [PostBodyExtension(self.registry, self.gallery_url)],
            output_format="html",
        )
        return md.convert(text or "")
