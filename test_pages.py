#!/usr/bin/env python3
"""
Integration tests for the blog pages, the health check and the static export,
using Flask's test client against a temporary posts directory.
"""

import os
import tempfile
import unittest
from unittest.mock import patch
from blog import app
from blog.config import _int_env
from blog.errors import PostsDirectoryNotFoundError
from blog.freezer import freeze, site_urls
from blog.views import PostView

POSTS = {
    "older": ('titulo: "Older post"\ndata: "2024-03-05"\nhora: "09:00"', "Nothing to see."),
    "newer": (
        'titulo: "Newer post"\ndata: "2024-03-05"\nhora: "14:30"',
        'Read [the docs](https://example.com).\n\n![a](/img/a.png)\n\n![b](/img/b.png "Bee")\n\n![a again](/img/a.png)\n\n![c](/img/c.png)',
    ),
    "undated": ('titulo: "Undated post"', "No date."),
}

class BlogTestCase(unittest.TestCase):
    """Points the app at a temporary posts directory for each test."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.posts_directory = os.path.join(self._tmp.name, "posts")
        os.mkdir(self.posts_directory)
        for post_id, (front_matter, body) in POSTS.items():
            with open(os.path.join(self.posts_directory, f"{post_id}.md"), "w", encoding="utf-8") as f:
                f.write(f"---\n{front_matter}\n---\n{body}\n")

        self._saved_config = {key: app.config.get(key) for key in ("POSTS_DIRECTORY", "TESTING", "GALLERY_SCROLLBAR_WIDTH")}
        app.config.update(POSTS_DIRECTORY=self.posts_directory, TESTING=True, GALLERY_SCROLLBAR_WIDTH=0)
        self.client = app.test_client()

    def tearDown(self):
        app.config.update(self._saved_config)
        self._tmp.cleanup()

class TestIndexPage(BlogTestCase):
    """Test cases for the post listing."""

    def test_lists_posts_newest_first(self):
        response = self.client.get("/")
        html = response.get_data(as_text=True)

        self.assertEqual(response.status_code, 200)
        self.assertLess(html.index("Newer post"), html.index("Older post"))
        self.assertLess(html.index("Older post"), html.index("Undated post"))
        self.assertIn('href="/posts/newer/"', html)

    def test_dates_are_formatted(self):
        html = self.client.get("/").get_data(as_text=True)
        self.assertIn('<time datetime="2024-03-05">05/03/2024</time>', html)
        # the undated post gets the empty placeholder
        self.assertIn("<div></div>", html)

    def test_missing_posts_directory_is_fatal(self):
        app.config.update(POSTS_DIRECTORY=os.path.join(self._tmp.name, "missing"))
        with self.assertRaises(PostsDirectoryNotFoundError):
            self.client.get("/")

    def test_missing_posts_directory_answers_500_when_not_testing(self):
        app.config.update(POSTS_DIRECTORY=os.path.join(self._tmp.name, "missing"), TESTING=False)
        with self.assertLogs("blog", level="ERROR"):
            response = self.client.get("/")
        self.assertEqual(response.status_code, 500)

class TestPostPage(BlogTestCase):
    """Test cases for the post detail page."""

    def test_renders_post(self):
        response = self.client.get("/posts/newer/")
        html = response.get_data(as_text=True)

        self.assertEqual(response.status_code, 200)
        self.assertIn("Newer post", html)
        self.assertIn("05/03/2024", html)
        self.assertIn('<figure class="post-image">', html)
        self.assertIn('href="/posts/newer/gallery/1/"', html)
        self.assertIn('rel="noopener noreferrer"', html)
        self.assertNotIn("overflow: hidden", html)

    def test_unknown_post_is_404(self):
        with self.assertLogs("blog", level="WARNING"):
            response = self.client.get("/posts/nope/")
        self.assertEqual(response.status_code, 404)
        self.assertIn("404", response.get_data(as_text=True))

    def test_malformed_post_is_fatal(self):
        with open(os.path.join(self.posts_directory, "broken.md"), "w") as f:
            f.write("---\ntitulo: [unclosed\n---\nbody\n")
        app.config.update(TESTING=False)
        with self.assertLogs("blog", level="ERROR"):
            response = self.client.get("/posts/broken/")
        self.assertEqual(response.status_code, 500)

    def test_view_is_unmounted_after_the_request(self):
        with patch.object(PostView, "unmount", autospec=True) as unmount:
            self.client.get("/posts/newer/")
        unmount.assert_called_once()

    def test_image_load_error_closes_gallery(self):
        with self.assertLogs("blog.gallery", level="WARNING") as logs:
            response = self.client.get("/posts/newer/?gallery_error=2")
        self.assertEqual(response.status_code, 200)
        self.assertIn("/img/c.png", logs.output[0])
        self.assertNotIn("overflow: hidden", response.get_data(as_text=True))

class TestGalleryPages(BlogTestCase):
    """Test cases for the gallery overlay pages."""

    def test_gallery_open_at_index(self):
        response = self.client.get("/posts/newer/gallery/1/")
        html = response.get_data(as_text=True)

        self.assertEqual(response.status_code, 200)
        self.assertIn('class="gallery-overlay"', html)
        self.assertIn('src="/img/b.png"', html)
        self.assertIn("<figcaption>Bee</figcaption>", html)
        self.assertIn('href="/posts/newer/gallery/0/"', html)
        self.assertIn('href="/posts/newer/gallery/2/"', html)
        self.assertIn("2 / 3", html)
        self.assertIn('style="overflow: hidden; padding-right: 0px;"', html)

    def test_navigation_wraps(self):
        html = self.client.get("/posts/newer/gallery/2/").get_data(as_text=True)
        self.assertIn('class="gallery-next" href="/posts/newer/gallery/0/"', html)

    def test_reported_scrollbar_width(self):
        html = self.client.get("/posts/newer/gallery/0/?sbw=15").get_data(as_text=True)
        self.assertIn("padding-right: 15px;", html)

    def test_out_of_range_index_is_404(self):
        with self.assertLogs("blog", level="WARNING"):
            response = self.client.get("/posts/newer/gallery/3/")
        self.assertEqual(response.status_code, 404)

    def test_activate_by_url(self):
        response = self.client.get("/posts/newer/gallery/", query_string={"src": "/img/c.png"})
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response.headers["Location"].endswith("/posts/newer/gallery/2/"))

    def test_activate_unknown_url_opens_first_image(self):
        response = self.client.get("/posts/newer/gallery/", query_string={"src": "/img/zzz.png"})
        self.assertTrue(response.headers["Location"].endswith("/posts/newer/gallery/0/"))

    def test_activate_without_images_returns_to_post(self):
        response = self.client.get("/posts/older/gallery/", query_string={"src": "/img/a.png"})
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response.headers["Location"].endswith("/posts/older/"))

class TestHealthcheck(BlogTestCase):
    """Test cases for the health check endpoint."""

    def test_healthy(self):
        response = self.client.get("/api/health")
        data = response.get_json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(data["status"], "healthy")
        self.assertEqual(data["checks"]["posts"]["details"]["post_count"], 3)
        self.assertEqual(response.headers["X-Cache"], "MISS")

    def test_missing_directory_is_unhealthy(self):
        app.config.update(POSTS_DIRECTORY=os.path.join(self._tmp.name, "missing"))
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.get_json()["checks"]["posts"]["status"], "unhealthy")

    def test_cached_answer(self):
        self.client.get("/api/health")
        response = self.client.get("/api/health?c=1")
        self.assertEqual(response.headers["X-Cache"], "HIT")

    def test_cached_answer_is_not_reused_for_another_directory(self):
        self.client.get("/api/health")
        app.config.update(POSTS_DIRECTORY=os.path.join(self._tmp.name, "missing"))

        response = self.client.get("/api/health?c=1")

        self.assertEqual(response.headers["X-Cache"], "MISS")
        self.assertEqual(response.status_code, 503)

class TestConfig(unittest.TestCase):
    """Test cases for reading integer settings from the environment."""

    def test_integer_setting(self):
        with patch.dict(os.environ, {"GALLERY_SCROLLBAR_WIDTH": "17"}):
            self.assertEqual(_int_env("GALLERY_SCROLLBAR_WIDTH", 0), 17)

    def test_malformed_integer_falls_back_to_default(self):
        with patch.dict(os.environ, {"GALLERY_SCROLLBAR_WIDTH": "wide"}):
            self.assertEqual(_int_env("GALLERY_SCROLLBAR_WIDTH", 0), 0)

    def test_missing_integer_uses_default(self):
        with patch.dict(os.environ, clear=True):
            self.assertEqual(_int_env("GALLERY_SCROLLBAR_WIDTH", 5), 5)

class TestFreeze(BlogTestCase):
    """Test cases for the static export."""

    def test_site_urls(self):
        urls = site_urls(app)
        self.assertEqual(urls[0], "/")
        self.assertIn("/posts/undated/", urls)
        self.assertEqual(
            [url for url in urls if "/gallery/" in url],
            ["/posts/newer/gallery/0/", "/posts/newer/gallery/1/", "/posts/newer/gallery/2/"],
        )

    def test_freeze_writes_every_page(self):
        output = os.path.join(self._tmp.name, "build")

        written = freeze(app, output)

        self.assertEqual(len(written), 7)
        for relative in ["index.html", "posts/newer/index.html", "posts/newer/gallery/2/index.html", "static/style.css"]:
            with self.subTest(path=relative):
                self.assertTrue(os.path.isfile(os.path.join(output, relative)))
        with open(os.path.join(output, "index.html"), encoding="utf-8") as f:
            self.assertIn("Newer post", f.read())

    def test_freeze_command(self):
        output = os.path.join(self._tmp.name, "cli-build")
        result = app.test_cli_runner().invoke(args=["freeze", "--output", output])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Exported 7 pages", result.output)

    def test_freeze_command_fails_without_posts(self):
        app.config.update(POSTS_DIRECTORY=os.path.join(self._tmp.name, "missing"))
        result = app.test_cli_runner().invoke(args=["freeze", "--output", os.path.join(self._tmp.name, "out")])
        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("Posts directory not found", result.output)

if __name__ == "__main__":
    unittest.main()
