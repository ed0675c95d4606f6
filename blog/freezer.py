# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Export the whole site to static HTML files (``flask --app blog freeze``)."""

import logging
import shutil
from pathlib import Path
from typing import List
from urllib.parse import unquote

import click
from flask import Flask, current_app, url_for
from flask.cli import with_appcontext

from .bp.posts import get_post_store
from .errors import BlogError
from .views import PostView

logger = logging.getLogger(__name__)

class FreezeError(BlogError):
    """A page could not be rendered during the export."""

def site_urls(app: Flask) -> List[str]:
    """Every page of the site: the index, each post and each gallery image of each post."""
    with app.test_request_context():
        store = get_post_store()
        urls = [url_for("posts.index")]
        for post_id in store.list_post_ids():
            urls.append(url_for("posts.post_detail", post_id=post_id))

            view = PostView()
            view.mount(store.load_post(post_id))
            image_count = len(view.registry)
            view.unmount()

            urls.extend(url_for("posts.gallery", post_id=post_id, index=index) for index in range(image_count))
    return urls

def _output_path(output_directory: Path, url: str) -> Path:
    relative = unquote(url).lstrip("/")
    if not relative or relative.endswith("/"):
        relative += "index.html"
    return output_directory / relative

def freeze(app: Flask, output_directory) -> List[Path]:
    """Render every page through the test client into ``output_directory``.

    Any page that does not answer 200 aborts the export.
    """
    output_directory = Path(output_directory)
    written = []
    client = app.test_client()

    for url in site_urls(app):
        response = client.get(url)
        if response.status_code != 200:
            raise FreezeError(f"{url} answered {response.status_code}")

        path = _output_path(output_directory, url)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(response.data)
        written.append(path)
        logger.debug("Wrote %s", path)

    if app.static_folder and Path(app.static_folder).is_dir():
        shutil.copytree(app.static_folder, output_directory / "static", dirs_exist_ok=True)

    logger.info("Exported %d pages to %s", len(written), output_directory)
    return written

@click.command("freeze")
@click.option("--output", "-o", "output", type=click.Path(file_okay=False), default=None,
              help="Directory to write the site to (default: FREEZE_OUTPUT_DIRECTORY).")
@with_appcontext
def freeze_command(output):
    """Export every page of the blog as static HTML."""
    app = current_app._get_current_object()
    output = output or app.config["FREEZE_OUTPUT_DIRECTORY"]
    try:
        written = freeze(app, output)
    except BlogError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Exported {len(written)} pages to {output}")
