# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

import logging
from flask import Blueprint, abort, current_app, g, redirect, render_template, request, url_for
from ..posts import PostStore
from ..sorting import sort_posts
from ..views import PostView

logger = logging.getLogger(__name__)

posts_bp = Blueprint('posts', __name__)

def get_post_store() -> PostStore:
    """A store for the configured posts directory and front-matter keys."""
    cfg = current_app.config
    return PostStore(cfg["POSTS_DIRECTORY"], {
        "title": cfg["FRONT_MATTER_TITLE_KEY"],
        "date": cfg["FRONT_MATTER_DATE_KEY"],
        "hour": cfg["FRONT_MATTER_HOUR_KEY"],
    })

def _scrollbar_width() -> int:
    # the client may report its real scrollbar width with ?sbw=
    reported = request.args.get("sbw", type=int)
    if reported is not None:
        return reported
    return current_app.config["GALLERY_SCROLLBAR_WIDTH"]

def mount_post_view(post_id: str) -> PostView:
    """Load and render a post into a view owned by this request.

    The view is unmounted by the app's teardown_request handler.
    """
    post = get_post_store().load_post(post_id)
    view = PostView(
        gallery_url=lambda index: url_for("posts.gallery", post_id=post_id, index=index),
        measure_scrollbar_width=_scrollbar_width,
    )
    g.post_view = view
    view.mount(post)
    return view

@posts_bp.route("/")
def index():
    """All posts, most recent first."""
    posts = sort_posts(get_post_store().load_all())
    return render_template("index.html", posts=posts)

@posts_bp.route("/posts/<post_id>/")
def post_detail(post_id):
    view = mount_post_view(post_id)

    # the gallery page reports images that fail to load with ?gallery_error=<index>
    failed_index = request.args.get("gallery_error", type=int)
    if failed_index is not None and 0 <= failed_index < len(view.registry):
        view.gallery.open_at(failed_index)
        view.gallery.image_failed(view.registry[failed_index].url)

    return render_template("post.html", post=view.post, body_style=view.scroll_lock.body_style)

@posts_bp.route("/posts/<post_id>/gallery/")
def activate_gallery(post_id):
    """Open the gallery on the image whose URL is given in ?src=."""
    view = mount_post_view(post_id)
    view.gallery.activate(request.args.get("src", ""))
    if not view.gallery.is_open:
        return redirect(url_for("posts.post_detail", post_id=post_id))
    return redirect(url_for("posts.gallery", post_id=post_id, index=view.gallery.state.current_index))

@posts_bp.route("/posts/<post_id>/gallery/<int:index>/")
def gallery(post_id, index):
    view = mount_post_view(post_id)
    try:
        view.gallery.open_at(index)
    except IndexError:
        logger.warning("Gallery index %d out of range for post %s (%d images)", index, post_id, len(view.registry))
        abort(404)

    previous_index, next_index = view.gallery.neighbours()
    return render_template(
        "gallery.html",
        post=view.post,
        entry=view.gallery.current,
        index=index,
        count=len(view.registry),
        previous_index=previous_index,
        next_index=next_index,
        body_style=view.scroll_lock.body_style,
    )
