# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

from flask import Flask, jsonify, render_template, request, g
from flask_cors import CORS
import logging
import time
from os import getenv
from .config import config
from .utility import configure_logging
from .version import __version__

# Configure logging
level = (logging.DEBUG if getenv("FLASK_ENV") == "development" or getenv("DEBUG_LOGGING") != None else logging.getLevelName(config.LOG_LEVEL.upper()))
if not isinstance(level, int):
    level = logging.INFO
configure_logging(level)
logger = logging.getLogger("blog")

from .bp.posts import posts_bp
from .bp.healthcheck import bp_healthcheck
from .dates import render_date
from .errors import PostNotFoundError
from .freezer import freeze_command

app = Flask(__name__)
app.config.update(config.as_flask_config())
app.debug = app.debug or config.DEBUG

app.jinja_env.filters["display_date"] = render_date

logger.info("Serving posts from %s", app.config["POSTS_DIRECTORY"])

@app.before_request
def start_timer():
    g.request_start_time = time.time()

@app.teardown_request
def teardown_post_view(exception):
    """Unmount the post view created for this request, if any."""
    view = g.pop('post_view', None)
    if view is not None:
        view.unmount()

@app.after_request
def log_request(response):
    """Log the request and response details."""
    # Include query parameters in the log if present
    query_string = f"?{request.query_string.decode()}" if request.query_string else ""
    started = g.get('request_start_time', time.time())
    logging.getLogger('blog.request').info(
        '%s %s%s %s %s %s "%s"',
        request.method,
        request.path,
        query_string,
        response.status_code,
        request.remote_addr,
        # how long the request took
        f"{(time.time() - started):.2f}s",
        request.headers.get('User-Agent', 'Unknown')
    )
    return response

CORS(app, resources = {
    "/api/*": {
        "origins": app.config["CORS_ORIGINS"]
    }
})

app.register_blueprint(posts_bp)
app.register_blueprint(bp_healthcheck)
app.cli.add_command(freeze_command)
logger.info("Blog front-end version %s starting up", __version__)

@app.errorhandler(PostNotFoundError)
def handle_post_not_found(error):
    logger.warning("Post not found: %s", error.post_id)
    return render_template("404.html"), 404

@app.errorhandler(404)
def handle_not_found(error):
    """Handle 404 errors."""
    logger.warning(f"404 error: {request.path} not found")
    return render_template("404.html"), 404

@app.errorhandler(500)
def handle_internal_error(error):
    """Log internal server errors; show the traceback only in debug mode."""
    import traceback

    original = getattr(error, "original_exception", None) or error
    tb_str = "".join(traceback.format_exception(type(original), original, original.__traceback__))
    logger.error(f"Internal server error: {original}\nTraceback:\n{tb_str}")

    if app.debug:
        return jsonify({
            "error": "Internal server error",
            "message": str(original),
            "traceback": tb_str,
            "endpoint": request.path,
            "method": request.method
        }), 500
    else:
        return "An internal server error occurred. Please try again later.", 500
