# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

from flask import Blueprint, current_app, jsonify, request, make_response
from datetime import datetime, timedelta, timezone
from ..errors import PostsDirectoryNotFoundError
from ..posts import PostStore
from ..version import __version__
from typing import Dict, Any
import os

bp_healthcheck = Blueprint('healthcheck', __name__)

CACHE_TTL = timedelta(minutes=1)

# In-memory cache for healthcheck, per process; an answer only applies to the posts directory it checked
_healthcheck_cache: Dict[str, Any] = {
    "response": None,
    "timestamp": None,
    "status_code": None,
    "directory": None
}

class Healthcheck:
    def __init__(self, app):
        self.app = app
        self.overall_healthy = True
        self.result = {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
            "checks": {},
            "environment": "development" if app.debug else "production"
        }

    def run(self):
        self.check_posts_directory()
        self.check_configuration()
        self.result["status"] = "healthy" if self.overall_healthy else "unhealthy"
        return self.result, self.overall_healthy

    def check_posts_directory(self):
        directory = self.app.config["POSTS_DIRECTORY"]
        check = {
            "status": "healthy",
            "message": "Posts directory is readable",
            "details": {"directory": str(directory)}
        }
        try:
            post_ids = PostStore(directory).list_post_ids()
            check["details"]["post_count"] = len(post_ids)
            if not os.access(directory, os.R_OK):
                check["status"] = "unhealthy"
                check["message"] = "Posts directory is not readable"
                self.overall_healthy = False
            elif not post_ids:
                check["status"] = "degraded"
                check["message"] = "Posts directory contains no posts"
        except PostsDirectoryNotFoundError as e:
            check["status"] = "unhealthy"
            check["message"] = str(e)
            self.overall_healthy = False
        except OSError as e:
            check["status"] = "unhealthy"
            check["message"] = f"Could not list posts: {e}"
            self.overall_healthy = False
        self.result["checks"]["posts"] = check

    def check_configuration(self):
        cfg = self.app.config
        keys = [cfg.get("FRONT_MATTER_TITLE_KEY"), cfg.get("FRONT_MATTER_DATE_KEY"), cfg.get("FRONT_MATTER_HOUR_KEY")]
        missing = [name for name, value in zip(["FRONT_MATTER_TITLE_KEY", "FRONT_MATTER_DATE_KEY", "FRONT_MATTER_HOUR_KEY"], keys) if not value]
        duplicated = len(set(keys)) != len(keys)

        status = "healthy"
        if missing or duplicated:
            status = "unhealthy"
            self.overall_healthy = False
        elif not cfg.get("SITE_TITLE"):
            status = "degraded"

        self.result["checks"]["configuration"] = {
            "status": status,
            "message": "Configuration is valid" if status == "healthy" else "Configuration needs attention",
            "details": {
                "missing": missing,
                "duplicated_front_matter_keys": duplicated,
                "site_title_set": bool(cfg.get("SITE_TITLE"))
            }
        }

@bp_healthcheck.route("/api/health")
@bp_healthcheck.route("/api/healthcheck")
@bp_healthcheck.route("/health")
@bp_healthcheck.route("/healthcheck")
def health():
    """Health of the posts directory and configuration. ?c=1 allows a cached answer."""

    use_cache = request.args.get("c") == "1"
    now = datetime.now(timezone.utc)
    cache_valid = (
        _healthcheck_cache["response"] is not None and
        _healthcheck_cache["timestamp"] is not None and
        (now - _healthcheck_cache["timestamp"]) < CACHE_TTL and
        _healthcheck_cache["directory"] == str(current_app.config["POSTS_DIRECTORY"])
    )

    if use_cache and cache_valid:
        resp = make_response(jsonify(_healthcheck_cache["response"]), _healthcheck_cache["status_code"])
        resp.headers["X-Cache"] = "HIT"
        return resp

    hc = Healthcheck(current_app)
    health_status, overall_healthy = hc.run()

    status_code = 200 if overall_healthy else 503

    _healthcheck_cache["response"] = health_status
    _healthcheck_cache["timestamp"] = now
    _healthcheck_cache["status_code"] = status_code
    _healthcheck_cache["directory"] = str(current_app.config["POSTS_DIRECTORY"])

    resp = make_response(jsonify(health_status), status_code)
    resp.headers["X-Cache"] = "MISS"
    return resp
