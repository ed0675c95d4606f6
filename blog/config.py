# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

import os
from typing import Any, Dict, List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default

class Config:
    """Application configuration, read from the environment."""

    # Content
    POSTS_DIRECTORY: str = os.getenv("POSTS_DIRECTORY", "posts")
    SITE_TITLE: str = os.getenv("SITE_TITLE", "A COOL BLOG")
    SITE_DESCRIPTION: str = os.getenv("SITE_DESCRIPTION", "Lorem ipsum dolor sit amet, consectetur adipiscing elit")

    # Front-matter key names (the existing posts are written in Portuguese)
    FRONT_MATTER_TITLE_KEY: str = os.getenv("FRONT_MATTER_TITLE_KEY", "titulo")
    FRONT_MATTER_DATE_KEY: str = os.getenv("FRONT_MATTER_DATE_KEY", "data")
    FRONT_MATTER_HOUR_KEY: str = os.getenv("FRONT_MATTER_HOUR_KEY", "hora")

    # Static export
    FREEZE_OUTPUT_DIRECTORY: str = os.getenv("FREEZE_OUTPUT_DIRECTORY", "build")

    # Gallery: scrollbar compensation in px when the client does not report its own width
    GALLERY_SCROLLBAR_WIDTH: int = _int_env("GALLERY_SCROLLBAR_WIDTH", 0)

    # CORS for the /api/* endpoints
    CORS_ORIGINS: List[str] = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

    # Debug mode
    DEBUG: bool = os.getenv("FLASK_DEBUG", "false").lower() == "true" or os.getenv("FLASK_ENV") == "development"

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def as_flask_config(cls) -> Dict[str, Any]:
        """Upper-case settings for ``app.config.update``."""
        return {name: getattr(cls, name) for name in dir(cls) if name.isupper()}

config = Config()
