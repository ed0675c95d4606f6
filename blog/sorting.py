# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

import logging
from datetime import datetime
from typing import Iterable, List, Tuple

from .dates import Invalid, Parsed, ParseResult, parse_hour, parse_iso_date
from .models import Post

logger = logging.getLogger(__name__)

def combined_timestamp(post: Post) -> ParseResult[datetime]:
    """The post's date with its ``HH:mm`` hour applied, used for ordering only.

    Offsets are dropped: posts are compared by the wall-clock time written in
    their front-matter. An unparseable hour is logged and the date-only
    timestamp is kept.
    """
    date_result = parse_iso_date(post.date)
    if isinstance(date_result, Invalid):
        return date_result

    timestamp = date_result.value.replace(tzinfo=None)

    hour_result = parse_hour(post.hour)
    if isinstance(hour_result, Invalid):
        logger.warning("Could not read hour %r of post %s: %s", post.hour, post.id, hour_result.reason)
        return Parsed(timestamp)

    return Parsed(timestamp.replace(hour=hour_result.value.hour, minute=hour_result.value.minute))

def _sort_key(post: Post) -> Tuple[bool, datetime]:
    result = combined_timestamp(post)
    if isinstance(result, Invalid):
        logger.warning("Post %s has an invalid date %r; listing it last", post.id, post.date)
        return (False, datetime.min)
    return (True, result.value)

def sort_posts(posts: Iterable[Post]) -> List[Post]:
    """Most recent first.

    The sort is stable, so posts with equal timestamps keep their incoming
    order. Posts without a usable date go last.
    """
    return sorted(posts, key=_sort_key, reverse=True)
