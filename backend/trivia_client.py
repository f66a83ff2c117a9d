"""Client for a jService-style trivia API.

Only one endpoint is used: ``GET {base}/category?id=N``, which returns::

    {"id": 11531, "title": "mixed bag", "clues_count": 5,
     "clues": [{"id": 98, "question": "...", "answer": "...", "value": 200}, ...]}
"""

import logging

import requests

import config
from models import Category, Clue

logger = logging.getLogger(__name__)


class TriviaServiceError(Exception):
    """Base class for anything that goes wrong talking to the trivia service."""


class CategoryNotFound(TriviaServiceError):
    pass


class TriviaNetworkError(TriviaServiceError):
    pass


class MalformedResponse(TriviaServiceError):
    pass


def _parse_value(raw):
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError, OverflowError):
        # inf / nan floats from the JSON decoder
        return None


def _parse_text(raw):
    if raw is None:
        return ""
    return str(raw)


def parse_category(data):
    """Turn a category payload into a Category, or raise MalformedResponse."""
    if not isinstance(data, dict):
        raise MalformedResponse(f"expected an object, got {type(data).__name__}")

    cat_id = data.get("id")
    if isinstance(cat_id, bool) or not isinstance(cat_id, int):
        raise MalformedResponse(f"invalid category id: {cat_id!r}")

    title = data.get("title")
    if not isinstance(title, str):
        raise MalformedResponse(f"category {cat_id} has no title")

    raw_clues = data.get("clues")
    if not isinstance(raw_clues, list):
        raise MalformedResponse(f"category {cat_id} has no clue list")

    clues = []
    for raw in raw_clues:
        if not isinstance(raw, dict):
            raise MalformedResponse(f"category {cat_id} has a malformed clue")
        clues.append(
            Clue(
                question=_parse_text(raw.get("question")),
                answer=_parse_text(raw.get("answer")),
                value=_parse_value(raw.get("value")),
            )
        )

    return Category(id=cat_id, title=title, clues=tuple(clues))


class TriviaClient:
    def __init__(self, base_url=None, timeout=None, session=None):
        self.base_url = (base_url or config.TRIVIA_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT
        self.session = session or requests.Session()

    def fetch_category(self, category_id):
        """Fetch one category with all of its clues."""
        url = f"{self.base_url}/category"
        try:
            response = self.session.get(
                url, params={"id": category_id}, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise TriviaNetworkError(f"category {category_id}: {e}") from e

        if response.status_code == 404:
            raise CategoryNotFound(f"category {category_id} not found")
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise TriviaNetworkError(f"category {category_id}: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponse(f"category {category_id}: body is not JSON") from e

        # jService answers unknown ids with a 200 and an empty body on some mirrors
        if not data:
            raise CategoryNotFound(f"category {category_id} not found")

        category = parse_category(data)
        logger.debug(
            "Fetched category %s (%s) with %d clues",
            category.id,
            category.title,
            len(category.clues),
        )
        return category
