"""Clue sampling, the per-cell reveal state machine and board assembly."""

import logging
import random
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import config
from models import RevealState
from trivia_client import TriviaServiceError

logger = logging.getLogger(__name__)

# Draws to try before filling the remaining slots without replacement
SAMPLE_ATTEMPT_LIMIT = 1000


class BoardError(Exception):
    pass


class InsufficientCluesError(BoardError):
    """A category has fewer distinct questions than a column needs."""


class BoardBuildError(BoardError):
    """The board could not be built; no partial board is returned."""


class CellNotFound(BoardError, LookupError):
    pass


def sample_clues(clues, count=config.CLUES_PER_CATEGORY, rng=random, max_attempts=SAMPLE_ATTEMPT_LIMIT):
    """Pick `count` clues with distinct question text, without replacement.

    Picks random indices and keeps a clue when its question is non-empty
    and not already taken. If that hasn't finished after `max_attempts`
    draws, the remaining slots are drawn from the unused questions directly.
    """
    clues = list(clues)
    by_question = {}
    for clue in clues:
        if clue.usable:
            by_question.setdefault(clue.question, []).append(clue)

    if len(by_question) < count:
        raise InsufficientCluesError(
            f"need {count} distinct questions, found {len(by_question)}"
        )

    selected = []
    taken = set()
    for _ in range(max_attempts):
        if len(selected) == count:
            break
        clue = clues[rng.randrange(len(clues))]
        if clue.usable and clue.question not in taken:
            selected.append(clue)
            taken.add(clue.question)

    if len(selected) < count:
        remaining = sorted(q for q in by_question if q not in taken)
        for question in rng.sample(remaining, count - len(selected)):
            selected.append(rng.choice(by_question[question]))

    return [clue.hidden() for clue in selected]


def advance(clue):
    """Move a clue one step through hidden -> question -> answer.

    Returns (new_clue, text_to_show). Once the answer is showing, the clue
    is returned unchanged with None.
    """
    if clue.showing is RevealState.HIDDEN:
        return replace(clue, showing=RevealState.QUESTION), clue.question
    if clue.showing is RevealState.QUESTION:
        return replace(clue, showing=RevealState.ANSWER), clue.answer
    return clue, None


class Column:
    def __init__(self, category_id, title, clues):
        self.category_id = category_id
        self.title = title
        self.clues = list(clues)


class Board:
    """Grid of clues, one column per category, addressed by (column, row)."""

    def __init__(self, columns):
        self._columns = list(columns)
        self._lock = threading.Lock()

    @property
    def columns(self):
        return list(self._columns)

    def headers(self):
        return [column.title for column in self._columns]

    def clue(self, column, row):
        if not 0 <= column < len(self._columns):
            raise CellNotFound(f"no column {column}")
        clues = self._columns[column].clues
        if not 0 <= row < len(clues):
            raise CellNotFound(f"no row {row} in column {column}")
        return clues[row]

    def advance_cell(self, column, row):
        """Advance one cell. Returns (clue after the step, text to show or None)."""
        with self._lock:
            current = self.clue(column, row)
            updated, text = advance(current)
            self._columns[column].clues[row] = updated
        return updated, text

    def reveal(self, column, row):
        """Advance one cell. Returns the new text to show, or None for a no-op."""
        return self.advance_cell(column, row)[1]

    def cells(self):
        """Display values row by row: cells()[row][column]."""
        with self._lock:
            rows = max((len(c.clues) for c in self._columns), default=0)
            return [
                [column.clues[row].display() for column in self._columns]
                for row in range(rows)
            ]


def _resolve_column(client, category_id, rng):
    try:
        category = client.fetch_category(category_id)
    except TriviaServiceError as e:
        raise BoardBuildError(f"could not resolve category {category_id}: {e}") from e
    try:
        clues = sample_clues(category.clues, rng=rng)
    except InsufficientCluesError as e:
        raise BoardBuildError(f"category {category_id} ({category.title}): {e}") from e
    return Column(category.id, category.title, clues)


def build_board(client, category_ids, workers=None, rng=random):
    """Resolve each category id and sample a column of clues for it.

    Columns keep the order of `category_ids`, also when categories are
    resolved in parallel. Any failure fails the whole build.
    """
    workers = config.RESOLVE_WORKERS if workers is None else workers
    category_ids = list(category_ids)

    if workers > 1 and len(category_ids) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            columns = list(
                pool.map(lambda cat_id: _resolve_column(client, cat_id, rng), category_ids)
            )
    else:
        columns = [_resolve_column(client, cat_id, rng) for cat_id in category_ids]

    logger.info("Built board with categories %s", ", ".join(c.title for c in columns))
    return Board(columns)
