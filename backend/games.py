"""Game sessions, one board each, held in memory until they expire."""

import logging
import threading
import uuid
from datetime import datetime, timedelta, timezone

import config
from board import BoardBuildError, build_board
from categories import AcquisitionError, acquire_category_ids

logger = logging.getLogger(__name__)


def utcnow():
    return datetime.now(timezone.utc)


class GameNotFound(LookupError):
    pass


class GameSession:
    """One game: a freshly built board and nothing carried over from earlier games."""

    def __init__(self, game_id, board, created_at=None):
        self.game_id = game_id
        self.board = board
        self.created_at = created_at or utcnow()

    def reveal(self, column, row):
        return self.board.reveal(column, row)

    def to_dict(self):
        return {
            "game_id": self.game_id,
            "created_at": self.created_at.isoformat(),
            "headers": self.board.headers(),
            "cells": self.board.cells(),
        }


class GameStore:
    """In-memory games keyed by id. Board builds run one at a time.

    Games older than `ttl_seconds` are dropped, and once more than
    `max_games` are stored the oldest go first.
    """

    def __init__(
        self,
        client,
        num_categories=None,
        workers=None,
        acquire=None,
        max_games=None,
        ttl_seconds=None,
        clock=utcnow,
    ):
        self.client = client
        self.num_categories = num_categories or config.NUM_CATEGORIES
        self.workers = workers
        self.max_games = config.MAX_GAMES if max_games is None else max_games
        self.ttl = timedelta(
            seconds=config.GAME_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        )
        self._acquire = acquire or acquire_category_ids
        self._clock = clock
        self._games = {}
        self._lock = threading.Lock()
        self._build_lock = threading.Lock()

    def new_game(self, game_id=None):
        """Build a new board, replacing any game already stored under `game_id`.

        On failure the old game is dropped too, so a caller never sees a
        stale board after a failed "new game".
        """
        game_id = game_id or uuid.uuid4().hex
        with self._build_lock:
            self.discard(game_id)
            try:
                ids = self._acquire(self.client, count=self.num_categories)
                board = build_board(self.client, ids, workers=self.workers)
            except (AcquisitionError, BoardBuildError) as e:
                logger.warning("Could not build board for game %s: %s", game_id, e)
                raise

            session = GameSession(game_id, board, created_at=self._clock())
            with self._lock:
                self._games[game_id] = session
                self._evict_locked()

        logger.info("Started game %s", game_id)
        return session

    def _evict_locked(self):
        cutoff = self._clock() - self.ttl
        expired = [gid for gid, s in self._games.items() if s.created_at <= cutoff]
        for gid in expired:
            del self._games[gid]

        overflow = len(self._games) - self.max_games
        if overflow > 0:
            oldest = sorted(self._games.values(), key=lambda s: s.created_at)[:overflow]
            for s in oldest:
                del self._games[s.game_id]
            expired.extend(s.game_id for s in oldest)

        if expired:
            logger.info("Evicted %d games", len(expired))

    def get(self, game_id):
        with self._lock:
            self._evict_locked()
            session = self._games.get(game_id)
        if session is None:
            raise GameNotFound(game_id)
        return session

    def reveal(self, game_id, column, row):
        return self.get(game_id).reveal(column, row)

    def discard(self, game_id):
        with self._lock:
            self._games.pop(game_id, None)

    def __len__(self):
        with self._lock:
            return len(self._games)
