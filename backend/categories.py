# Category acquisition - pick random categories from the trivia service
# until we have enough that can each fill a full column of the board.

import logging
import random
import time

import config
from trivia_client import TriviaServiceError

logger = logging.getLogger(__name__)


class AcquisitionError(Exception):
    """Gave up before collecting enough usable categories."""


def distinct_question_count(category):
    """Count distinct, non-empty question texts in a category."""
    return len({c.question for c in category.clues if c.usable})


def is_usable(category, minimum=config.CLUES_PER_CATEGORY):
    """Check the category has enough distinct questions to fill a column."""
    return distinct_question_count(category) >= minimum


def backoff_delay(failures, base, maximum):
    """Exponential delay after the given number of consecutive failures."""
    if failures < 1:
        return 0
    return min(maximum, base * 2 ** (failures - 1))


def acquire_category_ids(
    client,
    count=None,
    id_space=None,
    max_attempts=None,
    backoff_base=None,
    backoff_max=None,
    rng=random,
    sleep=time.sleep,
):
    """Collect `count` distinct ids of categories with enough usable clues.

    Ids are drawn uniformly from [0, id_space). Fetch failures are never
    raised: the candidate is dropped and another id is drawn after a
    backoff that doubles with every consecutive failure. Every draw counts
    against `max_attempts`; running out raises AcquisitionError.

    Returns the ids in the order they were accepted.
    """
    count = config.NUM_CATEGORIES if count is None else count
    id_space = config.CATEGORY_ID_SPACE if id_space is None else id_space
    max_attempts = config.MAX_ACQUIRE_ATTEMPTS if max_attempts is None else max_attempts
    backoff_base = config.BACKOFF_BASE if backoff_base is None else backoff_base
    backoff_max = config.BACKOFF_MAX if backoff_max is None else backoff_max

    if count < 1:
        raise ValueError("count must be at least 1")
    if id_space < 1:
        raise ValueError("id_space must be at least 1")

    accepted = []
    seen = set()
    failures = 0
    attempts = 0

    while len(accepted) < count:
        if attempts >= max_attempts:
            raise AcquisitionError(
                f"found {len(accepted)} of {count} categories after {attempts} attempts"
            )
        attempts += 1

        candidate = rng.randrange(id_space)
        if candidate in seen:
            continue

        try:
            category = client.fetch_category(candidate)
        except TriviaServiceError as e:
            failures += 1
            delay = backoff_delay(failures, backoff_base, backoff_max)
            logger.debug("Rejected category %s: %s (retrying in %.2fs)", candidate, e, delay)
            if delay:
                sleep(delay)
            continue
        failures = 0

        if category.id in seen:
            continue
        if not is_usable(category):
            logger.debug(
                "Rejected category %s: only %d distinct questions",
                category.id,
                distinct_question_count(category),
            )
            continue

        seen.add(category.id)
        accepted.append(category.id)
        logger.info("Accepted category %s (%s)", category.id, category.title)

    return accepted
