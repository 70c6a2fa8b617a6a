import json
import logging
from pathlib import Path

from pydantic import TypeAdapter

from shared.models.player import RosterEntry

logger = logging.getLogger(__name__)

_ROSTER = TypeAdapter(list[RosterEntry])


def load_roster(path: str | Path) -> list[RosterEntry]:
    """
    Reads the roster file: a JSON list of {"name": ..., "steamId": ...}.
    File order is the crawl order. Duplicate ids are kept as listed.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If an entry is missing a field.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    entries = _ROSTER.validate_python(raw)
    logger.info("Loaded %d roster entries from %s", len(entries), path)
    return entries
