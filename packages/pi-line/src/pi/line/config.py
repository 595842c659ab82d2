"""Line editor settings, read from the environment.

``PI_LINE_HISTORY_SIZE`` sets the number of remembered lines and
``PI_LINE_HISTORY_FILE`` turns on persistence to the given path.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 100


@dataclass
class LineConfig:
    history_size: int = DEFAULT_HISTORY_SIZE
    history_file: Path | None = None


def load_config(environ: dict[str, str] | None = None) -> LineConfig:
    env = os.environ if environ is None else environ
    config = LineConfig()

    raw_size = env.get("PI_LINE_HISTORY_SIZE", "")
    if raw_size:
        try:
            size = int(raw_size)
            if size < 0:
                raise ValueError(size)
            config.history_size = size
        except ValueError:
            logger.warning(
                "ignoring invalid PI_LINE_HISTORY_SIZE=%r, using %d",
                raw_size,
                DEFAULT_HISTORY_SIZE,
            )

    raw_file = env.get("PI_LINE_HISTORY_FILE", "")
    if raw_file:
        config.history_file = Path(raw_file).expanduser()

    return config
