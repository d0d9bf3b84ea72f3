"""
Common utilities for arena-lru.
"""

import logging
import math
import os
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)

_UNITS = [
    ("d", 24 * 3600.0),
    ("h", 3600.0),
    ("m", 60.0),
    ("s", 1.0),
    ("ms", 0.001),
]


def parseDuration(durationStr: str) -> float:
    """
    Parse duration string to seconds.

    Args:
        durationStr: String in one of formats:
            1. Plain number of seconds (e.g., "30" or "1.5")
            2. `DDdHHhMMmSSsNNNms` (e.g., "1d2h30m15s", "1500ms") - each section is optional
               but at least one must be present, sections must come in this order
            3. `HH:MM[:SS]` (e.g., "2:30" or "2:30:15")

    Returns:
        Total duration in seconds as float.

    Raises:
        ValueError: If the string doesn't match any supported format.
    """
    text = durationStr.strip()

    # Format 1: plain number
    try:
        value = float(text)
        if math.isfinite(value):
            return value
    except ValueError:
        pass  # Will try next format

    # Format 2: DDdHHhMMmSSsNNNms
    if text and text[0].isdigit() and text[-1].isalpha():
        total = 0.0
        remaining = text
        unitPos = 0
        matched = True
        while remaining and matched:
            digits = len(remaining) - len(remaining.lstrip("0123456789"))
            if digits == 0:
                matched = False
                break
            number = int(remaining[:digits])
            rest = remaining[digits:]

            matched = False
            # Units must appear in order, each at most once
            for pos in range(unitPos, len(_UNITS)):
                suffix, multiplier = _UNITS[pos]
                # "500ms" must not be read as 500 minutes
                if rest.startswith(suffix) and not (suffix == "m" and rest.startswith("ms")):
                    total += number * multiplier
                    remaining = rest[len(suffix) :]
                    unitPos = pos + 1
                    matched = True
                    break

        if matched and remaining == "":
            return total

    # Format 3: HH:MM[:SS]
    timeParts = text.split(":")
    if 2 <= len(timeParts) <= 3:
        try:
            hours = int(timeParts[0])
            minutes = int(timeParts[1])
            seconds = int(timeParts[2]) if len(timeParts) == 3 else 0

            # Validate ranges
            if hours >= 0 and 0 <= minutes < 60 and 0 <= seconds < 60:
                return float(hours * 3600 + minutes * 60 + seconds)

        except ValueError:
            pass  # Will raise ValueError at end

    raise ValueError(
        f"Invalid duration format: {durationStr}. Expected formats: 'N', '[DDd][HHh][MMm][SSs][NNNms]' or 'HH:MM[:SS]'"
    )


def loadDotenv(path: str = ".env", populateEnv: bool = True) -> Dict[str, str]:
    """
    Simple dotenv file loader.
    Just read file line by line and put key-value pairs into dictionary.

    Args:
        path: Path to .env file (default ".env"), missing file yields empty dict
        populateEnv: Whether to populate environment variables (default True)

    Returns:
        Dictionary of key-value pairs from .env file
    """
    ret: Dict[str, str] = {}
    if not Path(path).is_file():
        return ret

    with open(path, "rt") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            splittedLine = line.split("=", 1)
            if len(splittedLine) == 2:
                key, value = splittedLine
                ret[key.strip()] = value.strip().strip('"')

    if populateEnv:
        for k, v in ret.items():
            os.environ[k] = v
    logger.debug(f"Loaded {len(ret)} variables from {path}")
    return ret
