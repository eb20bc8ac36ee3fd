"""
Centralized loading of bucket sets from JSON configuration.

`bucket_sets.json` maps a set name to an ordered list of bucket entries:

    {
        "latency_tiers": [
            {"lower": null, "upper": 100, "output": 1.0},
            {"lower": 100, "upper": 500, "output": 0.5},
            [500, null, 0.0]
        ]
    }

Entry order is match priority. Inverted or empty ranges are kept as written.
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

from .bucketizer import Bucket, Bucketizer
from .errors import build_error, entry_error, error_message

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "BUCKETIZE_CONFIG_DIR"
STRICT_ENV = "BUCKETIZE_STRICT_CONFIG"
DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent / "data"
BUCKET_SETS_FILE = "bucket_sets.json"
ENTRY_KEYS = frozenset({"lower", "upper", "output"})

_SETS_CACHE: dict[tuple[str, bool], dict[str, Bucketizer]] = {}


def _resolve_config_dir(config_dir: Optional[str]) -> Path:
    if config_dir:
        return Path(config_dir)
    env_dir = os.getenv(CONFIG_DIR_ENV)
    if env_dir:
        return Path(env_dir)
    return DEFAULT_CONFIG_DIR


def _resolve_strict(strict: Optional[bool]) -> bool:
    if strict is not None:
        return strict
    env = os.getenv(STRICT_ENV, "")
    return env.lower() in {"1", "true", "yes", "on"}


def _warn(message: str) -> None:
    print(f"Warning: {message}", file=sys.stderr)


def _load_json(path: Path, *, strict: bool) -> Any:
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as exc:
        if strict:
            raise FileNotFoundError(f"Missing config file: {path}") from exc
        _warn(f"{path} not found.")
        return {}
    except json.JSONDecodeError as exc:
        if strict:
            raise ValueError(f"Malformed config file: {path} ({exc})") from exc
        _warn(f"{path} is malformed ({exc}).")
        return {}


def _ensure_dict(payload: Any, *, name: str, strict: bool) -> dict[str, Any]:
    if isinstance(payload, dict):
        return payload
    msg = f"Expected {name} to be an object."
    if strict:
        raise ValueError(msg)
    _warn(msg)
    return {}


def _coerce_number(value: Any, *, field: str) -> Optional[float]:
    if value is None:
        return None
    # bool is an int subclass; true/false are never bounds
    if isinstance(value, bool):
        raise ValueError(f"'{field}' must be a number, got {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            raise ValueError(f"'{field}' must be a number, got {value!r}") from None
    raise ValueError(f"'{field}' must be a number, got {type(value).__name__}")


def parse_bucket_entry(entry: Any) -> Bucket:
    """
    Converts one configuration entry into a Bucket.

    Accepts `{"lower": .., "upper": .., "output": ..}` (missing bounds are
    unbounded, any other key is rejected) or a `[lower, upper, output]` array.
    Numbers may be given as strings, which allows "inf", "-inf" and "nan".

    Raises:
        ValueError: If the entry has the wrong shape, an unknown key or a
            non-numeric field.
    """
    if isinstance(entry, dict):
        unknown = sorted(str(key) for key in entry if key not in ENTRY_KEYS)
        if unknown:
            raise ValueError(f"unknown key(s) {', '.join(unknown)}")
        lower, upper = entry.get("lower"), entry.get("upper")
        if "output" not in entry:
            raise ValueError("missing 'output'")
        output = entry["output"]
    elif isinstance(entry, (list, tuple)):
        if len(entry) != 3:
            raise ValueError(f"expected 3 items [lower, upper, output], got {len(entry)}")
        lower, upper, output = entry
    else:
        raise ValueError(f"expected an object or array, got {type(entry).__name__}")

    output_value = _coerce_number(output, field="output")
    if output_value is None:
        raise ValueError("'output' cannot be null")

    return Bucket(
        _coerce_number(lower, field="lower"),
        _coerce_number(upper, field="upper"),
        output_value,
    )


def build_bucketizer(
    entries: Any,
    *,
    set_name: str = "<inline>",
    strict: Optional[bool] = None,
    source: Optional[str] = None,
) -> Bucketizer:
    """
    Builds a Bucketizer from a list of configuration entries, preserving order.

    Invalid entries are skipped with a warning, or raise ValueError when strict.
    """
    strict_flag = _resolve_strict(strict)
    if not isinstance(entries, list):
        payload = build_error(
            f"Bucket set '{set_name}' must be a list of entries.",
            source=source,
            details=f"got {type(entries).__name__}",
        )
        if strict_flag:
            raise ValueError(error_message(payload))
        _warn(error_message(payload))
        return Bucketizer()

    bucketizer = Bucketizer()
    for index, entry in enumerate(entries):
        try:
            bucket = parse_bucket_entry(entry)
        except ValueError as exc:
            payload = entry_error(set_name, index, str(exc), source=source)
            if strict_flag:
                raise ValueError(error_message(payload)) from exc
            _warn(error_message(payload))
            continue
        bucketizer = bucketizer.add_bucket(bucket.lower, bucket.upper, bucket.output)

    inert = sum(1 for bucket in bucketizer if bucket.is_inert)
    if inert:
        logger.info(
            f"Bucket set '{set_name}' has {inert} bucket(s) that can never match",
            extra={"bucket_set": set_name},
        )
    return bucketizer


def load_bucket_sets(
    *, config_dir: Optional[str] = None, strict: Optional[bool] = None
) -> dict[str, Bucketizer]:
    """Loads every named bucket set from `bucket_sets.json`."""
    strict_flag = _resolve_strict(strict)
    config_path = _resolve_config_dir(config_dir) / BUCKET_SETS_FILE
    cache_key = (str(config_path), strict_flag)
    if cache_key in _SETS_CACHE:
        return dict(_SETS_CACHE[cache_key])

    payload = _load_json(config_path, strict=strict_flag)
    raw_sets = _ensure_dict(payload, name=BUCKET_SETS_FILE, strict=strict_flag)

    sets = {
        name: build_bucketizer(
            entries, set_name=name, strict=strict_flag, source=BUCKET_SETS_FILE
        )
        for name, entries in raw_sets.items()
    }
    logger.debug(f"Loaded {len(sets)} bucket set(s) from {config_path}")

    _SETS_CACHE[cache_key] = dict(sets)
    return sets


def load_bucketizer(
    name: str, *, config_dir: Optional[str] = None, strict: Optional[bool] = None
) -> Bucketizer:
    """
    Returns the named bucket set.

    An unknown name yields an empty Bucketizer (which classifies everything as
    None) with a warning, or raises KeyError when strict.
    """
    strict_flag = _resolve_strict(strict)
    sets = load_bucket_sets(config_dir=config_dir, strict=strict_flag)
    if name in sets:
        return sets[name]
    msg = f"Unknown bucket set '{name}' in {BUCKET_SETS_FILE}."
    if strict_flag:
        raise KeyError(msg)
    _warn(msg)
    return Bucketizer()


def clear_cache() -> None:
    _SETS_CACHE.clear()
