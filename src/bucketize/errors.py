"""
Error helpers for user-facing configuration diagnostics.

Bucket classification itself never fails; these payloads describe problems met
while sourcing bucket definitions from configuration.
"""

from collections.abc import Mapping
from typing import Any, Optional

ENTRY_HINT = (
    'Use {"lower": <num|null>, "upper": <num|null>, "output": <num>} '
    "or [lower, upper, output]."
)


def build_error(
    error: str,
    *,
    source: Optional[str] = None,
    details: Optional[str] = None,
    hint: Optional[str] = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": error}
    if source:
        payload["source"] = source
    if details:
        payload["details"] = details
    if hint:
        payload["hint"] = hint
    return payload


def entry_error(
    set_name: str, index: int, details: str, *, source: Optional[str] = None
) -> dict[str, Any]:
    """Payload for a bucket entry that could not be parsed."""
    location = f"{source}:{set_name}[{index}]" if source else f"{set_name}[{index}]"
    return build_error(
        f"Invalid bucket entry in set '{set_name}'.",
        source=location,
        details=details,
        hint=ENTRY_HINT,
    )


def error_lines(payload: Mapping[str, Any]) -> list[str]:
    lines = []
    error = payload.get("error") or "Unknown error."
    source = payload.get("source")
    lines.append(f"Error: {error}" if not source else f"Error: {error} ({source})")
    details = payload.get("details")
    if details:
        lines.append(f"Details: {details}")
    hint = payload.get("hint")
    if hint:
        lines.append(f"Hint: {hint}")
    return lines


def error_message(payload: Mapping[str, Any]) -> str:
    """Single-line form of `error_lines`, used for exception messages."""
    return " ".join(error_lines(payload))
