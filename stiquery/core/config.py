from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Optional

from stiquery import __version__

LANGUAGES: tuple[str, ...] = ("php", "python")
ANCESTOR_POLICIES: tuple[str, ...] = ("error", "root")


def _truthy(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class GeneratorSettings:
    add_timestamp: bool = False
    version: str = __version__
    language: str = "php"
    # "error" raises UnresolvedAncestorError, "root" extends the table query
    unresolved_ancestor: str = "error"

    def __post_init__(self):
        if self.language not in LANGUAGES:
            raise ValueError(f"Unsupported target language {self.language!r} (expected one of {LANGUAGES})")
        if self.unresolved_ancestor not in ANCESTOR_POLICIES:
            raise ValueError(
                f"Unsupported unresolved_ancestor policy {self.unresolved_ancestor!r} "
                f"(expected one of {ANCESTOR_POLICIES})"
            )

    @classmethod
    def from_env(cls) -> "GeneratorSettings":
        return cls(
            add_timestamp=_truthy(os.getenv("STIQUERY_ADD_TIMESTAMP")),
            version=(os.getenv("STIQUERY_VERSION") or __version__).strip(),
            language=(os.getenv("STIQUERY_TARGET_LANGUAGE") or "php").strip().lower(),
            unresolved_ancestor=(os.getenv("STIQUERY_UNRESOLVED_ANCESTOR") or "error").strip().lower(),
        )

    def with_payload(self, payload: Any) -> "GeneratorSettings":
        """
        Overlay API/CLI overrides on top of these settings.

        Accepts None or a dict; unknown keys and values of the wrong type are ignored.
        """
        if not isinstance(payload, dict):
            return self

        changes: dict[str, Any] = {}

        ts = payload.get("add_timestamp")
        if isinstance(ts, bool):
            changes["add_timestamp"] = ts

        for key in ("version", "language", "unresolved_ancestor"):
            v = payload.get(key)
            if isinstance(v, str) and v.strip():
                changes[key] = v.strip() if key == "version" else v.strip().lower()

        return replace(self, **changes) if changes else self
