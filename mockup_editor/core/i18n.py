"""Internationalization — JSON-backed translators for user-visible text.

Translations live in ``mockup_editor/translations/{lang}.json`` (nested JSON,
flattened to dot-notation keys at load time). Each editor session owns a
``Translator`` for its configured language, so sessions in different
languages never affect each other.

Usage:
    from mockup_editor.core.i18n import Translator

    tr = Translator("tr")
    message = tr.t("notify.save_failed", "Failed to save changes")
    msg = tr.t("notify.effect_applied", "{effect} effect has been applied").format(
        effect="sepia",
    )
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from mockup_editor.constants import DEFAULT_LANGUAGE

logger = logging.getLogger(__name__)

TRANSLATIONS_DIR = Path(__file__).parent.parent / "translations"


def _flatten(d: dict, prefix: str = "") -> dict[str, str]:
    """Flatten nested dict to dot-notation keys.

    {"notify": {"saved": "Kaydedildi"}} -> {"notify.saved": "Kaydedildi"}
    """
    result: dict[str, str] = {}
    for k, v in d.items():
        key = f"{prefix}.{k}" if prefix else k
        if isinstance(v, dict):
            result.update(_flatten(v, key))
        else:
            result[key] = str(v)
    return result


@lru_cache(maxsize=None)
def _load_strings(lang: str) -> dict[str, str]:
    path = TRANSLATIONS_DIR / f"{lang}.json"
    if not path.exists():
        logger.warning("No translations for language %r, using English defaults", lang)
        return {}
    return _flatten(json.loads(path.read_text(encoding="utf-8")))


def available_languages() -> list[str]:
    return sorted(p.stem for p in TRANSLATIONS_DIR.glob("*.json"))


class Translator:
    """String lookup for one language. Missing keys fall back to the default."""

    def __init__(self, lang: str = DEFAULT_LANGUAGE):
        self._lang = lang
        self._strings = _load_strings(lang)

    @property
    def lang(self) -> str:
        return self._lang

    def t(self, key: str, default: str = "") -> str:
        """Translate a dot-notation key (e.g. "notify.saved")."""
        return self._strings.get(key, default)
