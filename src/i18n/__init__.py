"""
Message translation for pkgs.

Messages are looked up in ``locales/<lang>/LC_MESSAGES/messages.mo`` next to
this module; when no catalog exists the original English text is returned.
"""

import gettext
import os
from typing import Optional

DEFAULT_LANGUAGE = "en"

CURRENT_LANGUAGE = DEFAULT_LANGUAGE

# Loaded translation objects keyed by language code
TRANSLATIONS = {}


def set_language(language: str) -> None:
    """Set the current language for translations."""
    global CURRENT_LANGUAGE  # pylint: disable=global-statement
    CURRENT_LANGUAGE = language or DEFAULT_LANGUAGE


def get_language() -> str:
    """Get the current language."""
    return CURRENT_LANGUAGE


def get_translation(language: Optional[str] = None) -> gettext.NullTranslations:
    """Get translation object for the specified language."""
    if language is None:
        language = CURRENT_LANGUAGE

    if language not in TRANSLATIONS:
        localedir = os.path.join(os.path.dirname(__file__), "locales")
        try:
            TRANSLATIONS[language] = gettext.translation(
                "messages", localedir, [language]
            )
        except FileNotFoundError:
            TRANSLATIONS[language] = gettext.NullTranslations()

    return TRANSLATIONS[language]


def _(message: str, language: Optional[str] = None) -> str:
    """Translate a message."""
    return get_translation(language).gettext(message)
