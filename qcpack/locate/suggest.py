"""
AI-assisted sentence matching fallback.

When neither the strict nor the aggressive match finds a context phrase, a
SentenceMatcher may be asked for the verbatim page text that corresponds to
it. Answers are only trusted when they are a literal substring of the page
text; anything else is treated as no match.

The OpenAI client is imported lazily so the package works without the
``ai`` extra installed.
"""

from __future__ import annotations

import logging
import os
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"

PROMPT_TEMPLATE = """You are a text processing expert. Your task is to find a SEARCH PHRASE within a larger TEXT BLOCK.
The text may have small differences due to formatting (like ligatures ﬁ vs fi, or smart quotes ’ vs ').
Your goal is to find the exact text in the TEXT BLOCK that corresponds to the SEARCH PHRASE.

1. Read the SEARCH PHRASE.
2. Read the TEXT BLOCK.
3. Find the sentence in the TEXT BLOCK that is the best semantic and character-level match for the SEARCH PHRASE.
4. Respond with ONLY the verbatim text of the matching sentence from the TEXT BLOCK. Do not alter it. Do not add explanations or quotes.

SEARCH PHRASE:
---
{phrase}
---

TEXT BLOCK:
---
{page_text}
---
"""


@runtime_checkable
class SentenceMatcher(Protocol):
    """Anything that can suggest the page text matching a phrase."""

    def suggest(self, page_text: str, context_phrase: str) -> str | None:
        """Return verbatim text from ``page_text`` matching the phrase, or None."""
        ...


def verify_suggestion(page_text: str, suggestion: str | None) -> str | None:
    """
    Accept a suggestion only if it literally occurs in the page text.

    Surrounding whitespace is ignored. Returns the trimmed suggestion or None.
    """
    if not suggestion:
        return None
    candidate = suggestion.strip()
    if candidate and candidate in page_text:
        return candidate
    return None


class OpenAISentenceMatcher:
    """SentenceMatcher backed by the OpenAI chat completions API.

    Without an API key (argument or OPENAI_API_KEY) the matcher is disabled
    and always returns None.

    Example:
        >>> matcher = OpenAISentenceMatcher()
        >>> locator = PhraseLocator(matcher=matcher)
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        timeout: float = 30.0,
    ):
        """
        Initialize the matcher.

        Args:
            api_key: OpenAI API key; falls back to OPENAI_API_KEY.
            model: Chat model to query.
            timeout: Request timeout in seconds.
        """
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.model = model
        self.timeout = timeout
        self._client = None

        if not self.api_key:
            logger.warning("OpenAI API key not found. AI sentence matching is disabled.")
            return

        from openai import OpenAI

        self._client = OpenAI(api_key=self.api_key, timeout=self.timeout)

    def is_available(self) -> bool:
        """Whether the matcher can make requests."""
        return self._client is not None

    def suggest(self, page_text: str, context_phrase: str) -> str | None:
        """Ask the model for the sentence matching ``context_phrase``."""
        if self._client is None:
            return None

        prompt = PROMPT_TEMPLATE.format(phrase=context_phrase, page_text=page_text)
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0,
            )
        except Exception as e:
            logger.warning("AI sentence matching failed: %s", e)
            return None

        content = response.choices[0].message.content if response.choices else None
        return content.strip() if content else None
