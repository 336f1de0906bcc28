"""Remote content classifiers.

The moderation pipeline only sees the narrow interfaces below; the OpenAI
implementations are one way of satisfying them. A classifier either returns a
verdict or raises ``ClassifierError`` when the call itself failed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import openai
from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


ABUSE_PROMPT_TEMPLATE = """Does this text contain curse words, swear words, obscenities, slurs, \
or an attack on a specifically named real person, in English, Russian, or Kazakh?

Reply YES if the text has:
- Curse words, swear words or obscenities in any alphabet (Cyrillic, Latin or mixed), \
including Kazakh or Russian written in Latin letters (e.g. Kotakbas, Qotaqbas) and \
obfuscated spellings (e.g. pid@ras, p1daras).
- Hate or harassment aimed at a person identified by name.

Reply NO if the text only complains or vents about a situation or a role without naming \
anyone (e.g. "the professor", "the director", "administration", "our dean"). Students may \
criticise roles and institutions; only a named, attacked person counts.

Reply only YES or NO.

Text: "{text}\""""

IMAGE_PROMPT = (
    "Is this image appropriate for a safe university community app? If it contains nudity, "
    "sexual content, violence, gore, hate symbols, or visible offensive text or curse words "
    "in English, Russian or Kazakh (any alphabet), reply only NO. Otherwise reply only YES."
)


class ClassifierError(RuntimeError):
    """The classifier could not be reached or answered malformed data."""


@dataclass(frozen=True)
class ClassificationVerdict:
    """Outcome of one classifier call."""

    flagged: bool
    raw: Any = None
    answer: str | None = None


class TextClassifier(Protocol):
    """Text in, verdict out."""

    async def classify(self, text: str) -> ClassificationVerdict:
        """Classify ``text``; raise ``ClassifierError`` on call failure."""
        ...


class ImageClassifier(Protocol):
    """Image URL in, verdict out."""

    async def classify_image(self, image_url: str) -> ClassificationVerdict:
        """Classify the image at ``image_url``; raise ``ClassifierError`` on call failure."""
        ...


def normalize_answer(content: str | None) -> str:
    """Trim and upper-case a short model answer; punctuation is kept."""
    if not content:
        return ""
    return content.strip().upper()


def _first_answer(completion: Any) -> str | None:
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None)


class OpenAIPolicyClassifier:
    """General content-policy check backed by the moderation endpoint."""

    def __init__(self, client: AsyncOpenAI, *, model: str) -> None:
        self._client = client
        self._model = model

    async def classify(self, text: str) -> ClassificationVerdict:
        try:
            response = await self._client.moderations.create(model=self._model, input=text)
        except openai.OpenAIError as exc:
            raise ClassifierError(f"Moderation request failed: {exc}") from exc

        if not response.results:
            raise ClassifierError("Moderation response carried no results")
        return ClassificationVerdict(flagged=bool(response.results[0].flagged), raw=response)


class OpenAIAbuseClassifier:
    """Targeted profanity and named-harassment check for the app's language mix.

    The policy classifier misses transliterated Kazakh and Russian profanity;
    this asks a chat model a narrow yes/no question instead.
    """

    def __init__(self, client: AsyncOpenAI, *, model: str, max_tokens: int = 10) -> None:
        self._client = client
        self._model = model
        self._max_tokens = max_tokens

    def build_prompt(self, text: str) -> str:
        return ABUSE_PROMPT_TEMPLATE.format(text=text)

    async def classify(self, text: str) -> ClassificationVerdict:
        try:
            completion = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": self.build_prompt(text)}],
                max_tokens=self._max_tokens,
                temperature=0,
            )
        except openai.OpenAIError as exc:
            raise ClassifierError(f"Abuse check request failed: {exc}") from exc

        answer = normalize_answer(_first_answer(completion))
        return ClassificationVerdict(flagged="YES" in answer, raw=completion, answer=answer)


class OpenAIImageClassifier:
    """Vision check; any answer other than exactly YES (after trim and upper-case) is inappropriate."""

    def __init__(self, client: AsyncOpenAI, *, model: str, max_tokens: int = 10) -> None:
        self._client = client
        self._model = model
        self._max_tokens = max_tokens

    async def classify_image(self, image_url: str) -> ClassificationVerdict:
        try:
            completion = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": IMAGE_PROMPT},
                            {"type": "image_url", "image_url": {"url": image_url}},
                        ],
                    }
                ],
                max_tokens=self._max_tokens,
                temperature=0,
            )
        except openai.OpenAIError as exc:
            raise ClassifierError(f"Image check request failed: {exc}") from exc

        answer = normalize_answer(_first_answer(completion))
        return ClassificationVerdict(flagged=answer != "YES", raw=completion, answer=answer)
