# src/unitea_functions/services/moderation.py
"""Moderation pipeline run before any post or comment is written."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from unitea_functions.core.errors import ModerationRejection, UpstreamFailure
from unitea_functions.services.classifiers import (
    ClassifierError,
    ImageClassifier,
    TextClassifier,
)
from unitea_functions.services.storage import ObjectStorage, StorageError

logger = logging.getLogger(__name__)

STAGE_POLICY = "policy"
STAGE_ABUSE = "abuse"
STAGE_IMAGE = "image"


class ContentTarget(enum.Enum):
    """Kind of entity the content will become."""

    POST = "post"
    COMMENT = "comment"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class ModerationRequest:
    """Content submitted for review; lives for a single request."""

    target: ContentTarget
    content: str | None = None
    image_key: str | None = None
    access_token: str | None = None


class ModerationPipeline:
    """Ordered content checks that stop at the first failure.

    Text goes through the policy classifier, then the abuse classifier. An
    attached image is checked last so rejected text never pays for vision.
    """

    def __init__(
        self,
        *,
        policy_classifier: TextClassifier,
        abuse_classifier: TextClassifier,
        image_classifier: ImageClassifier,
        storage: ObjectStorage,
        image_bucket: str = "post-images",
        signed_url_ttl_seconds: int = 300,
        abuse_max_chars: int = 2000,
    ) -> None:
        self.policy_classifier = policy_classifier
        self.abuse_classifier = abuse_classifier
        self.image_classifier = image_classifier
        self.storage = storage
        self.image_bucket = image_bucket
        self.signed_url_ttl_seconds = signed_url_ttl_seconds
        self.abuse_max_chars = abuse_max_chars

    async def review(self, request: ModerationRequest) -> str:
        """Run every applicable stage.

        Args:
            request: Content to check

        Returns:
            The trimmed text, ready to persist ("" when there is none)

        Raises:
            ModerationRejection: If a stage flags the content
            UpstreamFailure: If a classifier or storage call fails
        """
        text = await self.check_text(request.content, target=request.target)
        if request.image_key:
            await self.check_image(request.image_key, access_token=request.access_token)
        return text

    async def check_text(self, content: str | None, *, target: ContentTarget) -> str:
        text = (content or "").strip()
        if not text:
            return ""

        label = target.label
        try:
            verdict = await self.policy_classifier.classify(text)
        except ClassifierError as exc:
            logger.warning("Policy classifier failed for %s: %s", target.value, exc)
            raise UpstreamFailure(f"Failed to verify {target.value}. Please try again.") from exc
        if verdict.flagged:
            logger.info("%s rejected by policy classifier", label)
            raise ModerationRejection(
                f"{label} violates community guidelines", stage=STAGE_POLICY
            )

        try:
            verdict = await self.abuse_classifier.classify(text[: self.abuse_max_chars])
        except ClassifierError as exc:
            logger.warning("Abuse classifier failed for %s: %s", target.value, exc)
            raise UpstreamFailure(f"Failed to verify {target.value}. Please try again.") from exc
        if verdict.flagged:
            logger.info("%s rejected by abuse classifier (answer=%r)", label, verdict.answer)
            raise ModerationRejection(
                f"{label} contains language that is not allowed", stage=STAGE_ABUSE
            )

        return text

    async def check_image(self, image_key: str, *, access_token: str | None = None) -> None:
        try:
            signed_url = await self.storage.create_signed_url(
                self.image_bucket,
                image_key,
                self.signed_url_ttl_seconds,
                access_token=access_token,
            )
        except StorageError as exc:
            logger.warning("Could not sign image %s: %s", image_key, exc)
            raise UpstreamFailure("Failed to process image") from exc

        try:
            verdict = await self.image_classifier.classify_image(signed_url)
        except ClassifierError as exc:
            logger.warning("Image classifier failed for %s: %s", image_key, exc)
            raise UpstreamFailure("Failed to verify image. Please try again.") from exc
        if verdict.flagged:
            logger.info("Image %s rejected (answer=%r)", image_key, verdict.answer)
            raise ModerationRejection("Image violates community guidelines", stage=STAGE_IMAGE)
