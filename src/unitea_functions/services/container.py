"""Process-wide clients, built once at startup and closed at shutdown."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from unitea_functions.core.settings import Settings
from unitea_functions.services.classifiers import (
    OpenAIAbuseClassifier,
    OpenAIImageClassifier,
    OpenAIPolicyClassifier,
)
from unitea_functions.services.identity import IdentityProvider, build_identity_provider
from unitea_functions.services.moderation import ModerationPipeline
from unitea_functions.services.storage import SupabaseStorage

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Collaborators injected into request handlers."""

    identity: IdentityProvider
    pipeline: ModerationPipeline
    http: httpx.AsyncClient | None = None
    openai_client: AsyncOpenAI | None = None

    async def aclose(self) -> None:
        if self.http is not None:
            await self.http.aclose()
        if self.openai_client is not None:
            await self.openai_client.close()


def build_services(config: Settings) -> ServiceContainer:
    """Create the HTTP and classifier clients described by ``config``."""
    http = httpx.AsyncClient(
        base_url=config.supabase_url,
        timeout=httpx.Timeout(config.http_timeout_seconds),
    )
    openai_client = AsyncOpenAI(
        api_key=config.openai_api_key,
        base_url=config.openai_base_url,
    )

    pipeline = ModerationPipeline(
        policy_classifier=OpenAIPolicyClassifier(openai_client, model=config.moderation_model),
        abuse_classifier=OpenAIAbuseClassifier(
            openai_client,
            model=config.classifier_model,
            max_tokens=config.classifier_max_tokens,
        ),
        image_classifier=OpenAIImageClassifier(
            openai_client,
            model=config.classifier_model,
            max_tokens=config.classifier_max_tokens,
        ),
        storage=SupabaseStorage(http, anon_key=config.supabase_anon_key),
        image_bucket=config.post_images_bucket,
        signed_url_ttl_seconds=config.signed_url_ttl_seconds,
        abuse_max_chars=config.abuse_check_max_chars,
    )
    logger.info("Services ready (auth_mode=%s, bucket=%s)", config.auth_mode, config.post_images_bucket)
    return ServiceContainer(
        identity=build_identity_provider(config, http),
        pipeline=pipeline,
        http=http,
        openai_client=openai_client,
    )
