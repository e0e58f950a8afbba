from __future__ import annotations

import logging

from paysms_ml.data_models import Message
from paysms_ml.inference.embedding import EmbeddingService
from paysms_ml.pipeline.context import EmbeddedMessage

logger = logging.getLogger(__name__)


class EmbedStage:
    """Templateizes and embeds messages; drops those whose embedding failed."""

    name = "embed"

    def __init__(self, embedding_service: EmbeddingService):
        self._embedding = embedding_service

    async def process(self, messages: list[Message]) -> list[EmbeddedMessage]:
        if not messages:
            return []

        templates = [self._embedding.templateize(m.body) for m in messages]
        embeddings = await self._embedding.generate_embeddings(templates)

        embedded: list[EmbeddedMessage] = []
        for message, template, embedding in zip(messages, templates, embeddings):
            if embedding is None:
                logger.warning("Dropping message %s: embedding failed", message.id)
                continue
            embedded.append(EmbeddedMessage(message, template, embedding))

        logger.info("Embed tier: %d/%d embedded", len(embedded), len(messages))
        return embedded
