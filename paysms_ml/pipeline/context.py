from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from paysms_ml.data_models import Message

ProgressCallback = Callable[[str, int, int], None]

SUMMARY_SAMPLE_LENGTH = 60
MAIN_SAMPLE_LENGTH = 80


@dataclass
class EmbeddedMessage:
    """A message with its template and embedding.

    Created once in the embedding step and carried through every later
    stage; embeddings are never recomputed.
    """

    message: Message
    template: str
    embedding: NDArray[np.float32]


@dataclass
class Cluster:
    """Messages that share a format. The representative is also a member."""

    representative: EmbeddedMessage
    members: list[EmbeddedMessage] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)


@dataclass
class SourceGroup:
    """All clusters from one normalized sender address, largest first."""

    address: str
    clusters: list[Cluster]

    @property
    def total_count(self) -> int:
        return sum(c.size for c in self.clusters)

    @property
    def main_cluster(self) -> Cluster:
        return self.clusters[0]

    @property
    def exception_clusters(self) -> list[Cluster]:
        return self.clusters[1:]

    def distribution_summary(self) -> str:
        """Per-cluster share of the sender's messages, with a body excerpt."""
        total = self.total_count
        lines = [f"발신번호 {self.address} 총 {total}건:"]
        for i, cluster in enumerate(self.clusters):
            ratio = cluster.size * 100 // total if total else 0
            label = " (메인)" if i == 0 else ""
            sample = cluster.representative.message.body.replace("\n", " ")[
                :SUMMARY_SAMPLE_LENGTH
            ]
            lines.append(f"  - 서브그룹{i + 1}{label}: {cluster.size}건({ratio}%) | 원본: {sample}")
        return "\n".join(lines)


@dataclass(frozen=True)
class MainCaseContext:
    """What the main cluster of a sender resolved to."""

    card_name: str
    template: str
    sample: str
    is_payment: bool

    @classmethod
    def from_cluster(cls, cluster: Cluster, card_name: str | None) -> MainCaseContext:
        rep = cluster.representative
        return cls(
            card_name=card_name or "",
            template=rep.template,
            sample=rep.message.body.replace("\n", " ")[:MAIN_SAMPLE_LENGTH],
            is_payment=card_name is not None,
        )


def build_contextual_input(body: str, main: MainCaseContext, distribution_summary: str) -> str:
    """LLM input for an exception cluster: sender context, then the body."""
    lines = [
        "[참조 정보]",
        "이 SMS는 아래 발신번호의 예외 케이스입니다.",
        distribution_summary,
    ]
    if main.is_payment and main.card_name:
        lines.append(f"메인 케이스 카드: {main.card_name}")
    lines.extend(["", "[분석 대상 SMS]", body])
    return "\n".join(lines)
