"""Tests for pipeline context types."""

from paysms_ml.data_models import Message
from paysms_ml.pipeline import Cluster, EmbeddedMessage, MainCaseContext, SourceGroup
from paysms_ml.pipeline.context import build_contextual_input

from tests.fakes import unit_vector


def _item(i: int, body: str = "[KB국민]11/05 12:30 스타벅스강남 5,000원 승인") -> EmbeddedMessage:
    message = Message(id=str(i), address="15881688", body=body, timestamp_ms=0)
    return EmbeddedMessage(message, "template", unit_vector())


def _cluster(size: int, start: int = 0, body: str | None = None) -> Cluster:
    items = [_item(start + i, body) if body else _item(start + i) for i in range(size)]
    return Cluster(representative=items[0], members=items)


class TestSourceGroup:
    def test_main_and_exception_clusters(self) -> None:
        main, other = _cluster(3), _cluster(1, start=10)
        group = SourceGroup(address="15881688", clusters=[main, other])

        assert group.total_count == 4
        assert group.main_cluster is main
        assert group.exception_clusters == [other]

    def test_distribution_summary(self) -> None:
        group = SourceGroup(
            address="15881688",
            clusters=[_cluster(3), _cluster(1, start=10, body="KB 해외승인\nUSD 12.00")],
        )
        summary = group.distribution_summary()

        assert summary.splitlines() == [
            "발신번호 15881688 총 4건:",
            "  - 서브그룹1 (메인): 3건(75%) | 원본: [KB국민]11/05 12:30 스타벅스강남 5,000원 승인",
            "  - 서브그룹2: 1건(25%) | 원본: KB 해외승인 USD 12.00",
        ]


class TestMainCaseContext:
    def test_payment_main_case(self) -> None:
        main = MainCaseContext.from_cluster(_cluster(2), "KB국민")
        assert main.is_payment
        assert main.card_name == "KB국민"

    def test_unresolved_main_case(self) -> None:
        main = MainCaseContext.from_cluster(_cluster(2), None)
        assert not main.is_payment
        assert main.card_name == ""

    def test_contextual_input(self) -> None:
        main = MainCaseContext.from_cluster(_cluster(2), "KB국민")
        text = build_contextual_input("KB 해외승인 USD 12.00", main, "발신번호 요약")

        assert text.startswith("[참조 정보]")
        assert "메인 케이스 카드: KB국민" in text
        assert text.endswith("[분석 대상 SMS]\nKB 해외승인 USD 12.00")
