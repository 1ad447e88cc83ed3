"""
Charge pipeline tests.

Scenarios use the local template unless a mock generator is injected,
so no test touches the network.
"""
import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from gateway.mocks.explanation_generator import MockExplanationGenerator, failing_generator
from gateway.services.charge_service import ChargePipeline
from gateway.services.explanation_service import ExplanationCache, ExplanationService
from gateway.services.risk_scorer import RiskScorer
from gateway.services.transaction_ledger import TransactionLedger
from tests.conftest import make_request


def make_pipeline(generator=None, timeout_seconds: float = 1.0) -> ChargePipeline:
    return ChargePipeline(
        scorer=RiskScorer(),
        explanations=ExplanationService(
            cache=ExplanationCache(),
            generator=generator,
            timeout_seconds=timeout_seconds,
        ),
        ledger=TransactionLedger(),
    )


class TestChargeScenarios:
    """End-to-end decisions for representative charges."""

    @pytest.mark.asyncio
    async def test_small_clean_charge_routes_to_provider_a(self, pipeline):
        response = await pipeline.process(make_request(amount=1000, email="user@gmail.com"))

        assert response.risk_score == 0.0
        assert response.status == "success"
        assert response.provider == "ProviderA"
        assert response.explanation == (
            "Payment routed to ProviderA with low risk score (0.00) for $10.00 transaction."
        )

    @pytest.mark.asyncio
    async def test_large_charge_routes_to_provider_b(self, pipeline):
        response = await pipeline.process(make_request(amount=60_000, email="user@gmail.com"))

        assert response.risk_score == pytest.approx(0.3)
        assert response.status == "success"
        assert response.provider == "ProviderB"

    @pytest.mark.asyncio
    async def test_very_large_charge_blocked_at_boundary(self, pipeline):
        response = await pipeline.process(make_request(amount=150_000, email="user@gmail.com"))

        assert response.risk_score == pytest.approx(0.5)
        assert response.status == "blocked"
        assert response.provider == "none"
        assert response.explanation == (
            "Payment blocked due to moderate risk score (0.50) from suspicious patterns."
        )

    @pytest.mark.asyncio
    async def test_all_signals_capped_and_blocked(self, pipeline):
        response = await pipeline.process(make_request(amount=200_000, email="temp@test.com"))

        assert response.risk_score == 1.0
        assert response.status == "blocked"
        assert response.provider == "none"

    @pytest.mark.asyncio
    async def test_suspicious_domain_alone_routes_to_provider_b(self, pipeline):
        response = await pipeline.process(make_request(email="user@mail.ru"))

        assert response.status == "success"
        assert response.provider == "ProviderB"

    @pytest.mark.asyncio
    async def test_denylist_text_in_local_part_still_routes(self, pipeline):
        """Denylist text before the "@" is not a suspicious domain."""
        response = await pipeline.process(make_request(amount=60_000, email="mytest.com@gmail.com"))

        assert response.risk_score == pytest.approx(0.3)
        assert response.status == "success"
        assert response.provider == "ProviderB"


class TestChargePipeline:

    def test_decide_keeps_provider_and_block_consistent(self, pipeline):
        accepted = pipeline.decide(make_request(amount=1000))
        blocked = pipeline.decide(make_request(amount=200_000, email="temp@test.com"))

        assert accepted.blocked is False and accepted.provider == "ProviderA"
        assert blocked.blocked is True and blocked.provider is None

    @pytest.mark.asyncio
    async def test_transaction_ids_are_unique(self, pipeline):
        responses = [await pipeline.process(make_request()) for _ in range(50)]

        ids = [r.transaction_id for r in responses]
        assert len(set(ids)) == 50
        assert all(i.startswith("txn_") for i in ids)

    @pytest.mark.asyncio
    async def test_ledger_records_each_charge_in_call_order(self, pipeline):
        requests = [
            make_request(amount=1000),
            make_request(amount=60_000),
            make_request(amount=200_000, email="temp@test.com"),
        ]
        responses = [await pipeline.process(r) for r in requests]

        snapshot = pipeline.ledger.snapshot()
        assert len(snapshot) == 3
        for transaction, request, response in zip(snapshot, requests, responses):
            assert transaction.id == response.transaction_id
            assert transaction.request == request
            assert transaction.response == response
            assert transaction.timestamp.tzinfo is not None

    @pytest.mark.asyncio
    async def test_generator_failure_never_aborts_processing(self):
        pipeline = make_pipeline(failing_generator())

        response = await pipeline.process(make_request(amount=60_000))

        assert response.status == "success"
        assert response.explanation.startswith("Payment routed to ProviderB")
        assert len(pipeline.ledger) == 1

    @pytest.mark.asyncio
    async def test_generator_timeout_never_aborts_processing(self):
        pipeline = make_pipeline(
            MockExplanationGenerator(reply="late", delay_seconds=0.5),
            timeout_seconds=0.05,
        )

        response = await pipeline.process(make_request(amount=150_000))

        assert response.status == "blocked"
        assert response.explanation.startswith("Payment blocked")

    @pytest.mark.asyncio
    async def test_generated_explanation_reaches_response_and_ledger(self):
        generator = MockExplanationGenerator(reply="Routed: small amount, trusted domain.")
        pipeline = make_pipeline(generator)

        response = await pipeline.process(make_request())

        assert response.explanation == "Routed: small amount, trusted domain."
        assert pipeline.ledger.snapshot()[0].response.explanation == response.explanation
        assert "Decision: APPROVED via ProviderA" in generator.prompts[0]

    @pytest.mark.asyncio
    async def test_repeated_charge_reuses_cached_explanation(self):
        generator = MockExplanationGenerator()
        pipeline = make_pipeline(generator)

        first = await pipeline.process(make_request())
        second = await pipeline.process(make_request())

        assert first.transaction_id != second.transaction_id
        assert first.explanation == second.explanation
        assert generator.call_count == 1

    @pytest.mark.race
    @pytest.mark.asyncio
    async def test_concurrent_charges_all_recorded(self):
        pipeline = make_pipeline(MockExplanationGenerator(delay_seconds=0.01))
        requests = [make_request(amount=1000 + n) for n in range(50)]

        responses = await asyncio.gather(*[pipeline.process(r) for r in requests])

        snapshot = pipeline.ledger.snapshot()
        assert len(snapshot) == 50
        assert {t.id for t in snapshot} == {r.transaction_id for r in responses}
        for transaction in snapshot:
            assert transaction.response.transaction_id == transaction.id

    @pytest.mark.race
    def test_charges_from_independent_threads(self):
        """
        Each thread drives its own event loop against one shared pipeline.

        10 distinct charges, each submitted by all 8 threads: the ledger keeps
        all 80 transactions and every copy of a charge gets the same text.
        """
        pipeline = make_pipeline(MockExplanationGenerator(delay_seconds=0.005))
        requests = [make_request(amount=1000 + n) for n in range(10)]

        def submit_all(_: int) -> list:
            return [asyncio.run(pipeline.process(r)) for r in requests]

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(submit_all, range(8)))

        snapshot = pipeline.ledger.snapshot()
        assert len(snapshot) == 80
        assert len({t.id for t in snapshot}) == 80
        assert len(pipeline.explanations.cache) == 10

        for index, request in enumerate(requests):
            texts = {responses[index].explanation for responses in results}
            key = pipeline.explanations.cache_key(request, 0.0, False)
            assert texts == {pipeline.explanations.cache.get(key)}
