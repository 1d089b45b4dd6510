"""Tests for the validation stage."""

import pytest

from repairer_leads.enrich.validator import CandidateValidator, Verdict, parse_verdict

from conftest import make_candidate


class TestParseVerdict:
    """Tests for reply classification."""

    def test_valid(self):
        assert parse_verdict("VALIDE - confiance 90%") is Verdict.VALID

    def test_invalid_is_not_read_as_valid(self):
        assert parse_verdict("INVALIDE, ce commerce a fermé") is Verdict.INVALID

    def test_ambiguous(self):
        assert parse_verdict("Je n'ai pas trouvé d'information.") is Verdict.AMBIGUOUS

    def test_case_sensitive(self):
        assert parse_verdict("le commerce semble valide") is Verdict.AMBIGUOUS


class TestCandidateValidator:
    """Tests for Perplexity validation."""

    @pytest.mark.asyncio
    async def test_decision_table(self, providers):
        providers.validations['"Valid Shop"'] = "VALIDE (confiance 0.9)"
        providers.validations['"Closed Shop"'] = "INVALIDE: fermé définitivement"
        providers.validations['"Unknown Shop"'] = "Aucune information trouvée"
        validator = CandidateValidator("pplx-key", client=providers.client())
        candidates = [
            make_candidate(name="Valid Shop", confidence_score=0.7),
            make_candidate(name="Closed Shop"),
            make_candidate(name="Unknown Shop", confidence_score=0.6),
        ]

        validated = await validator.validate(candidates)

        assert [c.name for c in validated] == ["Valid Shop", "Unknown Shop"]
        assert validated[0].confidence_score == pytest.approx(0.9)
        assert validated[0].validated is True
        assert validated[1] == candidates[2]

    @pytest.mark.asyncio
    async def test_valid_bonus_capped(self, providers):
        providers.validations['"Valid Shop"'] = "VALIDE"
        validator = CandidateValidator("pplx-key", client=providers.client())

        [validated] = await validator.validate([make_candidate(name="Valid Shop", confidence_score=0.95)])
        assert validated.confidence_score == 1.0

    @pytest.mark.asyncio
    async def test_provider_error_keeps_candidate(self, providers):
        providers.validations['"Flaky Shop"'] = 502
        validator = CandidateValidator("pplx-key", client=providers.client())
        candidate = make_candidate(name="Flaky Shop")

        assert await validator.validate([candidate]) == [candidate]

    @pytest.mark.asyncio
    async def test_only_first_ten_are_checked(self, providers):
        for i in range(12):
            providers.validations[f'"Shop {i}"'] = "INVALIDE"
        validator = CandidateValidator("pplx-key", client=providers.client())
        candidates = [make_candidate(name=f"Shop {i}") for i in range(12)]

        validated = await validator.validate(candidates)

        assert providers.count("api.perplexity.ai") == 10
        assert validated == candidates[10:]

    @pytest.mark.asyncio
    async def test_limit_is_configurable(self, providers):
        providers.validations['"Shop'] = "VALIDE"
        validator = CandidateValidator("pplx-key", client=providers.client(), limit=2)
        candidates = [make_candidate(name=f"Shop {i}", confidence_score=0.6) for i in range(4)]

        validated = await validator.validate(candidates)

        assert providers.count("api.perplexity.ai") == 2
        assert [c.confidence_score for c in validated] == pytest.approx([0.8, 0.8, 0.6, 0.6])
        assert validated[2:] == candidates[2:]

    @pytest.mark.asyncio
    async def test_no_key_is_identity(self, providers):
        validator = CandidateValidator("", client=providers.client())
        candidates = [make_candidate(name="A Shop")]

        assert await validator.validate(candidates) == candidates
        assert providers.requests == []

    def test_negative_limit_rejected(self):
        with pytest.raises(ValueError):
            CandidateValidator("pplx-key", limit=-1)
