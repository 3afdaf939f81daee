"""
Triage scorer tests: scoring tables, clamping, tiers and scheme recommendations
"""

import pytest

from models import Priority, SchemeCategory
from reference_data import HEALTH_SCHEMES
from triage_engine import TriageScorer


@pytest.fixture
def scorer():
    return TriageScorer()


class TestScoring:

    def test_chest_pain_is_critical_with_no_wait(self, scorer, make_patient):
        for age in (1, 30, 80):
            result = scorer.score(make_patient(age=age, current_symptoms=["Chest Pain", "cough"]))
            assert result.priority == Priority.CRITICAL
            assert result.estimated_wait_time == 0

    def test_no_symptoms_no_history_is_low(self, scorer, make_patient):
        for age in (2, 40, 65):
            result = scorer.score(make_patient(age=age))
            assert result.score == 0
            assert result.priority == Priority.LOW
            assert result.estimated_wait_time == 30
            assert result.recommended_action == "Routine consultation or self-care"

    def test_score_is_clamped_to_ten(self, scorer, make_patient):
        patient = make_patient(
            current_symptoms=["chest pain", "severe bleeding"],
            medical_history=["heart disease"],
        )
        assert scorer.raw_score(patient) == 23
        assert scorer.score(patient).score == 10

    def test_unknown_symptom_defaults_to_three(self, scorer, make_patient):
        result = scorer.score(make_patient(current_symptoms=["itchy elbow"]))
        assert result.score == 3
        assert result.priority == Priority.LOW

    def test_unknown_history_adds_nothing(self, scorer, make_patient):
        patient = make_patient(current_symptoms=["headache"], medical_history=["freckles"])
        assert scorer.score(patient).score == 4

    def test_history_lookup_is_case_insensitive(self, scorer, make_patient):
        patient = make_patient(current_symptoms=["fever"], medical_history=["Diabetes", "HYPERTENSION"])
        result = scorer.score(patient)
        assert result.score == 8
        assert result.priority == Priority.CRITICAL

    def test_age_adjustments(self, scorer, make_patient):
        assert scorer.score(make_patient(age=66, current_symptoms=["fever"])).score == 6
        assert scorer.score(make_patient(age=1, current_symptoms=["fever"])).score == 7
        assert scorer.score(make_patient(age=65, current_symptoms=["fever"])).score == 4
        assert scorer.score(make_patient(age=2, current_symptoms=["fever"])).score == 4

    @pytest.mark.parametrize("symptoms,priority,wait", [
        (["fever"], Priority.MEDIUM, 15),
        (["high fever"], Priority.HIGH, 5),
        (["severe pain"], Priority.HIGH, 5),
        (["vaccination", "minor cut"], Priority.LOW, 30),
        (["difficulty breathing"], Priority.CRITICAL, 0),
    ])
    def test_priority_tiers(self, scorer, make_patient, symptoms, priority, wait):
        result = scorer.score(make_patient(current_symptoms=symptoms))
        assert result.priority == priority
        assert result.estimated_wait_time == wait

    def test_cardiac_presentation(self, scorer, make_patient):
        patient = make_patient(
            age=58,
            current_symptoms="Chest pain, Shortness of breath, Diaphoresis",
            medical_history="Hypertension, Type 2 Diabetes",
        )
        result = scorer.score(patient)
        assert result.priority == Priority.CRITICAL
        assert result.recommended_action == "Immediate medical attention required"

    def test_mild_presentation(self, scorer, make_patient):
        patient = make_patient(age=32, current_symptoms=["common cold"])
        assert scorer.score(patient).priority == Priority.LOW

    def test_scoring_is_deterministic(self, scorer, make_patient):
        patient = make_patient(current_symptoms=["cough", "headache"], medical_history=["asthma"])
        assert scorer.score(patient) == scorer.score(patient)


class TestSchemeRecommendations:

    def test_insurance_always_recommended(self, scorer, make_patient):
        schemes = scorer.score(make_patient()).recommended_schemes
        assert schemes
        assert all(s.category == SchemeCategory.INSURANCE for s in schemes)

    def test_children_get_child_schemes_first(self, scorer, make_patient):
        schemes = scorer.score(make_patient(age=10)).recommended_schemes
        categories = [s.category for s in schemes]
        assert categories[0] == SchemeCategory.CHILD
        assert SchemeCategory.CHILD in categories
        assert categories[-1] == SchemeCategory.INSURANCE

    def test_pregnancy_symptom_adds_maternal_schemes(self, scorer, make_patient):
        patient = make_patient(age=27, current_symptoms=["Pregnancy checkup"])
        categories = [s.category for s in scorer.score(patient).recommended_schemes]
        assert SchemeCategory.MATERNAL in categories

    def test_repeated_scheme_in_source_is_kept(self, make_patient):
        # categories are disjoint, so repeats can only come from the scheme source
        shared = HEALTH_SCHEMES[0].model_copy(update={"category": SchemeCategory.INSURANCE})
        scorer = TriageScorer(schemes=[shared, shared])
        schemes = scorer.recommend_schemes(make_patient())
        assert len(schemes) == 2


class TestApplyAndSpeech:

    def test_apply_attaches_score_and_priority(self, scorer, make_patient):
        patient = make_patient(current_symptoms=["fever"])
        triaged, result = scorer.apply(patient)
        assert triaged.triage_score == result.score == 4
        assert triaged.priority == Priority.MEDIUM
        assert patient.triage_score == 0

    def test_spoken_summary_languages(self, scorer, make_patient):
        result = scorer.score(make_patient(current_symptoms=["fever"]))
        assert scorer.spoken_summary(result) == (
            "Your triage score is 4. Your priority is Medium. Estimated wait time is 15 minutes."
        )
        punjabi = scorer.spoken_summary(result, "pa")
        assert "ਮੱਧਮ" in punjabi
        assert "15" in punjabi
