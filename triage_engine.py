"""
CareSync: Rule-Based Triage Scorer
Fixed lookup-table scoring of symptoms, history and age; works fully offline
"""

import logging
from typing import Dict, List, Optional

from models import Patient, TriageResult, Priority, HealthScheme, SchemeCategory
from reference_data import HEALTH_SCHEMES

logger = logging.getLogger(__name__)

# ============================================================================
# SCORING TABLES
# ============================================================================

SYMPTOM_SCORES: Dict[str, int] = {
    # Critical symptoms (8-10)
    "chest pain": 10,
    "difficulty breathing": 9,
    "severe bleeding": 10,
    "loss of consciousness": 10,
    "severe head injury": 9,
    "severe allergic reaction": 9,

    # High priority symptoms (6-7)
    "severe pain": 7,
    "high fever": 6,
    "broken bone": 6,
    "severe nausea": 6,

    # Medium priority symptoms (4-5)
    "moderate pain": 5,
    "fever": 4,
    "cough": 4,
    "headache": 4,

    # Low priority symptoms (1-3)
    "minor cut": 2,
    "common cold": 2,
    "routine checkup": 1,
    "vaccination": 1,
}
UNKNOWN_SYMPTOM_SCORE = 3

RISK_FACTORS: Dict[str, int] = {
    "diabetes": 2,
    "heart disease": 3,
    "hypertension": 2,
    "asthma": 2,
    "elderly": 2,
    "immunocompromised": 3,
}

MIN_SCORE = 0
MAX_SCORE = 10

# (threshold, tier), checked top-down
PRIORITY_THRESHOLDS = [
    (8, Priority.CRITICAL),
    (6, Priority.HIGH),
    (4, Priority.MEDIUM),
]

WAIT_TIME_MINUTES = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 5,
    Priority.MEDIUM: 15,
    Priority.LOW: 30,
}

RECOMMENDED_ACTIONS = {
    Priority.CRITICAL: "Immediate medical attention required",
    Priority.HIGH: "Urgent care needed within 1 hour",
    Priority.MEDIUM: "Medical consultation recommended",
    Priority.LOW: "Routine consultation or self-care",
}

PRIORITY_PUNJABI = {
    Priority.CRITICAL: "ਗੰਭੀਰ",
    Priority.HIGH: "ਉੱਚ",
    Priority.MEDIUM: "ਮੱਧਮ",
    Priority.LOW: "ਘੱਟ",
}


def priority_for_score(score: int) -> Priority:
    for threshold, priority in PRIORITY_THRESHOLDS:
        if score >= threshold:
            return priority
    return Priority.LOW


class TriageScorer:
    """
    Deterministic triage:
    1. Symptom severity weights (unknown symptoms count as moderate)
    2. Risk factors from medical history
    3. Age adjustment (elderly, infants)
    4. Priority tier, wait estimate, action and scheme recommendations
    """

    def __init__(self, schemes: Optional[List[HealthScheme]] = None):
        self.schemes = list(HEALTH_SCHEMES if schemes is None else schemes)

    def raw_score(self, patient: Patient) -> int:
        """Unclamped sum of symptom weights, risk factors and age adjustment"""
        total = sum(
            SYMPTOM_SCORES.get(symptom.lower(), UNKNOWN_SYMPTOM_SCORE)
            for symptom in patient.current_symptoms
        )
        total += sum(RISK_FACTORS.get(condition.lower(), 0) for condition in patient.medical_history)

        if patient.age > 65:
            total += 2
        if patient.age < 2:
            total += 3

        return total

    def score(self, patient: Patient) -> TriageResult:
        raw = self.raw_score(patient)
        clamped = max(MIN_SCORE, min(raw, MAX_SCORE))
        priority = priority_for_score(clamped)

        result = TriageResult(
            score=clamped,
            priority=priority,
            recommended_action=RECOMMENDED_ACTIONS[priority],
            estimated_wait_time=WAIT_TIME_MINUTES[priority],
            recommended_schemes=self.recommend_schemes(patient),
        )
        logger.debug(f"Triage {patient.id[:8]}: raw={raw} score={clamped} priority={priority.value}")
        return result

    def recommend_schemes(self, patient: Patient) -> List[HealthScheme]:
        """
        Rule order: child schemes (age < 18), maternal schemes (pregnancy
        mentioned in symptoms), then every insurance scheme. Repeats are kept.
        """
        recommended: List[HealthScheme] = []

        if patient.age < 18:
            recommended.extend(self._by_category(SchemeCategory.CHILD))

        if any("pregnan" in symptom.lower() for symptom in patient.current_symptoms):
            recommended.extend(self._by_category(SchemeCategory.MATERNAL))

        recommended.extend(self._by_category(SchemeCategory.INSURANCE))
        return recommended

    def apply(self, patient: Patient) -> tuple:
        """Score `patient` and return (patient with triage fields, result)"""
        result = self.score(patient)
        triaged = patient.model_copy(update={
            "triage_score": result.score,
            "priority": result.priority,
        })
        return triaged, result

    def spoken_summary(self, result: TriageResult, language: str = "en") -> str:
        """Text for the voice recommendation, in English or Punjabi"""
        if language == "pa":
            return (
                f"ਤੁਹਾਡਾ ਟ੍ਰਾਈਏਜ ਸਕੋਰ {result.score} ਹੈ। "
                f"ਤੁਹਾਡੀ ਤਰਜੀਹ {PRIORITY_PUNJABI[result.priority]} ਹੈ। "
                f"ਅਨੁਮਾਨਿਤ ਉਡੀਕ ਦਾ ਸਮਾਂ {result.estimated_wait_time} ਮਿੰਟ ਹੈ।"
            )
        return (
            f"Your triage score is {result.score}. "
            f"Your priority is {result.priority.value}. "
            f"Estimated wait time is {result.estimated_wait_time} minutes."
        )

    def _by_category(self, category: SchemeCategory) -> List[HealthScheme]:
        return [s for s in self.schemes if s.category == category]
