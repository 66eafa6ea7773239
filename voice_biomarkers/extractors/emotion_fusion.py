"""Text + voice fusion, discrepancy analysis and online weight adaptation.

Provides:
- Weighted VAD and emotion-probability fusion (late or early strategy)
- Modality agreement and discrepancy classification
- Clinical recommendations from risk keywords, indicators and discrepancies
- Exponentially smoothed adaptation of the text/voice fusion weights
"""

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import AdapterConfig
from ..models.schemas import (
    VAD,
    EmotionDistribution,
    FusionResult,
    ModalityContributions,
    ModalityDiscrepancy,
    NoDiscrepancy,
    TextAnalysis,
    VoiceEmotionEstimate,
)
from ..utils.stats import clamp
from .emotion import quadrant_scores


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Fusion defaults
# ---------------------------------------------------------------------------
AGREEMENT_THRESHOLD = 0.5
SUPPRESSION_VALENCE = -0.3
MASKING_VALENCE = 0.3
AMPLIFICATION_RATIO = 1.5
URGENT_RISK_SEVERITY = 0.8
DEPRESSION_ALERT = 0.6
ANXIETY_ALERT = 0.6
WELLBEING_VALENCE = 0.5
WELLBEING_MAX_STRESS = 0.3
MIN_ADAPTATION_SAMPLES = 5
ADAPTATION_ALPHA = 0.1


INTERPRETATIONS = {
    "ru": {
        "suppression": "Голос выражает негативные эмоции, скрываемые в словах. Возможно подавление эмоций.",
        "masking": "Позитивный тон голоса маскирует негативное содержание. Рекомендуется уточнить состояние.",
        "amplification": "Голос передаёт более сильные негативные эмоции, чем слова.",
    },
    "en": {
        "suppression": "The voice carries negative emotion that the words conceal. Possible emotional suppression.",
        "masking": "A positive tone of voice masks negative content. Clarify the person's state.",
        "amplification": "The voice conveys stronger negative emotion than the words.",
    },
}

RECOMMENDATIONS = {
    "ru": {
        "urgent_risk": "ВНИМАНИЕ: Обнаружены индикаторы высокого риска. Рекомендуется немедленная оценка безопасности.",
        "risk": "Обнаружены потенциальные индикаторы риска. Рекомендуется дополнительная проверка.",
        "depression": "Голосовые биомаркеры указывают на возможные симптомы депрессии. Рекомендуется оценка PHQ-9.",
        "anxiety": "Выявлены признаки повышенной тревожности в голосе. Рассмотрите техники релаксации.",
        "discrepancy": "Обнаружено расхождение между речью и голосом ({type}). {interpretation}",
        "distortions": "Обнаружены когнитивные искажения: {types}. Рекомендуется работа с КПТ-техниками.",
        "wellbeing": "Общее эмоциональное состояние стабильное и позитивное.",
    },
    "en": {
        "urgent_risk": "WARNING: High-risk indicators detected. An immediate safety assessment is recommended.",
        "risk": "Potential risk indicators detected. A follow-up check is recommended.",
        "depression": "Voice biomarkers suggest possible depressive symptoms. A PHQ-9 assessment is recommended.",
        "anxiety": "Signs of elevated anxiety in the voice. Consider relaxation techniques.",
        "discrepancy": "Speech content and voice disagree ({type}). {interpretation}",
        "distortions": "Cognitive distortions detected: {types}. CBT techniques are recommended.",
        "wellbeing": "Overall emotional state is stable and positive.",
    },
}


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------

def text_sentiment_to_vad(sentiment: float, emotions: EmotionDistribution) -> Tuple[float, float, float]:
    """Map text sentiment and emotions onto (valence, arousal, dominance)."""
    arousal = (
        emotions.get("anger") * 0.8
        + emotions.get("fear") * 0.6
        + emotions.get("joy") * 0.4
        - emotions.get("sadness") * 0.4
    )
    dominance = 0.5 + emotions.get("anger") * 0.3 - emotions.get("fear") * 0.3
    return clamp(sentiment, -1, 1), clamp(arousal, -1, 1), clamp(dominance, 0, 1)


def modality_agreement(voice: VoiceEmotionEstimate, text: TextAnalysis) -> float:
    """1.0 when primary emotions match, else 1 - |voice valence - text sentiment| (floored at 0)."""
    if voice.primary_emotion == text.primary_emotion:
        return 1.0
    return max(0.0, 1.0 - abs(voice.vad.valence - text.sentiment))


def classify_discrepancy(
    voice: VoiceEmotionEstimate,
    text: TextAnalysis,
    language: str = "en",
):
    """
    Classify how voice and text disagree.

    suppression: positive words, clearly negative voice
    masking: negative words, clearly positive voice
    amplification: both negative, voice 1.5x more intense
    """
    voice_valence = voice.vad.valence
    text_valence = text.sentiment
    messages = INTERPRETATIONS.get(language, INTERPRETATIONS["en"])

    if text_valence > 0 and voice_valence < SUPPRESSION_VALENCE:
        kind = "suppression"
    elif text_valence < 0 and voice_valence > MASKING_VALENCE:
        kind = "masking"
    elif text_valence < 0 and voice_valence < 0 and abs(voice_valence) > abs(text_valence) * AMPLIFICATION_RATIO:
        kind = "amplification"
    else:
        return NoDiscrepancy()

    return ModalityDiscrepancy(
        type=kind,
        text_emotion=text.primary_emotion,
        voice_emotion=voice.primary_emotion,
        interpretation=messages[kind],
    )


def generate_recommendations(
    vad: VAD,
    voice: VoiceEmotionEstimate,
    text: TextAnalysis,
    discrepancy,
    language: str = "en",
) -> List[str]:
    """Ordered recommendations: risk, depression, anxiety, discrepancy, distortions, wellbeing."""
    messages = RECOMMENDATIONS.get(language, RECOMMENDATIONS["en"])
    recommendations = []

    if text.risk_keywords:
        severity = max(r.severity for r in text.risk_keywords)
        if severity >= URGENT_RISK_SEVERITY:
            recommendations.append(messages["urgent_risk"])
        else:
            recommendations.append(messages["risk"])

    if voice.depression_indicators.score > DEPRESSION_ALERT:
        recommendations.append(messages["depression"])

    if voice.anxiety_indicators.score > ANXIETY_ALERT:
        recommendations.append(messages["anxiety"])

    if discrepancy.type != "none":
        recommendations.append(messages["discrepancy"].format(
            type=discrepancy.type, interpretation=discrepancy.interpretation,
        ))

    if text.cognitive_distortions:
        types = list(dict.fromkeys(d.type for d in text.cognitive_distortions))
        recommendations.append(messages["distortions"].format(types=", ".join(types)))

    if vad.valence > WELLBEING_VALENCE and voice.stress_indicators.score < WELLBEING_MAX_STRESS:
        recommendations.append(messages["wellbeing"])

    return recommendations


# ---------------------------------------------------------------------------
# Fusion engine
# ---------------------------------------------------------------------------

class FusionEngine:
    """Combine voice and text estimates with the configured weights."""

    def __init__(self, config: Optional[AdapterConfig] = None):
        self.config = config or AdapterConfig()

    def _language(self, text: TextAnalysis) -> str:
        if self.config.language == "auto":
            return text.language if text.language in RECOMMENDATIONS else "en"
        return self.config.language

    def fuse(self, voice: VoiceEmotionEstimate, text: TextAnalysis) -> FusionResult:
        """
        Fuse the two modalities.

        Args:
            voice: Voice-derived estimate
            text: Text analysis of the transcript

        Returns:
            FusionResult with fused VAD, emotions, agreement and recommendations
        """
        text_weight, voice_weight = self.config.fusion_weights
        text_valence, text_arousal, text_dominance = text_sentiment_to_vad(text.sentiment, text.text_emotions)

        fused_vad = VAD(
            valence=clamp(text_weight * text_valence + voice_weight * voice.vad.valence, -1, 1),
            arousal=clamp(text_weight * text_arousal + voice_weight * voice.vad.arousal, -1, 1),
            dominance=clamp(text_weight * text_dominance + voice_weight * voice.vad.dominance, 0, 1),
            confidence=min(text.confidence, voice.vad.confidence),
        )

        if self.config.fusion_strategy == "early":
            fused_emotions = self._fuse_early(fused_vad, voice)
        else:
            fused_emotions = self._fuse_late(voice, text, text_weight, voice_weight)

        agreement = modality_agreement(voice, text)
        discrepancy = NoDiscrepancy()
        if agreement < AGREEMENT_THRESHOLD and voice.primary_emotion != text.primary_emotion:
            discrepancy = classify_discrepancy(voice, text, self._language(text))
            if discrepancy.type != "none":
                logger.info(
                    "Modality discrepancy '%s': text=%s voice=%s (agreement %.2f)",
                    discrepancy.type, text.primary_emotion, voice.primary_emotion, agreement,
                )

        return FusionResult(
            vad=fused_vad,
            emotion_probabilities=fused_emotions,
            primary_emotion=fused_emotions.primary(),
            contributions=ModalityContributions(text=text_weight, voice=voice_weight),
            modality_agreement=agreement,
            discrepancy=discrepancy,
            confidence=fused_vad.confidence,
            recommendations=generate_recommendations(
                fused_vad, voice, text, discrepancy, self._language(text),
            ),
        )

    @staticmethod
    def _fuse_late(
        voice: VoiceEmotionEstimate,
        text: TextAnalysis,
        text_weight: float,
        voice_weight: float,
    ) -> EmotionDistribution:
        """Weighted sum over the union of emotion labels (voice labels first)."""
        labels = list(dict.fromkeys([*voice.emotion_probabilities.keys(), *text.text_emotions.keys()]))
        fused: Dict[str, float] = {}
        for label in labels:
            fused[label] = (
                text_weight * text.text_emotions.get(label)
                + voice_weight * voice.emotion_probabilities.get(label)
            )
        return EmotionDistribution(fused)

    @staticmethod
    def _fuse_early(fused_vad: VAD, voice: VoiceEmotionEstimate) -> EmotionDistribution:
        """Classify the jointly fused valence/arousal point; carry over voice stress."""
        scores = quadrant_scores(fused_vad.arousal, fused_vad.valence)
        stress = voice.emotion_probabilities.get("stress")
        if stress > 0:
            scores["stress"] = stress
        return EmotionDistribution.from_scores(scores)


# ---------------------------------------------------------------------------
# Online weight adaptation
# ---------------------------------------------------------------------------

def vad_distance(a: VAD, b: VAD) -> float:
    """Euclidean distance between two VAD points (confidence ignored)."""
    return math.sqrt(
        (a.valence - b.valence) ** 2
        + (a.arousal - b.arousal) ** 2
        + (a.dominance - b.dominance) ** 2
    )


def adapt_fusion_weights(
    config: AdapterConfig,
    predictions: Sequence[FusionResult],
    actuals: Sequence[VoiceEmotionEstimate],
    alpha: float = ADAPTATION_ALPHA,
) -> AdapterConfig:
    """
    Return a config whose fusion weights moved toward the better modality.

    Each pair's VAD error is attributed to the modalities by that
    prediction's contributions. Weights are smoothed toward
    1 - error / total_error and renormalized. Fewer than five pairs,
    mismatched lengths or zero total error leave the config unchanged.
    """
    if len(predictions) != len(actuals) or len(predictions) < MIN_ADAPTATION_SAMPLES:
        logger.debug(
            "Skipping weight adaptation: %d predictions, %d actuals",
            len(predictions), len(actuals),
        )
        return config

    text_error = 0.0
    voice_error = 0.0
    for pred, actual in zip(predictions, actuals):
        if pred is None or actual is None:
            continue
        error = vad_distance(pred.vad, actual.vad)
        text_error += error * pred.contributions.text
        voice_error += error * pred.contributions.voice

    total_error = text_error + voice_error
    if total_error <= 0:
        return config

    text_performance = 1 - text_error / total_error
    voice_performance = 1 - voice_error / total_error

    current_text, current_voice = config.fusion_weights
    new_text = current_text * (1 - alpha) + text_performance * alpha
    new_voice = current_voice * (1 - alpha) + voice_performance * alpha
    total = new_text + new_voice
    weights = (new_text / total, new_voice / total)

    logger.debug("Fusion weights %s -> %s", config.fusion_weights, weights)
    return config.model_copy(update={"fusion_weights": weights})
