"""Lexicon-based text analysis of transcripts.

Produces the sentiment / emotion / risk / distortion summary consumed by the
fusion engine. Matching is plain substring search over lower-cased text,
which tolerates Russian inflection at the cost of occasional false hits.
"""

import re
from typing import Dict, List, Optional

from ..models.schemas import CognitiveDistortion, EmotionDistribution, RiskKeyword, TextAnalysis


FILLER_WORDS = {
    "en": [
        "um", "uh", "er", "ah", "like", "you know", "i mean",
        "basically", "actually", "literally", "right", "so",
        "well", "kind of", "sort of", "hmm", "uhh", "umm",
    ],
    "ru": ["эм", "ээ", "эээ", "мм", "ну", "как бы", "типа", "короче", "в общем", "вот", "значит"],
}

POSITIVE_WORDS = {
    "ru": ["хорошо", "отлично", "рад", "счастлив", "люблю", "нравится", "прекрасно", "супер"],
    "en": ["good", "great", "glad", "happy", "love", "enjoy", "wonderful", "excellent"],
}

NEGATIVE_WORDS = {
    "ru": ["плохо", "ужасно", "грустно", "злой", "ненавижу", "страшно", "больно", "тяжело"],
    "en": ["bad", "terrible", "sad", "angry", "hate", "scared", "painful", "hard"],
}

EMOTION_KEYWORDS = {
    "ru": {
        "joy": ["рад", "счастлив", "весело", "хорошо"],
        "sadness": ["грустно", "печально", "тоска", "одиноко"],
        "anger": ["злость", "бешенство", "раздражен", "ненавижу"],
        "fear": ["страх", "боюсь", "тревога", "паника"],
        "anxiety": ["беспокойство", "волнуюсь", "нервничаю"],
    },
    "en": {
        "joy": ["happy", "glad", "joyful", "cheerful"],
        "sadness": ["sad", "unhappy", "lonely", "miserable"],
        "anger": ["angry", "furious", "annoyed", "hate"],
        "fear": ["afraid", "scared", "terrified", "panic"],
        "anxiety": ["worried", "nervous", "anxious"],
    },
}

DISTORTION_PATTERNS = {
    "ru": {
        "catastrophizing": ["ужасно", "кошмар", "конец света", "все пропало"],
        "black_and_white": ["всегда", "никогда", "все", "никто", "полностью"],
        "mind_reading": ["они думают", "все считают", "наверняка думает"],
        "fortune_telling": ["точно будет", "никогда не получится", "обязательно провалюсь"],
        "should_statements": ["должен", "обязан", "надо было"],
    },
    "en": {
        "catastrophizing": ["terrible", "nightmare", "end of the world", "everything is ruined"],
        "black_and_white": ["always", "never", "everyone", "nobody", "completely"],
        "mind_reading": ["they think", "everyone thinks", "must think"],
        "fortune_telling": ["will definitely", "never work out", "going to fail"],
        "should_statements": ["should", "must", "have to"],
    },
}

RISK_KEYWORDS = {
    "ru": {
        "suicidal": ["суицид", "покончить", "убить себя", "не хочу жить", "конец", "уйти навсегда"],
        "self_harm": ["порезы", "порезать", "причинить боль", "навредить себе"],
        "crisis": ["не могу больше", "невыносимо", "нет сил", "безнадежно", "отчаяние"],
        "substance": ["выпить", "напиться", "употребить", "доза", "таблетки"],
    },
    "en": {
        "suicidal": ["suicide", "kill myself", "end my life", "don't want to live", "want to die"],
        "self_harm": ["cut myself", "hurt myself", "self-harm", "harm myself"],
        "crisis": ["can't take it", "unbearable", "no strength left", "hopeless", "despair"],
        "substance": ["get drunk", "overdose", "pills", "dose"],
    },
}

RISK_SEVERITY = {"suicidal": 1.0, "self_harm": 0.8}
DEFAULT_RISK_SEVERITY = 0.5

SENTIMENT_STEP = 0.2
TEXT_CONFIDENCE = 0.7
EMPTY_TEXT_CONFIDENCE = 0.1

_CYRILLIC = re.compile(r"[а-яё]", re.IGNORECASE)


def detect_language(text: str) -> str:
    """'ru' if the text contains Cyrillic letters, else 'en'."""
    return "ru" if _CYRILLIC.search(text) else "en"


def count_filler_words(text: str, language: Optional[str] = None) -> Dict[str, int]:
    """Count filler words in the transcript."""
    text_lower = text.lower()
    languages = [language] if language in FILLER_WORDS else list(FILLER_WORDS)
    counts = {}

    for lang in languages:
        for filler in FILLER_WORDS[lang]:
            pattern = r'\b' + re.escape(filler) + r'\b'
            matches = re.findall(pattern, text_lower)
            if matches:
                counts[filler] = counts.get(filler, 0) + len(matches)

    return counts


class LexiconTextAnalyzer:
    """Keyword-lexicon analyzer for Russian and English transcripts."""

    def __init__(self, language: str = "ru"):
        self.language = language

    def _languages(self) -> List[str]:
        if self.language == "auto":
            return ["ru", "en"]
        return [self.language]

    def analyze(self, text: str) -> TextAnalysis:
        """
        Analyze transcript text.

        Args:
            text: Transcript

        Returns:
            TextAnalysis with sentiment, emotions, distortions and risk keywords
        """
        lower = text.lower()
        words = [w for w in lower.split() if w]
        languages = self._languages()
        language = detect_language(text) if self.language == "auto" else self.language

        return TextAnalysis(
            text=text,
            language=language,
            word_count=len(words),
            sentiment=self._sentiment(lower, languages),
            key_phrases=[w for w in words if len(w) > 6][:5],
            text_emotions=self._emotions(lower, languages),
            cognitive_distortions=self._distortions(lower, languages),
            risk_keywords=self._risk_keywords(lower, languages),
            filler_words=count_filler_words(text, None if self.language == "auto" else self.language),
            confidence=TEXT_CONFIDENCE if words else EMPTY_TEXT_CONFIDENCE,
        )

    def _sentiment(self, lower: str, languages: List[str]) -> float:
        score = 0.0
        for lang in languages:
            score += SENTIMENT_STEP * sum(1 for w in POSITIVE_WORDS[lang] if w in lower)
            score -= SENTIMENT_STEP * sum(1 for w in NEGATIVE_WORDS[lang] if w in lower)
        return max(-1.0, min(1.0, score))

    def _emotions(self, lower: str, languages: List[str]) -> EmotionDistribution:
        counts: Dict[str, float] = {}
        for lang in languages:
            for emotion, keywords in EMOTION_KEYWORDS[lang].items():
                hits = sum(1 for kw in keywords if kw in lower)
                if hits:
                    counts[emotion] = counts.get(emotion, 0) + hits
        return EmotionDistribution.from_scores(counts)

    def _distortions(self, lower: str, languages: List[str]) -> List[CognitiveDistortion]:
        found = []
        for lang in languages:
            for distortion_type, patterns in DISTORTION_PATTERNS[lang].items():
                for pattern in patterns:
                    if pattern in lower:
                        found.append(CognitiveDistortion(type=distortion_type, phrase=pattern, confidence=0.7))
        return found

    def _risk_keywords(self, lower: str, languages: List[str]) -> List[RiskKeyword]:
        found = []
        for lang in languages:
            for category, keywords in RISK_KEYWORDS[lang].items():
                for keyword in keywords:
                    if keyword in lower:
                        found.append(RiskKeyword(
                            keyword=keyword,
                            category=category,
                            severity=RISK_SEVERITY.get(category, DEFAULT_RISK_SEVERITY),
                        ))
        return found
