"""Tests for the lexicon text analyzer."""

import pytest


class TestLexiconTextAnalyzer:
    """Tests for LexiconTextAnalyzer."""

    def test_positive_english(self):
        """Positive words raise sentiment and map to joy."""
        from voice_biomarkers.extractors.text_analysis import LexiconTextAnalyzer

        analysis = LexiconTextAnalyzer("en").analyze("I feel happy and glad today")
        assert analysis.sentiment == pytest.approx(0.4)
        assert analysis.primary_emotion == "joy"
        assert analysis.word_count == 6
        assert analysis.confidence == pytest.approx(0.7)

    def test_negative_russian(self):
        """Russian negative words lower sentiment."""
        from voice_biomarkers.extractors.text_analysis import LexiconTextAnalyzer

        analysis = LexiconTextAnalyzer("ru").analyze("Мне очень грустно")
        assert analysis.sentiment == pytest.approx(-0.2)
        assert analysis.primary_emotion == "sadness"
        assert analysis.language == "ru"

    def test_risk_keywords(self):
        """Suicidal phrases carry the highest severity."""
        from voice_biomarkers.extractors.text_analysis import LexiconTextAnalyzer

        analysis = LexiconTextAnalyzer("en").analyze("Sometimes I want to die")
        categories = {r.category: r.severity for r in analysis.risk_keywords}
        assert categories["suicidal"] == 1.0

    def test_cognitive_distortions(self):
        """Absolutist wording is tagged as black-and-white thinking."""
        from voice_biomarkers.extractors.text_analysis import LexiconTextAnalyzer

        analysis = LexiconTextAnalyzer("en").analyze("Nothing ever works, I always fail")
        assert "black_and_white" in {d.type for d in analysis.cognitive_distortions}

    def test_empty_text(self):
        """Empty text yields neutral emotion and low confidence."""
        from voice_biomarkers.extractors.text_analysis import LexiconTextAnalyzer

        analysis = LexiconTextAnalyzer("en").analyze("")
        assert analysis.sentiment == 0
        assert analysis.primary_emotion == "neutral"
        assert analysis.confidence == pytest.approx(0.1)

    def test_auto_language(self):
        """Auto mode detects Cyrillic text."""
        from voice_biomarkers.extractors.text_analysis import LexiconTextAnalyzer, detect_language

        assert detect_language("привет") == "ru"
        assert detect_language("hello") == "en"
        assert LexiconTextAnalyzer("auto").analyze("всё хорошо").language == "ru"

    def test_filler_words(self):
        """Filler words are counted on word boundaries."""
        from voice_biomarkers.extractors.text_analysis import count_filler_words

        counts = count_filler_words("Um, I think, um, it went well. Umbrella.", "en")
        assert counts["um"] == 2
        assert counts["well"] == 1
