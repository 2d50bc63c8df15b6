"""
Analysis Module

Turns a free-text explanation into a summary, key points,
flashcards and quiz questions.
"""

from explainer.analysis.sentence_splitter import Sentence, SentenceSplitter, segment
from explainer.analysis.synthesizer import (
    AnalysisResult,
    ContentSynthesizer,
    ValidationError,
    generate_content,
    synthesize,
)

__all__ = [
    "Sentence",
    "SentenceSplitter",
    "segment",
    "AnalysisResult",
    "ContentSynthesizer",
    "ValidationError",
    "generate_content",
    "synthesize",
]
