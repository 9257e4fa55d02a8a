"""Service layer modules for Langotron."""

from .sentence_words import SentenceWordsResult, collect_sentence_words
from .word_ai import WordGenerator, ask_word_question, generate_example, generate_word_entry
from .word_service import WordRepository

__all__ = [
    "SentenceWordsResult",
    "WordGenerator",
    "WordRepository",
    "ask_word_question",
    "collect_sentence_words",
    "generate_example",
    "generate_word_entry",
]
