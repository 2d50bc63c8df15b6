"""
Sentence Splitter Module

Splits an explanation into the sentences that study material is built from.
Only substantive sentences are kept; short fragments such as headings,
abbreviations and stray words are dropped.
"""

from dataclasses import dataclass
from typing import Generator, List


@dataclass
class Sentence:
    """Represents a single qualifying sentence with position information."""

    id: str  # Unique identifier (e.g., "s0003")
    text: str  # Trimmed sentence text, without the terminating period
    start_char: int  # Character offset in original text
    end_char: int  # End character offset


class SentenceSplitter:
    """
    Period-based sentence splitter.

    Fragments are cut at every "." and trimmed. A fragment qualifies as a
    sentence only when its trimmed length exceeds ``min_length``.
    """

    MIN_LENGTH = 20

    def __init__(self, min_length: int = MIN_LENGTH):
        """
        Initialize the sentence splitter.

        Args:
            min_length: Fragments of this length or shorter are discarded
        """
        self.min_length = min_length

    def split(self, text: str) -> List[Sentence]:
        """
        Split text into qualifying sentences.

        Args:
            text: Full text to split

        Returns:
            List of Sentence objects in order of appearance
        """
        sentences = []
        offset = 0

        for fragment in text.split("."):
            trimmed = fragment.strip()

            if len(trimmed) > self.min_length:
                start = offset + fragment.find(trimmed)
                sentences.append(Sentence(
                    id=f"s{len(sentences):04d}",
                    text=trimmed,
                    start_char=start,
                    end_char=start + len(trimmed),
                ))

            # Skip past the fragment and its period
            offset += len(fragment) + 1

        return sentences

    def split_iter(self, text: str) -> Generator[Sentence, None, None]:
        """Generator version of split."""
        for sentence in self.split(text):
            yield sentence


def segment(text: str, min_length: int = SentenceSplitter.MIN_LENGTH) -> List[Sentence]:
    """
    Convenience function to split text into qualifying sentences.

    Args:
        text: Text to split
        min_length: Minimum length a fragment must exceed

    Returns:
        List of Sentence objects
    """
    return SentenceSplitter(min_length).split(text)
