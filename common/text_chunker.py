"""
Text chunking utilities for handling large documents.

Both policies here are lossless: joining the returned chunk texts in order
gives back the input exactly.
"""
import re
from typing import List

from extraction.models import TextChunk


PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
SENTENCE_BREAK = re.compile(r"[.!?]\s+")


def _cut_after(text: str, pattern: re.Pattern) -> List[str]:
    """Cut text right after every match of pattern, keeping the separators."""
    pieces = []
    start = 0
    for match in pattern.finditer(text):
        pieces.append(text[start:match.end()])
        start = match.end()
    if start < len(text):
        pieces.append(text[start:])
    return pieces


def split_paragraphs(text: str) -> List[str]:
    """Split on blank lines; each separator stays with the paragraph before it."""
    return _cut_after(text, PARAGRAPH_BREAK)


def split_sentences(text: str) -> List[str]:
    """Split after '.', '!' or '?' followed by whitespace."""
    return _cut_after(text, SENTENCE_BREAK)


def _as_chunks(pieces: List[str]) -> List[TextChunk]:
    total = len(pieces)
    return [TextChunk(index=i, total=total, text=piece) for i, piece in enumerate(pieces)]


def split_text(text: str, max_size: int) -> List[TextChunk]:
    """
    Split text into chunks of at most max_size characters.

    Paragraphs are packed greedily into a running buffer that is flushed
    whenever the next paragraph would not fit. A paragraph that is longer than
    max_size on its own is broken into sentences which are packed the same
    way. A single sentence longer than max_size is kept whole.

    Args:
        text: Text to chunk
        max_size: Maximum characters per chunk

    Returns:
        Ordered list of TextChunk objects
    """
    if max_size <= 0:
        raise ValueError("max_size must be positive")
    if not text:
        return []

    units: List[str] = []
    for paragraph in split_paragraphs(text):
        if len(paragraph) > max_size:
            units.extend(split_sentences(paragraph))
        else:
            units.append(paragraph)

    pieces: List[str] = []
    buffer = ""
    for unit in units:
        if buffer and len(buffer) + len(unit) > max_size:
            pieces.append(buffer)
            buffer = ""
        buffer += unit
    if buffer:
        pieces.append(buffer)

    return _as_chunks(pieces)


def _find_break(text: str, start: int, end: int) -> int:
    """Return the index just past the first paragraph or sentence break in [start, end), or -1."""
    para = text.find("\n\n", start, end)
    if para != -1:
        return para + 2
    match = SENTENCE_BREAK.search(text, start, end)
    if match:
        return match.start() + 2
    return -1


def chunk_text_windows(text: str, window: int = 100_000, lookahead: int = 1_000) -> List[TextChunk]:
    """
    Chop text into fixed windows, nudging each cut forward onto a natural break.

    Every interior boundary starts at start + window and may move forward by
    up to lookahead characters to land just after a paragraph break, or
    failing that a sentence break. Without either the raw boundary is used.

    Args:
        text: Text to chunk
        window: Nominal characters per chunk
        lookahead: How far past the nominal boundary to look for a break

    Returns:
        Ordered list of TextChunk objects
    """
    if window <= 0:
        raise ValueError("window must be positive")
    if not text:
        return []

    pieces = []
    start = 0
    while start < len(text):
        end = start + window
        if end >= len(text):
            end = len(text)
        else:
            nudged = _find_break(text, end, min(end + lookahead, len(text)))
            if nudged != -1:
                end = nudged
        pieces.append(text[start:end])
        start = end

    return _as_chunks(pieces)
