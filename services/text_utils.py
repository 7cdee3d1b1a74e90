"""
Helpers for mixed Chinese / English text: detection, spacing, truncation,
slugs and naive keyword extraction for SEO.
"""
from __future__ import annotations

import re
from collections import Counter
from typing import List

_CJK_RANGES = (
    (0x4E00, 0x9FFF),    # CJK Unified Ideographs
    (0x3400, 0x4DBF),    # Extension A
    (0x20000, 0x2A6DF),  # Extension B
    (0x2A700, 0x2B73F),  # Extension C
    (0x2B740, 0x2B81F),  # Extension D
    (0x2B820, 0x2CEAF),  # Extension E
    (0x2CEB0, 0x2EBEF),  # Extension F
    (0x30000, 0x3134F),  # Extension G
)

_CJK_PUNCT_RANGES = (
    (0x3000, 0x303F),  # CJK symbols and punctuation
    (0xFF00, 0xFFEF),  # half/full width forms
)


def is_chinese_char(char: str) -> bool:
    if not char:
        return False
    code = ord(char[0])
    return any(start <= code <= end for start, end in _CJK_RANGES)


def is_chinese_punctuation(char: str) -> bool:
    if not char:
        return False
    code = ord(char[0])
    return any(start <= code <= end for start, end in _CJK_PUNCT_RANGES)


def chinese_ratio(text: str) -> float:
    if not text:
        return 0.0
    return sum(1 for ch in text if is_chinese_char(ch)) / len(text)


def is_primarily_chinese(text: str, threshold: float = 0.3) -> bool:
    return chinese_ratio(text) >= threshold


def add_spacing_to_mixed_text(text: str) -> str:
    text = re.sub(r"([\u4e00-\u9fff])([A-Za-z0-9])", r"\1 \2", text)
    text = re.sub(r"([A-Za-z0-9])([\u4e00-\u9fff])", r"\1 \2", text)
    return re.sub(r"\s+", " ", text).strip()


def optimize_text_for_display(text: str) -> str:
    if not text:
        return text
    ratio = chinese_ratio(text)
    optimized = add_spacing_to_mixed_text(text) if 0.1 < ratio < 0.9 else text
    # no whitespace after full-width punctuation
    return re.sub(r"([，。；：？！])\s+", r"\1", optimized)


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """Cut at ``max_length`` characters, preferring a space or punctuation in the last 10."""
    if not text or len(text) <= max_length:
        return text
    break_point = max_length
    for i in range(max_length - 1, max(0, max_length - 10) - 1, -1):
        ch = text[i]
        if ch in (" ", ",", ".") or is_chinese_punctuation(ch):
            break_point = i + 1
            break
    return text[:break_point] + suffix


def display_width(text: str) -> int:
    """Chinese characters count as two columns."""
    return sum(2 if is_chinese_char(ch) else 1 for ch in text or "")


def generate_slug(text: str) -> str:
    slug = text.lower().strip()
    slug = re.sub(r"[\u3000-\u303f\uff00-\uffef]", "-", slug)
    slug = re.sub(r"[\s\W]+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def extract_chinese_keywords(text: str, max_keywords: int = 10) -> List[str]:
    """Most frequent mostly-Chinese words of two or more characters."""
    if not text:
        return []
    cleaned = re.sub(r"[^\u4e00-\u9fff\w\s]", " ", text)
    words = [w for w in cleaned.split() if len(w) >= 2 and chinese_ratio(w) > 0.5]
    return [word for word, _ in Counter(words).most_common(max_keywords)]
