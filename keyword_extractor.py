"""
Keyword and skill extraction from free text (job descriptions, bullets).
"""

import re
from collections import Counter
from typing import FrozenSet, Iterable, List, Optional

from skill_taxonomy import (
    BENEFIT_KEYWORDS,
    GAP_STOP_WORDS,
    SKILL_DISPLAY_NAMES,
    SKILL_PATTERNS,
    SPECIAL_SKILL_NAMES,
)

# ASCII word characters only, so accented letters split words apart
_NON_WORD = re.compile(r'[^\w\s]', re.ASCII)
_BULLET_LINE = re.compile(r'(?:^|\n)\s*(?:[-•*]|\d+\.)\s*([^\n]+)')
_TITLE_SPLIT = re.compile(r'[\s-]+')

_SALARY_PATTERNS = (
    (re.compile(r'\$\s*(\d{1,3}(?:,\d{3})*(?:\.\d{2})?)\s*(?:/\s*(?:yr\.?|year)|per year|annually)?'
               r'\s*(?:to|-)\s*\$?\s*(\d{1,3}(?:,\d{3})*(?:\.\d{2})?)\s*(?:/\s*(?:yr\.?|year)|per year|annually)?',
               re.IGNORECASE), ''),
    (re.compile(r'\$\s*(\d+)k\s*(?:to|-)\s*\$?\s*(\d+)k', re.IGNORECASE), 'k'),
    (re.compile(r'\$\s*(\d{1,3}(?:,\d{3})*(?:\.\d{2})?)\s*(?:/\s*(?:yr\.?|year)|per year|annually)', re.IGNORECASE), ''),
    (re.compile(r'\$\s*(\d+)k', re.IGNORECASE), 'k'),
)


def _whole_word(pattern: str) -> re.Pattern:
    # Lookarounds instead of \b so symbol-edged skills (c#, .net, c++) still match
    return re.compile(rf'(?<!\w){pattern}(?!\w)', re.IGNORECASE)


_COMPILED_SKILL_PATTERNS = tuple(
    _whole_word(pattern) for patterns in SKILL_PATTERNS.values() for pattern in patterns
)


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def extract_keywords(text: str, limit: int = 20, min_length: int = 5,
                     stop_words: FrozenSet[str] = GAP_STOP_WORDS) -> List[str]:
    """Most frequent words of at least min_length characters, stop words removed."""
    words = _NON_WORD.sub(' ', (text or '').lower()).split()
    counts = Counter(word for word in words if len(word) >= min_length and word not in stop_words)
    return [word for word, _ in counts.most_common(limit)]


def normalize_skill_name(raw: str) -> str:
    """Canonical display name for a matched skill."""
    normalized = raw.replace('.', '').replace('\\', '').strip().lower()
    if normalized in SPECIAL_SKILL_NAMES:
        return SPECIAL_SKILL_NAMES[normalized]
    if normalized in SKILL_DISPLAY_NAMES:
        return SKILL_DISPLAY_NAMES[normalized]
    return ' '.join(word[:1].upper() + word[1:] for word in _TITLE_SPLIT.split(normalized) if word)


def extract_skills(text: str) -> List[str]:
    """Skills from the fixed taxonomy found in the text, first-seen order."""
    text_lower = (text or '').lower()
    found = []
    for pattern in _COMPILED_SKILL_PATTERNS:
        match = pattern.search(text_lower)
        if match:
            found.append(normalize_skill_name(match.group(0)))
    return _dedupe(found)


def extract_responsibilities(text: str, limit: Optional[int] = None) -> List[str]:
    """Bulleted lines of a job description that read like responsibilities."""
    responsibilities = []
    for match in _BULLET_LINE.finditer(text or ''):
        resp = match.group(1).strip()
        if 20 < len(resp) < 200:
            responsibilities.append(resp)
    return responsibilities[:limit] if limit is not None else responsibilities


def extract_benefits(text: str) -> List[str]:
    text_lower = (text or '').lower()
    benefits = [
        ' '.join(word[:1].upper() + word[1:] for word in keyword.split(' '))
        for keyword in BENEFIT_KEYWORDS if keyword in text_lower
    ]
    return _dedupe(benefits) or ['Benefits package available']


def extract_pay_range(text: str) -> str:
    for pattern, unit in _SALARY_PATTERNS:
        match = pattern.search(text or '')
        if not match:
            continue
        values = [re.sub(r'\.00$', '', g) + unit for g in match.groups() if g]
        if len(values) == 2:
            return f'${values[0]} - ${values[1]} per year'
        return f'${values[0]} per year'
    return 'Compensation not specified'
