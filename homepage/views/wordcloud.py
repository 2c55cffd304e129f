"""
Word cloud data from publication titles.

Layout is left to the browser-side renderer; this module produces the
weighted word list plus the color, size and rotation settings of the
selected template.
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from homepage.exceptions import ConfigurationError
from homepage.sources.data import Publication

MAX_WORDS = 150
MIN_WORD_LENGTH = 3

WORD_SPLIT_PATTERN = re.compile(r"\W+")
NUMERIC_PATTERN = re.compile(r"^\d+$")

STOPWORDS = frozenset(
    """
    a about above after again against all am an and any are as at be because been
    before being below between both but by can could did do does doing down during
    each few for from further had has have having he her here hers herself him
    himself his how i if in into is it its itself just me more most my myself no nor
    not now of off on once only or other our ours ourselves out over own same she
    should so some such than that the their theirs them themselves then there these
    they this those through to too under until up upon us very via was we were what
    when where which while who whom why will with would you your yours yourself
    yourselves also using use used towards toward across within without among
    """.split()
)

# Font family, grid and shape shared by every template
BASE_LAYOUT = {
    "gridSize": 12,
    "fontFamily": 'Inter, -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif',
    "rotationSteps": 2,
    "backgroundColor": "transparent",
    "shape": "circle",
    "ellipticity": 0.8,
}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _hsl(hue: float, saturation: float, lightness: float) -> str:
    return f"hsl({hue:g}, {saturation:g}%, {lightness:g}%)"


@dataclass(frozen=True)
class WordCloudTemplate:
    """Styling callbacks for one word cloud look.

    Both callbacks receive the word frequency normalized by the most
    frequent word, in (0, 1].
    """

    name: str
    color: Callable[[float], str]
    font_size: Callable[[float], float]
    rotate_ratio: float

    def layout_options(self) -> Dict[str, Any]:
        return dict(BASE_LAYOUT, rotateRatio=self.rotate_ratio)


TEMPLATES = {
    t.name: t
    for t in (
        WordCloudTemplate(
            name="harvard",
            color=lambda n: _hsl(0, 70 + n * 20, 60 - n * 30),
            font_size=lambda n: _clamp(14 + n * 46, 14, 60),
            rotate_ratio=0.3,
        ),
        WordCloudTemplate(
            name="modern",
            color=lambda n: _hsl(220 + n * 40, 60 + n * 30, 50 - n * 20),
            font_size=lambda n: _clamp(12 + n * 60, 12, 72),
            rotate_ratio=0.5,
        ),
        WordCloudTemplate(
            name="academic",
            color=lambda n: _hsl(45, 80 + n * 20, 55 - n * 25),
            font_size=lambda n: _clamp(16 + n * 40, 16, 56),
            rotate_ratio=0.1,
        ),
        WordCloudTemplate(
            name="minimal",
            color=lambda n: _hsl(0, 0, 20 + n * 60),
            font_size=lambda n: _clamp(10 + n * 38, 10, 48),
            rotate_ratio=0.0,
        ),
        # Hot to cold: the most frequent words are red, the rarest blue
        WordCloudTemplate(
            name="rainbow",
            color=lambda n: _hsl(240 - n * 240, 60 + n * 20, 45 + n * 15),
            font_size=lambda n: _clamp(12 + n * 56, 12, 68),
            rotate_ratio=0.4,
        ),
        WordCloudTemplate(
            name="sunset",
            color=lambda n: _hsl(n * 60, 85 + n * 15, 55 + n * 15),
            font_size=lambda n: _clamp(14 + n * 50, 14, 64),
            rotate_ratio=0.2,
        ),
        WordCloudTemplate(
            name="ocean",
            color=lambda n: _hsl(200 + n * 40, 70 + n * 30, 40 + n * 30),
            font_size=lambda n: _clamp(13 + n * 49, 13, 62),
            rotate_ratio=0.3,
        ),
        WordCloudTemplate(
            name="forest",
            color=lambda n: _hsl(120 + n * 40, 75 + n * 25, 35 + n * 35),
            font_size=lambda n: _clamp(15 + n * 43, 15, 58),
            rotate_ratio=0.25,
        ),
    )
}

DEFAULT_TEMPLATE = "harvard"


def get_template(name: str) -> WordCloudTemplate:
    try:
        return TEMPLATES[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown word cloud template '{name}'. Available: {', '.join(TEMPLATES)}"
        ) from None


def tokenize_title(title: str) -> List[str]:
    """Lower-cased title words without stopwords, short tokens or numbers."""
    return [
        word
        for word in WORD_SPLIT_PATTERN.split(title.lower())
        if len(word) >= MIN_WORD_LENGTH
        and word not in STOPWORDS
        and not NUMERIC_PATTERN.match(word)
    ]


def word_frequencies(
    publications: Iterable[Publication],
    area: Optional[str] = None,
    limit: int = MAX_WORDS,
) -> List[Tuple[str, int]]:
    """
    Count title words across publications.

    Args:
        publications: Classified publications
        area: Only count publications labelled with this area; None or "All" counts all
        limit: Maximum number of words returned

    Returns:
        (word, count) pairs, most frequent first
    """
    counter = Counter()
    for pub in publications:
        if area and area != "All" and area not in pub.areas:
            continue
        if not pub.title:
            continue
        counter.update(tokenize_title(pub.title))
    return counter.most_common(limit)


def build_word_cloud(
    publications: Iterable[Publication],
    template: str = DEFAULT_TEMPLATE,
    area: Optional[str] = None,
    limit: int = MAX_WORDS,
) -> Dict[str, Any]:
    """Weighted, styled word list for the word cloud renderer."""
    style = get_template(template)
    frequencies = word_frequencies(publications, area=area, limit=limit)
    max_count = frequencies[0][1] if frequencies else 1

    words = []
    for text, count in frequencies:
        normalized = count / max_count
        words.append(
            {
                "text": text,
                "count": count,
                "font_size": style.font_size(normalized),
                "color": style.color(normalized),
            }
        )

    return {
        "template": style.name,
        "area": area or "All",
        "words": words,
        "options": style.layout_options(),
    }
