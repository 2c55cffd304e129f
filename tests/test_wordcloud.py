import pytest

from homepage.exceptions import ConfigurationError
from homepage.views.wordcloud import TEMPLATES, build_word_cloud, tokenize_title, word_frequencies
from tests.fakes import make_publication


def sample_publications():
    return [
        make_publication("Efficient Inference on Microcontrollers", areas=["Machine Learning Systems"]),
        make_publication("Efficient TinyML Inference 2023", areas=["Machine Learning Systems"]),
        make_publication("The AI of Robots", areas=["Autonomous Agents"]),
    ]


def test_tokenize_title_drops_stopwords_short_and_numeric_tokens() -> None:
    assert tokenize_title("The AI of Robots: 2023 Edition") == ["robots", "edition"]


def test_word_frequencies_most_common_first() -> None:
    assert word_frequencies(sample_publications()) == [
        ("efficient", 2),
        ("inference", 2),
        ("microcontrollers", 1),
        ("tinyml", 1),
        ("robots", 1),
    ]


def test_word_frequencies_by_area_and_limit() -> None:
    pubs = sample_publications()

    assert word_frequencies(pubs, area="Autonomous Agents") == [("robots", 1)]
    assert len(word_frequencies(pubs, area="All", limit=2)) == 2


def test_build_word_cloud_styles_words() -> None:
    cloud = build_word_cloud(sample_publications(), template="harvard")

    top = cloud["words"][0]
    assert top == {"text": "efficient", "count": 2, "font_size": 60, "color": "hsl(0, 90%, 30%)"}
    assert cloud["words"][-1]["font_size"] == 37
    assert cloud["options"]["rotateRatio"] == 0.3
    assert cloud["options"]["gridSize"] == 12
    assert cloud["options"]["shape"] == "circle"


def test_all_templates_available() -> None:
    assert sorted(TEMPLATES) == sorted(
        ["harvard", "modern", "academic", "minimal", "rainbow", "sunset", "ocean", "forest"]
    )
    assert TEMPLATES["minimal"].layout_options()["rotateRatio"] == 0.0
    assert TEMPLATES["rainbow"].color(1.0) == "hsl(0, 80%, 60%)"


def test_unknown_template_raises() -> None:
    with pytest.raises(ConfigurationError):
        build_word_cloud(sample_publications(), template="neon")


def test_empty_publications_give_empty_cloud() -> None:
    assert build_word_cloud([])["words"] == []
