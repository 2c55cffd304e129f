from homepage.research_areas import (
    AUTONOMOUS_AGENTS,
    COMPUTER_ARCHITECTURE,
    CORE_TAXONOMY,
    EXTENDED_TAXONOMY,
    ML_SYSTEMS,
    MOBILE_COMPUTING,
)
from homepage.sources.classifier import classify, classify_publications, score_areas
from tests.fakes import make_publication


def test_core_taxonomy_assigns_expected_areas() -> None:
    cases = [
        ("Energy-Efficient Cache Architectures for Mobile GPUs", "ISCA", [COMPUTER_ARCHITECTURE]),
        ("Federated Learning for TinyML Inference", "MLSys", [ML_SYSTEMS]),
        ("Multi-Agent Planning for Autonomous Drones", "ICRA", [AUTONOMOUS_AGENTS]),
    ]
    for title, venue, expected in cases:
        assert classify(make_publication(title, venue), CORE_TAXONOMY) == expected


def test_classification_is_not_exclusive() -> None:
    pub = make_publication("Neural Network Accelerators for Autonomous Robots", "Unknown")

    areas = classify(pub, CORE_TAXONOMY)

    assert areas == [COMPUTER_ARCHITECTURE, ML_SYSTEMS, AUTONOMOUS_AGENTS]


def test_title_match_outweighs_venue_match() -> None:
    scores = score_areas("Cache Design", "ISCA", CORE_TAXONOMY)

    assert scores[COMPUTER_ARCHITECTURE] == 3
    assert scores[AUTONOMOUS_AGENTS] == 0


def test_single_venue_keyword_is_below_threshold() -> None:
    scores = score_areas("Quantum Bits", "Planning Letters", CORE_TAXONOMY)

    assert scores[AUTONOMOUS_AGENTS] == 1
    assert classify(make_publication("Quantum Bits", "Planning Letters"), CORE_TAXONOMY) == [ML_SYSTEMS]


def test_substring_matching_is_untokenized() -> None:
    # "ai" inside "email"
    assert classify(make_publication("Email Spam Detection", "Unknown"), CORE_TAXONOMY) == [ML_SYSTEMS]


def test_venue_fallback_when_no_keyword_matches() -> None:
    pub = make_publication("Quantum Bits", "ASPLOS 2023")

    assert classify(pub, CORE_TAXONOMY) == [COMPUTER_ARCHITECTURE]


def test_default_area_when_nothing_matches() -> None:
    pub = make_publication("Quantum Bits", "Journal of Physics")

    assert classify(pub, CORE_TAXONOMY) == [CORE_TAXONOMY.default_area]


def test_classification_is_deterministic() -> None:
    pub = make_publication("Wireless Sensor Networks on Smartphones", "MobiSys")

    first = classify(pub, EXTENDED_TAXONOMY)

    assert classify(pub, EXTENDED_TAXONOMY) == first
    assert MOBILE_COMPUTING in first


def test_classify_publications_sets_areas_in_place() -> None:
    pubs = [
        make_publication("Multi-Agent Planning for Autonomous Drones", "ICRA"),
        make_publication("Quantum Bits", "Journal of Physics"),
    ]

    result = classify_publications(pubs, CORE_TAXONOMY)

    assert result == pubs
    assert pubs[0].areas == [AUTONOMOUS_AGENTS]
    assert pubs[1].areas == [ML_SYSTEMS]
