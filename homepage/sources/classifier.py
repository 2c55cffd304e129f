"""Keyword-based research area classification of publications."""

from typing import Dict, Iterable, List

from homepage.research_areas import AreaTaxonomy

from .data import Publication


def score_areas(title: str, venue: str, taxonomy: AreaTaxonomy) -> Dict[str, int]:
    """
    Score every area of the taxonomy against a title and venue.

    Matching is plain substring search on lower-cased text, so short
    keywords also hit inside longer words.
    """
    title = (title or "").lower()
    venue = (venue or "").lower()

    scores = {}
    for area, keywords in taxonomy.keywords.items():
        score = 0
        for keyword in keywords:
            if keyword in title:
                score += taxonomy.title_weight
            if keyword in venue:
                score += taxonomy.venue_weight
        scores[area] = score
    return scores


def classify(publication: Publication, taxonomy: AreaTaxonomy) -> List[str]:
    """
    Assign research areas to a publication.

    Args:
        publication: Publication to classify
        taxonomy: Area profile providing keywords, venue fallbacks and default

    Returns:
        Distinct area labels in taxonomy order; never empty
    """
    scores = score_areas(publication.title, publication.venue, taxonomy)
    matched = [area for area, score in scores.items() if score >= taxonomy.threshold]
    if matched:
        return matched

    venue = (publication.venue or "").lower()
    for area, venues in taxonomy.venue_fallbacks.items():
        if any(name in venue for name in venues):
            return [area]

    return [taxonomy.default_area]


def classify_publications(
    publications: Iterable[Publication],
    taxonomy: AreaTaxonomy,
) -> List[Publication]:
    """Attach area labels to each publication in place and return them as a list."""
    result = []
    for pub in publications:
        pub.areas = classify(pub, taxonomy)
        result.append(pub)
    return result
