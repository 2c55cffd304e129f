from datetime import datetime

from homepage.sources.bibtex import clean_bibtex_string, parse_authors, parse_bibtex
from tests.test_dblp import BIBTEX


def test_parse_bibtex_entry_fields() -> None:
    pubs = parse_bibtex(BIBTEX)
    paper = pubs[0]

    assert paper.title == "TinyML: Energy-Efficient Inference"
    assert paper.authors == ["Alice Smith", "Vijay Janapa Reddi"]
    assert paper.venue == "50th Annual International Symposium on Computer Architecture"
    assert paper.year == 2023
    assert paper.type == "inproceedings"
    assert paper.doi == "10.1145/123"
    assert paper.key == "DBLP:conf/isca/Smith23"


def test_entries_without_title_are_skipped() -> None:
    titles = [p.title for p in parse_bibtex(BIBTEX)]

    assert titles == ["TinyML: Energy-Efficient Inference", "An Undated Note"]


def test_missing_year_defaults_to_current_year() -> None:
    note = parse_bibtex(BIBTEX)[1]

    assert note.year == datetime.now().year
    assert note.type == "misc"
    assert note.venue == "Unknown"


def test_clean_bibtex_string() -> None:
    assert clean_bibtex_string("{Design}  \\& {Test}\n of {ML}") == "Design & Test of ML"


def test_parse_authors_strips_whitespace() -> None:
    assert parse_authors("A. One and\n  B. Two  and C. Three") == ["A. One", "B. Two", "C. Three"]
