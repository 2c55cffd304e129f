"""
Research area taxonomies used by the keyword classifier.

Two profiles exist and both stay available: ``core`` is the three-area
scheme shown on the publications and research pages, ``extended`` is the
seven-area scheme applied when publications are ingested into the cache.
Custom profiles can be loaded from YAML with :func:`load_taxonomy`.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple, Union

import yaml

from homepage.exceptions import ConfigurationError

COMPUTER_ARCHITECTURE = "Computer Architecture"
ML_SYSTEMS = "Machine Learning Systems"
AUTONOMOUS_AGENTS = "Autonomous Agents"
MOBILE_COMPUTING = "Mobile Computing"
SYSTEMS_SOFTWARE = "Systems & Software"
SECURITY_PRIVACY = "Security & Privacy"
NETWORKING = "Networking"


@dataclass(frozen=True)
class AreaTaxonomy:
    """Keyword table, venue fallbacks and scoring parameters for one profile."""

    name: str
    keywords: Dict[str, Tuple[str, ...]]
    venue_fallbacks: Dict[str, Tuple[str, ...]]
    default_area: str
    title_weight: int = 3
    venue_weight: int = 1
    threshold: int = 2

    @property
    def areas(self) -> List[str]:
        return list(self.keywords)


CORE_TAXONOMY = AreaTaxonomy(
    name="core",
    keywords={
        COMPUTER_ARCHITECTURE: (
            "architecture", "processor", "cpu", "gpu", "hardware", "memory", "cache",
            "accelerator", "chip", "silicon", "fpga", "asic", "microarchitecture",
            "performance", "energy", "power", "multicore", "parallel", "embedded",
            "mobile", "iot", "edge computing",
        ),
        ML_SYSTEMS: (
            "machine learning", "ml", "deep learning", "neural", "ai", "artificial intelligence",
            "tinyml", "inference", "training", "model", "benchmark", "mlperf",
            "distributed learning", "framework", "system", "edge ai", "dataset",
        ),
        AUTONOMOUS_AGENTS: (
            "autonomous", "robot", "robotics", "agent", "uav", "drone", "control",
            "navigation", "planning", "safety", "fault", "real-time", "multi-agent",
            "coordination", "decision making", "embodied", "ros",
        ),
    },
    venue_fallbacks={
        COMPUTER_ARCHITECTURE: ("isca", "micro", "hpca", "asplos", "pact", "ppopp"),
        ML_SYSTEMS: ("mlsys", "neurips", "nips", "icml", "iclr", "osdi", "sosp"),
        AUTONOMOUS_AGENTS: ("icra", "iros", "aamas", "rss", "ijcai", "aaai"),
    },
    default_area=ML_SYSTEMS,
)

EXTENDED_TAXONOMY = AreaTaxonomy(
    name="extended",
    keywords={
        ML_SYSTEMS: (
            "machine learning", "ml", "deep learning", "neural network", "tinyml", "tiny ml",
            "inference", "training", "model", "mlperf", "benchmark", "ai", "artificial intelligence",
            "federated learning", "distributed learning", "edge ai", "neural", "cnn", "rnn", "transformer",
        ),
        COMPUTER_ARCHITECTURE: (
            "architecture", "processor", "cpu", "gpu", "accelerator", "hardware", "memory",
            "cache", "pipeline", "microarchitecture", "performance", "energy", "power",
            "chip", "silicon", "fpga", "asic", "multicore", "parallel",
        ),
        AUTONOMOUS_AGENTS: (
            "autonomous", "robot", "robotics", "agent", "uav", "drone", "vehicle", "navigation",
            "control", "sensing", "perception", "planning", "ros", "operating system",
            "fault", "safety", "reliability", "real-time", "multi-agent", "coordination",
            "decision making", "embodied", "generative", "co-design", "safety-critical",
            "adaptation", "physical interaction", "runtime", "feedback loop",
        ),
        MOBILE_COMPUTING: (
            "mobile", "smartphone", "android", "ios", "wireless", "cellular", "wifi",
            "battery", "energy efficient", "low power", "embedded", "iot", "wearable",
            "sensor", "ubiquitous",
        ),
        SYSTEMS_SOFTWARE: (
            "system", "software", "operating system", "compiler", "runtime", "framework",
            "distributed", "cloud", "virtualization", "container", "scalability",
            "fault tolerance", "debugging", "testing",
        ),
        SECURITY_PRIVACY: (
            "security", "privacy", "encryption", "attack", "vulnerability", "threat",
            "authentication", "authorization", "cryptography", "secure", "protection",
        ),
        NETWORKING: (
            "network", "networking", "protocol", "communication", "internet", "tcp",
            "udp", "routing", "congestion", "bandwidth", "latency", "wireless network",
        ),
    },
    venue_fallbacks={
        COMPUTER_ARCHITECTURE: ("isca", "micro", "hpca", "asplos"),
        ML_SYSTEMS: ("mlsys", "neurips", "icml"),
        MOBILE_COMPUTING: ("mobicom", "mobisys", "sensys"),
        SYSTEMS_SOFTWARE: ("sosp", "osdi", "usenix"),
    },
    default_area=SYSTEMS_SOFTWARE,
)

TAXONOMIES: Dict[str, AreaTaxonomy] = {
    CORE_TAXONOMY.name: CORE_TAXONOMY,
    EXTENDED_TAXONOMY.name: EXTENDED_TAXONOMY,
}


def get_taxonomy(name: str) -> AreaTaxonomy:
    """Look up a built-in taxonomy profile by name."""
    try:
        return TAXONOMIES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown taxonomy '{name}'. Available: {sorted(TAXONOMIES)}"
        ) from None


def load_taxonomy(path: Union[str, Path]) -> AreaTaxonomy:
    """
    Load a taxonomy profile from a YAML file.

    Expected shape::

        name: custom
        default_area: Systems
        threshold: 2            # optional
        areas:
          Systems:
            keywords: [system, runtime]
            venues: [osdi, sosp]  # optional

    Args:
        path: Path to the YAML document

    Returns:
        AreaTaxonomy built from the document
    """
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    areas = data.get("areas")
    if not isinstance(areas, dict) or not areas:
        raise ConfigurationError(f"Taxonomy file {path} defines no areas")

    keywords = {}
    venue_fallbacks = {}
    for area, entry in areas.items():
        entry = entry or {}
        keywords[area] = tuple(str(k).lower() for k in entry.get("keywords", []))
        venues = entry.get("venues") or []
        if venues:
            venue_fallbacks[area] = tuple(str(v).lower() for v in venues)

    default_area = data.get("default_area") or next(iter(keywords))
    return AreaTaxonomy(
        name=data.get("name") or Path(path).stem,
        keywords=keywords,
        venue_fallbacks=venue_fallbacks,
        default_area=default_area,
        title_weight=int(data.get("title_weight", 3)),
        venue_weight=int(data.get("venue_weight", 1)),
        threshold=int(data.get("threshold", 2)),
    )
