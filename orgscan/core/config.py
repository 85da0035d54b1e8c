"""
Configuration management for the organization summary engine.

Settings are grouped per concern (aggregation, relationship detection,
reporting) and can come from a JSON file written by ``orgscan init`` or
from ``ORGSCAN_*`` environment variables, optionally kept in a .env file.
"""

import os
import json
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from dotenv import load_dotenv


@dataclass
class AggregationConfig:
    """Configuration for language and topic aggregation."""

    # Number of languages kept in the language aggregate
    top_languages: int = 20


@dataclass
class RelationshipConfig:
    """Configuration for relationship detection."""

    # Edges need a strength strictly above these bounds
    topic_similarity_threshold: float = 0.3
    contributor_overlap_threshold: float = 0.2

    # Only compare pairs sharing at least one topic or login
    use_candidate_index: bool = True

    dependency_classification: str = "runtime"


@dataclass
class ReportConfig:
    """Limits applied by the markdown digest."""

    top_languages: int = 10
    top_topics: int = 15
    min_reported_cluster_size: int = 3


SECTIONS = {
    "aggregation": AggregationConfig,
    "relationships": RelationshipConfig,
    "report": ReportConfig,
}


@dataclass
class PipelineConfig:
    """Master configuration combining all section configurations."""

    aggregation: AggregationConfig = field(default_factory=AggregationConfig)
    relationships: RelationshipConfig = field(default_factory=RelationshipConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    verbose: bool = False

    # Directory receiving reports when no output path is given
    output_dir: str = "."

    def copy(self) -> "PipelineConfig":
        """Independent copy; changing it leaves this configuration untouched."""
        return replace(
            self,
            aggregation=replace(self.aggregation),
            relationships=replace(self.relationships),
            report=replace(self.report),
        )

    def validate(self) -> None:
        """
        Check value ranges.

        Raises:
            ValueError: On a threshold outside [0, 1) or a non-positive limit.
        """
        for name in ("topic_similarity_threshold", "contributor_overlap_threshold"):
            value = getattr(self.relationships, name)
            if not 0.0 <= value < 1.0:
                raise ValueError(f"relationships.{name} must be in [0, 1), got {value}")

        limits = {
            "aggregation.top_languages": self.aggregation.top_languages,
            "report.top_languages": self.report.top_languages,
            "report.top_topics": self.report.top_topics,
            "report.min_reported_cluster_size": self.report.min_reported_cluster_size,
        }
        for name, value in limits.items():
            if value < 1:
                raise ValueError(f"{name} must be at least 1, got {value}")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


# variable -> (section or None for top level, attribute, parser)
ENV_OVERRIDES: Dict[str, Tuple[Optional[str], str, Callable[[str], Any]]] = {
    "ORGSCAN_TOP_LANGUAGES": ("aggregation", "top_languages", int),
    "ORGSCAN_TOPIC_THRESHOLD": ("relationships", "topic_similarity_threshold", float),
    "ORGSCAN_CONTRIBUTOR_THRESHOLD": ("relationships", "contributor_overlap_threshold", float),
    "ORGSCAN_CANDIDATE_INDEX": ("relationships", "use_candidate_index", _parse_bool),
    "ORGSCAN_OUTPUT_DIR": (None, "output_dir", str),
    "ORGSCAN_VERBOSE": (None, "verbose", _parse_bool),
}


class Config:
    """
    Process-wide holder of the active PipelineConfig.

    Components that receive no explicit configuration fall back to
    ``Config.get()``.
    """

    _instance: Optional["Config"] = None
    _config: PipelineConfig = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._config = PipelineConfig()
        return cls._instance

    @classmethod
    def get(cls) -> PipelineConfig:
        """Get the active configuration."""
        return cls()._config

    @classmethod
    def reset(cls) -> PipelineConfig:
        """Restore the default configuration."""
        return cls._activate(PipelineConfig())

    @classmethod
    def _activate(cls, config: PipelineConfig) -> PipelineConfig:
        config.validate()
        cls()._config = config
        return config

    @classmethod
    def load_from_file(cls, config_path: str) -> PipelineConfig:
        """
        Load and activate a JSON configuration file.

        Sections missing from the file keep their defaults.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: On an unknown setting or an out-of-range value.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r") as f:
            data = json.load(f)

        return cls._activate(cls._dict_to_config(data))

    @classmethod
    def load_from_env(cls, dotenv_path: Optional[str] = None) -> PipelineConfig:
        """
        Apply ``ORGSCAN_*`` environment overrides and activate the result.

        A .env file is read first; variables already set in the
        environment take precedence over it.

        Args:
            dotenv_path: Optional explicit path to a .env file.

        Raises:
            ValueError: If a variable does not parse or is out of range;
                the active configuration is left unchanged.
        """
        load_dotenv(dotenv_path)

        config = cls.get().copy()
        for variable, (section, attribute, parse) in ENV_OVERRIDES.items():
            raw = os.getenv(variable)
            if not raw:
                continue
            target = getattr(config, section) if section else config
            setattr(target, attribute, parse(raw))

        return cls._activate(config)

    @staticmethod
    def _dict_to_config(data: dict) -> PipelineConfig:
        config = PipelineConfig()

        for section, section_cls in SECTIONS.items():
            values = data.get(section)
            if values is None:
                continue
            known = {f.name for f in fields(section_cls)}
            unknown = sorted(set(values) - known)
            if unknown:
                raise ValueError(f"Unknown {section} settings: {', '.join(unknown)}")
            setattr(config, section, section_cls(**values))

        if "verbose" in data:
            config.verbose = bool(data["verbose"])
        if "output_dir" in data:
            config.output_dir = data["output_dir"]

        return config

    @classmethod
    def save_to_file(cls, config_path: str) -> None:
        """Write the active configuration as JSON."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            json.dump(asdict(cls.get()), f, indent=2)
