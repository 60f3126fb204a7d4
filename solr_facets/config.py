"""Configuration for the Solr backend and for facet definitions."""

import json
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from solr_facets.exceptions import ConfigurationError

QUERY_OPERATORS = ("and", "or")
EMPTY_BEHAVIORS = ("none", "text")


def _validation_message(error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into a single message."""
    messages = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        message = err.get("msg", "")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)


def _load_json(config_path: str) -> Any:
    """Read a JSON configuration file, mapping failures to ConfigurationError."""
    try:
        with open(config_path) as f:
            return json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Configuration file not found: {config_path}")
    except json.JSONDecodeError:
        raise ConfigurationError(f"Invalid JSON in configuration file: {config_path}")
    except Exception as e:
        raise ConfigurationError(f"Failed to load config: {str(e)}")


class _ConfigModel(BaseModel):
    """Base model raising ConfigurationError instead of ValidationError."""

    model_config = ConfigDict(extra="ignore")

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(_validation_message(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()


class SolrConfig(_ConfigModel):
    """Connection settings for the Solr backend."""

    solr_base_url: str = ""
    default_collection: Optional[str] = None
    connection_timeout: int = 10

    @model_validator(mode="before")
    @classmethod
    def check_required(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("solr_base_url"):
            raise ConfigurationError("solr_base_url is required")
        return data

    @field_validator("solr_base_url")
    @classmethod
    def validate_solr_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ConfigurationError("Solr base URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("connection_timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ConfigurationError("connection_timeout must be positive")
        return v

    @classmethod
    def load(cls, config_path: str) -> "SolrConfig":
        """Load configuration from a JSON file.

        Args:
            config_path: Path to the JSON file

        Returns:
            Loaded configuration

        Raises:
            ConfigurationError: If the file is missing, malformed or invalid
        """
        config_dict = _load_json(config_path)
        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"Configuration file must contain an object: {config_path}")
        return cls(**config_dict)


class ProcessorSettings(_ConfigModel):
    """Per-facet configuration of one processor."""

    processor_id: str
    weights: Dict[str, int] = {}
    settings: Dict[str, Any] = {}


class WidgetSettings(_ConfigModel):
    """Widget choice of a facet and its settings."""

    type: str = "links"
    config: Dict[str, Any] = {}


class FacetConfig(_ConfigModel):
    """Persisted definition of a facet."""

    id: str
    name: str = ""
    description: str = ""
    field_identifier: str
    facet_source_id: str
    url_alias: Optional[str] = None
    widget: WidgetSettings = Field(default_factory=WidgetSettings)
    query_type_name: Optional[str] = None
    processor_configs: Dict[str, ProcessorSettings] = {}
    empty_behavior: Dict[str, Any] = {"behavior": "none"}
    only_visible_when_facet_source_is_visible: bool = False
    query_operator: str = "and"
    hard_limit: int = 0
    min_count: int = 1
    exclude: bool = False

    @model_validator(mode="before")
    @classmethod
    def fill_processor_ids(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("processor_configs"), dict):
            configs = {}
            for processor_id, settings in data["processor_configs"].items():
                if isinstance(settings, dict):
                    settings = {"processor_id": processor_id, **settings}
                configs[processor_id] = settings
            data = {**data, "processor_configs": configs}
        return data

    @field_validator("query_operator")
    @classmethod
    def validate_operator(cls, v: str) -> str:
        operator = v.lower()
        if operator not in QUERY_OPERATORS:
            raise ConfigurationError(f"query_operator must be one of {', '.join(QUERY_OPERATORS)}")
        return operator

    @field_validator("hard_limit", "min_count")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ConfigurationError("hard_limit and min_count must not be negative")
        return v

    @field_validator("empty_behavior")
    @classmethod
    def validate_empty_behavior(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        if v.get("behavior", "none") not in EMPTY_BEHAVIORS:
            raise ConfigurationError(f"Unknown empty behavior: {v.get('behavior')}")
        return v


def load_facet_configs(config_path: str) -> List[FacetConfig]:
    """Load facet definitions from a JSON file.

    The file holds either a list of facet definitions or an object with a
    "facets" list.

    Raises:
        ConfigurationError: If the file is missing, malformed or invalid
    """
    data = _load_json(config_path)
    if isinstance(data, dict):
        data = data.get("facets", [])
    if not isinstance(data, list):
        raise ConfigurationError(f"No facet definitions found in {config_path}")
    return [FacetConfig(**definition) for definition in data]


def collect_processor_settings(
    processors: Mapping[str, Any],
    values: Mapping[str, Mapping[str, Any]]
) -> Dict[str, ProcessorSettings]:
    """Turn submitted processor values into a facet's processor_configs.

    Args:
        processors: All loaded processors keyed by id
        values: Submitted values keyed by processor id, each with "status",
            "weights" and "settings"

    Returns:
        Settings of the enabled processors, ordered by processor id
    """
    new_settings = {}
    for processor_id, processor in processors.items():
        processor_values = values.get(processor_id, {})
        if not processor_values.get("status") and not processor.locked:
            continue
        new_settings[processor_id] = ProcessorSettings(
            processor_id=processor_id,
            weights=dict(processor_values.get("weights") or {}),
            settings=dict(processor_values.get("settings") or {}),
        )
    return dict(sorted(new_settings.items()))
