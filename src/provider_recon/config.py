"""Configuration loader and validation for reconciliation settings."""

from pathlib import Path
from typing import Any, Literal, Optional
import logging

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Roles a CSV column can be assigned to, in precedence order
FIELD_ROLES = ("reference", "amount", "status", "date", "description")

DEFAULT_FIELD_KEYWORDS: dict[str, list[str]] = {
    "reference": ["reference", "id"],
    "amount": ["amount"],
    "status": ["status"],
    "date": ["date"],
    "description": ["description"],
}


class InputConfig(BaseModel):
    """Configuration for input file parsing."""

    model_config = ConfigDict(validate_assignment=True)

    encoding: str = "utf-8"
    # "simple" splits on every comma; "rfc4180" honours quoted fields
    csv_mode: Literal["simple", "rfc4180"] = "simple"
    field_keywords: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_FIELD_KEYWORDS.items()}
    )

    @field_validator("field_keywords")
    @classmethod
    def _check_roles(cls, value: dict[str, list[str]]) -> dict[str, list[str]]:
        unknown = set(value) - set(FIELD_ROLES)
        if unknown:
            raise ValueError(f"Unknown field roles: {', '.join(sorted(unknown))}")
        # Keep precedence order regardless of the order keys were given in
        return {
            role: [k.lower() for k in value[role]] for role in FIELD_ROLES if role in value
        }


class MatchingConfig(BaseModel):
    """Configuration for the reconciliation engine."""

    model_config = ConfigDict(validate_assignment=True)

    amount_tolerance: float = Field(default=0.01, ge=0)
    status_case_sensitive: bool = False


class ExcelOutputConfig(BaseModel):
    """Configuration for Excel output."""

    filename_template: str = "reconciliation_report_{date}_{time}.xlsx"


class SheetConfig(BaseModel):
    """Configuration for a report sheet."""

    enabled: bool = True
    name: str


class SheetsConfig(BaseModel):
    """Configuration for all report sheets."""

    summary: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Summary"))
    matched: SheetConfig = Field(
        default_factory=lambda: SheetConfig(name="Matched Transactions")
    )
    mismatches: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Mismatches"))
    internal_only: SheetConfig = Field(
        default_factory=lambda: SheetConfig(name="Internal Only")
    )
    provider_only: SheetConfig = Field(
        default_factory=lambda: SheetConfig(name="Provider Only")
    )


class CsvExportConfig(BaseModel):
    """File names used when exporting result groups to CSV."""

    matched_filename: str = "matched_transactions.csv"
    internal_only_filename: str = "internal_only_transactions.csv"
    provider_only_filename: str = "provider_only_transactions.csv"


class OutputConfig(BaseModel):
    """Configuration for output."""

    excel: ExcelOutputConfig = Field(default_factory=ExcelOutputConfig)
    sheets: SheetsConfig = Field(default_factory=SheetsConfig)
    csv: CsvExportConfig = Field(default_factory=CsvExportConfig)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ReconConfig(BaseModel):
    """Main configuration model for reconciliation."""

    input: InputConfig = Field(default_factory=InputConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a dictionary."""
    return {
        "input": {
            "encoding": "utf-8",
            "csv_mode": "simple",
            "field_keywords": {k: list(v) for k, v in DEFAULT_FIELD_KEYWORDS.items()},
        },
        "matching": {
            "amount_tolerance": 0.01,
            "status_case_sensitive": False,
        },
        "output": {
            "excel": {
                "filename_template": "reconciliation_report_{date}_{time}.xlsx",
            },
            "sheets": {
                "summary": {"enabled": True, "name": "Summary"},
                "matched": {"enabled": True, "name": "Matched Transactions"},
                "mismatches": {"enabled": True, "name": "Mismatches"},
                "internal_only": {"enabled": True, "name": "Internal Only"},
                "provider_only": {"enabled": True, "name": "Provider Only"},
            },
            "csv": {
                "matched_filename": "matched_transactions.csv",
                "internal_only_filename": "internal_only_transactions.csv",
                "provider_only_filename": "provider_only_transactions.csv",
            },
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    }


def load_config(config_path: Optional[Path] = None) -> ReconConfig:
    """
    Load configuration from a YAML file or use defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        ReconConfig object with loaded or default settings

    Raises:
        ConfigurationError: If the file cannot be read or holds invalid values
    """
    config_dict = get_default_config()

    if config_path and config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        try:
            with open(config_path, "r") as f:
                user_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {config_path}"
            )

        # Deep merge user config into defaults
        config_dict = _deep_merge(config_dict, user_config)
        config_dict["config_file_path"] = str(config_path)
    else:
        logger.info("Using default configuration")

    try:
        return ReconConfig(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary to merge on top

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def generate_default_config(output_path: Path) -> None:
    """
    Generate a default configuration file.

    Args:
        output_path: Path to write the configuration file
    """
    config_dict = get_default_config()

    yaml_content = """# Internal export / provider statement reconciliation configuration
# Generated configuration file - customize as needed

"""
    yaml_content += yaml.dump(config_dict, default_flow_style=False, sort_keys=False)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
