"""Configuration loader with Pydantic validation for MRZ module.

This module provides type-safe configuration loading from YAML files using
Pydantic models for validation and default values.
"""

from pathlib import Path
from typing import Dict, List

import yaml
from pydantic import BaseModel, Field


class NormalizerConfig(BaseModel):
    """Text normalization configuration.

    Attributes:
        confusables: OCR-confusable glyph replacements applied to the whole
            frame text after upper-casing. The fill character '<' must not be
            remapped; it is stripped later, per field.
    """

    confusables: Dict[str, str] = {"O": "0"}


class DetectionConfig(BaseModel):
    """Document type detection configuration.

    Attributes:
        passport_markers: Line prefixes that identify a TD3 passport MRZ
        id_card_markers: Line prefixes that identify a TD1/TD2 ID card MRZ
        structural_probe: Fall back to TD1/TD2 line-2 grammars when no marker
            is readable
    """

    passport_markers: List[str] = ["P<"]
    id_card_markers: List[str] = ["I<", "ID"]
    structural_probe: bool = True


class ValidationConfig(BaseModel):
    """Field validation configuration.

    Attributes:
        min_document_number_length: Minimum document number length after
            fill-character stripping, keyed by format code (TD1, TD2, TD3)
    """

    min_document_number_length: Dict[str, int] = {"TD3": 8, "TD1": 1, "TD2": 1}


class CheckDigitConfig(BaseModel):
    """ICAO 9303 check digit validation configuration.

    Attributes:
        enabled: Reject candidates whose document number, birth date or expiry
            date check digit does not match. Disabled by default, which keeps
            acceptance to structural and date-range checks only.
    """

    enabled: bool = False


class SessionConfig(BaseModel):
    """Scan session configuration.

    Attributes:
        success_delay_seconds: Delay between committing a result and notifying
            the listener, so a highlighted MRZ stays visible on screen
    """

    success_delay_seconds: float = Field(default=1.0, ge=0.0)


class EngineConfig(BaseModel):
    """Tesseract engine configuration.

    Attributes:
        psm: Tesseract page segmentation mode (6 = uniform block of text)
        oem: Tesseract OCR engine mode
        lang: Tesseract language model
        char_whitelist: Characters Tesseract may emit
    """

    psm: int = Field(default=6, ge=0, le=13)
    oem: int = Field(default=3, ge=0, le=3)
    lang: str = "eng"
    char_whitelist: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789<"


class MRZModuleConfig(BaseModel):
    """Complete MRZ module configuration.

    Attributes:
        normalizer: Text normalization configuration
        detection: Document type detection configuration
        validation: Field validation configuration
        check_digit: Check digit validation configuration
        session: Scan session configuration
        engine: Tesseract engine configuration
    """

    normalizer: NormalizerConfig = NormalizerConfig()
    detection: DetectionConfig = DetectionConfig()
    validation: ValidationConfig = ValidationConfig()
    check_digit: CheckDigitConfig = CheckDigitConfig()
    session: SessionConfig = SessionConfig()
    engine: EngineConfig = Field(default_factory=EngineConfig)


class Config(BaseModel):
    """Root configuration container.

    Attributes:
        mrz: MRZ module configuration
    """

    mrz: MRZModuleConfig = MRZModuleConfig()


def load_config(config_path: Path) -> Config:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated Config object with all settings

    Raises:
        FileNotFoundError: If config file does not exist
        yaml.YAMLError: If YAML parsing fails
        pydantic.ValidationError: If configuration validation fails

    Example:
        >>> config = load_config(Path("src/mrz/config.yaml"))
        >>> print(config.mrz.session.success_delay_seconds)
        1.0
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    # Wrap flat YAML structure in 'mrz' key for Config model
    return Config(mrz=MRZModuleConfig(**config_dict))


def get_default_config() -> Config:
    """Get default configuration from bundled config.yaml file.

    Returns:
        Config object loaded from src/mrz/config.yaml
    """
    default_config_path = Path(__file__).parent / "config.yaml"
    if default_config_path.exists():
        return load_config(default_config_path)
    else:
        # Fallback to hardcoded defaults if config file is missing
        return Config()
