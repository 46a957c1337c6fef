"""
Conversion settings.

Defaults can be overridden from the environment (a `.env` file is loaded by
the CLI) or by keyword arguments.
"""

import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

from slideshifter.models import ConversionMode


ENV_VARS = {
    "mode": "SLIDESHIFTER_MODE",
    "analyzer": "SLIDESHIFTER_ANALYZER",
    "model": "SLIDESHIFTER_MODEL",
    "zoom": "SLIDESHIFTER_ZOOM",
    "decode_timeout": "SLIDESHIFTER_DECODE_TIMEOUT",
    "output_dir": "OUTPUT_DIR",
}


class ConversionSettings(BaseModel):
    """Settings for a conversion run."""

    mode: ConversionMode = Field(
        default=ConversionMode.AI_EXTRACT, description="AI_EXTRACT or IMAGE_ONLY"
    )
    analyzer: Literal["gemini", "claude"] = Field(
        default="gemini", description="Vision analyzer backend"
    )
    model: Optional[str] = Field(default=None, description="Analyzer model override")
    zoom: float = Field(default=2.5, gt=0, description="PDF render zoom (2.5 = 180 DPI)")
    decode_timeout: float = Field(
        default=10.0, gt=0, description="Seconds allowed for decoding a page before cropping"
    )
    slide_height_inches: float = Field(default=7.5, gt=0, description="Output slide height")
    output_dir: Path = Field(default=Path("output"), description="Where output files go")

    model_config = {
        "json_schema_extra": {
            "example": {
                "mode": "AI_EXTRACT",
                "analyzer": "gemini",
                "model": None,
                "zoom": 2.5,
                "decode_timeout": 10.0,
                "slide_height_inches": 7.5,
                "output_dir": "output",
            }
        }
    }

    @classmethod
    def from_env(cls, **overrides: Any) -> "ConversionSettings":
        """
        Build settings from environment variables, then apply overrides.

        Overrides set to None are ignored so CLI flags that were not given
        fall through to the environment.
        """
        values: Dict[str, Any] = {}
        for field, var in ENV_VARS.items():
            value = os.getenv(var)
            if value:
                values[field] = value

        # Accept the short CLI spellings in the environment too
        if isinstance(values.get("mode"), str):
            values["mode"] = normalize_mode(values["mode"])

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)


def normalize_mode(value: str) -> str:
    """Map "ai"/"image" (any case) to the ConversionMode values."""
    aliases = {
        "ai": ConversionMode.AI_EXTRACT.value,
        "ai_extract": ConversionMode.AI_EXTRACT.value,
        "image": ConversionMode.IMAGE_ONLY.value,
        "image_only": ConversionMode.IMAGE_ONLY.value,
    }
    return aliases.get(value.strip().lower(), value)
