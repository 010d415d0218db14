import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "config.yml"


class ClassifierThresholds(BaseModel):
    """Per-shape distance ratios, all relative to the hand size."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    extended: float = Field(0.6, gt=0)
    # absolute, in input units: 0 only rejects a wrist on top of the middle MCP
    min_hand_size: float = Field(0.0, ge=0)

    g_margin: float = Field(0.1, ge=0)
    l_thumb_spread: float = Field(0.9, gt=0)
    x_hook: float = Field(0.2, ge=0)

    o_curve: float = Field(0.55, gt=0)
    o_touch: float = Field(0.5, gt=0)
    a_offset: float = Field(0.25, ge=0)
    knuckle_reach: float = Field(0.35, gt=0)
    rich_fist: bool = True

    f_touch: float = Field(0.45, gt=0)

    r_cross: float = Field(0.4, gt=0)
    kp_thumb_reach: float = Field(0.3, gt=0)
    v_spread: float = Field(0.5, gt=0)

    y_spread: float = Field(1.2, gt=0)

    b_tuck: float = Field(0.35, gt=0)
    c_thumb: float = Field(0.8, gt=0)
    c_curve: float = Field(0.85, gt=0)


class StabilizerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    window: int = Field(5, ge=1)
    stable_threshold: int = Field(15, ge=1)
    wave_displacement: float = Field(0.04, gt=0)
    wave_stationary_frames: int = Field(10, ge=0)
    wave_cycles: int = Field(4, ge=1)
    wave_text: str = " HELLO "


class FingerspellConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    classifier: ClassifierThresholds = ClassifierThresholds()
    stabilizer: StabilizerConfig = StabilizerConfig()


def load_config(path: Optional[Union[str, Path]] = None) -> FingerspellConfig:
    """
    Load thresholds from YAML.
    Priority:
      1) explicit path argument
      2) env HANDSPELL_CONFIG
      3) config.yml next to this file
    Missing sections fall back to the model defaults.
    """
    if path is None:
        envp = os.getenv("HANDSPELL_CONFIG", "").strip()
        path = envp or DEFAULT_CONFIG_PATH

    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return FingerspellConfig.model_validate(data)
