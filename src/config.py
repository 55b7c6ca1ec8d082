"""Unified configuration loaded from .meridian.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".meridian.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "meridian" / "config.toml"

# Route of the speech proxy on the Meridian server.
SPEECH_PATH = "/api/tts"


class SiteConfig(BaseModel):
    """[site] section."""

    entries_dir: str = "data/entries"
    output_dir: str = "site"
    name: str = "Meridian"
    tagline: str = "A diary of the AI mind"


class SpeechConfig(BaseModel):
    """[speech] section — ElevenLabs voice and the proxy endpoint."""

    api_url: str = "https://api.elevenlabs.io/v1"
    api_key: str = ""
    voice_id: str = "RTFg9niKcgGLDwa3RFlz"
    model_id: str = "eleven_multilingual_v2"
    stability: float = 0.6
    similarity_boost: float = 0.8
    style: float = 0.15
    use_speaker_boost: bool = True
    max_chars: int = 15000
    timeout: int = 60
    endpoint_url: str = f"http://127.0.0.1:8000{SPEECH_PATH}"

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


class GenerateConfig(BaseModel):
    """[generate] section."""

    model: str | None = None
    max_tokens: int = 4096
    timeout: int = 300


class ServerConfig(BaseModel):
    """[server] section."""

    host: str = "127.0.0.1"
    port: int = 8000


class MeridianConfig(BaseModel):
    """Top-level configuration for the site, speech proxy and generator."""

    site: SiteConfig = Field(default_factory=SiteConfig)
    speech: SpeechConfig = Field(default_factory=SpeechConfig)
    generate: GenerateConfig = Field(default_factory=GenerateConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @property
    def entries_path(self) -> Path:
        return Path(self.site.entries_dir)

    @property
    def output_path(self) -> Path:
        return Path(self.site.output_dir)


def load_config(path: str | Path | None = None) -> MeridianConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .meridian.toml in CWD
    3. ~/.config/meridian/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged MeridianConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG_PATH.exists():
            data = _load_toml(GLOBAL_CONFIG_PATH)
            logger.info("Loaded config from %s", GLOBAL_CONFIG_PATH)

    config = MeridianConfig.model_validate(data) if data else MeridianConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: MeridianConfig, **cli_kwargs: object) -> MeridianConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "entries_dir": ("site", "entries_dir"),
        "output_dir": ("site", "output_dir"),
        "model": ("generate", "model"),
        "host": ("server", "host"),
        "port": ("server", "port"),
        "speech_url": ("speech", "endpoint_url"),
    }

    for key, value in cli_kwargs.items():
        if value is None or key not in mapping:
            continue
        section, field = mapping[key]
        data[section][field] = str(value) if isinstance(value, Path) else value

    return MeridianConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: MeridianConfig) -> MeridianConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "MERIDIAN_ENTRIES_DIR": ("site", "entries_dir"),
        "MERIDIAN_OUTPUT_DIR": ("site", "output_dir"),
        "MERIDIAN_MODEL": ("generate", "model"),
        "MERIDIAN_SPEECH_URL": ("speech", "endpoint_url"),
        "MERIDIAN_HOST": ("server", "host"),
        "ELEVENLABS_API_KEY": ("speech", "api_key"),
        "ELEVENLABS_VOICE_ID": ("speech", "voice_id"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    port_raw = os.environ.get("MERIDIAN_PORT")
    if port_raw is not None:
        try:
            data["server"]["port"] = int(port_raw)
        except ValueError:
            logger.warning("Ignoring non-numeric MERIDIAN_PORT: %r", port_raw)

    return MeridianConfig.model_validate(data)
