"""Configuration management for langtutor."""

import json
import shutil
from dataclasses import dataclass, asdict

from .paths import CONFIG_FILE, ensure_state_dir, atomic_json_write

# Models offered for the API tracker backend
CLAUDE_MODELS: dict[str, dict] = {
    "claude-opus-4-6": {
        "name": "Claude Opus 4.6",
        "max_output_tokens": 32_000,
    },
    "claude-sonnet-4-5-20250929": {
        "name": "Claude Sonnet 4.5",
        "max_output_tokens": 16_384,
    },
    "claude-haiku-4-5-20251001": {
        "name": "Claude Haiku 4.5",
        "max_output_tokens": 8_192,
    },
}

TRACKER_BACKENDS = ("cli", "api")


def get_model_specs(model_id: str) -> dict:
    """Get specs for a model, with fallback defaults."""
    return CLAUDE_MODELS.get(model_id, {
        "name": model_id,
        "max_output_tokens": 8_192,
    })


@dataclass
class Config:
    """Application configuration."""

    claude_command: str = "claude"
    responder_timeout: float = 120.0
    tracker_timeout: float = 60.0
    max_message_length: int = 10_000
    tracker_backend: str = "cli"
    tracker_model: str = "claude-haiku-4-5-20251001"
    tracker_max_turns: int = 8


def load_config() -> Config:
    """Load config from disk, creating defaults if needed."""
    ensure_state_dir()

    if CONFIG_FILE.exists():
        try:
            with open(CONFIG_FILE, encoding="utf-8") as f:
                data = json.load(f)
            config = Config(
                **{k: v for k, v in data.items() if k in Config.__dataclass_fields__}
            )
            if config.tracker_backend not in TRACKER_BACKENDS:
                config.tracker_backend = "cli"
            return config
        except (json.JSONDecodeError, TypeError):
            # Back up corrupted config before overwriting with defaults
            backup_path = CONFIG_FILE.with_suffix(".json.bak")
            try:
                shutil.copy2(CONFIG_FILE, backup_path)
            except OSError:
                pass

    config = Config()
    save_config(config)
    return config


def save_config(config: Config) -> None:
    """Save config to disk."""
    ensure_state_dir()
    atomic_json_write(CONFIG_FILE, asdict(config))


def format_config_display(config: Config) -> str:
    """Format config values for display."""
    lines = ["Configuration", "=" * 50]
    for key, value in asdict(config).items():
        lines.append(f"  {key}: {value}")
    lines.append("=" * 50)
    return "\n".join(lines)
