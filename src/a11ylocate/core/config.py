"""Configuration management for a11ylocate (a11ylocate.toml parsing + defaults)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from a11ylocate.errors import ConfigError

try:
    import tomllib
except ImportError:
    try:
        import tomli as tomllib  # type: ignore[no-redef]
    except ImportError:
        tomllib = None  # type: ignore[assignment]

CONFIG_FILENAME = "a11ylocate.toml"


@dataclass
class DetectionConfig:
    min_text_length: int = 3
    max_text_length: int = 100
    min_class_length: int = 5
    max_class_tokens: int = 2
    class_prefix_denylist: list[str] = field(
        default_factory=lambda: [
            "sm:",
            "md:",
            "lg:",
            "xl:",
            "2xl:",
            "hover:",
            "focus:",
            "active:",
            "group-hover:",
        ]
    )
    source_extensions: list[str] = field(
        default_factory=lambda: [".ts", ".tsx", ".js", ".jsx"]
    )
    vendor_segments: list[str] = field(
        default_factory=lambda: ["node_modules", "vendor", "bower_components"]
    )
    test_markers: list[str] = field(
        default_factory=lambda: [".test.", ".spec.", "__tests__"]
    )
    request_delay_ms: int = 200
    accept_weak_matches: bool = True

    @property
    def request_delay(self) -> float:
        """Inter-request delay in seconds."""
        return self.request_delay_ms / 1000


@dataclass
class ChangeConfig:
    branch_prefix: str = "fix/a11y"
    fallback_file_token: str = "fix"
    rule_docs_url: str = "https://dequeuniversity.com/rules/axe/4.4/"
    standards_url: str = "https://www.w3.org/WAI/WCAG21/quickref/"
    code_language: str = "html"


@dataclass
class LocalRepoConfig:
    exclude: list[str] = field(
        default_factory=lambda: [
            "node_modules/",
            ".git/",
            "dist/",
            "build/",
            "coverage/",
        ]
    )
    max_results: int = 20


@dataclass
class A11yLocateConfig:
    """Complete a11ylocate configuration."""

    detection: DetectionConfig = field(default_factory=DetectionConfig)
    change: ChangeConfig = field(default_factory=ChangeConfig)
    local: LocalRepoConfig = field(default_factory=LocalRepoConfig)


_INT_FIELDS = {
    "detection": (
        "min_text_length",
        "max_text_length",
        "min_class_length",
        "max_class_tokens",
        "request_delay_ms",
    ),
    "local": ("max_results",),
}
_LIST_FIELDS = {
    "detection": (
        "class_prefix_denylist",
        "source_extensions",
        "vendor_segments",
        "test_markers",
    ),
    "local": ("exclude",),
}
_BOOL_FIELDS = {"detection": ("accept_weak_matches",)}
_STR_FIELDS = {
    "change": (
        "branch_prefix",
        "fallback_file_token",
        "rule_docs_url",
        "standards_url",
        "code_language",
    ),
}


def load_config(project_path: Path | None = None) -> A11yLocateConfig:
    """Load configuration from a11ylocate.toml if present, otherwise return defaults."""
    config = A11yLocateConfig()

    if project_path is None:
        project_path = Path.cwd()

    config_file = project_path / CONFIG_FILENAME
    if not config_file.exists():
        return config

    if tomllib is None:
        return config

    with open(config_file, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"{config_file}: {exc}") from exc

    apply_overrides(config, data)
    return config


def apply_overrides(config: A11yLocateConfig, data: dict) -> A11yLocateConfig:
    """Apply parsed TOML sections onto ``config`` in place."""
    for section in ("detection", "change", "local"):
        values = data.get(section)
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ConfigError(f"[{section}] must be a table")
        target = getattr(config, section)

        for attr in _INT_FIELDS.get(section, ()):
            if attr in values:
                value = values[attr]
                if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                    raise ConfigError(f"{section}.{attr} must be a non-negative integer")
                setattr(target, attr, value)

        for attr in _LIST_FIELDS.get(section, ()):
            if attr in values:
                value = values[attr]
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise ConfigError(f"{section}.{attr} must be a list of strings")
                setattr(target, attr, list(value))

        for attr in _BOOL_FIELDS.get(section, ()):
            if attr in values:
                if not isinstance(values[attr], bool):
                    raise ConfigError(f"{section}.{attr} must be true or false")
                setattr(target, attr, values[attr])

        for attr in _STR_FIELDS.get(section, ()):
            if attr in values:
                if not isinstance(values[attr], str):
                    raise ConfigError(f"{section}.{attr} must be a string")
                setattr(target, attr, values[attr])

    det = config.detection
    if det.min_text_length >= det.max_text_length:
        raise ConfigError("detection.min_text_length must be below max_text_length")

    return config
