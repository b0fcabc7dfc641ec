"""
Configuration loading, validation, and typed models.

Supports:
  - YAML config file (optional; built-in defaults apply without one)
  - Environment variable override for the signing secret (JWT_INSPECT_SECRET)
  - CLI argument merging via merge_cli_overrides()
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

from .analysis import DEFAULT_MAX_LIFETIME_SECONDS, DEFAULT_SENSITIVE_CLAIMS, AnalysisPolicy
from .models import SUPPORTED_ALGORITHMS

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "PROJECT_ROOT",
    "ENV_SECRET",
    "REPORT_FORMATS",
    "ConfigError",
    "PolicyConfig",
    "SigningConfig",
    "ReportConfig",
    "AppConfig",
    "load_config",
    "merge_cli_overrides",
]

logger = logging.getLogger(__name__)

# Default config path, relative to the project root (two levels up from this file)
DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
    "config",
    "config.yaml",
)

# Project root directory
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

ENV_SECRET = "JWT_INSPECT_SECRET"

REPORT_FORMATS = ("text", "json", "markdown")


# ---------------------------------------------------------------------------
# Typed configuration models
# ---------------------------------------------------------------------------

class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


@dataclass(frozen=True)
class PolicyConfig:
    max_lifetime_seconds: int = DEFAULT_MAX_LIFETIME_SECONDS
    sensitive_claims: tuple[str, ...] = tuple(sorted(DEFAULT_SENSITIVE_CLAIMS))

    def to_policy(self) -> AnalysisPolicy:
        return AnalysisPolicy.build(self.max_lifetime_seconds, self.sensitive_claims)


@dataclass(frozen=True)
class SigningConfig:
    algorithm: str = "HS256"
    secret: str = ""

    def __repr__(self) -> str:
        """Redact the secret in repr to prevent accidental logging."""
        shown = "'***redacted***'" if self.secret else "''"
        return f"SigningConfig(algorithm={self.algorithm!r}, secret={shown})"


@dataclass(frozen=True)
class ReportConfig:
    output_dir: str = "reports"
    format: str = "text"


@dataclass(frozen=True)
class AppConfig:
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    signing: SigningConfig = field(default_factory=SigningConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    log_file: str = ""
    verbose: bool = False


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

_PLACEHOLDER_VALUES = frozenset({
    "your-signing-secret",
    "REPLACE_WITH_YOUR_SECRET",
    "change-me",
})


def _section(raw: dict, name: str) -> dict:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(section).__name__}")
    return section


def _check_secret(secret: str, source: str) -> str:
    if secret in _PLACEHOLDER_VALUES or secret.startswith("your-"):
        raise ConfigError(
            f"Placeholder signing secret in {source}. "
            f"Set '{ENV_SECRET}' env var or 'signing.secret' in config."
        )
    return secret


def _parse_policy(section: dict) -> PolicyConfig:
    hours = section.get("max_lifetime_hours")
    if hours is None:
        max_lifetime = DEFAULT_MAX_LIFETIME_SECONDS
    else:
        try:
            max_lifetime = int(float(hours) * 3600)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"policy.max_lifetime_hours must be a number, got {hours!r}") from e
        if max_lifetime <= 0:
            raise ConfigError("policy.max_lifetime_hours must be positive")

    claims = section.get("sensitive_claims")
    if claims is None:
        claims = sorted(DEFAULT_SENSITIVE_CLAIMS)
    if not isinstance(claims, list) or not all(isinstance(c, str) for c in claims):
        raise ConfigError("policy.sensitive_claims must be a list of strings")

    return PolicyConfig(
        max_lifetime_seconds=max_lifetime,
        sensitive_claims=tuple(c.lower() for c in claims),
    )


def load_config(config_path: str = DEFAULT_CONFIG_PATH, required: bool = False) -> AppConfig:
    """Load and validate the YAML configuration file.

    The ``JWT_INSPECT_SECRET`` environment variable takes precedence over
    ``signing.secret`` in the file. Without a file, defaults are used unless
    *required* is set (an explicit ``--config`` path).

    Raises:
        ConfigError: If the file is missing (when required) or invalid.
    """
    path = Path(config_path)
    raw: dict = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(
                f"Invalid config file format: expected YAML mapping, got {type(loaded).__name__}"
            )
        raw = loaded
    elif required:
        raise ConfigError(
            f"Config file not found: {config_path}\n"
            "Copy config/config.yaml.example to config/config.yaml and adjust it."
        )
    else:
        logger.debug("No config file at %s, using defaults", config_path)

    policy = _parse_policy(_section(raw, "policy"))

    # --- Signing (env var > YAML) ---
    signing_section = _section(raw, "signing")
    algorithm = signing_section.get("algorithm", "HS256") or "HS256"
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ConfigError(
            f"Invalid signing.algorithm: {algorithm!r}. "
            f"Expected one of: {', '.join(SUPPORTED_ALGORITHMS)}."
        )
    env_secret = os.environ.get(ENV_SECRET)
    if env_secret:
        secret = _check_secret(env_secret, ENV_SECRET)
    else:
        secret = _check_secret(str(signing_section.get("secret", "") or ""), "config")

    # --- Report ---
    report_section = _section(raw, "report")
    output_dir = report_section.get("output_dir", "reports") or "reports"
    report_fmt = report_section.get("format", "text") or "text"
    if report_fmt not in REPORT_FORMATS:
        raise ConfigError(
            f"Invalid report format: {report_fmt!r}. Expected one of: {', '.join(REPORT_FORMATS)}."
        )

    log_file = str(_section(raw, "logging").get("file", "") or "")

    config = AppConfig(
        policy=policy,
        signing=SigningConfig(algorithm=algorithm, secret=secret),
        report=ReportConfig(output_dir=output_dir, format=report_fmt),
        log_file=log_file,
    )

    logger.debug("Config loaded from %s (secret from %s)",
                 config_path if raw else "defaults",
                 "env" if env_secret else "file")
    return config


# ---------------------------------------------------------------------------
# CLI override merging
# ---------------------------------------------------------------------------

def merge_cli_overrides(cfg: AppConfig, args) -> AppConfig:
    """Merge CLI arguments over loaded config, returning a new AppConfig.

    Only attributes present on *args* and not ``None`` override the file
    values: ``secret``, ``alg``, ``format``, ``output_dir``, ``verbose``.

    Raises:
        ConfigError: If merged values fail validation.
    """
    signing = cfg.signing
    report = cfg.report

    secret = getattr(args, "secret", None)
    alg = getattr(args, "alg", None)
    if alg is not None and alg not in SUPPORTED_ALGORITHMS:
        raise ConfigError(
            f"Invalid algorithm: {alg!r}. Expected one of: {', '.join(SUPPORTED_ALGORITHMS)}."
        )
    fmt = getattr(args, "format", None)
    if fmt is not None and fmt not in REPORT_FORMATS:
        raise ConfigError(f"Invalid report format: {fmt!r}.")
    out_dir = getattr(args, "output_dir", None)

    return replace(
        cfg,
        signing=SigningConfig(
            algorithm=alg if alg is not None else signing.algorithm,
            secret=secret if secret is not None else signing.secret,
        ),
        report=ReportConfig(
            output_dir=out_dir if out_dir is not None else report.output_dir,
            format=fmt if fmt is not None else report.format,
        ),
        verbose=bool(getattr(args, "verbose", False)),
    )
