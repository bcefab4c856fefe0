import os
import logging
import sys
from typing import Optional

from tabulate import tabulate_formats


# =============================================================================
# Logging Configuration
# =============================================================================
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT: str = os.getenv(
    "LOG_FORMAT",
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def setup_logging(level: Optional[str] = None):
    """Configure application-wide logging

    Logs go to stderr; stdout carries the rendered tables.
    """
    level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    # basicConfig is a no-op once handlers exist; the level still applies
    logging.getLogger().setLevel(level)
    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("kubernetes").setLevel(logging.WARNING)


# =============================================================================
# Cluster Access Configuration
# =============================================================================
KUBECONFIG: str = os.getenv(
    "KUBECONFIG",
    os.path.join(os.path.expanduser("~"), ".kube", "config")
)
KUBE_CONTEXT: Optional[str] = os.getenv("KUBE_CONTEXT") or None

# metrics-server API (metrics.k8s.io)
METRICS_API_GROUP: str = os.getenv("METRICS_API_GROUP", "metrics.k8s.io")
METRICS_API_VERSION: str = os.getenv("METRICS_API_VERSION", "v1beta1")


# =============================================================================
# Output Configuration
# =============================================================================
TABLE_FORMAT: str = os.getenv("TABLE_FORMAT", "psql")

# Optional JSON report, disabled when empty
REPORT_OUTPUT_PATH: Optional[str] = os.getenv("REPORT_OUTPUT_PATH") or None


__all__ = [
    "LOG_LEVEL",
    "LOG_FORMAT",
    "setup_logging",
    "KUBECONFIG",
    "KUBE_CONTEXT",
    "METRICS_API_GROUP",
    "METRICS_API_VERSION",
    "TABLE_FORMAT",
    "REPORT_OUTPUT_PATH",
    "validate_config",
    "ConfigValidationError",
]


# =============================================================================
# Configuration Validation
# =============================================================================
class ConfigValidationError(Exception):
    """Raised when configuration validation fails"""
    pass


def _validate_non_empty(name: str, value: str) -> None:
    if not value or not value.strip():
        raise ConfigValidationError(f"{name} must not be empty")


def _validate_log_level(value: str) -> None:
    if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigValidationError(
            f"LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL, got '{value}'"
        )


def _validate_table_format(value: str) -> None:
    if value not in tabulate_formats:
        raise ConfigValidationError(
            f"TABLE_FORMAT '{value}' is not a known tabulate format"
        )


def _validate_output_path(name: str, value: Optional[str]) -> None:
    if value is None:
        return
    parent = os.path.dirname(value) or "."
    if not os.path.isdir(parent):
        raise ConfigValidationError(f"{name} directory does not exist: {parent}")


def validate_config() -> None:
    """Validate all configuration values on startup

    Raises:
        ConfigValidationError: If any configuration value is invalid
    """
    errors = []

    try:
        _validate_log_level(LOG_LEVEL)
    except ConfigValidationError as e:
        errors.append(str(e))

    for name, value in (
        ("KUBECONFIG", KUBECONFIG),
        ("METRICS_API_GROUP", METRICS_API_GROUP),
        ("METRICS_API_VERSION", METRICS_API_VERSION),
    ):
        try:
            _validate_non_empty(name, value)
        except ConfigValidationError as e:
            errors.append(str(e))

    try:
        _validate_table_format(TABLE_FORMAT)
    except ConfigValidationError as e:
        errors.append(str(e))

    try:
        _validate_output_path("REPORT_OUTPUT_PATH", REPORT_OUTPUT_PATH)
    except ConfigValidationError as e:
        errors.append(str(e))

    if errors:
        raise ConfigValidationError(
            "Configuration validation failed:\n  - " + "\n  - ".join(errors)
        )
