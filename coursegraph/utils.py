"""
Shared utilities for the course graph tools.

This module provides:
- Configuration management with JSON files and environment variables
- Logging utilities with operation timers
- File I/O helpers for JSON output
"""

import os
import json
import time
import logging
from pathlib import Path
from typing import Dict, List, Any, Union
from dataclasses import dataclass, field, asdict

EXPORT_FORMATS = ["json", "graph", "dot", "tsv"]

logger = logging.getLogger(__name__)


@dataclass
class CourseGraphConfig:
    """Configuration settings for loading and exporting course graphs."""

    log_level: str = "INFO"

    # Export Settings
    export_formats: List[str] = field(default_factory=lambda: list(EXPORT_FORMATS))
    dot_rankdir: str = "LR"
    max_label_length: int = 30

    # Node fill colours keyed by offering pattern
    semester_colors: Dict[str, str] = field(default_factory=lambda: {
        "spring": "#96CEB4",
        "fall": "#FFEAA7",
        "both": "#45B7D1",
        "unspecified": "#F0F0F0",
    })
    unknown_color: str = "#FF6B6B"


class CourseGraphLogger:
    """Named logger with operation timing and a performance summary."""

    def __init__(self, name: str, log_level: str = "INFO"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

        self.performance_data = {}
        self.start_times = {}

    def start_timer(self, operation: str) -> None:
        """Start timing an operation."""
        self.start_times[operation] = time.time()
        self.logger.debug(f"Starting {operation}")

    def end_timer(self, operation: str) -> float:
        """End timing an operation and return duration."""
        if operation not in self.start_times:
            self.logger.warning(f"Timer for {operation} was not started")
            return 0.0

        duration = time.time() - self.start_times.pop(operation)
        self.performance_data[operation] = duration
        self.logger.debug(f"Completed {operation} in {duration:.3f}s")
        return duration

    def log_performance_summary(self) -> None:
        """Log summary of all performance data."""
        if not self.performance_data:
            return

        total_time = sum(self.performance_data.values())
        self.logger.info(f"Total time: {total_time:.3f}s")
        for operation, duration in sorted(self.performance_data.items(),
                                          key=lambda x: x[1], reverse=True):
            self.logger.debug(f"  {operation}: {duration:.3f}s")

    def info(self, message: str) -> None:
        self.logger.info(message)

    def debug(self, message: str) -> None:
        self.logger.debug(message)

    def warning(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str) -> None:
        self.logger.error(message)


class FileManager:
    """File output helpers with error logging."""

    def __init__(self, logger: CourseGraphLogger):
        self.logger = logger

    def save_json(self, data: Any, file_path: Union[str, Path], indent: int = 2) -> bool:
        """Save data to JSON file, returning False if it cannot be written."""
        file_path = Path(file_path)

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=indent, ensure_ascii=False)
                f.write("\n")
        except OSError as e:
            self.logger.error(f"Failed to save {file_path}: {e}")
            return False

        self.logger.debug(f"Saved data to {file_path}")
        return True


def load_config(config_path: Union[str, Path, None] = None) -> CourseGraphConfig:
    """Load configuration from file, then apply environment variable overrides."""
    config = CourseGraphConfig()

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
            for key, value in config_data.items():
                if not hasattr(config, key):
                    logger.warning(f"Ignoring unknown config key '{key}' in {config_path}")
                    continue
                expected = type(getattr(config, key))
                if type(value) is not expected:
                    logger.warning(
                        f"Ignoring config key '{key}' in {config_path}: expected "
                        f"{expected.__name__}, got {type(value).__name__}"
                    )
                    continue
                setattr(config, key, value)
        except (OSError, ValueError, AttributeError) as e:
            logger.warning(f"Failed to load config file {config_path}: {e}")

    if os.getenv("COURSEGRAPH_LOG_LEVEL"):
        config.log_level = os.getenv("COURSEGRAPH_LOG_LEVEL").upper()

    if os.getenv("COURSEGRAPH_EXPORT_FORMATS"):
        formats = [f.strip() for f in os.getenv("COURSEGRAPH_EXPORT_FORMATS").split(",")]
        config.export_formats = [f for f in formats if f]

    return config


def config_to_dict(config: CourseGraphConfig) -> Dict[str, Any]:
    return asdict(config)
