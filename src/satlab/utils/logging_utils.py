"""
Logging utilities for satlab.

This module configures Python's logging for the ``satlab`` package and
provides a StructuredLogger that records solver runs as JSON Lines or CSV,
with a NumpyJSONEncoder for serializing numpy values.
"""

import csv
import json
import logging
import os
import time
from datetime import datetime
from typing import Any

import numpy as np

from satlab.exceptions import ConfigurationError

PACKAGE_LOGGER = "satlab"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class NumpyJSONEncoder(json.JSONEncoder):
    """JSON encoder that can handle NumPy arrays and scalars."""

    def default(self, obj):
        """Convert numpy objects to standard Python types."""
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.bool_):
            return bool(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        return super().default(obj)


def configure_logging(
    level: int | str = logging.INFO,
    log_file: str | None = None,
    fmt: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """
    Configure console (and optionally file) output for the package logger.

    Calling it again replaces the handlers installed by a previous call.

    Args:
        level: Logging level or its name
        log_file: Optional path of a log file
        fmt: Format string for both handlers

    Returns:
        The configured ``satlab`` logger

    Raises:
        ConfigurationError: If ``level`` names no logging level
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ConfigurationError(f"Unknown logging level: {level}")
        level = resolved

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Remove any existing handlers
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(fmt)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        directory = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(directory, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


class StructuredLogger:
    """
    A logger for structured data in various formats.

    This logger can output data in JSON Lines or CSV format.
    It maintains separate files for different event types.
    """

    FORMAT_JSON = "json"
    FORMAT_CSV = "csv"

    def __init__(
        self,
        output_dir: str,
        experiment_name: str,
        format_type: str = "json",
    ):
        """
        Initialize the structured logger.

        Args:
            output_dir: Directory to save log files in
            experiment_name: Name of the experiment (used in filenames)
            format_type: Format to save logs in ("json" or "csv")
        """
        if format_type not in (self.FORMAT_JSON, self.FORMAT_CSV):
            raise ValueError(f"Unknown structured log format: {format_type}")

        self.output_dir = output_dir
        self.experiment_name = experiment_name
        self.format_type = format_type

        os.makedirs(output_dir, exist_ok=True)

        self.files = {}
        self.write_counts = {}
        self.metadata = {
            "experiment_name": experiment_name,
            "start_time": datetime.now().isoformat(),
            "log_files": {},
        }

    def path_for(self, event_type: str) -> str:
        """Path of the file that records ``event_type`` events."""
        ext = ".jsonl" if self.format_type == self.FORMAT_JSON else ".csv"
        return os.path.join(self.output_dir, f"{self.experiment_name}_{event_type}{ext}")

    def _get_file(self, event_type: str) -> tuple:
        """
        Get the file handle for a given event type.

        Args:
            event_type: Type of event (used in filename)

        Returns:
            Tuple of (file_handle, is_new)
        """
        if event_type not in self.files:
            filepath = self.path_for(event_type)
            self.metadata["log_files"][event_type] = filepath

            file = open(
                filepath,
                "w",
                newline="" if self.format_type == self.FORMAT_CSV else None,
            )
            self.files[event_type] = file
            self.write_counts[event_type] = 0
            return file, True

        return self.files[event_type], False

    def log_event(self, event_type: str, data: dict[str, Any]) -> None:
        """
        Write an event to the appropriate log file.

        Args:
            event_type: Type of event
            data: Data to log
        """
        file, is_new = self._get_file(event_type)

        if self.format_type == self.FORMAT_JSON:
            file.write(json.dumps(data, cls=NumpyJSONEncoder) + "\n")
        else:
            flat = {
                key: json.dumps(value, cls=NumpyJSONEncoder) if isinstance(value, (dict, list)) else value
                for key, value in data.items()
            }
            writer = csv.DictWriter(file, fieldnames=list(flat.keys()))
            if is_new:
                writer.writeheader()
            writer.writerow(flat)
        file.flush()

        self.write_counts[event_type] += 1

    def log_solver_run(
        self,
        instance: str,
        solver: str,
        run: int,
        result,
    ) -> None:
        """
        Log one solver run.

        Args:
            instance: Name or path of the problem instance
            solver: Registered solver name
            run: Run number for repeated runs on the same instance
            result: The SolverResult of the run
        """
        data = {
            "instance": instance,
            "solver": solver,
            "run": run,
            **result.to_dict(),
            "timestamp": time.time(),
        }
        self.log_event("solver_run", data)

    def close(self):
        """Close all open file handles."""
        for file in self.files.values():
            file.close()
        self.files = {}

    def finalize(self) -> str:
        """
        Close all files and write a metadata file describing them.

        Returns:
            Path to the metadata file
        """
        self.close()

        self.metadata["end_time"] = datetime.now().isoformat()
        self.metadata["record_counts"] = self.write_counts

        metadata_path = os.path.join(self.output_dir, f"{self.experiment_name}_metadata.json")
        with open(metadata_path, "w") as f:
            json.dump(self.metadata, f, indent=2)

        return metadata_path


def create_logger(
    experiment_name: str,
    output_dir: str = "logs",
    format_type: str = "json",
) -> StructuredLogger:
    """
    Create a structured logger with default settings.

    Args:
        experiment_name: Name of the experiment
        output_dir: Directory to save logs in
        format_type: Format to save logs in ("json" or "csv")

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(
        output_dir=output_dir,
        experiment_name=experiment_name,
        format_type=format_type,
    )
