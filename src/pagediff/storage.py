"""
Storage layer for persisting comparison results.

Provides abstract interface for storage backends and a file-based implementation
for CSV and JSON export plus the annotated page itself.
"""

import csv
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from .models import ComparisonResult

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("csv", "json")


class StorageError(Exception):
    """Base exception for storage errors."""

    pass


class Storage(ABC):
    """
    Abstract interface for storage backends.

    Designed to be swappable without changing engine code.
    """

    @abstractmethod
    def save(self, result: ComparisonResult, format: str = "csv", output_path: str | None = None) -> str:
        """
        Save a comparison result.

        Args:
            result: ComparisonResult to save
            format: Output format ('csv' or 'json')
            output_path: Optional output file path. If not provided, generates one.

        Returns:
            Path to the saved file (for file storage) or identifier (for database)

        Raises:
            StorageError: If save operation fails
        """
        pass


class FileStorage(Storage):
    """
    File-based storage implementation.

    Exports results to CSV or JSON files and writes annotated HTML pages.
    """

    def __init__(self, output_directory: str = "."):
        """
        Initialize file storage.

        Args:
            output_directory: Directory to save output files (default: current directory)

        Raises:
            StorageError: If the output directory cannot be created
        """
        self.output_directory = Path(output_directory)
        try:
            self.output_directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create output directory {output_directory}: {str(e)}") from e

    def save(self, result: ComparisonResult, format: str = "csv", output_path: str | None = None) -> str:
        """
        Save a comparison result to file.

        Args:
            result: ComparisonResult to save
            format: Output format ('csv' or 'json')
            output_path: Optional output file path. If not provided, generates one.

        Returns:
            Path to the saved file

        Raises:
            StorageError: If save operation fails
        """
        format_lower = format.lower()

        if format_lower not in SUPPORTED_FORMATS:
            raise StorageError(f"Unsupported format: {format}. Use 'csv' or 'json'.")

        if output_path is None:
            output_path = f"page_diff_{self._timestamp(result)}.{format_lower}"

        output_file_path = self.output_directory / output_path

        try:
            if format_lower == "csv":
                self._save_csv(result, output_file_path)
            else:
                self._save_json(result, output_file_path)
        except OSError as e:
            raise StorageError(f"Failed to save results: {str(e)}") from e

        logger.info("Saved %d differences to %s", result.count, output_file_path)
        return str(output_file_path)

    def save_annotated_html(
        self, html: str, result: ComparisonResult, output_path: str | None = None
    ) -> str:
        """
        Save the annotated current page.

        Args:
            html: Annotated markup
            result: ComparisonResult the annotation belongs to (used for naming)
            output_path: Optional output file path. If not provided, generates one.

        Returns:
            Path to the saved file

        Raises:
            StorageError: If the file cannot be written
        """
        if output_path is None:
            output_path = f"page_diff_{self._timestamp(result)}_annotated.html"

        output_file_path = self.output_directory / output_path
        try:
            output_file_path.write_text(html, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to save annotated page: {str(e)}") from e

        return str(output_file_path)

    def _timestamp(self, result: ComparisonResult) -> str:
        return result.started_at.strftime("%Y%m%d_%H%M%S")

    def _save_csv(self, result: ComparisonResult, output_path: Path):
        """
        Save result to CSV format.

        One row per difference, preceded by a commented summary header.
        """
        with open(output_path, "w", newline="", encoding="utf-8") as csvfile:
            csvfile.write("# Page Difference Report\n")
            csvfile.write(f"# Source: {result.source_url or 'N/A'}\n")
            csvfile.write(f"# Current: {result.current_url or 'N/A'}\n")
            csvfile.write(f"# Generated: {result.finished_at}\n")
            csvfile.write(f"# Differences: {result.count}\n")
            csvfile.write("\n")

            fieldnames = ["ID", "Type", "Category", "Details", "Element"]
            writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
            writer.writeheader()

            for diff in result.differences:
                writer.writerow(
                    {
                        "ID": diff.id,
                        "Type": diff.visual_kind.value,
                        "Category": diff.category.label,
                        "Details": diff.detail,
                        "Element": diff.target_tag or "",
                    }
                )

    def _save_json(self, result: ComparisonResult, output_path: Path):
        """Save result to JSON format for programmatic access."""
        with open(output_path, "w", encoding="utf-8") as jsonfile:
            json.dump(result.to_dict(), jsonfile, indent=2, ensure_ascii=False)
