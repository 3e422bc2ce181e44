"""
Filesystem operations with dry-run support and overwrite protection.
"""

import shutil
from pathlib import Path
from typing import Optional

from .constants import get_logger


class FileOperations:
    """Rename, move and delete files without ever replacing an existing file."""

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run
        self.logger = get_logger()

    def ensure_directory(self, directory: Path) -> None:
        """Create directory and parents if needed, with dry-run support."""
        if not self.dry_run and not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)

    def rename_safely(self, source: Path, dest: Path) -> bool:
        """Rename a file within its directory. Fails if the target exists."""
        if dest.exists():
            self.logger.error(f"Cannot rename {source.name}: {dest.name} already exists")
            return False

        if self.dry_run:
            self.logger.info(f"DRY RUN: Would rename {source.name} -> {dest.name}")
            return True

        try:
            source.rename(dest)
            if not dest.exists():
                raise FileNotFoundError(f"File not found after rename: {dest}")
            self.logger.debug(f"{source} -> {dest}")
            return True
        except OSError as e:
            self.logger.error(f"Failed to rename {source} -> {dest}: {e}")
            return False

    def move_file_safely(self, source: Path, dest: Path) -> bool:
        """Move a file with validation and dry-run support. Fails if the target exists."""
        if dest.exists():
            self.logger.error(f"Cannot move {source}: {dest} already exists")
            return False

        if self.dry_run:
            self.logger.info(f"DRY RUN: Would move {source} -> {dest}")
            return True

        try:
            self.ensure_directory(dest.parent)
            shutil.move(str(source), str(dest))

            # Verify the operation
            if not dest.exists():
                raise FileNotFoundError(f"File not found after move: {dest}")
            if source.exists():
                raise FileExistsError(f"Source file still exists after move: {source}")

            self.logger.debug(f"{source} -> {dest}")
            return True
        except OSError as e:
            self.logger.error(f"Failed to move {source} -> {dest}: {e}")
            return False

    def delete_safely(self, *files_to_delete: Optional[Path]) -> bool:
        """Unlink the file path(s) provided. Return all(success)."""
        if self.dry_run:
            for file_to_delete in files_to_delete:
                if file_to_delete:
                    self.logger.info(f"DRY RUN: Would delete {file_to_delete}")
            return True

        success = True
        for file_to_delete in files_to_delete:
            if file_to_delete and file_to_delete.exists():
                try:
                    file_to_delete.unlink()
                    self.logger.debug(f"Deleted {file_to_delete}")
                except OSError as e:
                    self.logger.error(f"Failed to delete {file_to_delete}: {e}")
                    success = False

        return success
