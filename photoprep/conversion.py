"""
Still image conversion using ImageMagick.
"""

import os
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from . import constants
from .collisions import CollisionResolver
from .constants import PROGRAM, TOOL_TIMEOUT, get_logger
from .errors import NothingToConvertError
from .file_operations import FileOperations
from .media import find_convertible
from .progress import ProgressContext


@dataclass
class ConversionResult:
    """Result of converting one still image."""
    source: Path
    destination: Path
    success: bool
    index: int = 0
    total: int = 0


class ImageConverter:
    """Converts an image file into the format implied by the destination's extension."""

    def convert(self, input_path: Path, output_path: Path) -> bool:
        """Write output_path from input_path; return False on failure.

        The input file must be left untouched either way.
        """
        raise NotImplementedError


class MagickConverter(ImageConverter):
    """Handles image conversion using ImageMagick (magick, or the legacy convert binary)."""

    def __init__(self):
        self.logger = get_logger("photoprep.conversion")
        if constants.check_tool_availability("magick", "-version"):
            self.command = ["magick"]
        elif constants.check_tool_availability("convert", "-version"):
            self.command = ["convert"]
        else:
            self.command = None
            self.logger.warning("ImageMagick unavailable: image conversion will fail")

    def convert(self, input_path: Path, output_path: Path) -> bool:
        if self.command is None:
            self.logger.error(f"Cannot convert {input_path}: ImageMagick not found")
            return False

        temp_path = None
        try:
            # Save file stat to restore on the output path
            original_stat = input_path.stat()

            # Use temporary file beside the output to avoid partial writes
            temp_fd, temp_name = tempfile.mkstemp(suffix=output_path.suffix,
                                                  prefix=f".{PROGRAM}_", dir=output_path.parent)
            os.close(temp_fd)
            temp_path = Path(temp_name)

            cmd = self.command + [str(input_path), str(temp_path)]
            subprocess.run(cmd, capture_output=True, check=True, timeout=TOOL_TIMEOUT)

            # Verify the converted file exists and has content
            if not temp_path.exists() or temp_path.stat().st_size == 0:
                raise FileNotFoundError("Conversion produced no output")

            # Move temp file to final location and restore original timestamps
            temp_path.rename(output_path)
            os.utime(output_path, (original_stat.st_atime, original_stat.st_mtime))

            self.logger.debug(f"{input_path} -> {output_path}")
            return True

        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode(errors="replace").strip() if e.stderr else ""
            self.logger.error(f"ImageMagick conversion failed for {input_path}: {stderr}")
            return False
        except subprocess.TimeoutExpired:
            self.logger.error(f"ImageMagick timed out converting {input_path}")
            return False
        except OSError as e:
            self.logger.error(f"Conversion error for {input_path}: {e}")
            return False
        finally:
            if temp_path is not None and temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass


class ConversionOrchestrator:
    """Converts every convertible still in a directory to the target extension."""

    def __init__(self, converter: ImageConverter, file_ops: FileOperations,
                 collision_resolver: CollisionResolver):
        self.converter = converter
        self.file_ops = file_ops
        self.collision_resolver = collision_resolver
        self.logger = get_logger()

    def convert_all(self, source_dir: Path, target_extension: str,
                    progress_ctx: Optional[ProgressContext] = None) -> List[ConversionResult]:
        """Convert each .png/.heic in source_dir, never touching the originals.

        Raises NothingToConvertError when there is nothing to convert. A failed
        conversion is recorded and the batch continues.
        """
        extension = target_extension.lstrip('.').lower()
        candidates = find_convertible(source_dir, extension)
        if not candidates:
            raise NothingToConvertError(source_dir)

        total = len(candidates)
        self.logger.info(f"Converting {total} images to .{extension}")
        if progress_ctx:
            progress_ctx.start_phase(f"Converting to .{extension}...", total)

        results = []
        planned = set()
        for index, media_file in enumerate(candidates, start=1):
            if progress_ctx:
                progress_ctx.update(f"Converting: {media_file.name}")

            destination = self.collision_resolver.resolve(
                media_file.path.with_suffix(f".{extension}"), planned
            )
            planned.add(destination)

            if self.file_ops.dry_run:
                self.logger.info(f"DRY RUN: Would convert {media_file.path} -> {destination}")
                success = True
            else:
                success = self.converter.convert(media_file.path, destination)

            results.append(ConversionResult(source=media_file.path, destination=destination,
                                            success=success, index=index, total=total))
            if success:
                self.logger.info(f"[{index}/{total}] Converted {media_file.name} -> {destination.name}")
            else:
                self.logger.error(f"[{index}/{total}] Failed to convert {media_file.name}")

            if progress_ctx:
                progress_ctx.advance()

        return results
