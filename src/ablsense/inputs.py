"""
Input resolution: turns paths into named text blobs.

Program inputs:
- ABL sources (.p, .w, .i, .cls by default) are read directly
- Archives (.zip) are opened and every source entry inside is read as if
  it had been given directly
- Anything else is skipped with a log line, not an error

Schema inputs are read as given. Any read or decode failure raises
SourceReadError and ends the run.
"""

from __future__ import annotations

import logging
import zipfile
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from ablsense.config import Config, get_config
from ablsense.exceptions import SourceReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NamedText:
    """A named blob of text: a file, or an entry inside an archive."""
    name: str
    text: str


def read_text_file(path: str | Path, encoding: str = "utf-8") -> NamedText:
    """
    Read one file as a NamedText.

    Raises:
        SourceReadError: If the file cannot be read or decoded
    """
    filepath = Path(path)
    try:
        text = filepath.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(
            f"Cannot read file: {filepath}",
            source=str(filepath),
            detail=str(e),
        ) from e
    return NamedText(name=str(filepath), text=text)


def expand_archive(path: str | Path, config: Config | None = None) -> list[NamedText]:
    """
    Read every ABL source entry of an archive, in archive order.

    Directory entries and entries without a source suffix are skipped.
    Entry names are kept as stored in the archive.

    Raises:
        SourceReadError: If the archive or one of its entries cannot be read
    """
    config = config or get_config()
    archive_path = Path(path)
    logger.info("Opening archive: %s", archive_path)

    blobs: list[NamedText] = []
    try:
        with zipfile.ZipFile(archive_path) as archive:
            for entry in archive.infolist():
                if entry.is_dir() or not config.is_source_name(entry.filename):
                    continue
                logger.info("Reading archive entry: %s", entry.filename)
                try:
                    text = archive.read(entry).decode(config.encoding)
                except UnicodeDecodeError as e:
                    raise SourceReadError(
                        f"Cannot decode archive entry: {entry.filename}",
                        source=f"{archive_path}:{entry.filename}",
                        detail=str(e),
                    ) from e
                except (RuntimeError, NotImplementedError) as e:
                    # Encrypted entries and unsupported compression methods
                    raise SourceReadError(
                        f"Cannot extract archive entry: {entry.filename}",
                        source=f"{archive_path}:{entry.filename}",
                        detail=str(e),
                    ) from e
                blobs.append(NamedText(name=entry.filename, text=text))
    except (OSError, zipfile.BadZipFile) as e:
        raise SourceReadError(
            f"Cannot read archive: {archive_path}",
            source=str(archive_path),
            detail=str(e),
        ) from e

    return blobs


def load_program_texts(
    paths: Iterable[str | Path],
    config: Config | None = None,
) -> list[NamedText]:
    """
    Resolve program inputs into source blobs.

    Plain files come first, in the order given; archive contents follow,
    archive by archive.
    """
    config = config or get_config()
    paths = [Path(p) for p in paths]

    blobs: list[NamedText] = []
    for path in paths:
        if config.is_archive_name(path.name):
            continue
        if not config.is_source_name(path.name):
            logger.info("Ignoring (not a Progress source): %s", path)
            continue
        logger.info("Reading file: %s", path)
        blobs.append(read_text_file(path, config.encoding))

    for path in paths:
        if config.is_archive_name(path.name):
            blobs.extend(expand_archive(path, config))

    return blobs


def load_schema_texts(
    paths: Iterable[str | Path],
    config: Config | None = None,
) -> list[NamedText]:
    """
    Read schema (.df) inputs in the order given.

    Files without a schema suffix are still read, with a warning, since
    .df exports are often renamed.
    """
    config = config or get_config()
    blobs: list[NamedText] = []
    for path in paths:
        path = Path(path)
        if not config.is_schema_name(path.name):
            logger.warning("Unexpected schema file suffix: %s", path)
        logger.info("Reading schema: %s", path)
        blobs.append(read_text_file(path, config.encoding))
    return blobs
