"""Temporary storage for the photos of one long-receipt job.

Each job gets its own directory under the runtime temp dir:

    <TMPDIR>/jobs/<job-id>/
    ├── section_01.jpg
    ├── section_02.jpg
    └── ...

Files are removed when a section is discarded or retaken, and the whole
directory is removed when the job ends, whatever the outcome.
"""

from __future__ import annotations

import shutil
import uuid
from datetime import datetime
from pathlib import Path
from types import TracebackType

from pricescan.domain.prices import ReceiptSection
from pricescan.runtime.logging import get_logger
from pricescan.runtime.paths import get_paths

logger = get_logger(__name__)


class SectionStore:
    """Owns the section image files of one long-receipt job.

    Usage:
        with SectionStore() as store:
            store.add_section(photo_1)
            store.add_section(photo_2)
            result = process_long_receipt(store.sections, engine)
        # every section file is gone here
    """

    def __init__(self, base_dir: Path | None = None) -> None:
        root = base_dir if base_dir is not None else get_paths().jobs
        self.job_dir = root / uuid.uuid4().hex
        self.job_dir.mkdir(parents=True, exist_ok=False)
        self._sections: dict[int, ReceiptSection] = {}
        self._closed = False

    @property
    def sections(self) -> list[ReceiptSection]:
        """Current sections in capture order."""
        return [self._sections[n] for n in sorted(self._sections)]

    def _next_number(self) -> int:
        return max(self._sections, default=0) + 1

    def _store_file(self, source: Path | bytes, section_number: int) -> Path:
        if self._closed:
            raise RuntimeError("Section store is already cleaned up")
        suffix = source.suffix.lower() if isinstance(source, Path) and source.suffix else ".jpg"
        target = self.job_dir / f"section_{section_number:02d}{suffix}"
        if isinstance(source, Path):
            shutil.copy2(source, target)
        else:
            target.write_bytes(source)
        return target

    def add_section(self, source: Path | bytes) -> ReceiptSection:
        """Copy a captured photo into the job and register it as the next section."""
        number = self._next_number()
        section = ReceiptSection(
            image_path=self._store_file(source, number),
            section_number=number,
            timestamp=datetime.now(),
        )
        self._sections[number] = section
        logger.debug("Captured section %d: %s", number, section.image_path.name)
        return section

    def retake_section(self, section_number: int, source: Path | bytes) -> ReceiptSection:
        """Replace a section's photo, keeping its position in the sequence."""
        old = self._sections.get(section_number)
        if old is None:
            raise KeyError(f"No section {section_number} in this job")
        old.image_path.unlink(missing_ok=True)
        section = ReceiptSection(
            image_path=self._store_file(source, section_number),
            section_number=section_number,
            timestamp=datetime.now(),
        )
        self._sections[section_number] = section
        logger.debug("Retook section %d", section_number)
        return section

    def discard_section(self, section_number: int) -> None:
        """Delete a section and renumber the later ones to stay contiguous."""
        old = self._sections.pop(section_number, None)
        if old is None:
            raise KeyError(f"No section {section_number} in this job")
        old.image_path.unlink(missing_ok=True)

        remaining = [self._sections[n] for n in sorted(self._sections)]
        self._sections = {}
        for number, section in enumerate(remaining, start=1):
            if section.section_number != number:
                new_path = section.image_path.with_name(f"section_{number:02d}{section.image_path.suffix}")
                section.image_path.rename(new_path)
                section = ReceiptSection(image_path=new_path, section_number=number, timestamp=section.timestamp)
            self._sections[number] = section
        logger.debug("Discarded section %d; %d remain", section_number, len(self._sections))

    def cleanup(self) -> None:
        """Remove every section file and the job directory."""
        if self._closed:
            return
        shutil.rmtree(self.job_dir, ignore_errors=True)
        self._sections.clear()
        self._closed = True
        logger.debug("Cleaned up job directory %s", self.job_dir)

    def __enter__(self) -> SectionStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()
