"""Versioned destination naming: '{date} {source name} V{n}'."""
from __future__ import annotations
import logging
from datetime import date
from itertools import count
from pathlib import Path
from .errors import SourceNotFound, DestinationBaseNotFound

log = logging.getLogger(__name__)


def source_base_name(source: Path) -> str:
	name = source.name
	if not name:
		# Drive or share root, e.g. 'D:\\' -> 'D'
		name = source.drive.strip('\\/:') or source.anchor.strip('\\/:')
	return name or 'root'


def version_name(day: date, base_name: str, n: int) -> str:
	return f"{day.isoformat()} {base_name} V{n}"


def resolve_destination(source: Path | str, destination_base: Path | str, today: date | None = None) -> Path:
	"""Create and return the first free versioned directory under destination_base.

	Candidates V1, V2, ... are created with mkdir(exist_ok=False), so picking a
	name and claiming it is a single filesystem operation.
	"""
	source = Path(source); base = Path(destination_base)
	if not source.is_dir():
		raise SourceNotFound(f"Source folder not found: {source}")
	if not base.is_dir():
		raise DestinationBaseNotFound(f"Destination folder not found: {base}")
	day = today or date.today()
	name = source_base_name(source.resolve())
	for n in count(1):
		candidate = base / version_name(day, name, n)
		try:
			candidate.mkdir()
		except FileExistsError:
			continue
		log.debug('Resolved versioned destination %s', candidate)
		return candidate
	raise AssertionError('unreachable')  # pragma: no cover
