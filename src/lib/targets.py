"""Target store: the persisted nickname -> destination list.

File format (UTF-8):
	Nickname|Path
	nas|\\\\server\\share\\backups
	usb|E:\\copies

The first record is a literal header. Every following non-empty record is
split once on the separator into two trimmed fields.
"""
from __future__ import annotations
import os, logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List
from config.settings import STORE_HEADER, FIELD_SEPARATOR, STORE_ENCODING
from .errors import (
	StorageError, InvalidPath, InvalidNickname, DuplicateNickname, UnknownNickname, IndexOutOfRange
)

log = logging.getLogger(__name__)

# Characters that would break the record format or the quoted menu command
FORBIDDEN_NICKNAME_CHARS = (FIELD_SEPARATOR, '"', '\r', '\n')


@dataclass(frozen=True)
class Target:
	nickname: str
	path: str

	@classmethod
	def create(cls, nickname: str, path: str) -> 'Target':
		nickname = (nickname or '').strip(); path = (path or '').strip()
		if not nickname: raise InvalidNickname('Nickname must not be empty')
		bad = [c for c in FORBIDDEN_NICKNAME_CHARS if c in nickname]
		if bad: raise InvalidNickname(f"Nickname must not contain {bad[0]!r}: {nickname}")
		if not path: raise InvalidPath('Path must not be empty')
		return cls(nickname, path)

	@classmethod
	def from_record(cls, line: str) -> 'Target | None':
		"""Parse one stored record; None for records with fewer than two fields."""
		fields = line.split(FIELD_SEPARATOR, 1)
		if len(fields) < 2:
			return None
		return cls.create(fields[0], fields[1])

	def to_record(self) -> str:
		return f"{self.nickname}{FIELD_SEPARATOR}{self.path}"


class TargetStore:
	"""Handle on the backing file plus the last loaded (displayed) list."""

	def __init__(self, path: Path):
		self.path = Path(path)
		self.targets: List[Target] = []

	def exists(self) -> bool:
		return self.path.exists()

	def load(self, create: bool = True) -> List[Target]:
		"""Read the store, creating it with only the header when absent.

		With create=False a missing store just reads as empty, so listing never
		writes. Never raises: an unreadable or unrecognised file yields an
		empty list.
		"""
		if not self.exists():
			if not create:
				self.targets = []
				return []
			try:
				self.save([])
			except StorageError as e:
				log.warning('Could not create target list: %s', e)
			self.targets = []
			return []
		try:
			text = self.path.read_text(encoding=f"{STORE_ENCODING}-sig")
		except (OSError, UnicodeDecodeError) as e:
			log.warning('Could not read target list %s: %s', self.path, e)
			self.targets = []
			return []
		self.targets = self._parse(text)
		return list(self.targets)

	def _parse(self, text: str) -> List[Target]:
		lines = [ln for ln in text.splitlines() if ln.strip()]
		if not lines:
			log.warning('Target list %s is empty', self.path)
			return []
		if lines[0].strip() != STORE_HEADER:
			log.warning('Target list %s has an unexpected header %r; ignoring it', self.path, lines[0])
			return []
		targets: List[Target] = []; seen = set()
		for ln in lines[1:]:
			try:
				t = Target.from_record(ln)
			except (InvalidNickname, InvalidPath) as e:
				log.debug('Skipping record %r: %s', ln, e)
				continue
			if t is None:
				continue
			if t.nickname in seen:
				log.warning('Skipping duplicate nickname %r in %s', t.nickname, self.path)
				continue
			seen.add(t.nickname)
			targets.append(t)
		return targets

	def save(self, targets: Iterable[Target]) -> None:
		"""Write header + records to a temp sibling, then replace the store.

		Every target is re-validated first, so a record that could not be read
		back never reaches the file.
		"""
		targets = [Target.create(t.nickname, t.path) for t in targets]
		body = '\n'.join([STORE_HEADER] + [t.to_record() for t in targets]) + '\n'
		tmp = self.path.with_name(self.path.name + '.tmp')
		try:
			self.path.parent.mkdir(parents=True, exist_ok=True)
			tmp.write_text(body, encoding=STORE_ENCODING)
			os.replace(tmp, self.path)
		except OSError as e:
			raise StorageError(f"Could not write target list {self.path}: {e}") from e
		self.targets = targets

	def get(self, nickname: str) -> Target:
		for t in self.load():
			if t.nickname == nickname:
				return t
		raise UnknownNickname(f"Unknown target: {nickname}")

	def add(self, nickname: str, path: str) -> Target:
		target = Target.create(nickname, path)
		if not Path(target.path).is_dir():
			raise InvalidPath(f"Directory does not exist: {target.path}")
		current = self.load()
		if any(t.nickname == target.nickname for t in current):
			raise DuplicateNickname(f"Nickname already in use: {target.nickname}")
		self.save(current + [target])
		log.info('Added target %s -> %s', target.nickname, target.path)
		return target

	def remove(self, index: int) -> Target:
		"""Remove by 1-based position in the currently displayed list."""
		if not 1 <= index <= len(self.targets):
			raise IndexOutOfRange(f"Selection {index} is out of range (1-{len(self.targets)})")
		return self.remove_nickname(self.targets[index - 1].nickname)

	def remove_nickname(self, nickname: str) -> Target:
		current = self.load()
		match = next((t for t in current if t.nickname == nickname), None)
		if match is None:
			raise UnknownNickname(f"Unknown target: {nickname}")
		remaining = [t for t in current if t.nickname != nickname]
		if remaining:
			self.save(remaining)
		else:
			# An empty registry is represented by no file at all
			try:
				self.path.unlink(missing_ok=True)
			except OSError as e:
				raise StorageError(f"Could not delete target list {self.path}: {e}") from e
			self.targets = []
		log.info('Removed target %s', nickname)
		return match
