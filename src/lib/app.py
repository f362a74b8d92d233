"""Application context: the one handle threaded through every operation."""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List, Tuple
from config.settings import EXCLUDE_NAMES, store_path
from .copier import CopyOptions, CopyOutcome, run_copy
from .errors import DestinationBaseNotFound, CopyFailed
from .shell_menu import MenuSynchronizer, default_backend
from .targets import Target, TargetStore
from .versioning import resolve_destination

log = logging.getLogger(__name__)


@dataclass
class AppContext:
	store: TargetStore
	menu: MenuSynchronizer
	exclusions: FrozenSet[str] = EXCLUDE_NAMES
	options: CopyOptions = field(default_factory=CopyOptions)

	@classmethod
	def build(cls, path: Path | None = None, backend=None) -> 'AppContext':
		store = TargetStore(path if path is not None else store_path())
		return cls(store, MenuSynchronizer(backend if backend is not None else default_backend()))

	def targets(self, create: bool = True) -> List[Target]:
		return self.store.load(create)

	def sync_menu(self):
		return self.menu.sync(self.store.load(create=False))

	def _sync_after_change(self):
		# store.targets already reflects the write; reloading would recreate a deleted store
		return self.menu.sync(self.store.targets)

	def add_target(self, nickname: str, path: str) -> Target:
		target = self.store.add(nickname, path)
		self._sync_after_change()
		return target

	def remove_target(self, index: int) -> Target:
		target = self.store.remove(index)
		self._sync_after_change()
		return target

	def remove_target_by_nickname(self, nickname: str) -> Target:
		target = self.store.remove_nickname(nickname)
		self._sync_after_change()
		return target

	def copy_to_target(self, source: Path | str, nickname: str) -> Tuple[Path, CopyOutcome]:
		"""Copy source into a new versioned folder under the target's path."""
		target = self.store.get(nickname)
		base = Path(target.path)
		if not base.is_dir():
			raise DestinationBaseNotFound(f"Target {target.nickname} points to a missing folder: {base}")
		try:
			destination = resolve_destination(source, base)
		except OSError as e:
			raise CopyFailed(f"Could not create a versioned folder under {base}: {e}") from e
		log.info('Copying %s -> %s', source, destination)
		outcome = run_copy(source, destination, self.exclusions, self.options).check()
		return destination, outcome
