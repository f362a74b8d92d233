"""Shell context-menu synchronisation.

The menu is a cascade under the folder right-click menu:

	Copy to target >
		nas
		usb

Every sync replaces the whole group, so the registered children always
mirror the target list.
"""
from __future__ import annotations
import sys, logging
from typing import Dict, Iterable, List, Sequence, Tuple
from config.settings import MENU_GROUP, MENU_LABEL, SHELL_PLACEHOLDER
from .errors import RegistrationError
from .targets import Target

log = logging.getLogger(__name__)

Child = Tuple[str, str]  # (label, command line)


def program_command() -> List[str]:
	"""How the shell should start this tool."""
	return [sys.executable, '-m', 'src.main']


def quote(arg: str) -> str:
	return '"' + arg + '"'


def build_command(program: Sequence[str], nickname: str) -> str:
	parts = [quote(p) for p in program] + ['run', quote(SHELL_PLACEHOLDER), quote(nickname)]
	return ' '.join(parts)


class MemoryMenuBackend:
	"""Keeps registrations in a dict; used off Windows and in tests."""

	def __init__(self):
		self.groups: Dict[str, Tuple[str, List[Child]]] = {}

	def register(self, group: str, label: str, children: Sequence[Child]) -> None:
		self.groups[group] = (label, list(children))

	def unregister(self, group: str) -> bool:
		return self.groups.pop(group, None) is not None


class WindowsMenuBackend:
	"""Per-user Explorer registration under HKCU\\Software\\Classes."""

	ROOT = r'Software\Classes\Directory\shell'

	def __init__(self):
		import winreg
		self._reg = winreg

	def register(self, group: str, label: str, children: Sequence[Child]) -> None:
		reg = self._reg
		key_path = f"{self.ROOT}\\{group}"
		try:
			with reg.CreateKey(reg.HKEY_CURRENT_USER, key_path) as key:
				reg.SetValueEx(key, 'MUIVerb', 0, reg.REG_SZ, label)
				reg.SetValueEx(key, 'SubCommands', 0, reg.REG_SZ, '')
			for i, (child_label, command) in enumerate(children, 1):
				# Explorer orders sub-commands by key name
				child_path = f"{key_path}\\shell\\{i:03d}"
				with reg.CreateKey(reg.HKEY_CURRENT_USER, child_path) as key:
					reg.SetValueEx(key, 'MUIVerb', 0, reg.REG_SZ, child_label)
				with reg.CreateKey(reg.HKEY_CURRENT_USER, child_path + '\\command') as key:
					reg.SetValueEx(key, '', 0, reg.REG_SZ, command)
		except OSError as e:
			raise RegistrationError(f"Could not register menu {group}: {e}") from e

	def unregister(self, group: str) -> bool:
		try:
			self._delete_tree(f"{self.ROOT}\\{group}")
		except FileNotFoundError:
			return False
		except OSError as e:
			raise RegistrationError(f"Could not remove menu {group}: {e}") from e
		return True

	def _delete_tree(self, key_path: str) -> None:
		reg = self._reg
		with reg.OpenKey(reg.HKEY_CURRENT_USER, key_path, 0, reg.KEY_ALL_ACCESS) as key:
			subkeys = []
			i = 0
			while True:
				try:
					subkeys.append(reg.EnumKey(key, i))
				except OSError:
					break
				i += 1
		for sub in subkeys:
			self._delete_tree(f"{key_path}\\{sub}")
		reg.DeleteKey(reg.HKEY_CURRENT_USER, key_path)


def default_backend():
	if sys.platform == 'win32':
		return WindowsMenuBackend()
	log.warning('Shell menu integration needs Windows; registrations are kept in memory only')
	return MemoryMenuBackend()


class MenuSynchronizer:
	def __init__(self, backend, program: Sequence[str] | None = None, group: str = MENU_GROUP, label: str = MENU_LABEL):
		self.backend = backend
		self.program = list(program) if program is not None else program_command()
		self.group = group; self.label = label

	def entries(self, targets: Iterable[Target]) -> List[Child]:
		return [(t.nickname, build_command(self.program, t.nickname)) for t in targets if t.nickname.strip()]

	def sync(self, targets: Iterable[Target]) -> List[Child]:
		"""Replace the menu group with one child per target."""
		children = self.entries(targets)
		self._unregister()
		if children:
			self._call(self.backend.register, self.group, self.label, children)
		log.info('Shell menu synced with %d target(s)', len(children))
		return children

	def unsync(self) -> bool:
		removed = self._unregister()
		if not removed:
			log.warning('Shell menu %s was not registered', self.group)
		return removed

	def _unregister(self) -> bool:
		return self._call(self.backend.unregister, self.group)

	def _call(self, fn, *args):
		try:
			return fn(*args)
		except RegistrationError:
			raise
		except OSError as e:
			raise RegistrationError(f"Shell menu update failed: {e}") from e
