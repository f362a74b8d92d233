"""Copy invoker: robocopy argument contract and exit-status interpretation."""
from __future__ import annotations
import subprocess, logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional
from config.settings import (
	COPY_TOOL, RETRY_COUNT, RETRY_WAIT_SECONDS, COPY_THREADS, LOG_ENABLED, LOG_FILE_NAME, FAILURE_EXIT_CODE
)
from .errors import CopyFailed

log = logging.getLogger(__name__)

# robocopy exit status is a bit field
EXIT_FLAGS = (
	(1, 'files copied'),
	(2, 'extra files or directories in destination'),
	(4, 'mismatched files or directories'),
	(8, 'some files or directories could not be copied'),
	(16, 'fatal error, nothing copied'),
)


@dataclass
class CopyOptions:
	retries: int = RETRY_COUNT
	wait_seconds: int = RETRY_WAIT_SECONDS
	threads: int = COPY_THREADS
	write_log: bool = LOG_ENABLED
	tool: str = COPY_TOOL


@dataclass
class CopyOutcome:
	source: Path
	target: Path
	exit_code: Optional[int]
	log_path: Optional[Path] = None
	error: str = ''

	@property
	def ok(self) -> bool:
		return self.exit_code is not None and self.exit_code < FAILURE_EXIT_CODE

	def describe(self) -> str:
		if self.exit_code is None:
			return self.error or 'copy tool did not run'
		if self.exit_code == 0:
			return 'no changes, nothing to copy'
		parts = [text for bit, text in EXIT_FLAGS if self.exit_code & bit]
		return ', '.join(parts) or f"exit code {self.exit_code}"

	def check(self) -> 'CopyOutcome':
		if not self.ok:
			code = f" (code {self.exit_code})" if self.exit_code is not None else ""
			raise CopyFailed(f"Copy to {self.target} failed{code}: {self.describe()}", self.exit_code)
		return self


def build_copy_args(source: Path, target: Path, exclusions: Iterable[str] = (), options: CopyOptions | None = None) -> List[str]:
	opts = options or CopyOptions()
	args = [
		opts.tool, str(source), str(target),
		'/E',  # recurse, including empty directories
		'/COPY:DAT', '/DCOPY:DAT',
		f'/R:{opts.retries}', f'/W:{opts.wait_seconds}',
		f'/MT:{opts.threads}',
	]
	names = sorted(exclusions)
	if names:
		args += ['/XF', *names, '/XD', *names]
	if opts.write_log:
		args += [f'/LOG+:{Path(target) / LOG_FILE_NAME}', '/TEE']
	return args


def _execute(args: List[str]) -> int:
	return subprocess.run(args, check=False).returncode


def run_copy(source: Path | str, target: Path | str, exclusions: Iterable[str] = (), options: CopyOptions | None = None) -> CopyOutcome:
	"""Run the copy tool and return its interpreted outcome (never raises CopyFailed)."""
	opts = options or CopyOptions()
	source = Path(source); target = Path(target)
	args = build_copy_args(source, target, exclusions, opts)
	log_path = target / LOG_FILE_NAME if opts.write_log else None
	log.debug('Running %s', ' '.join(args))
	try:
		code = _execute(args)
	except OSError as e:
		log.error('Could not start %s: %s', opts.tool, e)
		return CopyOutcome(source, target, None, log_path, f"could not start {opts.tool}: {e}")
	outcome = CopyOutcome(source, target, code, log_path)
	if outcome.ok:
		log.info('Copy finished (code %s): %s', code, outcome.describe())
	else:
		log.error('Copy failed (code %s): %s', code, outcome.describe())
	return outcome
