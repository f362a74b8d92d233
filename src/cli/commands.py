"""CLI commands implemented with click.

`targetcopy run SOURCE NICKNAME` is what the right-click menu calls.
Without arguments (or with only one) the interactive menu opens instead.
"""
from __future__ import annotations
import logging, click
from config.settings import LOG_LEVEL, LOG_FORMAT, PAUSE_AT_END
from src.lib.app import AppContext
from src.lib.errors import TargetCopyError, ValidationError, StorageError, RegistrationError
from src.cli.interactive import run_menu

@click.group(invoke_without_command=True)
@click.option('--verbose', is_flag=True, help='Log debug output.')
@click.pass_context
def cli(ctx, verbose):
	"""Copy folders into versioned directories under remembered targets."""
	logging.basicConfig(level='DEBUG' if verbose else LOG_LEVEL, format=LOG_FORMAT)
	if ctx.obj is None:
		ctx.obj = AppContext.build()
	if ctx.invoked_subcommand is None:
		run_menu(ctx.obj)

@cli.command()
@click.argument('source', required=False)
@click.argument('nickname', required=False)
@click.pass_context
def run(ctx, source, nickname):
	"""Copy SOURCE to the target NICKNAME (interactive menu if either is missing)."""
	app: AppContext = ctx.obj
	if not (source and nickname):
		run_menu(app)
		return
	code = 0
	try:
		dest, outcome = app.copy_to_target(source, nickname)
		click.echo(f'Copied {source} -> {dest} ({outcome.describe()})')
		if outcome.log_path:
			click.echo(f'Log: {outcome.log_path}')
	except TargetCopyError as e:
		click.echo(f'Error: {e}')
		code = 1
	if PAUSE_AT_END:
		click.pause()
	ctx.exit(code)

@cli.command('list')
@click.pass_obj
def list_targets(app):
	"""Show the saved targets."""
	targets = app.targets(create=False)
	if not targets:
		click.echo('No targets.')
		return
	for i, t in enumerate(targets, 1):
		click.echo(f"{i}. {t.nickname} -> {t.path}")

@cli.command()
@click.argument('nickname')
@click.argument('path', type=click.Path(file_okay=False))
@click.pass_obj
def add(app, nickname, path):
	"""Save PATH as a target called NICKNAME."""
	try:
		t = app.add_target(nickname, path)
		click.echo(f'Added target {t.nickname}.')
	except (ValidationError, StorageError) as e:
		click.echo(f'Error: {e}')
	except RegistrationError as e:
		click.echo(f'Target saved, but the right-click menu was not updated: {e}')

@cli.command()
@click.argument('nickname')
@click.pass_obj
def remove(app, nickname):
	"""Forget the target NICKNAME."""
	try:
		t = app.remove_target_by_nickname(nickname)
		click.echo(f'Removed target {t.nickname}.')
	except (ValidationError, StorageError) as e:
		click.echo(f'Error: {e}')
	except RegistrationError as e:
		click.echo(f'Target removed, but the right-click menu was not updated: {e}')

@cli.command()
@click.pass_obj
def sync(app):
	"""Rebuild the right-click menu from the saved targets."""
	try:
		children = app.sync_menu()
		click.echo(f'Right-click menu updated ({len(children)} target(s)).')
	except RegistrationError as e:
		click.echo(f'Error: {e}')

@cli.command()
@click.pass_obj
def unsync(app):
	"""Remove the right-click menu."""
	try:
		if app.menu.unsync():
			click.echo('Right-click menu removed.')
		else:
			click.echo('Right-click menu was not installed.')
	except RegistrationError as e:
		click.echo(f'Error: {e}')
