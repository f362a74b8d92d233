"""Interactive target menu, driven by an explicit state machine."""
from __future__ import annotations
import click
from enum import Enum
from src.lib.app import AppContext
from src.lib.errors import ValidationError, StorageError, RegistrationError


class MenuState(Enum):
	MAIN_MENU = 'main'
	ADDING = 'adding'
	REMOVING = 'removing'
	SYNCING = 'syncing'
	UNSYNCING = 'unsyncing'
	EXIT = 'exit'


CHOICES = {
	1: ('Add a target', MenuState.ADDING),
	2: ('Remove a target', MenuState.REMOVING),
	3: ('Update the right-click menu', MenuState.SYNCING),
	4: ('Remove the right-click menu', MenuState.UNSYNCING),
	5: ('Exit', MenuState.EXIT),
}


def show_targets(app: AppContext) -> None:
	targets = app.targets(create=False)
	if not targets:
		click.echo('No targets yet.')
		return
	for i, t in enumerate(targets, 1):
		click.echo(f"{i}. {t.nickname} -> {t.path}")


def main_menu(app: AppContext) -> MenuState:
	click.echo('\n=== Targets ===')
	show_targets(app)
	click.echo('')
	for key, (label, _) in CHOICES.items():
		click.echo(f"{key}) {label}")
	choice = click.prompt('Choose', type=click.IntRange(1, len(CHOICES)))
	return CHOICES[choice][1]


def adding(app: AppContext) -> MenuState:
	nickname = click.prompt('Nickname')
	path = click.prompt('Destination folder')
	try:
		t = app.add_target(nickname, path)
		click.echo(f"Added target {t.nickname}.")
	except (ValidationError, StorageError) as e:
		click.echo(f'Error: {e}')
	except RegistrationError as e:
		click.echo(f'Target saved, but the right-click menu was not updated: {e}')
	return MenuState.MAIN_MENU


def removing(app: AppContext) -> MenuState:
	if not app.store.targets:
		click.echo('No targets to remove.')
		return MenuState.MAIN_MENU
	index = click.prompt('Number to remove (0 to cancel)', type=int)
	if index == 0:
		return MenuState.MAIN_MENU
	try:
		t = app.remove_target(index)
		click.echo(f"Removed target {t.nickname}.")
	except (ValidationError, StorageError) as e:
		click.echo(f'Error: {e}')
	except RegistrationError as e:
		click.echo(f'Target removed, but the right-click menu was not updated: {e}')
	return MenuState.MAIN_MENU


def syncing(app: AppContext) -> MenuState:
	try:
		children = app.sync_menu()
		click.echo(f"Right-click menu updated ({len(children)} target(s)).")
	except RegistrationError as e:
		click.echo(f'Error: {e}')
	return MenuState.MAIN_MENU


def unsyncing(app: AppContext) -> MenuState:
	try:
		if app.menu.unsync():
			click.echo('Right-click menu removed.')
		else:
			click.echo('Right-click menu was not installed.')
	except RegistrationError as e:
		click.echo(f'Error: {e}')
	return MenuState.MAIN_MENU


HANDLERS = {
	MenuState.MAIN_MENU: main_menu,
	MenuState.ADDING: adding,
	MenuState.REMOVING: removing,
	MenuState.SYNCING: syncing,
	MenuState.UNSYNCING: unsyncing,
}


def run_menu(app: AppContext) -> None:
	state = MenuState.MAIN_MENU
	while state is not MenuState.EXIT:
		try:
			state = HANDLERS[state](app)
		except click.Abort:
			# Ctrl-C or end of input at a prompt
			click.echo()
			state = MenuState.EXIT
