from click.testing import CliRunner
from src.cli.commands import cli
from src.lib import copier
from src.lib.app import AppContext
from src.lib.shell_menu import MemoryMenuBackend

def make_app(tmp_path):
    backend = MemoryMenuBackend()
    return AppContext.build(tmp_path / 'targets.txt', backend), backend

def test_cli_add_list_remove(tmp_path):
    app, backend = make_app(tmp_path)
    dest = tmp_path / 'dest'; dest.mkdir()
    runner = CliRunner()
    add = runner.invoke(cli, ['add', 'nas', str(dest)], obj=app)
    assert add.exit_code == 0
    assert 'Added target nas' in add.output
    assert 'nas' in dict(backend.groups['TargetCopy'][1])
    lst = runner.invoke(cli, ['list'], obj=app)
    assert f'1. nas -> {dest}' in lst.output
    dup = runner.invoke(cli, ['add', 'nas', str(dest)], obj=app)
    assert 'Error: Nickname already in use' in dup.output
    rm = runner.invoke(cli, ['remove', 'nas'], obj=app)
    assert 'Removed target nas' in rm.output
    assert not app.store.path.exists()
    assert 'No targets' in runner.invoke(cli, ['list'], obj=app).output

def test_cli_sync_and_unsync(tmp_path):
    app, backend = make_app(tmp_path)
    dest = tmp_path / 'dest'; dest.mkdir()
    app.store.add('nas', str(dest))
    runner = CliRunner()
    r = runner.invoke(cli, ['sync'], obj=app)
    assert '1 target(s)' in r.output
    assert 'TargetCopy' in backend.groups
    assert 'menu removed' in runner.invoke(cli, ['unsync'], obj=app).output
    assert 'not installed' in runner.invoke(cli, ['unsync'], obj=app).output

def test_cli_run_unknown_nickname_exits_1(tmp_path):
    app, _ = make_app(tmp_path)
    src = tmp_path / 'src'; src.mkdir()
    r = CliRunner().invoke(cli, ['run', str(src), 'nope'], obj=app)
    assert r.exit_code == 1
    assert 'Unknown target: nope' in r.output

def test_cli_run_missing_source_exits_1(tmp_path):
    app, _ = make_app(tmp_path)
    dest = tmp_path / 'dest'; dest.mkdir()
    app.store.add('nas', str(dest))
    r = CliRunner().invoke(cli, ['run', str(tmp_path / 'missing'), 'nas'], obj=app)
    assert r.exit_code == 1
    assert 'Source folder not found' in r.output

def test_cli_run_copies(monkeypatch, tmp_path):
    monkeypatch.setattr(copier, '_execute', lambda args: 3)
    app, _ = make_app(tmp_path)
    dest = tmp_path / 'dest'; dest.mkdir()
    app.store.add('nas', str(dest))
    src = tmp_path / 'Photos'; src.mkdir()
    r = CliRunner().invoke(cli, ['run', str(src), 'nas'], obj=app)
    assert r.exit_code == 0
    assert 'Photos V1' in r.output
    assert len(list(dest.iterdir())) == 1

def test_cli_run_hard_failure_exits_1(monkeypatch, tmp_path):
    monkeypatch.setattr(copier, '_execute', lambda args: 16)
    app, _ = make_app(tmp_path)
    dest = tmp_path / 'dest'; dest.mkdir()
    app.store.add('nas', str(dest))
    src = tmp_path / 'Photos'; src.mkdir()
    r = CliRunner().invoke(cli, ['run', str(src), 'nas'], obj=app)
    assert r.exit_code == 1
    assert 'code 16' in r.output

def test_store_path_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv('TARGETCOPY_STORE', str(tmp_path / 'env' / 'targets.txt'))
    monkeypatch.setattr('src.lib.app.default_backend', MemoryMenuBackend)
    dest = tmp_path / 'dest'; dest.mkdir()
    r = CliRunner().invoke(cli, ['add', 'nas', str(dest)])
    assert r.exit_code == 0
    assert 'nas|' in (tmp_path / 'env' / 'targets.txt').read_text(encoding='utf-8')

class FailingBackend(MemoryMenuBackend):
    def register(self, group, label, children):
        raise PermissionError('access denied')

def test_cli_remove_last_keeps_store_deleted(tmp_path):
    app, _ = make_app(tmp_path)
    dest = tmp_path / 'dest'; dest.mkdir()
    runner = CliRunner()
    runner.invoke(cli, ['add', 'nas', str(dest)], obj=app)
    runner.invoke(cli, ['remove', 'nas'], obj=app)
    assert not app.store.path.exists()
    assert 'No targets' in runner.invoke(cli, ['list'], obj=app).output
    assert not app.store.path.exists()

def test_cli_add_reports_menu_failure_but_keeps_target(tmp_path):
    app = AppContext.build(tmp_path / 'targets.txt', FailingBackend())
    dest = tmp_path / 'dest'; dest.mkdir()
    r = CliRunner().invoke(cli, ['add', 'nas', str(dest)], obj=app)
    assert r.exit_code == 0
    assert 'Target saved, but the right-click menu was not updated' in r.output
    assert 'access denied' in r.output
    assert [t.nickname for t in app.store.load()] == ['nas']

def test_cli_remove_reports_menu_failure_but_keeps_removal(tmp_path):
    app = AppContext.build(tmp_path / 'targets.txt', FailingBackend())
    dest = tmp_path / 'dest'; dest.mkdir()
    app.store.add('one', str(dest)); app.store.add('two', str(dest))
    r = CliRunner().invoke(cli, ['remove', 'one'], obj=app)
    assert 'Target removed, but the right-click menu was not updated' in r.output
    assert [t.nickname for t in app.store.load()] == ['two']

def test_cli_add_reports_unwritable_store(tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('not a directory')
    app, backend = make_app(tmp_path)
    app.store.path = blocker / 'targets.txt'
    dest = tmp_path / 'dest'; dest.mkdir()
    r = CliRunner().invoke(cli, ['add', 'nas', str(dest)], obj=app)
    assert r.exit_code == 0
    assert 'Error: Could not write target list' in r.output
    assert backend.groups == {}
