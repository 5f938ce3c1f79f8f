from pathlib import Path
import subprocess
import pytest
from notos.api import Notos, EditorError
from notos.conf import NotosConf
from notos.store import InvalidTopicError


def config():
    return NotosConf(root_dir=Path('/home/me/.notos'), notes_dir=Path('/notes'),
                     log_file=Path('/home/me/.notos/notos.log'), log_enabled=False)


def test_for_user(fs):
    Path('~').expanduser().mkdir(parents=True)
    Path('~/.notos').expanduser().mkdir()
    Path('~/.notos/config.toml').expanduser().write_text('notes_dir = "/notes"\nlog_enabled = false\n')
    with Notos.for_user() as nt:
        assert nt.conf.notes_dir == Path('/notes')
        assert nt.store.notes_dir == Path('/notes')
        assert nt.store.log is nt.log
        assert Path('/notes').is_dir()


def test_edit(fs, mocker, monkeypatch):
    run = mocker.patch('subprocess.run', return_value=subprocess.CompletedProcess([], 3))
    monkeypatch.delenv('VISUAL', raising=False)
    monkeypatch.setenv('EDITOR', 'code --wait')
    nt = Notos(config())
    assert nt.edit('work') == 3
    run.assert_called_once_with(['code', '--wait', '/notes/work.txt'])

    monkeypatch.setenv('VISUAL', 'nano')
    nt.edit('work')
    run.assert_called_with(['nano', '/notes/work.txt'])

    monkeypatch.delenv('VISUAL')
    monkeypatch.delenv('EDITOR')
    nt.edit('work')
    run.assert_called_with(['vi', '/notes/work.txt'])


def test_edit_invalid_topic(fs, mocker):
    run = mocker.patch('subprocess.run')
    with pytest.raises(InvalidTopicError):
        Notos(config()).edit('../escape')
    run.assert_not_called()


def test_edit_bad_editor(fs, mocker, monkeypatch):
    run = mocker.patch('subprocess.run')
    monkeypatch.delenv('VISUAL', raising=False)
    monkeypatch.setenv('EDITOR', 'vim "')
    nt = Notos(config())
    with pytest.raises(EditorError, match='Can not parse editor command') as excinfo:
        nt.edit('work')
    assert excinfo.value.command == 'vim "'

    monkeypatch.setenv('VISUAL', '   ')
    with pytest.raises(EditorError, match='Editor command is empty'):
        nt.edit('work')
    run.assert_not_called()


# Most of the Notos class is tested indirectly via the tests for the CLI.
