from pathlib import Path
import pytest
from notos.conf import NotosConf, ConfError, resolve


HOME = '/home/me'
ROOT = '/home/me/.notos'


def write_config(fs, contents, name='config.toml'):
    fs.create_file(f'{ROOT}/{name}', contents=contents)


def test_fresh_install(fs):
    conf = resolve(Path(HOME))
    assert conf == NotosConf(root_dir=Path(ROOT), notes_dir=Path(ROOT, 'notes'), log_file=Path(ROOT, 'notos.log'),
                             log_level='debug', log_enabled=True)
    assert Path(ROOT).is_dir()
    assert Path(ROOT, 'notes').is_dir()
    assert not Path(ROOT, 'notos.log').exists()


def test_for_user(fs):
    Path('~').expanduser().mkdir(parents=True)
    conf = NotosConf.for_user()
    assert conf.root_dir == Path('~/.notos').expanduser()
    assert conf.notes_dir.is_dir()


def test_idempotent(tmp_path, mocker):
    first = resolve(tmp_path)
    mkdir = mocker.spy(Path, 'mkdir')
    second = resolve(tmp_path)
    assert first == second
    assert mkdir.call_count == 0


def test_only_log_enabled(fs):
    write_config(fs, 'log_enabled = false\n')
    conf = resolve(Path(HOME))
    assert not conf.log_enabled
    assert conf.notes_dir == Path(ROOT, 'notes')
    assert conf.log_file == Path(ROOT, 'notos.log')
    assert conf.log_level == 'debug'


def test_log_file_does_not_change_log_enabled(fs):
    write_config(fs, 'log_file = "/var/log/notos.log"\n')
    conf = resolve(Path(HOME))
    assert conf.log_file == Path('/var/log/notos.log')
    assert conf.log_enabled


def test_all_keys(fs):
    write_config(fs, """
notes_dir = "/data/notes"
log_file = "logs/notos.log"
log_enabled = true
log_level = "WARN"
something_else = 12
""")
    conf = resolve(Path(HOME))
    assert conf.notes_dir == Path('/data/notes')
    assert conf.log_file == Path(ROOT, 'logs/notos.log')
    assert conf.log_enabled
    assert conf.log_level == 'warn'
    assert Path('/data/notes').is_dir()
    assert not Path(ROOT, 'notes').exists()


def test_home_relative_path(fs):
    write_config(fs, 'notes_dir = "~/Documents/notes"\n')
    conf = resolve(Path(HOME))
    assert conf.notes_dir == Path('~/Documents/notes').expanduser()


def test_legacy_config_name(fs):
    write_config(fs, 'notes_dir = "old-notes"\n', name='config')
    assert resolve(Path(HOME)).notes_dir == Path(ROOT, 'old-notes')


@pytest.mark.parametrize('contents,match', [
    ('log_enabled = "yes"\n', '`log_enabled` must be true or false'),
    ('notes_dir = 5\n', '`notes_dir` must be a non-empty string'),
    ('notes_dir = ""\n', '`notes_dir` must be a non-empty string'),
    ('log_file = false\n', '`log_file` must be a non-empty string'),
    ('log_level = "loud"\n', '`log_level` must be one of trace, debug, info, warn, error'),
    ('notes_dir = \n', 'Failed to parse config file'),
])
def test_malformed(fs, contents, match):
    write_config(fs, contents)
    with pytest.raises(ConfError, match=match) as excinfo:
        resolve(Path(HOME))
    assert excinfo.value.path == Path(ROOT, 'config.toml')


def test_not_utf8(fs):
    write_config(fs, b'notes_dir = "caf\xe9"\n')
    with pytest.raises(ConfError, match='not valid UTF-8') as excinfo:
        resolve(Path(HOME))
    assert excinfo.value.path == Path(ROOT, 'config.toml')
