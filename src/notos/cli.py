"""Command-line interface for notos."""


import argparse
import sys
from terminaltables import AsciiTable
from notos import __version__
from notos.api import Notos, EditorError
from notos.conf import ConfError
from notos.models import ModeFlags, ValidationError, LineIndexError, validate, Intent, DestroyIntent,\
    DeleteLineIntent, EditIntent, DumpAllIntent, AppendIntent, ReadTopicIntent, ListTopicsIntent
from notos.store import TopicNotFoundError, LineOutOfRangeError, InvalidTopicError, InvalidNoteError, ENCODING,\
    ENCODING_ERRORS


OK = 0
VALIDATION_FAIL = 1
TARGET_NOT_FOUND = 2
OPERATION_FAIL = 3


def _printable(line: str) -> str:
    return line.encode(ENCODING, ENCODING_ERRORS).decode(ENCODING, 'replace')


def _destroy(intent: DestroyIntent, nt: Notos) -> int:
    if intent.topic is None:
        nt.log.warning('Tried to destroy without naming a topic')
        print('You need to specify a topic to destroy', file=sys.stderr)
        return TARGET_NOT_FOUND
    nt.store.destroy(intent.topic)
    print(f'Destroyed {intent.topic}')
    return OK


def _delete_line(intent: DeleteLineIntent, nt: Notos) -> int:
    index = intent.index
    line = nt.store.delete_line(intent.topic, index)
    print(f'Deleted line {index} from {intent.topic}: {_printable(line)}')
    return OK


def _edit(intent: EditIntent, nt: Notos) -> int:
    return nt.edit(intent.topic)


def _dump_all(intent: DumpAllIntent, nt: Notos) -> int:
    for topic, lines in nt.store.dump():
        print(f'{topic}:')
        for line in lines:
            print(f'\t{_printable(line)}')
    return OK


def _append(intent: AppendIntent, nt: Notos) -> int:
    nt.store.append(intent.topic, intent.text)
    return OK


def _read(intent: ReadTopicIntent, nt: Notos) -> int:
    for line in nt.store.read(intent.topic):
        print(_printable(line))
    return OK


def _list(intent: ListTopicsIntent, nt: Notos) -> int:
    topics = nt.store.topics()
    if not topics:
        return OK
    data = [('Topic', 'Notes')] + [(t, str(nt.store.line_count(t))) for t in topics]
    table = AsciiTable(data)
    table.justify_columns[1] = 'right'
    print(table.table)
    return OK


_HANDLERS = {
    DestroyIntent: _destroy,
    DeleteLineIntent: _delete_line,
    EditIntent: _edit,
    DumpAllIntent: _dump_all,
    AppendIntent: _append,
    ReadTopicIntent: _read,
    ListTopicsIntent: _list,
}


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        raise ValidationError(message)


def argparser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog='notos',
        description='Keep short notes in topics. With no arguments, lists your topics. With just a topic, '
                    'prints its notes. With a topic followed by text, adds the text as a new note.')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--destroy', action='store_true',
                        help='Destroy (delete) a topic file. This can not be undone.')
    parser.add_argument('-d', '--delete-line', action='store_true',
                        help='Delete a line from the topic. Lines are numbered starting from 0.')
    parser.add_argument('-e', '--edit', action='store_true',
                        help='Open the topic file in your editor ($VISUAL or $EDITOR).')
    parser.add_argument('-a', '--dump-all', action='store_true', help='Print all notes from all topics.')
    parser.add_argument('topic', nargs='?', help='Name of the topic.')
    parser.add_argument('value', nargs='*',
                        help='Text of a note to add, joined with single spaces; or, with --delete-line, '
                             'the number of the line to delete.')
    return parser


def run(intent: Intent, nt: Notos) -> int:
    """Performs the intent and returns the exit code, reporting any failure to stderr and the log."""
    try:
        return _HANDLERS[type(intent)](intent, nt)
    except TopicNotFoundError as e:
        nt.log.warning(e.message)
        print(e.message, file=sys.stderr)
        return TARGET_NOT_FOUND
    except (LineIndexError, LineOutOfRangeError, InvalidTopicError, InvalidNoteError) as e:
        nt.log.error(e.message)
        print(e.message, file=sys.stderr)
        return VALIDATION_FAIL
    except EditorError as e:
        nt.log.error(e.message)
        print(f'Error: {e.message}', file=sys.stderr)
        return OPERATION_FAIL
    except (OSError, UnicodeError) as e:
        nt.log.exception('Failed to perform %s', intent)
        print(f'Error: {e}', file=sys.stderr)
        return OPERATION_FAIL


def main(args=None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.
    """
    try:
        nt = Notos.for_user()
    except ConfError as e:
        print(f'Error: {e.message}', file=sys.stderr)
        return OPERATION_FAIL
    except OSError as e:
        print(f'Error: {e}', file=sys.stderr)
        return OPERATION_FAIL

    with nt:
        parser = argparser()
        try:
            parsed = parser.parse_intermixed_args(args)
            flags = ModeFlags(destroy=parsed.destroy, delete_line=parsed.delete_line,
                              edit=parsed.edit, dump_all=parsed.dump_all)
            intent = validate(flags, parsed.topic, parsed.value)
        except ValidationError as e:
            nt.log.error(e.message)
            print(e.message, file=sys.stderr)
            return VALIDATION_FAIL
        nt.log.debug('Running %s', intent)
        return run(intent, nt)
