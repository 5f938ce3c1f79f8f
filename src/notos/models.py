"""Defines the command intents and the rules for which command-line combinations are legal.

The most important function is :func:`validate`, which turns raw flags and positional arguments into
exactly one :class:`Intent`.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence


class ValidationError(Exception):
    """Raised when a combination of flags and arguments is not allowed."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LineIndexError(Exception):
    """Raised when the argument given for a line to delete is not a non-negative integer."""
    def __init__(self, message: str, value: str):
        super().__init__(message)
        self.message = message
        self.value = value


@dataclass
class ModeFlags:
    """The mode flags from the command line. At most one is meant to be set."""

    destroy: bool = False
    delete_line: bool = False
    edit: bool = False
    dump_all: bool = False


@dataclass(frozen=True)
class Intent:
    """Base class for the validated interpretations of a command line."""
    pass


@dataclass(frozen=True)
class DestroyIntent(Intent):
    """Delete a topic file irrevocably."""

    topic: Optional[str]
    """May be None, in which case there is nothing to destroy."""


@dataclass(frozen=True)
class DeleteLineIntent(Intent):
    """Delete one line from a topic."""

    topic: str

    value: str
    """The line number exactly as given on the command line. See :attr:`index`."""

    @property
    def index(self) -> int:
        """The 0-based line number to delete.

        Raises :exc:`LineIndexError` if :attr:`value` is not a non-negative integer.
        """
        text = self.value.strip()
        if not (text.isascii() and text.isdigit()):
            raise LineIndexError(f'Line number must be a non-negative integer, got: {self.value}', self.value)
        return int(text)


@dataclass(frozen=True)
class EditIntent(Intent):
    """Open the topic file in an external editor."""

    topic: str


@dataclass(frozen=True)
class DumpAllIntent(Intent):
    """Print every topic with all of its lines."""
    pass


@dataclass(frozen=True)
class AppendIntent(Intent):
    """Add a line of text to the end of a topic, creating the topic if needed."""

    topic: str
    text: str


@dataclass(frozen=True)
class ReadTopicIntent(Intent):
    """Print the lines of one topic."""

    topic: str


@dataclass(frozen=True)
class ListTopicsIntent(Intent):
    """Print the names of all topics."""
    pass


def _check_destroy(flags: ModeFlags, values: Sequence[str]) -> None:
    if flags.delete_line:
        raise ValidationError("You can't both destroy a topic and also delete a line from it")
    if values:
        raise ValidationError('If you wish to destroy a topic then do not add a note')
    if flags.edit:
        raise ValidationError("You can't use edit and destroy in the same call, choose one")
    if flags.dump_all:
        raise ValidationError('Destroying a topic and dumping all data are mutually exclusive')


def _check_delete_line(flags: ModeFlags, topic: Optional[str], values: Sequence[str]) -> None:
    if topic is None:
        raise ValidationError('You need to specify a topic from which to delete a line')
    if not values:
        raise ValidationError('You need to specify a line to delete')
    if flags.dump_all:
        raise ValidationError('Either delete a line or dump all data, not both')


def _check_edit(flags: ModeFlags, topic: Optional[str]) -> None:
    if topic is None:
        raise ValidationError('You need to specify a topic to edit')
    if flags.dump_all:
        raise ValidationError('You must choose either to edit or dump all data')


def _check_dump_all(topic: Optional[str], values: Sequence[str]) -> None:
    if topic is not None or values:
        raise ValidationError('If you wish to dump all data then do not provide any further arguments')


def validate(flags: ModeFlags, topic: Optional[str] = None, values: Sequence[str] = ()) -> Intent:
    """Checks a command line and returns what it asks for.

    The first flag that is set, in the order destroy, delete_line, edit, dump_all, decides the mode;
    with no flags, the mode is plain (list, read or append depending on the positional arguments).
    Only the rules of the selected mode are checked, and the first one broken is reported.

    Raises :exc:`ValidationError` describing the problem if the combination is not allowed. Otherwise
    the returned intent is always well-formed; note that a :class:`DeleteLineIntent` line number is
    parsed separately, via :attr:`DeleteLineIntent.index`.
    """
    values = list(values)
    if flags.destroy:
        _check_destroy(flags, values)
        return DestroyIntent(topic)
    if flags.delete_line:
        _check_delete_line(flags, topic, values)
        return DeleteLineIntent(topic, values[0])
    if flags.edit:
        _check_edit(flags, topic)
        return EditIntent(topic)
    if flags.dump_all:
        _check_dump_all(topic, values)
        return DumpAllIntent()
    if topic is None:
        return ListTopicsIntent()
    if values:
        return AppendIntent(topic, ' '.join(values))
    return ReadTopicIntent(topic)
