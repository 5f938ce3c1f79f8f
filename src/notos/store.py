"""Provides :class:`TopicStore`, which keeps each topic's notes as lines of a text file."""

from __future__ import annotations
import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional, Tuple
import shortuuid


TOPIC_EXTENSION = '.txt'
ENCODING = 'utf-8'
ENCODING_ERRORS = 'surrogateescape'


class Error(Exception):
    """Base class for errors about a topic."""
    def __init__(self, message: str, topic: str):
        super().__init__(message)
        self.message = message
        self.topic = topic


class TopicNotFoundError(Error):
    """Raised when an operation needs a topic that does not exist."""
    def __init__(self, topic: str):
        super().__init__(f'Topic does not exist: {topic}', topic)


class LineOutOfRangeError(Error):
    """Raised when a line number is beyond the end of a topic."""
    def __init__(self, topic: str, index: int, count: int):
        super().__init__(f'Topic {topic} has {count} line(s), there is no line {index}', topic)
        self.index = index
        self.count = count


class InvalidTopicError(Error):
    """Raised when a topic name cannot be used as a file name."""
    def __init__(self, topic: str):
        super().__init__(f'Not a valid topic name: {topic!r}', topic)


class InvalidNoteError(Error):
    """Raised when the text of a note would not fit on a single line."""
    def __init__(self, topic: str):
        super().__init__('A note must be a single line; it can not contain line breaks', topic)


def split_lines(content: str) -> List[str]:
    """Splits file content into lines on ``\\n`` only. A final newline does not start another line."""
    if not content:
        return []
    lines = content.split('\n')
    if lines[-1] == '':
        lines.pop()
    return lines


class TopicStore:
    """Reads and changes topics, each stored as ``<notes_dir>/<topic>.txt`` with one note per line.

    No file contents are kept between calls: every method opens the file it needs, and closes it
    before returning. Nothing guards against another process changing the same file at the same time.

    .. attribute:: notes_dir
       :type: pathlib.Path

    .. attribute:: log
       :type: logging.Logger
    """
    def __init__(self, notes_dir: Path, log: Optional[logging.Logger] = None):
        self.notes_dir = Path(notes_dir)
        self.log = log if log is not None else logging.getLogger(__name__)

    def path(self, topic: str) -> Path:
        """Returns the path of the file for the topic, whether or not it exists.

        Raises :exc:`InvalidTopicError` if the name is empty, starts with a period, or contains a path separator.
        """
        if (not topic or topic.startswith('.') or '/' in topic or '\0' in topic
                or os.sep in topic or (os.altsep and os.altsep in topic)):
            raise InvalidTopicError(topic)
        return self.notes_dir.joinpath(topic + TOPIC_EXTENSION)

    def exists(self, topic: str) -> bool:
        return self.path(topic).is_file()

    def _existing_path(self, topic: str) -> Path:
        path = self.path(topic)
        if not path.is_file():
            raise TopicNotFoundError(topic)
        return path

    def append(self, topic: str, text: str) -> None:
        """Adds text as a new last line of the topic, creating the topic if it doesn't exist yet.

        Raises :exc:`InvalidNoteError` if the text contains a line break.
        """
        path = self.path(topic)
        if '\n' in text or '\r' in text:
            raise InvalidNoteError(topic)
        if not self.notes_dir.exists():
            self.notes_dir.mkdir(parents=True)
        prefix = ''
        if path.is_file() and path.stat().st_size > 0:
            with open(path, 'rb') as file:
                file.seek(-1, os.SEEK_END)
                if file.read(1) != b'\n':
                    prefix = '\n'
        with open(path, 'a', encoding=ENCODING, errors=ENCODING_ERRORS, newline='') as file:
            file.write(f'{prefix}{text}\n')
        self.log.info('Added a note to topic %s', topic)

    def read(self, topic: str) -> List[str]:
        """Returns the lines of the topic in order, exactly as stored.

        Raises :exc:`TopicNotFoundError` if the topic does not exist.
        """
        path = self._existing_path(topic)
        with open(path, 'r', encoding=ENCODING, errors=ENCODING_ERRORS, newline='') as file:
            return split_lines(file.read())

    def line_count(self, topic: str) -> int:
        return len(self.read(topic))

    def delete_line(self, topic: str, index: int) -> str:
        """Removes the line at the 0-based index and returns it. Later lines move up by one.

        The remaining lines are written to a temporary file next to the topic, which then replaces
        the topic file, so the topic is never seen half-written.

        Raises :exc:`TopicNotFoundError` if the topic does not exist, or :exc:`LineOutOfRangeError`
        if it has no line at that index; the file is unchanged in either case.
        """
        path = self._existing_path(topic)
        lines = self.read(topic)
        if index < 0 or index >= len(lines):
            self.log.warning('Line %d is out of range for topic %s with %d line(s)', index, topic, len(lines))
            raise LineOutOfRangeError(topic, index, len(lines))
        removed = lines.pop(index)

        tmp = path.with_name(f'.{path.name}.{shortuuid.uuid()}.tmp')
        try:
            with open(tmp, 'w', encoding=ENCODING, errors=ENCODING_ERRORS, newline='') as file:
                file.write(''.join(f'{line}\n' for line in lines))
            shutil.copymode(path, tmp)
            os.replace(tmp, path)
        except BaseException:
            if tmp.exists():
                tmp.unlink()
            raise
        self.log.info('Deleted line %d from topic %s', index, topic)
        return removed

    def destroy(self, topic: str) -> None:
        """Deletes the topic's file. This can not be undone.

        Raises :exc:`TopicNotFoundError` if the topic does not exist.
        """
        path = self.path(topic)
        if not path.is_file():
            self.log.warning('Tried to destroy a non-existing topic %s', topic)
            raise TopicNotFoundError(topic)
        try:
            path.unlink()
        except OSError as e:
            self.log.error("Failed to delete file '%s': %s", path, e)
            raise
        self.log.info("File '%s' deleted successfully.", path)

    def topics(self) -> List[str]:
        """Returns the names of all topics, sorted.

        Files without the topic extension, and names starting with a period, are not topics.
        """
        if not self.notes_dir.is_dir():
            return []
        names = []
        for entry in os.scandir(self.notes_dir):
            if entry.name.startswith('.') or not entry.name.endswith(TOPIC_EXTENSION):
                continue
            if not entry.is_file():
                continue
            name = entry.name[:-len(TOPIC_EXTENSION)]
            if name:
                names.append(name)
        names.sort()
        return names

    def dump(self) -> List[Tuple[str, List[str]]]:
        """Returns every topic name, sorted, with its lines."""
        return [(topic, self.read(topic)) for topic in self.topics()]
