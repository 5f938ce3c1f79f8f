"""Provides the main entry point for using the library, :class:`Notos`"""

from __future__ import annotations
import logging
import os
import shlex
import subprocess
from typing import Optional
from notos.conf import NotosConf
from notos.log import configure_logging, close_logging
from notos.store import TopicStore


DEFAULT_EDITOR = 'vi'


class EditorError(Exception):
    """Raised when the editor command can not be understood."""
    def __init__(self, message: str, command: str):
        super().__init__(message)
        self.message = message
        self.command = command


class Notos:
    """Main entry point for working programmatically with your topics.

    Generally, you should get an instance using the :meth:`Notos.for_user` method. Call :meth:`close` when you're
    done with it, or else use it as a context manager.

    .. attribute:: conf
       :type: notos.conf.NotosConf

    .. attribute:: log
       :type: logging.Logger

    .. attribute:: store
       :type: notos.store.TopicStore

    Here's an example that adds a note and prints everything in the topic:

    .. code-block:: python

       from notos.api import Notos
       with Notos.for_user() as nt:
           nt.store.append('groceries', 'oat milk')
           print('\\n'.join(nt.store.read('groceries')))
    """

    @staticmethod
    def for_user() -> Notos:
        """Creates an instance using the configuration in ``~/.notos``, with logging set up from it.

        May raise :exc:`notos.conf.ConfError` or OSError.
        """
        conf = NotosConf.for_user()
        return Notos(conf, configure_logging(conf))

    def __init__(self, conf: NotosConf, log: Optional[logging.Logger] = None):
        self.conf = conf
        self.log = log if log is not None else logging.getLogger(__name__)
        self.store = TopicStore(conf.notes_dir, self.log)

    def edit(self, topic: str) -> int:
        """Opens the topic's file in the user's editor and returns the editor's exit code.

        The editor is taken from ``$VISUAL`` or ``$EDITOR``, falling back to ``vi``. The topic does not
        need to exist yet; saving from the editor creates it.

        Raises :exc:`EditorError` if the editor setting is not a valid shell command line.
        """
        path = self.store.path(topic)
        editor = os.environ.get('VISUAL') or os.environ.get('EDITOR') or DEFAULT_EDITOR
        try:
            command = shlex.split(editor)
        except ValueError as e:
            raise EditorError(f'Can not parse editor command {editor!r}: {e}', editor)
        if not command:
            raise EditorError(f'Editor command is empty: {editor!r}', editor)
        command.append(str(path))
        self.log.debug('Opening topic %s with %s', topic, command[0])
        return subprocess.run(command).returncode

    def close(self):
        """Releases the log file."""
        close_logging(self.log)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
