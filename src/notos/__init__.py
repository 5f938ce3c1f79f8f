"""Keeps short notes in topics, one plain text file per topic.

If you installed via ``pip``, run ``notos -h`` to get help.

To use the Python API, look at :class:`notos.api.Notos`
"""

__version__ = '0.1.0'
