"""Console output for interactive sessions."""

import logging
import os
import sys

from ..formatters import HumanFormatter


def stream_supports_color(stream) -> bool:
    """ANSI colours only on a TTY, honouring ``NO_COLOR`` and ``TERM=dumb``."""
    isatty = getattr(stream, 'isatty', None)
    if isatty is None or not isatty():
        return False
    return not os.environ.get('NO_COLOR') and os.environ.get('TERM', '') != 'dumb'


class ConsoleHandler(logging.StreamHandler):
    """Human-formatted records on stderr, INFO and above by default."""

    def __init__(self,
                 stream=None,
                 use_colors=None,
                 show_context: bool = True,
                 level: int = logging.INFO):
        super().__init__(stream if stream is not None else sys.stderr)
        if use_colors is None:
            use_colors = stream_supports_color(self.stream)
        self.setFormatter(HumanFormatter(use_colors=use_colors, show_context=show_context))
        self.setLevel(level)
