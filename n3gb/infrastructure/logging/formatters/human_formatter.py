"""Console formatter."""

import logging
from typing import Any, Dict, Mapping, Optional


class HumanFormatter(logging.Formatter):
    """
    One line per record: time, level, logger, grid context tag, message.

    The tag reads ``[op:from_polygon | z:10 | src:polygon]``. Performance data
    follows on an indented line and tracebacks after that.
    """

    LEVEL_COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '',
        'WARNING': '\033[93m',
        'ERROR': '\033[91m',
        'CRITICAL': '\033[95m',
    }
    DIM = '\033[2m'
    RESET = '\033[0m'

    _TAG_LABELS = (('operation', 'op'), ('zoom', 'z'), ('source', 'src'))

    def __init__(self, use_colors: bool = True, show_context: bool = True):
        super().__init__(datefmt='%Y-%m-%d %H:%M:%S')
        self.use_colors = use_colors
        self.show_context = show_context

    def _paint(self, text: str, code: str) -> str:
        if not (self.use_colors and code):
            return text
        return f"{code}{text}{self.RESET}"

    def format(self, record: logging.LogRecord) -> str:
        head = [
            self._paint(self.formatTime(record, self.datefmt), self.DIM),
            self._paint(f"{record.levelname:<8}", self.LEVEL_COLORS.get(record.levelname, '')),
            self._paint(f"[{self.short_name(record.name)}]", self.DIM),
        ]
        if self.show_context:
            tag = self.context_tag(getattr(record, 'context', None))
            if tag:
                head.append(tag)
        head.append(record.getMessage())
        lines = [' '.join(head)]

        performance = getattr(record, 'performance', None)
        if performance:
            lines.append('  ' + self._paint(f"Performance: {self.performance_summary(performance)}", self.DIM))

        tb = getattr(record, 'traceback', None)
        if not tb and record.exc_info:
            tb = self.formatException(record.exc_info)
        if tb:
            lines.append(tb.rstrip('\n'))

        return '\n'.join(lines)

    @classmethod
    def context_tag(cls, context: Optional[Mapping[str, Any]]) -> str:
        if not context:
            return ''
        parts = [f"{label}:{context[key]}" for key, label in cls._TAG_LABELS
                 if context.get(key) is not None]
        return f"[{' | '.join(parts)}]" if parts else ''

    @staticmethod
    def short_name(name: str, max_length: int = 24) -> str:
        """Logger name cut to its last component when too long."""
        if len(name) <= max_length:
            return name
        tail = name.rsplit('.', 1)[-1]
        if len(tail) <= max_length - 3:
            return f"...{tail}"
        return f"{name[:max_length - 3]}..."

    @staticmethod
    def performance_summary(performance: Dict[str, Any]) -> str:
        parts = []
        if 'duration_seconds' in performance:
            parts.append(f"{performance['duration_seconds']:.3f}s")
        if 'cells_generated' in performance:
            parts.append(f"{performance['cells_generated']} cells")
        if 'cells_per_second' in performance:
            parts.append(f"{performance['cells_per_second']:.1f} cells/s")
        return ' | '.join(parts)
