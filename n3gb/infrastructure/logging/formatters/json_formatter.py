"""JSON-lines formatter for log files."""

import json
import logging
from datetime import datetime, timezone

GRID_FIELDS = ('operation', 'zoom', 'source')


class JsonFormatter(logging.Formatter):
    """
    One compact JSON object per record.

    Grid context (operation, zoom, source) is lifted into a ``grid`` object;
    the remaining context fields stay under ``context``.
    """

    def format(self, record: logging.LogRecord) -> str:
        context = dict(getattr(record, 'context', None) or {})
        grid = {key: context.pop(key) for key in GRID_FIELDS if key in context}

        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'location': f"{record.module}:{record.funcName}:{record.lineno}",
            'pid': record.process,
        }
        if grid:
            entry['grid'] = grid
        if context:
            entry['context'] = context

        performance = getattr(record, 'performance', None)
        if performance:
            entry['performance'] = performance

        tb = getattr(record, 'traceback', None)
        if not tb and record.exc_info:
            tb = self.formatException(record.exc_info)
        if tb:
            entry['traceback'] = tb

        return json.dumps(entry, separators=(',', ':'), default=str)
