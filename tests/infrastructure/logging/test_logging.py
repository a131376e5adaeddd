"""Tests for the structured logging system."""

import json
import logging
import os

import pytest

from n3gb.infrastructure.logging import (
    StructuredLogger, get_logger, grid_operation, log_operation,
    operation_context, setup_logging, setup_simple_logging, get_log_stats,
    zoom_context,
)
from n3gb.infrastructure.logging.formatters import HumanFormatter, JsonFormatter
from n3gb.infrastructure.logging.handlers import ConsoleHandler, FileHandler


def make_record(**attrs):
    record = logging.LogRecord('n3gb.grid_systems.hexagonal_grid', logging.INFO,
                               __file__, 10, 'Generated %d cells', (42,), None)
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if isinstance(handler, (ConsoleHandler, FileHandler)):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestStructuredLogger:
    """Logger class and context propagation."""

    def test_get_logger_type(self):
        logger = get_logger('n3gb.tests.structured')

        assert isinstance(logger, StructuredLogger)
        assert get_logger('n3gb.tests.structured') is logger

    def test_context_attached(self, caplog):
        logger = get_logger('n3gb.tests.context')
        with caplog.at_level(logging.INFO):
            token = zoom_context.set(11)
            try:
                logger.info("inside")
            finally:
                zoom_context.reset(token)

        record = caplog.records[-1]
        assert record.context['zoom'] == 11
        assert 'operation' not in record.context

    def test_persistent_context(self, caplog):
        logger = get_logger('n3gb.tests.persistent')
        logger.add_context(run='abc')
        try:
            with caplog.at_level(logging.INFO):
                logger.info("tagged")
        finally:
            logger.clear_context()

        assert caplog.records[-1].context['run'] == 'abc'

    def test_end_operation_without_start(self, caplog):
        logger = get_logger('n3gb.tests.timing')
        with caplog.at_level(logging.WARNING):
            logger.end_operation('never_started')

        assert 'without start_operation' in caplog.records[-1].getMessage()


class TestGridOperation:
    """Context manager scoping."""

    def test_sets_and_resets_context(self, caplog):
        logger = get_logger('n3gb.tests.grid_operation')
        with caplog.at_level(logging.DEBUG):
            with grid_operation('from_extent', zoom=10, source='extent') as metrics:
                assert operation_context.get() == 'from_extent'
                logger.info("working")
                metrics['cells_generated'] = 12

        assert operation_context.get() is None
        assert zoom_context.get() is None

        working = next(r for r in caplog.records if r.getMessage() == 'working')
        assert working.context['operation'] == 'from_extent'
        assert working.context['zoom'] == 10
        assert working.context['source'] == 'extent'

        perf = [r for r in caplog.records if r.performance]
        assert perf[-1].performance['operation'] == 'from_extent'
        assert perf[-1].performance['cells_generated'] == 12

    def test_exception_propagates(self, caplog):
        with caplog.at_level(logging.DEBUG):
            with pytest.raises(RuntimeError):
                with grid_operation('from_polygon', zoom=3):
                    raise RuntimeError("boom")

        assert operation_context.get() is None
        assert not [r for r in caplog.records if getattr(r, 'performance', None)]

    def test_nested(self):
        with grid_operation('outer', zoom=4):
            with grid_operation('inner'):
                assert operation_context.get() == 'inner'
                assert zoom_context.get() == 4
            assert operation_context.get() == 'outer'


class TestLogOperation:
    """Decorator logging."""

    def test_logs_start_and_cells(self, caplog):
        @log_operation('build_cells', log_args=True)
        def build(count, zoom=7, label='x'):
            return list(range(count))

        with caplog.at_level(logging.DEBUG):
            assert build(5) == [0, 1, 2, 3, 4]

        start = next(r for r in caplog.records if r.getMessage() == 'Calling build_cells')
        assert start.context['arguments'] == {'count': 5, 'zoom': 7, 'label': 'x'}
        last = caplog.records[-1]
        assert last.performance['cells_generated'] == 5
        assert last.context['operation'] == 'build_cells'
        assert last.context['zoom'] == 7

    def test_disabled_level_skips_logging(self, caplog):
        @log_operation()
        def quiet():
            return 1

        with caplog.at_level(logging.WARNING):
            assert quiet() == 1
        assert not caplog.records


class TestFormatters:
    """Human and JSON output."""

    def test_human_context_and_performance(self):
        record = make_record(
            context={'operation': 'from_polygon', 'zoom': 10, 'source': 'polygon'},
            performance={'duration_seconds': 0.5, 'cells_generated': 100, 'cells_per_second': 200.0},
        )
        output = HumanFormatter(use_colors=False).format(record)

        assert '[op:from_polygon | z:10 | src:polygon]' in output
        assert 'Generated 42 cells' in output
        assert '0.500s | 100 cells | 200.0 cells/s' in output
        assert '\033[' not in output

    def test_human_zoom_zero_shown(self):
        record = make_record(context={'zoom': 0})
        assert '[z:0]' in HumanFormatter(use_colors=False).format(record)

    def test_human_shortens_logger_name(self):
        output = HumanFormatter(use_colors=False).format(make_record())
        assert '[...hexagonal_grid]' in output

    def test_json(self):
        record = make_record(context={'zoom': 12}, performance={'duration_seconds': 0.1})
        data = json.loads(JsonFormatter().format(record))

        assert data['level'] == 'INFO'
        assert data['message'] == 'Generated 42 cells'
        assert data['grid'] == {'zoom': 12}
        assert 'context' not in data
        assert data['performance'] == {'duration_seconds': 0.1}
        assert 'traceback' not in data


class TestSetup:
    """Root logger configuration."""

    def test_setup_logging_writes_json(self, tmp_path, test_config, restore_root_logger):
        log_file = tmp_path / 'logs' / 'run.log'
        setup_logging(test_config, log_file=str(log_file), console=False, log_level='DEBUG')

        with grid_operation('from_extent', zoom=9):
            get_logger('n3gb.tests.setup').info("hello")
        for handler in restore_root_logger.handlers:
            handler.flush()

        lines = [json.loads(line) for line in log_file.read_text().splitlines()]
        hello = next(line for line in lines if line['message'] == 'hello')
        assert hello['grid'] == {'operation': 'from_extent', 'zoom': 9}
        assert hello['context']['logger_name'] == 'n3gb.tests.setup'
        assert get_log_stats()['file']['filename'] == os.path.abspath(log_file)

    def test_setup_simple_logging(self, restore_root_logger):
        setup_simple_logging('WARNING')

        assert restore_root_logger.level == logging.WARNING
        assert len(restore_root_logger.handlers) == 1
        assert get_log_stats() == {}


class TestGridLogging:
    """Grid builds emit tagged performance records."""

    def test_grid_build_reports_cells(self, caplog, sample_extent):
        from n3gb import HexagonalGrid

        with caplog.at_level(logging.DEBUG, logger='n3gb'):
            grid = HexagonalGrid.from_extent(*sample_extent, 10)

        perf = [r for r in caplog.records if getattr(r, 'performance', None)
                and r.performance['operation'] == 'from_extent']
        assert perf[-1].performance['cells_generated'] == len(grid)
        assert perf[-1].context['zoom'] == 10
        assert perf[-1].context['source'] == 'extent'

    def test_line_constructor_is_tagged(self, caplog):
        from n3gb import HexCell

        with caplog.at_level(logging.DEBUG, logger='n3gb'):
            cells = HexCell.from_line_string([(457000, 339500), (458000, 340500)], 10)

        perf = [r for r in caplog.records if getattr(r, 'performance', None)
                and r.performance['operation'] == 'cells_from_line']
        assert perf[-1].performance['cells_generated'] == len(cells)
        assert perf[-1].context['source'] == 'line'
