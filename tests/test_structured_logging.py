import io
import json

from ghdiscussions.logging import StructuredLogger, configure_logging, get_logger


def test_structured_logger_json_format():
    """JSON mode emits one object per line with extra fields inlined."""
    stream = io.StringIO()
    logger = StructuredLogger(name='test-json', json_logging=True, level='INFO', stream=stream)
    logger.log_operation('list', owner='octo', repo='hello')

    lines = [line for line in stream.getvalue().splitlines() if line]
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry['message'] == 'Operation: list'
    assert entry['operation'] == 'list'
    assert entry['owner'] == 'octo'
    assert entry['level'] == 'INFO'
    assert 'lineno' not in entry


def test_default_level_hides_info():
    stream = io.StringIO()
    logger = StructuredLogger(name='test-quiet', stream=stream)
    logger.info('not shown')
    logger.warning('shown')

    output = stream.getvalue()
    assert 'not shown' not in output
    assert 'shown' in output


def test_request_logging_at_debug():
    stream = io.StringIO()
    logger = StructuredLogger(name='test-debug', json_logging=True, level='DEBUG', stream=stream)
    logger.log_request('POST', 'https://api.github.com/graphql', 200, 12.3456)

    entry = json.loads(stream.getvalue())
    assert entry['status'] == 200
    assert entry['duration_ms'] == 12.35
    assert entry['method'] == 'POST'


def test_timed_operation_logs_start_and_duration():
    stream = io.StringIO()
    logger = StructuredLogger(name='test-timed', json_logging=True, level='INFO', stream=stream)
    with logger.timed_operation('listComments', number=3):
        pass

    entries = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert [e['operation'] for e in entries] == ['listComments_start', 'listComments']
    assert 'duration_ms' in entries[1]
    assert entries[1]['number'] == 3


def test_configure_logging_replaces_global():
    stream = io.StringIO()
    configured = configure_logging(json_logging=False, level='ERROR', stream=stream)
    assert get_logger() is configured
    get_logger().error('boom')
    assert 'ERROR boom' in stream.getvalue()
