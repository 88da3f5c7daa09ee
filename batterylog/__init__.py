"""batterylog parses Android battery history lines (Format 2)
into structured records, and detects the history format version."""

__version__ = '0.1.0'

from ._common import HistoryParser, init_parser
from ._common import ParserDefinitionError, LogParseFailure, MalformedLine
from .entry import Entry, EntryBuilder
from .projection import FlatRecord, project
from .detect import classify, classify_lines
from .load import load_from_config, load_detector_config


def parse(line):
    """Parse one Format 2 line with the default parser.

    Raises:
        MalformedLine: if the line does not match the grammar.
    """
    return _DEFAULT_PARSER.process_line(line)


_DEFAULT_PARSER = init_parser()
