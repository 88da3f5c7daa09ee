# coding: utf-8

# keys in public
KEY_TIMESTAMP = "timestamp"
KEY_TIMESTAMP_SYNTHETIC = "timestamp_synthetic"
KEY_REMAINDER = "remainder"


class ParserDefinitionError(Exception):
    """ParserDefinitionError is raised when the given rules
    are inappropriate (e.g., header rules without a remainder item,
    or a field table pointing to unknown Entry attributes).
    """
    pass


class LogParseFailure(Exception):
    """LogParseFailure is the base class of failures
    on parsing one input line.
    """
    pass


class MalformedLine(LogParseFailure):
    """MalformedLine is raised when the input line does not
    match the Format 2 grammar (including empty lines).

    No partial :class:`~entry.Entry` is produced for such lines.
    If you iterate over many lines, catch this exception per line
    and continue with the next one.
    """
    pass


def _shorten(line, length=50):
    if len(line) > length:
        return line[:length]
    else:
        return line


class HistoryParser:
    """Battery history (Format 2) line parser.

    HistoryParser consists of two different parsers:
    :class:`~header.HeaderParser` and :class:`~fields.FieldExtractor`.
    The header parser checks the line grammar and splits a line into
    header items and the free-form remainder.
    The field extractor scans the remainder for scalar pairs,
    state toggles and wake reasons.

    Example:
        >>> parser = batterylog.init_parser()
        >>> entry = parser.process_line(
        ...     "01-11 12:11:14.405 075 c4002820 +running status=discharging volt=4170")
        >>> entry.status
        'discharging'
        >>> entry.voltage
        4170
        >>> dict(entry.states)
        {'running': True}

    Args:
        header_parser (:obj:`~header.HeaderParser`): header rule to use.
        field_extractor (:obj:`~fields.FieldExtractor`): remainder rules to use.
    """

    def __init__(self, header_parser, field_extractor):
        from .header import HeaderParser
        if not isinstance(header_parser, HeaderParser):
            raise TypeError("header_parser must be a HeaderParser")
        self.header_parser = header_parser
        self.field_extractor = field_extractor

    def process_header(self, line):
        """Parse header part of a Format 2 line.

        Args:
            line (str): A log line. Surrounding white spaces are ignored.

        Returns:
            dict: parsed header items, including "timestamp",
            "timestamp_synthetic" and "remainder".

        Raises:
            MalformedLine: if the line does not match the grammar.
        """
        stripped = line.strip()
        ret = None
        if stripped != "":
            ret = self.header_parser.process_line(stripped)
        if ret is None:
            msg = "header format mismatch: {0}".format(_shorten(stripped))
            raise MalformedLine(msg)
        return ret

    def process_remainder(self, remainder, builder=None):
        """Apply field extraction rules to a remainder string.

        Args:
            remainder (str): free-form part following the header.
            builder (:obj:`~entry.EntryBuilder`, optional):
                builder to populate. A new one is used if not given.

        Returns:
            :obj:`~entry.EntryBuilder`
        """
        from .entry import EntryBuilder
        if builder is None:
            builder = EntryBuilder()
        return self.field_extractor.process_line(remainder, builder)

    def process_line(self, line):
        """Parse a Format 2 line into an :class:`~entry.Entry`.

        Args:
            line (str): A log line. Line feed code will be removed.

        Returns:
            :obj:`~entry.Entry`

        Raises:
            MalformedLine: if the line does not match the grammar.
        """
        from .entry import EntryBuilder
        d = self.process_header(line)
        builder = EntryBuilder()
        builder.set_header(d)
        self.process_remainder(d[KEY_REMAINDER], builder)
        return builder.build()


def init_parser(header_parser=None, field_extractor=None):
    """Generate :class:`HistoryParser` object.

    If no arguments are given,
    this function generates HistoryParser with default configurations.

    Args:
        header_parser (:class:`~header.HeaderParser`, optional):
            If not given, use :func:`preset.default_header_parser`.
        field_extractor (:class:`~fields.FieldExtractor`, optional):
            If not given, use :func:`preset.default_field_extractor`.
    """

    if header_parser is None:
        from . import preset
        header_parser = preset.default_header_parser()
    if field_extractor is None:
        from . import preset
        field_extractor = preset.default_field_extractor()
    return HistoryParser(header_parser, field_extractor)
