#!/usr/bin/env python

import csv
import logging
import sys

import click

_logger = logging.getLogger("batterylog")


def text_postprocess(line):
    return line.rstrip("\r\n")


def iter_lines(files, encoding="utf-8"):
    if len(files) == 0:
        for line in sys.stdin:
            yield text_postprocess(line)
    else:
        for fp in files:
            if fp.endswith(".bz2"):
                import bz2
                with bz2.open(fp, 'rt', encoding=encoding) as f:
                    for line in f:
                        yield text_postprocess(line)
            elif fp.endswith(".gz"):
                import gzip
                with gzip.open(fp, 'rt', encoding=encoding) as f:
                    for line in f:
                        yield text_postprocess(line)
            else:
                with open(fp, 'rt', encoding=encoding) as f:
                    for line in f:
                        yield text_postprocess(line)


def iter_entries(parser, lines):
    """Parse lines independently; malformed lines are reported and skipped."""
    from batterylog import MalformedLine
    for lineno, line in enumerate(lines, 1):
        if line.strip() == "":
            continue
        try:
            yield parser.process_line(line)
        except MalformedLine as e:
            _logger.warning("line %d skipped: %s", lineno, e)


@click.command()
@click.argument("files", nargs=-1)
@click.option("--config", "-c", default=None,
              help="filename of parser config")
@click.option("--encoding", default="utf-8",
              help="encoding to load input data")
@click.option("--output", "-o", default=None,
              help="output filename")
@click.option("--type", "-t", "format_type", default="object",
              type=click.Choice(["object", "csv"]),
              help="output format type")
@click.option("--detect", "-d", "detect_only", is_flag=True,
              help="show the history format version (1 or 2) only")
@click.option("--verbose", "-v", is_flag=True,
              help="verbose output to stderr")
def main(files, config, encoding, output, format_type, detect_only, verbose):
    """Parse battery history lines given in FILES (or stdin if FILES not given)."""

    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    from batterylog import init_parser, classify_lines, project
    from batterylog import load_from_config, load_detector_config
    if config:
        parser = load_from_config(config)
        detect_kwargs = load_detector_config(config)
    else:
        parser = init_parser()
        detect_kwargs = {}

    if output:
        f_output = open(output, "w", newline="")
    else:
        f_output = sys.stdout

    try:
        if detect_only:
            version = classify_lines(iter_lines(files, encoding=encoding),
                                     **detect_kwargs)
            f_output.write("{0}\n".format(version))
        elif format_type == "csv":
            writer = csv.writer(f_output)
            for entry in iter_entries(parser, iter_lines(files, encoding=encoding)):
                writer.writerow(project(entry).as_row())
        else:
            for entry in iter_entries(parser, iter_lines(files, encoding=encoding)):
                f_output.write(repr(entry) + "\n")
    finally:
        if output:
            f_output.close()


if __name__ == "__main__":
    main()
