import logging
import argparse
from egcg_core.app_logging import logging_default as log_cfg
from run_info_extractor.config import default as cfg, load_config
from run_info_extractor.exceptions import RunInfoError
from run_info_extractor.extraction import RunInfoExtractor

app_logger = log_cfg.get_logger('client')


def main(argv=None):
    args = _parse_args(argv)

    load_config()

    log_cfg.set_log_level(logging.DEBUG if args.debug else logging.INFO)
    log_cfg.cfg = cfg.get('logging', {})
    log_cfg.configure_handlers_from_config()
    log_cfg.add_stdout_handler()

    try:
        RunInfoExtractor(args.input, args.output, _unescape(args.delim)).execute()
    except RunInfoError as e:
        app_logger.error('Could not extract run info from %s: %s', args.input, e)
        return 1
    return 0


def _unescape(delim):
    """Allow a tab delimiter to be passed as '\\t' on the command line."""
    if delim is None:
        return None
    return delim.replace('\\t', '\t')


def _parse_args(argv=None):
    p = argparse.ArgumentParser(description='Extract information about an Illumina sequencing run from RunInfo.xml')
    p.add_argument('-i', '--input', required=True, help='RunInfo.xml, typically found in the run folder')
    p.add_argument('-o', '--output', required=True, help='The output file')
    p.add_argument('-d', '--delim', default=None, help='The column delimiter (default: tab)')
    p.add_argument('--debug', action='store_true', help='override log level to debug')
    return p.parse_args(argv)
