import os
from egcg_core.app_logging import AppLogger
from run_info_extractor.config import default_delimiter
from run_info_extractor.exceptions import RunInfoIOError
from run_info_extractor.reader.run_info import parse_run_info, run_info_path

HEADER_COLUMNS = ('run_barcode', 'flowcell_barcode', 'run_date', 'read_structure', 'num_lanes')


def format_lines(run_info, delim='\t'):
    """Render the header and a single data row for a RunInfo."""
    row = (
        run_info.run_barcode,
        run_info.flowcell_barcode,
        run_info.run_date.isoformat(),
        str(run_info.read_structure),
        str(run_info.num_lanes)
    )
    return [delim.join(HEADER_COLUMNS), delim.join(row)]


def assert_readable(path):
    if not os.path.isfile(path):
        raise RunInfoIOError('Input file does not exist or is not a file: ' + path)
    if not os.access(path, os.R_OK):
        raise RunInfoIOError('Input file is not readable: ' + path)


def assert_can_write_file(path):
    if os.path.exists(path):
        if not os.path.isfile(path):
            raise RunInfoIOError('Output path exists and is not a file: ' + path)
        if not os.access(path, os.W_OK):
            raise RunInfoIOError('Output file is not writable: ' + path)
    else:
        parent = os.path.dirname(os.path.abspath(path))
        if not os.path.isdir(parent):
            raise RunInfoIOError('Output directory does not exist: ' + parent)
        if not os.access(parent, os.W_OK):
            raise RunInfoIOError('Output directory is not writable: ' + parent)


class RunInfoExtractor(AppLogger):
    """
    Extracts information about an Illumina sequencing run from its RunInfo.xml. The output file will contain a
    header line and a single line with the columns:
      - run_barcode: the unique identifier for the run and flowcell, '<instrument>_<flowcell_barcode>'
      - flowcell_barcode
      - run_date: ISO-8601 date of the run
      - read_structure: the cycles of the run, e.g. '151T8B151T' for template and sample barcode cycles
      - num_lanes: number of lanes in the flowcell
    """

    def __init__(self, input_path, output_path, delim=None):
        """
        :param str input_path: RunInfo.xml, or the run folder containing it
        :param str output_path: file to write, overwritten if it exists
        :param str delim: column delimiter. Defaults to the configured run_info.delimiter, then a tab
        """
        self.input_path = run_info_path(input_path)
        self.output_path = output_path
        self.delim = delim if delim is not None else default_delimiter()

        assert_readable(self.input_path)
        assert_can_write_file(self.output_path)

    def execute(self):
        self.info('Extracting run info from %s', self.input_path)
        run_info = parse_run_info(self.input_path)
        lines = format_lines(run_info, self.delim)

        try:
            with open(self.output_path, 'w') as f:
                for l in lines:
                    f.write(l + '\n')
        except OSError as e:
            raise RunInfoIOError('Could not write %s: %s' % (self.output_path, e)) from e

        self.info('Wrote run info for %s to %s', run_info.run_barcode, self.output_path)
        return run_info
