import os.path
from collections import namedtuple
from datetime import datetime
from xml.etree import ElementTree
from egcg_core.app_logging import logging_default as log_cfg
from run_info_extractor.exceptions import MalformedRunInfoError, InvalidDateError
from run_info_extractor.read_structure import ReadStructure, SampleBarcode, Template

app_logger = log_cfg.get_logger(__name__)


RunInfo = namedtuple(
    'RunInfo',
    ('run_barcode', 'flowcell_barcode', 'run_date', 'read_structure', 'num_lanes', 'instrument', 'run_id')
)
RunInfo.__doc__ = """
Fields parsed from a RunInfo.xml. run_barcode identifies both the instrument and the flowcell, as
'<instrument>_<flowcell_barcode>'. instrument and run_id are informational only.
"""


def run_info_path(path):
    """Resolve a run folder to the RunInfo.xml inside it. File paths are returned unchanged."""
    if os.path.isdir(path):
        return os.path.join(path, 'RunInfo.xml')
    return path


def parse_run_info(path):
    """
    Parse the flowcell barcode, instrument, run date, read structure and lane count from a RunInfo.xml.
    :param str path: RunInfo.xml file, or a run folder containing one
    :rtype: RunInfo
    """
    run_info_xml = run_info_path(path)
    try:
        root = ElementTree.parse(run_info_xml).getroot()
    except ElementTree.ParseError as e:
        raise MalformedRunInfoError('Could not parse %s: %s' % (run_info_xml, e)) from e

    if root.tag != 'RunInfo':
        raise MalformedRunInfoError('Expected a RunInfo root element in %s, got %s' % (run_info_xml, root.tag))

    run = _find(root, 'Run', run_info_xml)
    flowcell_barcode = _text(run, 'Flowcell', run_info_xml)
    instrument = _text(run, 'Instrument', run_info_xml)
    run_date = _text(run, 'Date', run_info_xml)
    num_lanes = _int(_attrib(_find(run, 'FlowcellLayout', run_info_xml), 'LaneCount', run_info_xml), 'LaneCount')
    if num_lanes < 1:
        raise MalformedRunInfoError('LaneCount must be positive, got %s' % num_lanes)

    reads = [
        (_is_indexed_read(r, run_info_xml), _num_cycles(r, run_info_xml))
        for r in _find(run, 'Reads', run_info_xml).findall('Read')
    ]
    if not reads:
        raise MalformedRunInfoError('No reads found in ' + run_info_xml)

    app_logger.debug(
        'Parsed %s: flowcell=%s, instrument=%s, date=%s, lanes=%s, reads=%s',
        run_info_xml, flowcell_barcode, instrument, run_date, num_lanes, reads
    )
    return RunInfo(
        run_barcode=instrument + '_' + flowcell_barcode,
        flowcell_barcode=flowcell_barcode,
        run_date=format_date(run_date),
        read_structure=build_read_structure(reads),
        num_lanes=num_lanes,
        instrument=instrument,
        run_id=run.get('Id')
    )


def build_read_structure(reads):
    """
    Translate:
        <Read Number="1" NumCycles="76" IsIndexedRead="N"/>
        <Read Number="2" NumCycles="8" IsIndexedRead="Y"/>
        <Read Number="3" NumCycles="76" IsIndexedRead="N"/>
    i.e. [(False, 76), (True, 8), (False, 76)], to the read structure '76T8B76T'.
    """
    segments = [SampleBarcode(num_cycles) if indexed else Template(num_cycles) for indexed, num_cycles in reads]
    return ReadStructure(segments, reset_offsets=True)


def format_date(date):
    """
    Convert a RunInfo.xml date, either YYMMDD or YYYYMMDD, to a date.
    :param str date:
    :rtype: datetime.date
    """
    if len(date) == 6:
        iso_date = '20' + date[0:2] + '-' + date[2:4] + '-' + date[4:]
    elif len(date) == 8:
        iso_date = date[0:4] + '-' + date[4:6] + '-' + date[6:]
    else:
        raise InvalidDateError('Could not parse date: ' + date)

    try:
        return datetime.strptime(iso_date, '%Y-%m-%d').date()
    except ValueError as e:
        raise InvalidDateError('Could not parse date: %s (%s)' % (date, e)) from e


def _find(element, tag, source):
    e = element.find(tag)
    if e is None:
        raise MalformedRunInfoError('Could not find %s in %s' % (tag, source))
    return e


def _text(element, tag, source):
    text = _find(element, tag, source).text
    if not text or not text.strip():
        raise MalformedRunInfoError('Empty %s in %s' % (tag, source))
    return text.strip()


def _attrib(element, name, source):
    if name not in element.attrib:
        raise MalformedRunInfoError('Could not find attribute %s on %s in %s' % (name, element.tag, source))
    return element.attrib[name]


def _int(value, name):
    try:
        return int(value)
    except ValueError as e:
        raise MalformedRunInfoError('Invalid %s: %s' % (name, value)) from e


def _num_cycles(read, source):
    num_cycles = _int(_attrib(read, 'NumCycles', source), 'NumCycles')
    if num_cycles < 1:
        raise MalformedRunInfoError('NumCycles must be positive, got %s' % num_cycles)
    return num_cycles


def _is_indexed_read(read, source):
    """Translate IsIndexedRead from "Y"/"N" to True/False."""
    is_indexed_read = _attrib(read, 'IsIndexedRead', source)
    if is_indexed_read not in ('Y', 'N'):
        raise MalformedRunInfoError('Invalid IsIndexedRead parameter: ' + is_indexed_read)
    return is_indexed_read == 'Y'
