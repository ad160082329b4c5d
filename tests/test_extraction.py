import os
import datetime
from os.path import join
from unittest.mock import patch
import pytest
from run_info_extractor.exceptions import RunInfoIOError, InvalidDateError
from run_info_extractor.extraction import RunInfoExtractor, HEADER_COLUMNS, format_lines
from run_info_extractor.read_structure import ReadStructure
from run_info_extractor.reader.run_info import RunInfo
from tests.test_run_info_extractor import TestRunInfoExtractor

header = 'run_barcode\tflowcell_barcode\trun_date\tread_structure\tnum_lanes'


class TestFormatLines(TestRunInfoExtractor):
    run_info = RunInfo(
        run_barcode='INST1_FC1',
        flowcell_barcode='FC1',
        run_date=datetime.date(2020, 1, 1),
        read_structure=ReadStructure.from_string('76T8B'),
        num_lanes=4,
        instrument='INST1',
        run_id=None
    )

    def test_format_lines(self):
        assert format_lines(self.run_info) == [header, 'INST1_FC1\tFC1\t2020-01-01\t76T8B\t4']

    def test_delimiter(self):
        assert format_lines(self.run_info, ',') == [
            ','.join(HEADER_COLUMNS),
            'INST1_FC1,FC1,2020-01-01,76T8B,4'
        ]
        tab_fields = [l.split('\t') for l in format_lines(self.run_info)]
        multi_char_fields = [l.split(' | ') for l in format_lines(self.run_info, ' | ')]
        assert tab_fields == multi_char_fields


class TestRunInfoExtractorTool(TestRunInfoExtractor):
    def setUp(self):
        super().setUp()
        self.output = join(self.tmp_path, 'run_info.tsv')

    def test_execute(self):
        run_info_xml = self.write_run_info()
        run_info = RunInfoExtractor(run_info_xml, self.output).execute()
        assert run_info.run_barcode == 'INST1_FC1'
        assert self.read_lines(self.output) == [header, 'INST1_FC1\tFC1\t2020-01-01\t76T8B\t4', '']

    def test_execute_assets(self):
        RunInfoExtractor(join(self.assets_path, 'RunInfo.xml'), self.output).execute()
        assert self.read_lines(self.output)[:2] == [
            header,
            'E00306_HCHK3CCXX\tHCHK3CCXX\t2015-07-23\t151T8B151T\t8'
        ]

        RunInfoExtractor(join(self.assets_path, 'run_folder'), self.output, ',').execute()
        assert self.read_lines(self.output)[:2] == [
            ','.join(HEADER_COLUMNS),
            'NB501234_HY7TKBGXH,HY7TKBGXH,2021-04-12,76T8B8B76T,4'
        ]

    def test_overwrite(self):
        self.write_file('run_info.tsv', 'some\nprevious\ncontent\nhere\n')
        RunInfoExtractor(self.write_run_info(), self.output).execute()
        lines = self.read_lines(self.output)
        assert len(lines) == 3 and lines[0] == header and lines[2] == ''

    def test_header_independent_of_delimiter(self):
        run_info_xml = self.write_run_info()
        for delim in ('\t', ',', ';'):
            RunInfoExtractor(run_info_xml, self.output, delim).execute()
            header_line, data_line, _ = self.read_lines(self.output)
            assert header_line.split(delim) == list(HEADER_COLUMNS)
            assert data_line.split(delim) == ['INST1_FC1', 'FC1', '2020-01-01', '76T8B', '4']

    def test_configured_delimiter(self):
        with patch('run_info_extractor.extraction.default_delimiter', return_value=';'):
            e = RunInfoExtractor(self.write_run_info(), self.output)
        assert e.delim == ';'

        assert RunInfoExtractor(self.write_run_info(), self.output).delim == '\t'

    def test_unreadable_input(self):
        with pytest.raises(RunInfoIOError):
            RunInfoExtractor(join(self.tmp_path, 'non_existent.xml'), self.output)
        with pytest.raises(RunInfoIOError):
            RunInfoExtractor(self.tmp_path, self.output)  # run folder without a RunInfo.xml
        assert not os.path.exists(self.output)

    def test_unwritable_output(self):
        run_info_xml = self.write_run_info()
        with pytest.raises(RunInfoIOError):
            RunInfoExtractor(run_info_xml, join(self.tmp_path, 'non_existent_dir', 'run_info.tsv'))
        with pytest.raises(RunInfoIOError):
            RunInfoExtractor(run_info_xml, self.tmp_path)

        with patch('run_info_extractor.extraction.os.access', side_effect=lambda p, mode: mode == os.R_OK):
            with pytest.raises(RunInfoIOError) as e:
                RunInfoExtractor(run_info_xml, self.output)
        assert 'not writable' in str(e.value)

    def test_empty_delimiter(self):
        e = RunInfoExtractor(self.write_run_info(), self.output, '')
        assert e.delim == ''
        e.execute()
        assert self.read_lines(self.output)[1] == 'INST1_FC1FC12020-01-0176T8B4'

    def test_write_failure(self):
        e = RunInfoExtractor(self.write_run_info(), self.output)
        with patch('run_info_extractor.extraction.open', create=True, side_effect=OSError('No space left on device')):
            with pytest.raises(RunInfoIOError) as error:
                e.execute()
        assert 'Could not write ' + self.output in str(error.value)
        assert 'No space left on device' in str(error.value)

    def test_no_partial_output(self):
        self.write_file('run_info.tsv', 'previous content\n')
        with pytest.raises(InvalidDateError):
            RunInfoExtractor(self.write_run_info(date='1234567'), self.output).execute()
        assert self.read_lines(self.output) == ['previous content', '']
