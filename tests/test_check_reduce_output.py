"""
Tests for the reduce output checker script
"""

import os

from check_reduce_output import check_output_file, check_reduce_outputs, main
from reducer.records import KeyValue, write_records


class TestCheckOutputFile:
    """Tests for single file validation"""

    def test_sorted_unique_file_is_valid(self, temp_dir):
        path = os.path.join(temp_dir, 'mrtmp.wc-res-0')
        write_records(path, [KeyValue('a', '1'), KeyValue('b', '1'), KeyValue('c', '1')])

        assert check_output_file(path) == []

    def test_duplicate_key_is_reported(self, temp_dir):
        path = os.path.join(temp_dir, 'out')
        write_records(path, [KeyValue('a', '1'), KeyValue('a', '2')])

        problems = check_output_file(path)
        assert len(problems) == 1
        assert 'duplicate' in problems[0]

    def test_unsorted_key_is_reported(self, temp_dir):
        path = os.path.join(temp_dir, 'out')
        write_records(path, [KeyValue('b', '1'), KeyValue('a', '2')])

        assert 'sorts before' in check_output_file(path)[0]

    def test_missing_file_is_reported(self, temp_dir):
        problems = check_output_file(os.path.join(temp_dir, 'missing'))
        assert len(problems) == 1


class TestCheckReduceOutputs:
    """Tests for checking every output of a job"""

    def test_checks_job_outputs(self, temp_dir):
        output_dir = os.path.join(temp_dir, 'output')
        os.makedirs(output_dir)
        write_records(os.path.join(output_dir, 'mrtmp.wc-res-0'), [KeyValue('a', '1')])
        write_records(os.path.join(output_dir, 'mrtmp.wc-res-1'), [KeyValue('b', '1')])

        assert check_reduce_outputs(temp_dir, 'wc') is True
        assert check_reduce_outputs(temp_dir, 'other') is False

    def test_main_exit_codes(self, temp_dir):
        good = os.path.join(temp_dir, 'good')
        bad = os.path.join(temp_dir, 'bad')
        write_records(good, [KeyValue('a', '1')])
        write_records(bad, [KeyValue('b', '1'), KeyValue('a', '1')])

        assert main(['--file', good]) == 0
        assert main(['--file', bad]) == 1
        assert main(['--shared-dir', os.path.join(temp_dir, 'nowhere')]) == 1
