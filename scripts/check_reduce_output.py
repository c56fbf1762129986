#!/usr/bin/env python3
"""
Utility script to check that reduce output files are valid merge inputs:
every file must decode and be strictly sorted by key with no duplicates.

Usage:
    python3 scripts/check_reduce_output.py [--shared-dir /path/to/shared] [--job-name wc]
    python3 scripts/check_reduce_output.py --file shared/output/mrtmp.wc-res-0
"""

import os
import sys
import glob
import argparse
import logging
from typing import List

from reducer.errors import ReduceTaskError
from reducer.naming import FILE_PREFIX
from reducer.records import read_records

logger = logging.getLogger(__name__)


def check_output_file(path: str) -> List[str]:
    """
    Check one reduce output file.

    Returns:
        List of problems found; empty if the file is valid
    """
    try:
        records = read_records(path)
    except ReduceTaskError as e:
        return [str(e)]

    problems = []
    for i in range(1, len(records)):
        prev_key, key = records[i - 1].key, records[i].key
        if key == prev_key:
            problems.append(f"record {i}: duplicate key {key!r}")
        elif key < prev_key:
            problems.append(f"record {i}: key {key!r} sorts before {prev_key!r}")
    return problems


def check_reduce_outputs(shared_dir: str, job_name: str = None) -> bool:
    """Check and display every reduce output file for a job (or all jobs)"""
    output_dir = os.path.join(shared_dir, 'output')

    if not os.path.exists(output_dir):
        print(f"❌ Output directory does not exist: {output_dir}")
        return False

    pattern = f"{FILE_PREFIX}{job_name or '*'}-res-*"
    files = sorted(glob.glob(os.path.join(output_dir, pattern)))

    if not files:
        print(f"❌ No reduce output files found!")
        print(f"   Pattern: {pattern}")
        print(f"   Directory: {output_dir}")
        return False

    print(f"✅ Found {len(files)} reduce output file(s)\n")

    ok = True
    for path in files:
        problems = check_output_file(path)
        if problems:
            ok = False
            print(f"  ❌ {os.path.basename(path)}: {len(problems)} problem(s)")
            for problem in problems[:10]:
                print(f"      {problem}")
        else:
            size = os.path.getsize(path)
            print(f"  ✅ {os.path.basename(path)}: {size} bytes")
    return ok


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Check that reduce output files are sorted and duplicate-free'
    )
    parser.add_argument(
        '--shared-dir',
        type=str,
        default='shared',
        help='Path to shared directory (default: shared)'
    )
    parser.add_argument(
        '--job-name',
        type=str,
        help='Filter by specific job name'
    )
    parser.add_argument(
        '--file',
        type=str,
        help='Check a single output file instead of a shared directory'
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.file:
        problems = check_output_file(args.file)
        for problem in problems:
            logger.error(problem)
        return 0 if not problems else 1

    shared_dir = os.path.abspath(args.shared_dir)
    print(f"Checking reduce output in: {shared_dir}")
    print(f"{'='*60}\n")
    return 0 if check_reduce_outputs(shared_dir, args.job_name) else 1


if __name__ == '__main__':
    sys.exit(main())
