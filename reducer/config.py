"""
Configuration for reduce tasks.
"""

import os
from dataclasses import dataclass

from reducer.naming import in_directory, merge_name, reduce_name


@dataclass
class ReduceSettings:
    """Where reduce tasks find their inputs and put their outputs"""

    shared_dir: str = '.'
    max_workers: int = 1
    fsync: bool = True

    def __post_init__(self):
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")

    @property
    def intermediate_dir(self) -> str:
        return os.path.join(self.shared_dir, 'intermediate')

    @property
    def output_dir(self) -> str:
        return os.path.join(self.shared_dir, 'output')

    def intermediate_namer(self):
        """Naming function for intermediate files under intermediate_dir"""
        return in_directory(self.intermediate_dir, reduce_name)

    def output_file(self, job_name: str, reduce_task: int) -> str:
        """Default output path for a reduce task under output_dir"""
        return os.path.join(self.output_dir, merge_name(job_name, reduce_task))

    def ensure_dirs(self):
        """Create the intermediate and output directories if missing"""
        for dir_path in [self.intermediate_dir, self.output_dir]:
            os.makedirs(dir_path, exist_ok=True)
