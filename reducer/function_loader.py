#!/usr/bin/env python3
"""
Dynamic Function Loader for user reduce functions
Loads a user-provided Python job file and returns its reduce_function
"""

import importlib.util
import logging
import os

logger = logging.getLogger(__name__)


class FunctionLoader:
    """Dynamically loads the reduce function from a user job file"""

    def __init__(self, job_file: str):
        """
        Initialize the function loader

        Args:
            job_file: Path to user's Python file defining reduce_function
        """
        self.job_file = job_file
        self.module = None

    def load_module(self):
        """
        Load the user job file as a module

        Returns:
            The loaded module object

        Raises:
            FileNotFoundError: If the job file doesn't exist
            ImportError: If the file cannot be loaded as a Python module
        """
        if not os.path.exists(self.job_file):
            raise FileNotFoundError(f"Job file not found: {self.job_file}")

        module_name = f"user_job_{os.path.splitext(os.path.basename(self.job_file))[0]}"
        spec = importlib.util.spec_from_file_location(module_name, self.job_file)
        if spec is None or spec.loader is None:
            raise ImportError(f"Failed to load job file: {self.job_file}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        self.module = module
        logger.info(f"Loaded job file {self.job_file}")
        return module

    def get_reduce_function(self):
        """
        Get reduce function from loaded module

        Returns:
            The reduce_function callable from the module

        Raises:
            AttributeError: If module doesn't define a callable 'reduce_function'
        """
        if not self.module:
            self.load_module()

        reduce_func = getattr(self.module, 'reduce_function', None)
        if not callable(reduce_func):
            raise AttributeError("Job file must define a callable 'reduce_function'")
        return reduce_func
