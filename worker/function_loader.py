#!/usr/bin/env python3
"""
Dynamic Function Loader for MapReduce User Functions
Loads user-provided Python modules containing map and reduce functions
"""

import importlib.util
import logging
import os
import sys
from typing import Optional

from worker.transforms import sum_reduce, word_count_map

logger = logging.getLogger(__name__)

MODULE_NAME = "user_mapreduce"


class FunctionLoader:
    """Dynamically loads user-provided map/reduce functions from Python files"""

    def __init__(self, map_reduce_file: Optional[str] = None):
        """
        Initialize the function loader

        Args:
            map_reduce_file: Path to user's Python file containing map/reduce
                functions. When None the built-in word count transforms are used.
        """
        self.map_reduce_file = map_reduce_file
        self.module = None

    def load_module(self):
        """
        Dynamically load user-provided module

        Returns:
            The loaded module object

        Raises:
            FileNotFoundError: If the map/reduce file doesn't exist
        """
        if not os.path.exists(self.map_reduce_file):
            raise FileNotFoundError(f"Map/Reduce file not found: {self.map_reduce_file}")

        spec = importlib.util.spec_from_file_location(MODULE_NAME, self.map_reduce_file)
        module = importlib.util.module_from_spec(spec)
        sys.modules[MODULE_NAME] = module
        spec.loader.exec_module(module)
        self.module = module
        logger.info(f"Loaded map/reduce functions from {self.map_reduce_file}")
        return module

    def get_map_function(self):
        """
        Get map function from loaded module

        Returns:
            The map_function callable, or the built-in word count map

        Raises:
            AttributeError: If a user module doesn't define 'map_function'
        """
        if self.map_reduce_file is None:
            return word_count_map
        if not self.module:
            self.load_module()

        if not hasattr(self.module, 'map_function'):
            raise AttributeError("Module must define 'map_function'")
        return self.module.map_function

    def get_reduce_function(self):
        """
        Get reduce function from loaded module

        Returns:
            The reduce_function callable, or the built-in integer sum
        """
        if self.map_reduce_file is None:
            return sum_reduce
        if not self.module:
            self.load_module()

        return getattr(self.module, 'reduce_function', sum_reduce)
