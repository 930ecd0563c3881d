"""
Route Spine - automatic route trees for path-addressed document repositories.

- route_spine.core: Adapter, materializer, repositories, configuration
- route_spine.cli: ``route-spine`` command line interface
"""

__version__ = "0.1.0"

from route_spine.core import *  # noqa
