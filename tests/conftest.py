"""
Shared fixtures for the reassembler tests
"""

import sys
from pathlib import Path

import pytest

# Add src to path for development
src_path = str(Path(__file__).parent.parent / 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from pipeline_reassembler import PipelineRegistry, RegistryConfig  # noqa: E402


# Input of the original driver's end-to-end run, including bad lines
MIXED_INPUT = """3 1 0 message_31 -1
      1 0 0 message_10 1 This text should be ignored
1 3 0 message_13 -1
err
12 8 m...
1 1 0 message_11 2
5 9 0 message_59 10
2 0 0 message_20 2
13 1 1 66616E63792031335F31 2
13 2 1 66616E63792074657874 -1
1 2 0 message_12 3
2 2 0 message_22 -1
1 0 0 message_10_2 1
5 11 0 message_510_2 -1
"""

MIXED_OUTPUT = (
    "Pipeline:1\n"
    "\t3| message_13\n"
    "Pipeline:2\n"
    "\t0| message_20\n"
    "\t2| message_22\n"
    "Pipeline:3\n"
    "\t1| message_31\n"
    "Pipeline:5\n"
    "\t9| message_59\n"
    "\t11| message_510_2\n"
    "Pipeline:13\n"
    "\t1| fancy 13_1\n"
    "\t2| fancy text\n"
)


@pytest.fixture
def registry():
    return PipelineRegistry()


@pytest.fixture
def strict_registry():
    return PipelineRegistry(RegistryConfig(discard_invalid_next_id=True))


@pytest.fixture
def mixed_input():
    return MIXED_INPUT


@pytest.fixture
def mixed_output():
    return MIXED_OUTPUT
