"""
Allow running the reassembler with python -m pipeline_reassembler
"""

import sys

from .cli import main

if __name__ == '__main__':
    sys.exit(main())
