#!/usr/bin/env python3
"""
Reassembly Demo - chain checking with and without the discard policy

Feeds the same unordered records into two registries, one accepting
out-of-sequence records and one dropping them, and prints both results.

Usage:
    python examples/reassembly_demo.py
"""

import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from pipeline_reassembler import PipelineRegistry, RegistryConfig, ingest_lines

RECORDS = [
    "2 1 1 4F4B 5",
    "1 0 0 some_text 1",
    "1 1 0 another_text 3",
    "1 7 0 stray_text 4",         # Pipeline 1 expects 3 here
    "2 5 1 4F4B -1",
    "2 6 0 after_close -1",       # Pipeline 2 is already closed
]


def demo(discard: bool):
    print("\n" + "="*60)
    print(f"discard_invalid_next_id = {discard}")
    print("="*60)

    registry = PipelineRegistry(RegistryConfig(discard_invalid_next_id=discard))
    metrics = ingest_lines(registry, RECORDS)

    print(registry.render(), end='')
    print(f"\n  Stored: {metrics.stored}, "
          f"dropped (closed): {metrics.dropped_closed}, "
          f"dropped (out of sequence): {metrics.dropped_out_of_sequence}")
    for pipeline in registry:
        stats = pipeline.get_stats()
        print(f"  Pipeline {stats['pipeline_id']}: {stats['state']}, "
              f"expects {stats['expected_next']}")


def main():
    demo(discard=False)
    demo(discard=True)


if __name__ == '__main__':
    main()
