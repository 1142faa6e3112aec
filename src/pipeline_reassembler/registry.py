#!/usr/bin/env python3
"""
Pipeline Registry

Maps pipeline id -> Pipeline and routes each record to its pipeline.
Pipelines are independent; the registry never moves state between them.

The registry is not thread-safe. A concurrent host must hold one lock around
each insert()/render() call.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from .pipeline import Outcome, Pipeline
from .record import Record


@dataclass(frozen=True)
class RegistryConfig:
    """Registry-wide policy, fixed at construction"""
    # Drop records whose id differs from the pipeline's expected next id
    discard_invalid_next_id: bool = False


class PipelineRegistry:
    """
    Owns every pipeline and applies records one at a time.

    Example:
        registry = PipelineRegistry(RegistryConfig(discard_invalid_next_id=True))
        registry.insert(parse_record("1 0 0 hello 1"))
        print(registry.render(), end='')
    """

    def __init__(self, config: Optional[RegistryConfig] = None):
        self.config = config if config is not None else RegistryConfig()
        self._pipelines: Dict[int, Pipeline] = {}
        self._outcomes: Dict[Outcome, int] = {outcome: 0 for outcome in Outcome}

    def insert(self, record: Record) -> Outcome:
        """
        Apply a record to its pipeline, creating the pipeline if needed.

        Returns:
            Outcome reported by the pipeline
        """
        pipeline = self._pipelines.get(record.pipeline_id)
        if pipeline is None:
            pipeline = Pipeline(record.pipeline_id)
            self._pipelines[record.pipeline_id] = pipeline

        outcome = pipeline.apply(record, self.config.discard_invalid_next_id)
        self._outcomes[outcome] += 1
        return outcome

    def get(self, pipeline_id: int) -> Optional[Pipeline]:
        return self._pipelines.get(pipeline_id)

    def pipeline_ids(self) -> List[int]:
        """Known pipeline ids, ascending"""
        return sorted(self._pipelines)

    def __iter__(self) -> Iterator[Pipeline]:
        for pipeline_id in self.pipeline_ids():
            yield self._pipelines[pipeline_id]

    def __len__(self) -> int:
        return len(self._pipelines)

    def __contains__(self, pipeline_id: object) -> bool:
        return pipeline_id in self._pipelines

    def render(self) -> str:
        """
        Render every pipeline, ascending by id, messages ascending by id.

        Non-destructive: repeated calls without inserts return the same text.
        """
        return ''.join(pipeline.render() for pipeline in self)

    def __str__(self):
        return self.render()

    def get_stats(self) -> Dict[str, Any]:
        """Get registry statistics"""
        stats: Dict[str, Any] = {
            'pipelines': len(self._pipelines),
            'closed_pipelines': sum(1 for p in self._pipelines.values() if p.closed),
            'messages': sum(len(p) for p in self._pipelines.values()),
        }
        for outcome, count in self._outcomes.items():
            stats[outcome.value] = count
        return stats
