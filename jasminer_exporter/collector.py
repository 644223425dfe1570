"""Prometheus collector running one device poll per scrape."""

from __future__ import annotations

import time
from typing import Iterable, Iterator

from loguru import logger
from prometheus_client.core import GaugeMetricFamily, Metric
from prometheus_client.registry import Collector

from jasminer_exporter.client import JasminerClient
from jasminer_exporter.exceptions import ExporterError
from jasminer_exporter.metrics import MetricAdapter, MetricDefinition, Observation


class JasminerCollector(Collector):
    """Polls the miner on every ``collect()`` and yields its gauges.

    A failed poll is logged and reported through ``<namespace>_up`` = 0;
    no device gauges are yielded for that scrape.
    """

    def __init__(self, client: JasminerClient, adapter: MetricAdapter, namespace: str = "jasminer"):
        self._client = client
        self._adapter = adapter
        self._up_name = f"{namespace}_up"
        self._duration_name = f"{namespace}_scrape_duration_seconds"

    def describe(self) -> Iterable[Metric]:
        # registering must not trigger a poll
        families = [self._empty_family(d) for d in self._adapter.definitions.values()]
        families.extend(self._health_families(0.0, 0.0))
        return families

    def collect(self) -> Iterator[Metric]:
        start = time.perf_counter()
        try:
            observations = self._adapter.to_metrics(self._client.poll())
        except ExporterError as e:
            logger.error(f"Scrape of {self._client.uri} failed: {e.__class__.__name__}: {e}")
            observations = None
        duration = time.perf_counter() - start

        if observations is not None:
            yield from self._group(observations)
        yield from self._health_families(0.0 if observations is None else 1.0, duration)

    def _group(self, observations: list[Observation]) -> list[GaugeMetricFamily]:
        by_name = {d.name: d for d in self._adapter.definitions.values()}
        families: dict[str, GaugeMetricFamily] = {}
        for obs in observations:
            definition = by_name[obs.name]
            family = families.get(obs.name)
            if family is None:
                family = families[obs.name] = self._empty_family(definition)
            family.add_metric([obs.labels[label] for label in definition.labelnames], obs.value)
        return list(families.values())

    @staticmethod
    def _empty_family(definition: MetricDefinition) -> GaugeMetricFamily:
        return GaugeMetricFamily(definition.name, definition.documentation, labels=list(definition.labelnames))

    def _health_families(self, up: float, duration: float) -> list[GaugeMetricFamily]:
        return [
            GaugeMetricFamily(self._up_name, "Whether the last poll of the miner succeeded", value=up),
            GaugeMetricFamily(self._duration_name, "Duration of the miner poll in seconds", value=duration),
        ]
