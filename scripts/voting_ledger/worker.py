"""Temporal worker entry point for voting ledgers.

Settings come from the environment:
    VOTING_TEMPORAL_ADDRESS: Temporal frontend (default "localhost:7233")
    VOTING_TEMPORAL_NAMESPACE: namespace (default "default")
    VOTING_TASK_QUEUE: task queue polled by the worker (default "voting-ledger")
    VOTING_LOG_LEVEL: root log level (default "INFO")
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from temporalio.client import Client
from temporalio.worker import Worker

from voting_ledger.workflow import VotingWorkflow, publish_events

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkerSettings:
    temporal_address: str = "localhost:7233"
    namespace: str = "default"
    task_queue: str = "voting-ledger"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> WorkerSettings:
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            temporal_address=env.get("VOTING_TEMPORAL_ADDRESS", defaults.temporal_address),
            namespace=env.get("VOTING_TEMPORAL_NAMESPACE", defaults.namespace),
            task_queue=env.get("VOTING_TASK_QUEUE", defaults.task_queue),
            log_level=env.get("VOTING_LOG_LEVEL", defaults.log_level).upper(),
        )


def build_worker(client: Client, settings: WorkerSettings) -> Worker:
    return Worker(
        client,
        task_queue=settings.task_queue,
        workflows=[VotingWorkflow],
        activities=[publish_events],
    )


async def run_worker(settings: WorkerSettings) -> None:
    client = await Client.connect(settings.temporal_address, namespace=settings.namespace)
    logger.info(
        "Voting worker polling %s on %s (namespace=%s)",
        settings.task_queue,
        settings.temporal_address,
        settings.namespace,
    )
    await build_worker(client, settings).run()


def main() -> None:
    settings = WorkerSettings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(run_worker(settings))


if __name__ == "__main__":
    main()
