"""Reconciler that turns Ping resources into ping Jobs."""

from __future__ import annotations

import logging
from typing import Optional

from .ping_types import Ping

_log = logging.getLogger(__name__)


class NotFoundError(LookupError):
    """The requested object does not exist."""


def ignore_not_found(error: Optional[BaseException]) -> Optional[BaseException]:
    """Return None for a not-found error, the error itself otherwise."""
    if isinstance(error, NotFoundError):
        return None
    return error


class PingReconciler:
    """Creates one Job per Ping through ``client``.

    ``client`` has ``get(namespace, name)`` returning a Ping and
    ``create(obj)``; both raise NotFoundError for missing objects.
    """

    def __init__(self, client):
        self.client = client

    def reconcile(self, namespace: str, name: str) -> Optional[dict]:
        """Create the Job for the named Ping; return it, or None if not found."""
        try:
            ping = self.client.get(namespace, name)
        except Exception as exc:
            _log.error("Unable to fetch Ping: %s", exc)
            if ignore_not_found(exc) is None:
                return None
            raise
        job = self.build_job(ping)
        try:
            self.client.create(job)
        except Exception as exc:
            _log.error("Unable to create job: %s", exc)
            if ignore_not_found(exc) is None:
                return None
            raise
        return job

    def build_job(self, ping: Ping) -> dict:
        """Return the batch/v1 Job that pings the Ping's host."""
        return {
            "apiVersion": "batch/v1",
            "kind": "Job",
            "metadata": {"name": f"{ping.name}-job", "namespace": ping.namespace},
            "spec": {
                "template": {
                    "spec": {
                        "restartPolicy": "Never",
                        "containers": [
                            {
                                "name": "ping",
                                "image": "bash",
                                "command": ["/bin/ping"],
                                "args": [f"-c{ping.spec.attempts}", ping.spec.hostname],
                            }
                        ],
                    }
                }
            },
        }