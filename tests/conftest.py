"""
Shared fixtures: settings, driver-value fakes and a fake async driver.

No test talks to a real Memgraph; AsyncGraphDatabase is patched where
a connected MemgraphHandler is needed.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mg_relay.gateway.config import GatewaySettings
from mg_relay.shared.database import MemgraphHandler, resolve_connection_config


# ─── Driver value fakes ──────────────────────────────────────


class FakeNode(dict):
    """Mimics neo4j.graph.Node: mapping of properties plus element_id/labels."""

    def __init__(self, element_id, labels=(), properties=None):
        super().__init__(properties or {})
        self.element_id = element_id
        self.labels = frozenset(labels)


class FakeRelationship(dict):
    """Mimics neo4j.graph.Relationship."""

    def __init__(self, element_id, start_node, end_node, rel_type, properties=None):
        super().__init__(properties or {})
        self.element_id = element_id
        self.start_node = start_node
        self.end_node = end_node
        self.type = rel_type


class FakePath:
    """Mimics neo4j.graph.Path: has start/end nodes but no type or element_id."""

    def __init__(self, *nodes, relationships=()):
        self.nodes = nodes
        self.relationships = relationships
        self.start_node = nodes[0]
        self.end_node = nodes[-1]


class FakeRecord:
    def __init__(self, values):
        self._values = list(values)

    def values(self):
        return list(self._values)


class FakeResult:
    """Async-iterable result; optionally fails after ``fail_after`` records."""

    def __init__(self, rows, fail_after=None, error=None):
        self._rows = rows
        self._fail_after = fail_after
        self._error = error

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for index, row in enumerate(self._rows):
            if self._fail_after is not None and index >= self._fail_after:
                raise self._error
            yield FakeRecord(row)


class FakeSession:
    """Records run/close calls so tests can assert on the session lifecycle."""

    def __init__(self, rows=(), run_error=None, close_error=None, fail_after=None, stream_error=None):
        self.rows = list(rows)
        self.run_error = run_error
        self.close_error = close_error
        self.fail_after = fail_after
        self.stream_error = stream_error
        self.run_calls = []
        self.close_calls = 0

    async def run(self, cypher, params):
        self.run_calls.append((cypher, params))
        if self.run_error is not None:
            raise self.run_error
        return FakeResult(self.rows, self.fail_after, self.stream_error)

    async def close(self):
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


# ─── Settings / config ───────────────────────────────────────


def make_settings(**overrides) -> GatewaySettings:
    values = {
        "mg_uri": "bolt+ssc://memgraph.internal:7687",
        "mg_user": "relay",
        "mg_pass": "s3cret",
    }
    values.update(overrides)
    return GatewaySettings(_env_file=None, **values)


@pytest.fixture
def settings() -> GatewaySettings:
    return make_settings()


@pytest.fixture
def connection_config(settings):
    return resolve_connection_config(settings)


# ─── Driver / handler ────────────────────────────────────────


@pytest.fixture
def fake_driver():
    """Patch AsyncGraphDatabase so MemgraphHandler.connect() gets a fake driver."""
    driver = MagicMock()
    driver.verify_connectivity = AsyncMock()
    driver.close = AsyncMock()
    driver.session = MagicMock(return_value=FakeSession())
    with patch("mg_relay.shared.database.memgraph_handler.AsyncGraphDatabase") as graph_db:
        graph_db.driver.return_value = driver
        driver.factory = graph_db.driver
        yield driver


@pytest.fixture
async def database(connection_config, fake_driver) -> MemgraphHandler:
    handler = MemgraphHandler(connection_config)
    await handler.connect()
    yield handler
    await handler.close()
