"""Shared test fixtures."""

import pytest

from tests.unit.fakes import WINDOW, FakeClock, FakeHost, FakeScheduler
from treesync.core.throttle import ThrottledDispatcher
from treesync.models.node import ComponentTree
from treesync.sync import Synchronizer


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler(clock: FakeClock) -> FakeScheduler:
    return FakeScheduler(clock)


@pytest.fixture
def tree() -> ComponentTree:
    """Return a tree: root -> (counter -> leaf, label)."""
    tree = ComponentTree()
    root = tree.add(state={"title": "Page"})
    counter = tree.add(parent=root, state={"count": 1}, props={"step": 1})
    tree.add(parent=counter, state={"items": [1, 2]})
    tree.add(parent=root, props={"text": "hi"})
    return tree


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def synchronizer(
    tree: ComponentTree, host: FakeHost, clock: FakeClock, scheduler: FakeScheduler
) -> Synchronizer:
    dispatcher = ThrottledDispatcher(host.apply, WINDOW, clock=clock, scheduler=scheduler)
    return Synchronizer(tree, host, dispatcher=dispatcher)
