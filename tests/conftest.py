"""pytest configuration and fixtures for pyqt-graphviews tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def default_view_config():
    """Every test starts from the default ViewConfig."""
    from pyqt_graphviews.protocols import set_view_config

    set_view_config(None)
    yield
    set_view_config(None)


@pytest.fixture
def system():
    from pyqt_graphviews.model import System

    return System()


@pytest.fixture
def selection(system):
    from pyqt_graphviews.model import Selection

    selection = Selection(system)
    yield selection
    selection.dispose()


@pytest.fixture
def scene(system):
    """Small graph: root node 'a' with a plain component and a subgraph component,
    child node 'b' under 'a', and root node 'c'. The subgraph holds node 'inner'."""
    from pyqt_graphviews.model import Component, GraphComponent

    graph = system.graph
    a = graph.create_node("a")
    b = graph.create_node("b", type="Mesh")
    c = graph.create_node("c")
    a.add_child(b)
    plain = a.create_component(Component, name="transform", type="Transform")
    sub = a.create_component(GraphComponent, name="group")
    inner = sub.inner_graph.create_node("inner")
    return {"a": a, "b": b, "c": c, "plain": plain, "sub": sub, "inner": inner}
