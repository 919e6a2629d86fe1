import pytest

from graph import Graph
from steppers import InvalidParameterError, TraversalEvent
from steppers.traversal import DFSTraversalStepper


def _run(stepper):
    events = []
    while not stepper.is_done():
        events.append(stepper.step())
    return events


def _two_components() -> Graph:
    g = Graph()
    g.add_edge(0, 1)
    g.add_edge(2, 3)
    return g


def test_directed_mapping_event_sequence():
    s = DFSTraversalStepper({0: [2, 1], 1: [3], 2: [], 3: []})
    events = _run(s)
    assert [(e.kind, e.where) for e in events] == [
        (TraversalEvent.INIT, (0,)),
        (TraversalEvent.DISCOVER, (0,)),
        (TraversalEvent.EXPLORE_EDGE, (0, 1)),
        (TraversalEvent.DISCOVER, (1,)),
        (TraversalEvent.EXPLORE_EDGE, (1, 3)),
        (TraversalEvent.DISCOVER, (3,)),
        (TraversalEvent.BACKTRACK, (3,)),
        (TraversalEvent.BACKTRACK, (1,)),
        (TraversalEvent.EXPLORE_EDGE, (0, 2)),
        (TraversalEvent.DISCOVER, (2,)),
        (TraversalEvent.BACKTRACK, (2,)),
        (TraversalEvent.BACKTRACK, (0,)),
        (TraversalEvent.DONE, ()),
    ]
    assert s.order == [0, 1, 3, 2]


def test_disconnected_graph_restarts_on_next_component():
    s = DFSTraversalStepper(_two_components())
    events = _run(s)
    assert s.order == [0, 1, 2, 3]
    inits = [e.where for e in events if e.kind is TraversalEvent.INIT]
    assert inits == [(0,), (2,)]


def test_explicit_start_node():
    s = DFSTraversalStepper(_two_components(), start=2)
    _run(s)
    assert s.order == [2, 3, 0, 1]


def test_every_node_discovered_exactly_once():
    g = Graph.generate_random(num_nodes=12, edge_probability=0.25, seed=7)
    s = DFSTraversalStepper(g)
    events = _run(s)
    discovered = [e.where[0] for e in events if e.kind is TraversalEvent.DISCOVER]
    assert sorted(discovered) == g.node_ids()
    assert len(set(discovered)) == len(discovered)
    # every push is matched by a pop
    pushes = sum(e.kind in (TraversalEvent.INIT, TraversalEvent.EXPLORE_EDGE) for e in events)
    pops = sum(e.kind is TraversalEvent.BACKTRACK for e in events)
    assert pushes == pops == g.node_count()


def test_parsed_adjacency_list():
    g = Graph.from_adjacency_list("0: 1 2\n1: 3\n# comment\n2 -> 3")
    s = DFSTraversalStepper(g)
    _run(s)
    assert s.order == [0, 1, 3, 2]


def test_empty_graph_finishes_on_first_step():
    s = DFSTraversalStepper(Graph())
    assert not s.is_done()
    event = s.step()
    assert event.kind is TraversalEvent.DONE
    assert s.order == []


def test_unknown_start_rejected():
    with pytest.raises(InvalidParameterError):
        DFSTraversalStepper({0: [1], 1: []}, start=5)
