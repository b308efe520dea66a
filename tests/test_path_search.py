import networkx as nx
import pytest

from src.graph_model import GraphModel
from src.path_search import Done, Relax, Update, Visit, final_path, path_cost, run


def make_graph(node_ids, edges):
    graph = GraphModel()
    graph.load(
        [{"id": n, "label": n, "x": 0, "y": 0} for n in node_ids],
        [{"source": s, "target": t, "weight": w} for s, t, w in edges],
    )
    return graph


@pytest.fixture
def seed_graph():
    return GraphModel.seeded()


def test_example_graph_prefers_cheaper_two_hop_route(seed_graph):
    steps = run(seed_graph, "1", "3")

    assert steps == [
        Visit("1"),
        Relax("e1-2", "1", "2"),
        Update("e1-2", "1", "2"),
        Relax("e1-3", "1", "3"),
        Update("e1-3", "1", "3"),
        Visit("2"),
        Relax("e2-3", "2", "3"),
        Update("e2-3", "2", "3"),
        Visit("3"),
        Done(("1", "2", "3")),
    ]
    assert path_cost(final_path(steps), seed_graph.edges) == 3


def test_unreachable_end_gives_empty_path(seed_graph):
    steps = run(seed_graph, "3", "1")

    assert steps == [Visit("3"), Done(())]
    assert final_path(steps) == ()


def test_start_equals_end(seed_graph):
    steps = run(seed_graph, "2", "2")
    assert final_path(steps) == ("2",)


def test_done_is_last_and_unique(seed_graph):
    for start in seed_graph.node_ids():
        for end in seed_graph.node_ids():
            steps = run(seed_graph, start, end)
            assert isinstance(steps[-1], Done)
            assert sum(isinstance(s, Done) for s in steps) == 1


def test_run_is_deterministic():
    graph = make_graph(
        ["1", "2", "3", "4", "5"],
        [("1", "2", 2), ("1", "3", 2), ("2", "4", 1), ("3", "4", 1), ("4", "5", 0), ("3", "5", 5)],
    )
    first = [s.to_dict() for s in run(graph, "1", "5")]
    second = [s.to_dict() for s in run(graph, "1", "5")]
    assert first == second


def test_every_update_follows_matching_relax():
    graph = make_graph(
        ["1", "2", "3", "4"],
        [("1", "2", 5), ("1", "3", 1), ("3", "2", 1), ("2", "4", 1), ("3", "4", 7)],
    )
    steps = run(graph, "1", "4")
    for i, step in enumerate(steps):
        if isinstance(step, Update):
            prev = steps[i - 1]
            assert isinstance(prev, Relax)
            assert (prev.edge, prev.source, prev.target) == (step.edge, step.source, step.target)


def test_path_endpoints_match_request():
    graph = make_graph(
        ["1", "2", "3", "4"],
        [("1", "2", 1), ("2", "3", 1), ("3", "4", 1), ("1", "4", 10)],
    )
    path = final_path(run(graph, "1", "4"))
    assert path[0] == "1"
    assert path[-1] == "4"
    assert path == ("1", "2", "3", "4")


def test_ties_are_broken_by_node_insertion_order():
    graph = make_graph(
        ["1", "3", "2", "4"],
        [("1", "2", 1), ("1", "3", 1), ("2", "4", 1), ("3", "4", 1)],
    )
    visits = [s.node for s in run(graph, "1", "4") if isinstance(s, Visit)]
    # "3" was inserted before "2", so it is settled first and claims "4"
    assert visits == ["1", "3", "2", "4"]
    assert final_path(run(graph, "1", "4")) == ("1", "3", "4")


def test_zero_weight_counts_as_one_during_search():
    graph = make_graph(
        ["1", "2", "3"],
        [("1", "2", 0), ("2", "3", 0), ("1", "3", 1.5)],
    )
    # 0 + 0 would win, but zero weights are treated as 1 so the direct edge is cheaper
    assert final_path(run(graph, "1", "3")) == ("1", "3")


def test_relax_only_targets_unvisited_nodes():
    graph = make_graph(["1", "2"], [("1", "2", 1), ("2", "1", 1)])
    steps = run(graph, "1", "2")
    relaxed = [s.edge for s in steps if isinstance(s, Relax)]
    assert relaxed == ["e1-2"]


def test_missing_start_node_yields_only_done(seed_graph):
    steps = run(seed_graph, "99", "3")
    assert steps == [Done(())]


def test_runs_on_snapshot_not_live_graph(seed_graph):
    snapshot = seed_graph.snapshot()
    seed_graph.set_edge_weight("e2-3", 10)
    assert final_path(run(snapshot, "1", "3")) == ("1", "2", "3")
    assert final_path(run(seed_graph, "1", "3")) == ("1", "3")


def test_cost_matches_networkx():
    graph = make_graph(
        ["1", "2", "3", "4", "5", "6"],
        [("1", "2", 7), ("1", "3", 9), ("1", "6", 14), ("2", "3", 10), ("2", "4", 15),
         ("3", "4", 11), ("3", "6", 2), ("4", "5", 6), ("6", "5", 9)],
    )
    path = final_path(run(graph, "1", "5"))
    expected = nx.dijkstra_path_length(graph.to_networkx(), "1", "5", weight="weight")
    assert path_cost(path, graph.edges) == expected == 20


def test_path_cost_edge_cases(seed_graph):
    assert path_cost([], seed_graph.edges) is None
    assert path_cost(["1"], seed_graph.edges) is None
    assert path_cost(["3", "1"], seed_graph.edges) is None
    assert path_cost(["1", "3"], seed_graph.edges) == 4


def test_step_dicts():
    assert Visit("1").to_dict() == {"type": "visit", "node": "1"}
    assert Relax("e1-2", "1", "2").to_dict() == {"type": "relax", "edge": "e1-2", "from": "1", "to": "2"}
    assert Done(("1", "2")).to_dict() == {"type": "done", "path": ["1", "2"]}
