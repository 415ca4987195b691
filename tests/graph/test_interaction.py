import pytest

from notegraph.graph.interaction import MAX_SCALE, MIN_SCALE, InteractionController
from notegraph.graph.models import Connection
from notegraph.graph.simulation import ForceSimulation


@pytest.fixture
def controller():
    sim = ForceSimulation(600, 420, seed=4)
    sim.set_nodes(["a", "b", "c"])
    return InteractionController(sim)


def test_client_to_simulation_coordinates(controller):
    controller.transform = controller.transform.model_copy(update={"x": 100, "y": 50, "scale": 2})
    assert controller.to_simulation(300, 250) == (100, 100)
    assert controller.to_client(100, 100) == (300, 250)


def test_pan_moves_transform_by_pointer_delta(controller):
    controller.pointer_down_canvas(10, 10)
    assert controller.panning
    controller.pointer_move(40, 25)
    assert (controller.transform.x, controller.transform.y) == (30, 15)
    controller.pointer_move(0, 0)
    assert (controller.transform.x, controller.transform.y) == (-10, -10)
    controller.pointer_up()
    assert not controller.panning
    controller.pointer_move(500, 500)
    assert (controller.transform.x, controller.transform.y) == (-10, -10)


def test_wheel_keeps_point_under_cursor_fixed(controller):
    before = controller.to_simulation(200, 120)
    t = controller.wheel(200, 120, delta_y=-100)
    assert t.scale == pytest.approx(1.1)
    after = controller.to_simulation(200, 120)
    assert after == pytest.approx(before)

    controller.wheel(50, 300, delta_y=120)
    assert controller.transform.scale == pytest.approx(1.1 * 0.91)


def test_wheel_scale_is_clamped(controller):
    for _ in range(100):
        controller.wheel(0, 0, delta_y=-1)
    assert controller.transform.scale == MAX_SCALE
    for _ in range(200):
        controller.wheel(0, 0, delta_y=1)
    assert controller.transform.scale == MIN_SCALE


def test_zoom_buttons_and_reset(controller):
    assert controller.zoom_in().scale == pytest.approx(1.25)
    assert controller.zoom_out().scale == pytest.approx(1.0)
    for _ in range(20):
        controller.zoom_in()
    assert controller.transform.scale == MAX_SCALE
    for _ in range(40):
        controller.zoom_out()
    assert controller.transform.scale == MIN_SCALE
    controller.pointer_down_canvas(0, 0)
    controller.pointer_move(30, 30)
    controller.pointer_up()
    t = controller.reset_view()
    assert (t.x, t.y, t.scale) == (0, 0, 1)


def test_drag_pins_moves_and_releases(controller):
    sim = controller.simulation
    for _ in range(sim.params.max_heat):
        sim.step()
    assert sim.frozen

    assert controller.pointer_down_node("b") is True
    assert sim.pinned == "b"
    controller.transform = controller.transform.model_copy(update={"scale": 2})
    controller.pointer_move(200, 100)
    assert sim.positions()["b"] == (100, 50)

    controller.pointer_up()
    assert sim.pinned is None
    assert controller.dragging is None
    assert sim.heat >= sim.params.release_heat


def test_drag_takes_precedence_over_pan(controller):
    controller.pointer_down_canvas(0, 0)
    controller.pointer_down_node("a")
    controller.pointer_move(80, 80)
    assert (controller.transform.x, controller.transform.y) == (0, 0)
    assert controller.simulation.positions()["a"] == (80, 80)


def test_pointer_down_on_unknown_node(controller):
    assert controller.pointer_down_node("ghost") is False
    assert controller.simulation.pinned is None
    assert controller.dragging is None


def test_select_does_not_touch_layout(controller):
    before = controller.simulation.positions()
    heat = controller.simulation.heat
    assert controller.select("a") == "a"
    assert controller.selected == "a"
    assert controller.simulation.positions() == before
    assert controller.simulation.heat == heat


def test_hover_highlights_neighbours(controller):
    conns = [
        Connection(source="a", target="b", strength=0.5, reason="Shared tags: #x"),
        Connection(source="b", target="c", strength=0.4, reason="Shared tags: #y"),
    ]
    assert controller.highlighted(conns) is None
    controller.hover("a")
    assert controller.highlighted(conns) == {"a", "b"}
    controller.hover("b")
    assert controller.highlighted(conns) == {"a", "b", "c"}


def test_forget_drops_stale_references(controller):
    controller.select("a")
    controller.hover("b")
    controller.pointer_down_node("c")
    controller.forget(["a"])
    assert controller.selected == "a"
    assert controller.hovered is None
    assert controller.dragging is None
