import konstruo
from konstruo import (
    CubicBezier,
    CubicBezierSpline,
    Distributable,
    distribute,
    flatten,
    offset,
    project_onto_path,
    stroke,
)


def test_version_is_a_string():
    assert isinstance(konstruo.__version__, str)


def test_entry_points_are_functions():
    for fn in (flatten, offset, stroke, distribute, project_onto_path):
        assert callable(fn)
    assert set(konstruo.__all__) >= {
        'flatten', 'offset', 'stroke', 'distribute', 'project_onto_path', 'AlignContent'}


def test_road_placement_round_trip():
    road = CubicBezierSpline.by_origins_and_handles(
        [(0, 0), (20, 0), (40, 10)], [(5, 0), (25, 0), (45, 12)])
    outline = stroke(road, 6.0, 0.05)
    assert outline.get_start() == outline.get_end()

    houses = [Distributable(size=(4.0, 3.0, 5.0), order=i) for i in range(4)]
    container = distribute(houses)
    placed = project_onto_path(container, road, offset=6.0)
    assert len(placed.items) == 4
    assert placed.warnings == ()
    assert len(flatten(road)) > 2
