"""Test selection and the player movement rules."""
from tactics.grid import GridMap, GridPosition
from tactics.model import Faction, Unit
from tactics.movement import MoveRejection, MovementValidator
from tactics.selection import SelectionState


def make_units(*specs):
    """specs: (id, faction, x, y)"""
    return {uid: Unit(id=uid, faction=f, pos=GridPosition(x, y)) for uid, f, x, y in specs}


def make_validator() -> MovementValidator:
    return MovementValidator(GridMap(10, 10, 64.0))


def selected(unit_id: str) -> SelectionState:
    sel = SelectionState()
    sel.select_unit(unit_id)
    return sel


def test_valid_movement():
    units = make_units(("P1", Faction.PLAYER, 5, 5))
    v = make_validator()
    res = v.try_move(units["P1"], GridPosition(5, 6), selected("P1"), units)
    assert res.ok
    assert units["P1"].pos == GridPosition(5, 6)
    assert units["P1"].status.has_acted
    assert units["P1"].status.has_moved


def test_unit_cannot_move_twice_in_one_turn():
    units = make_units(("P1", Faction.PLAYER, 5, 5))
    v = make_validator()
    sel = selected("P1")
    assert v.try_move(units["P1"], GridPosition(5, 6), sel, units).ok
    res = v.try_move(units["P1"], GridPosition(5, 7), sel, units)
    assert res.rejection is MoveRejection.ALREADY_ACTED
    assert units["P1"].pos == GridPosition(5, 6)


def test_move_requires_selection():
    units = make_units(("P1", Faction.PLAYER, 5, 5), ("P2", Faction.PLAYER, 1, 1))
    v = make_validator()
    assert v.try_move(units["P1"], GridPosition(5, 6), SelectionState(), units).rejection is MoveRejection.NO_SELECTION
    assert v.try_move(units["P1"], GridPosition(5, 6), selected("P2"), units).rejection is MoveRejection.NOT_SELECTED
    assert units["P1"].pos == GridPosition(5, 5)
    assert not units["P1"].status.has_acted


def test_non_adjacent_and_diagonal_rejected():
    units = make_units(("P1", Faction.PLAYER, 5, 5))
    v = make_validator()
    sel = selected("P1")
    for target in (GridPosition(6, 6), GridPosition(5, 7), GridPosition(5, 5)):
        assert v.try_move(units["P1"], target, sel, units).rejection is MoveRejection.INVALID_TARGET
    assert not units["P1"].status.has_acted


def test_out_of_bounds_rejected():
    units = make_units(("P1", Faction.PLAYER, 0, 0))
    res = make_validator().try_move(units["P1"], GridPosition(-1, 0), selected("P1"), units)
    assert res.rejection is MoveRejection.OUT_OF_BOUNDS
    assert units["P1"].pos == GridPosition(0, 0)


def test_adjacency_checked_before_bounds():
    """A far out-of-bounds click is a bad target first."""
    units = make_units(("P1", Faction.PLAYER, 0, 0))
    res = make_validator().try_move(units["P1"], GridPosition(-5, 0), selected("P1"), units)
    assert res.rejection is MoveRejection.INVALID_TARGET


def test_player_collision_detection():
    """Neither friendly nor enemy units can be walked onto."""
    units = make_units(("P1", Faction.PLAYER, 5, 5), ("P2", Faction.PLAYER, 5, 6), ("E1", Faction.ENEMY, 6, 5))
    v = make_validator()
    sel = selected("P1")
    assert v.try_move(units["P1"], GridPosition(5, 6), sel, units).rejection is MoveRejection.TILE_OCCUPIED
    assert v.try_move(units["P1"], GridPosition(6, 5), sel, units).rejection is MoveRejection.TILE_OCCUPIED
    assert units["P1"].pos == GridPosition(5, 5)
    assert not units["P1"].status.has_acted


def test_acted_checked_before_target():
    units = make_units(("P1", Faction.PLAYER, 5, 5))
    units["P1"].status.has_acted = True
    res = make_validator().try_move(units["P1"], GridPosition(9, 9), selected("P1"), units)
    assert res.rejection is MoveRejection.ALREADY_ACTED


def test_highlights_exclude_occupied_tiles():
    units = make_units(
        ("P1", Faction.PLAYER, 5, 5),
        ("E1", Faction.ENEMY, 6, 5),
        ("E2", Faction.ENEMY, 5, 6),
        ("E3", Faction.ENEMY, 4, 5),
    )
    v = make_validator()
    assert v.valid_moves(units["P1"], units) == [GridPosition(5, 4)]
    # dry run leaves everything untouched
    assert units["P1"].pos == GridPosition(5, 5)
    assert not units["P1"].status.has_acted


def test_valid_moves_in_corner():
    units = make_units(("P1", Faction.PLAYER, 0, 0))
    assert set(make_validator().valid_moves(units["P1"], units)) == {GridPosition(1, 0), GridPosition(0, 1)}


# --- selection ---

def test_select_player_unit():
    units = make_units(("P1", Faction.PLAYER, 2, 2), ("P2", Faction.PLAYER, 3, 2))
    sel = SelectionState()
    assert sel.select(units, GridPosition(2, 2)).id == "P1"
    assert sel.selected_unit == "P1"
    sel.select(units, GridPosition(3, 2))
    assert sel.selected_unit == "P2"
    assert not sel.is_selected(units["P1"])


def test_enemy_click_keeps_selection():
    units = make_units(("P1", Faction.PLAYER, 2, 2), ("E1", Faction.ENEMY, 6, 7))
    sel = SelectionState()
    sel.select(units, GridPosition(2, 2))
    assert sel.select(units, GridPosition(6, 7)) is None
    assert sel.selected_unit == "P1"


def test_empty_click_keeps_selection():
    units = make_units(("P1", Faction.PLAYER, 2, 2))
    sel = SelectionState()
    sel.select(units, GridPosition(2, 2))
    assert sel.select(units, GridPosition(8, 8)) is None
    assert sel.select(units, GridPosition(-3, 40)) is None
    assert sel.selected_unit == "P1"


def test_enemy_never_selected_from_empty():
    units = make_units(("E1", Faction.ENEMY, 6, 7))
    sel = SelectionState()
    sel.select(units, GridPosition(6, 7))
    assert sel.selected_unit is None


def test_resolve_drops_missing_unit():
    units = make_units(("P1", Faction.PLAYER, 2, 2))
    sel = selected("P9")
    assert sel.resolve(units) is None
    assert sel.selected_unit is None


def test_resolve_keeps_acted_unit():
    """Acted units stay selected; the validator rejects their moves."""
    units = make_units(("P1", Faction.PLAYER, 2, 2))
    units["P1"].status.has_acted = True
    sel = selected("P1")
    assert sel.resolve(units) is units["P1"]


def test_resolve_drops_enemy_id():
    units = make_units(("E1", Faction.ENEMY, 6, 7))
    sel = selected("E1")
    assert sel.resolve(units) is None
