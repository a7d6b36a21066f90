import pytest
from helpers import scripted_rng

from Hookline.rules.dice import DicePool, DiceRNG, DiceTerm, RollResult
from Hookline.rules.errors import InvalidInput


def test_evaluate_sums_faces_and_modifier():
    rng = scripted_rng(2, 5, 6)
    res = rng.evaluate(3, 6, 4)
    assert isinstance(res, RollResult)
    assert res.faces == {6: (2, 5, 6)}
    assert res.total == 2 + 5 + 6 + 4
    assert res.modifier == 4
    assert res.formula == "3d6+4"


def test_evaluate_negative_modifier():
    res = scripted_rng(3, 3).evaluate(2, 6, -2)
    assert res.total == 4
    assert res.formula == "2d6-2"


def test_evaluate_zero_dice_is_modifier_only():
    res = DiceRNG(seed=1).evaluate(0, 6, 7)
    assert res.total == 7
    assert res.faces_of(6) == ()


def test_size_one_die_is_fixed_and_consumes_no_randomness():
    rng = scripted_rng()  # any randint call would fail
    res = rng.evaluate(1, 1, 0)
    assert res.total == 1
    assert res.faces == {1: (1,)}
    assert res.formula == "1"
    assert res.is_placeholder


@pytest.mark.parametrize("count,size", [(-1, 6), (2, 0), (2, -3)])
def test_invalid_count_or_size_rejected(count, size):
    rng = scripted_rng()
    with pytest.raises(InvalidInput):
        rng.evaluate(count, size, 0)


def test_non_integer_inputs_rejected():
    with pytest.raises(InvalidInput):
        DiceTerm(True, 6)
    with pytest.raises(InvalidInput):
        DicePool.single(1, 6, modifier=1.5)


def test_seeded_engine_is_reproducible():
    a = DiceRNG(seed=42).evaluate(4, 6, 1)
    b = DiceRNG(seed=42).evaluate(4, 6, 1)
    assert a == b
    assert all(1 <= f <= 6 for f in a.faces_of(6))


def test_faces_grouped_by_size_in_term_order():
    rng = scripted_rng(6, 6, 3, 8)
    res = rng.roll("2d6+1d4+1d8+2")
    assert res.faces == {6: (6, 6), 4: (3,), 8: (8,)}
    assert res.total == 6 + 6 + 3 + 8 + 2
    assert res.rolls == [6, 6, 3, 8]


def test_same_size_terms_merge_into_one_group():
    res = scripted_rng(1, 2, 3).roll("2d6+1d6")
    assert res.faces == {6: (1, 2, 3)}


class TestParse:
    def test_basic_forms(self):
        assert DicePool.parse("2d6") == DicePool.single(2, 6)
        assert DicePool.parse("d20") == DicePool.single(1, 20)
        assert DicePool.parse("3D6 + 2") == DicePool.single(3, 6, 2)
        assert DicePool.parse("1d8-3") == DicePool.single(1, 8, -3)

    def test_bare_integer_is_fixed_dice(self):
        pool = DicePool.parse("1")
        assert pool.is_placeholder
        assert pool.formula == "1"

    def test_formula_round_trip(self):
        for text in ("2d6+1d8+3", "1d10", "4d6-1"):
            assert DicePool.parse(text).formula == text

    @pytest.mark.parametrize("text", ["", "d", "2x6", "2d6++1", "-1d6", "2d", "abc", "1d6+d"])
    def test_bad_expressions(self, text):
        with pytest.raises(InvalidInput):
            DicePool.parse(text)

    def test_limits(self):
        with pytest.raises(InvalidInput):
            DicePool.parse("101d6")
        with pytest.raises(InvalidInput):
            DicePool.parse("1d1001")


@pytest.mark.parametrize("count,size", [(10**7, 6), (1, 10**6), (101, 6), (1, 1001)])
def test_dice_limits_apply_to_direct_evaluation(count, size):
    rng = scripted_rng()
    with pytest.raises(InvalidInput):
        rng.evaluate(count, size, 0)
    with pytest.raises(InvalidInput):
        DicePool.single(count, size)


def test_dice_limits_are_inclusive():
    assert DiceTerm(100, 1000).formula == "100d1000"


def test_roll_result_faces_are_read_only():
    res = scripted_rng(3, 4).evaluate(2, 6, 0)
    with pytest.raises(TypeError):
        res.faces[6] = (6, 6)
    with pytest.raises(TypeError):
        del res.faces[6]
    assert res.faces_of(6) == (3, 4)


def test_roll_result_is_hashable():
    a = RollResult(formula="2d6", total=7, faces={6: (3, 4)})
    b = RollResult(formula="2d6", total=7, faces={6: (3, 4)})
    assert hash(a) == hash(b)
    assert len({a, b}) == 1


def test_roll_result_detached_from_source_dict():
    source = {6: [3, 4]}
    res = RollResult(formula="2d6", total=7, faces=source)
    source[6].append(6)
    source[8] = [8]
    assert res.faces == {6: (3, 4)}
    assert res.total == 7
