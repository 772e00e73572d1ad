from typetrainer.core.text import CORRECT, INCORRECT, UNTYPED, TextModel


def test_from_text_starts_untyped():
    model = TextModel.from_text("abc")
    assert model.typed == (None, None, None)
    assert model.locked == (False, False, False)
    assert [model.status(i) for i in range(3)] == [UNTYPED, UNTYPED, UNTYPED]


def test_set_char_locks_correct_character():
    model = TextModel.from_text("abc").set_char(0, "a").set_char(1, "x")
    assert model.locked == (True, False, False)
    assert model.typed == ("a", "x", None)
    assert model.status(0) == CORRECT
    assert model.status(1) == INCORRECT


def test_set_char_ignores_locked_and_out_of_range():
    model = TextModel.from_text("ab").set_char(0, "a")
    assert model.set_char(0, "z") is model
    assert model.set_char(-1, "z") is model
    assert model.set_char(2, "z") is model


def test_clear_range_skips_locked_positions():
    model = TextModel.from_text("abcd")
    for index, char in enumerate("aXcY"):
        model = model.set_char(index, char)
    cleared = model.clear_range(0, 10)
    assert cleared.typed == ("a", None, "c", None)
    assert cleared.locked == model.locked


def test_replace_text_resets_everything():
    model = TextModel.from_text("ab").set_char(0, "a").replace_text("xyz")
    assert model.text == "xyz"
    assert model.typed == (None, None, None)
    assert model.locked == (False, False, False)
