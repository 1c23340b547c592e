import pytest

from planetsim.codes import KeyCode, MouseCode


@pytest.mark.parametrize(
    "key, value",
    [
        (KeyCode.SPACE, 32),
        (KeyCode.D0, 48),
        (KeyCode.A, 65),
        (KeyCode.Z, 90),
        (KeyCode.ESCAPE, 256),
        (KeyCode.F25, 314),
        (KeyCode.KP_EQUAL, 336),
        (KeyCode.LEFT_SHIFT, 340),
        (KeyCode.MENU, 348),
    ],
)
def test_key_values_follow_glfw(key, value):
    assert int(key) == value
    assert KeyCode(value) is key


def test_letters_are_contiguous():
    letters = [KeyCode(code) for code in range(65, 91)]
    assert [k.name for k in letters] == [chr(c) for c in range(ord("A"), ord("Z") + 1)]


def test_function_keys_are_contiguous():
    keys = [KeyCode(code) for code in range(290, 315)]
    assert [k.name for k in keys] == [f"F{n}" for n in range(1, 26)]


def test_key_str_is_numeric():
    assert str(KeyCode(65)) == "65"
    assert str(KeyCode(348)) == "348"


def test_unknown_key_raises():
    with pytest.raises(ValueError):
        KeyCode(1)


def test_mouse_aliases():
    assert MouseCode(0) is MouseCode.BUTTON_LEFT
    assert MouseCode(1) is MouseCode.BUTTON_RIGHT
    assert MouseCode(2) is MouseCode.BUTTON_MIDDLE
    assert MouseCode(7) is MouseCode.BUTTON_LAST


def test_mouse_str_is_numeric():
    assert str(MouseCode(2)) == "2"
    assert [int(MouseCode(n)) for n in range(8)] == list(range(8))
    assert len(list(MouseCode)) == 8