import pytest

from app.services.masking import mask_name


def test_mask_two_part_name():
    assert mask_name("Rupesh Kumar") == "R****h K****r"


def test_mask_single_word():
    assert mask_name("Priyanka") == "P******a"


@pytest.mark.parametrize("name", ["Al", "A", "Md", "Md Al"])
def test_short_parts_are_left_unchanged(name):
    assert mask_name(name) == name


def test_mixed_short_and_long_parts():
    assert mask_name("Md Rafiq Ansari") == "Md R***q A****i"


def test_three_letter_part_hides_only_middle():
    assert mask_name("Ram") == "R*m"


def test_repeated_spaces_are_preserved():
    assert mask_name("Rupesh  Kumar") == "R****h  K****r"


def test_unicode_letters():
    assert mask_name("राजेश") == "र***श"
    assert mask_name("José Núñez") == "J**é N***z"


@pytest.mark.parametrize(
    "name",
    ["Rupesh Kumar", "Sunita Devi Sharma", "Abhishek", "Xavier Lopez Garcia"],
)
def test_mask_keeps_shape_and_edges(name):
    masked = mask_name(name)
    parts, masked_parts = name.split(" "), masked.split(" ")
    assert len(masked_parts) == len(parts)
    for original, hidden in zip(parts, masked_parts):
        assert len(hidden) == len(original)
        assert hidden[0] == original[0] and hidden[-1] == original[-1]
        assert set(hidden[1:-1]) == {"*"}


def test_mask_is_deterministic():
    assert mask_name("Rupesh Kumar") == mask_name("Rupesh Kumar")
