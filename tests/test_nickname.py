import random

from brightfuture.nickname import ANIMALS, EMOTIONS, generate_nickname


def test_nickname_is_mood_and_animal():
    for _ in range(50):
        mood, animal = generate_nickname().split(" ")
        assert mood in EMOTIONS
        assert animal in ANIMALS


def test_seeded_rng_is_repeatable():
    assert generate_nickname(random.Random(7)) == generate_nickname(random.Random(7))


def test_word_lists_have_no_spaces():
    # nicknames are split on the single separating space
    assert all(" " not in w for w in EMOTIONS + ANIMALS)
