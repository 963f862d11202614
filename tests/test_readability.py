import pytest

from resume_optimizer.services.readability import count_syllables, flesch_reading_ease


@pytest.mark.parametrize("word", ["the", "led", "cloud", "Led"])
def test_single_syllable_words(word):
    assert count_syllables(word) == 1


def test_longer_words_have_more_syllables():
    assert count_syllables("Led") < count_syllables("backend") < count_syllables("Architected")


def test_count_syllables_never_zero():
    assert count_syllables("") == 1


def test_flesch_empty_text():
    assert flesch_reading_ease("") == 50.0
    assert flesch_reading_ease("   ") == 50.0


def test_flesch_short_words_read_easier():
    easy = flesch_reading_ease("Led backend services using some cloud tools")
    hard = flesch_reading_ease("Architected backend services using some cloud tools")
    assert easy >= 60.0 > hard


def test_flesch_is_clamped():
    dense = "Internationalization considerations institutionalized organizationally"
    assert flesch_reading_ease(dense) == 0.0
    assert 0.0 <= flesch_reading_ease("Go. Run. Do it.") <= 100.0
