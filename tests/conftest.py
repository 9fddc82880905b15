import pytest

from tagfreq import TagCount, WordTagDictionary


@pytest.fixture
def dt_nn():
    return TagCount({"DT": 10, "NN": 1})


@pytest.fixture
def small_dictionary():
    dictionary = WordTagDictionary()
    dictionary.update([
        ("the", "DT"), ("the", "DT"), ("dog", "NN"),
        ("runs", "VBZ"), ("runs", "NNS"), ("runs", "VBZ"),
    ])
    dictionary.add("--", None)
    return dictionary.build()
