import io

import pytest

from tagfreq import ABSENT_TAG, DeserializationError, SerializationError, WordTagDictionary


def test_build_counts(small_dictionary):
    assert len(small_dictionary) == 4
    assert small_dictionary.count_for("the", "DT") == 2
    assert small_dictionary.total_count("runs") == 3
    assert small_dictionary.majority_tag("runs") == "VBZ"
    assert small_dictionary["--"].count_for(ABSENT_TAG) == 1


def test_unknown_word(small_dictionary):
    assert small_dictionary.get("cat") is None
    assert "cat" not in small_dictionary
    assert small_dictionary.count_for("cat", "NN") == 0
    assert small_dictionary.total_count("cat") == 0
    assert small_dictionary.majority_tag("cat") is ABSENT_TAG
    with pytest.raises(KeyError):
        small_dictionary["cat"]


def test_tag_vocabulary_excludes_absent(small_dictionary):
    assert small_dictionary.tag_vocabulary() == ("DT", "NN", "NNS", "VBZ")


def test_words_keep_insertion_order(small_dictionary):
    assert small_dictionary.words() == ["the", "dog", "runs", "--"]


def test_min_count_prunes_tags_and_words():
    dictionary = WordTagDictionary()
    dictionary.update([("a", "DT"), ("a", "DT"), ("a", "NN"), ("b", "NN")])
    dictionary.build(min_count=2)
    assert dict(dictionary["a"].counts) == {"DT": 2}
    assert "b" not in dictionary


def test_lowercase_merges_forms():
    dictionary = WordTagDictionary()
    dictionary.update([("The", "DT"), ("the", "DT"), ("THE", "NN")])
    dictionary.build(lowercase=True)
    assert dictionary.words() == ["the"]
    assert dict(dictionary["the"].counts) == {"DT": 2, "NN": 1}


def test_add_after_build_fails(small_dictionary):
    with pytest.raises(RuntimeError):
        small_dictionary.add("cat", "NN")


def test_lookup_before_build_fails():
    dictionary = WordTagDictionary()
    dictionary.add("cat", "NN")
    with pytest.raises(RuntimeError):
        dictionary.get("cat")


def test_negative_count_rejected():
    with pytest.raises(ValueError):
        WordTagDictionary().add("cat", "NN", -1)


def test_from_tnt_lines():
    lines = [
        "%% a comment\n",
        "The\tDT\n",
        "dog\tNN\n",
        "\n",
        "dog\tVB\t3\n",
        "...\t_\n",
        "x\t\n",
    ]
    dictionary = WordTagDictionary.from_tnt(lines).build()
    assert dict(dictionary["dog"].counts) == {"NN": 1, "VB": 3}
    assert dictionary["..."].count_for(ABSENT_TAG) == 1
    assert dictionary["x"].count_for(ABSENT_TAG) == 1
    assert dictionary.majority_tag("dog") == "VB"


def test_from_tnt_file(tmp_path):
    path = tmp_path / "corpus.tnt"
    path.write_text("café\tNN\ncafé\tNN\n", encoding="utf-8")
    dictionary = WordTagDictionary.from_tnt(path).build()
    assert dictionary.total_count("café") == 2


@pytest.mark.parametrize("line", ["no-tab-here\n", "dog\tNN\tmany\n", "dog\tNN\t-2\n"])
def test_from_tnt_rejects_bad_lines(line):
    with pytest.raises(ValueError, match="Line 2"):
        WordTagDictionary.from_tnt(["ok\tNN\n", line])


def test_model_roundtrip(tmp_path, small_dictionary):
    path = tmp_path / "models" / "lexicon.tfd"
    small_dictionary.save(path)
    loaded = WordTagDictionary.load(path)
    assert loaded.built
    assert loaded.words() == small_dictionary.words()
    for word, store in small_dictionary.items():
        assert dict(loaded[word].counts) == dict(store.counts)
        assert loaded[word].total == store.total


def test_model_layout():
    dictionary = WordTagDictionary()
    dictionary.add("a", "DT", 2)
    buf = io.BytesIO()
    dictionary.build().write(buf)
    assert buf.getvalue() == (
        b"\x00\x00\x00\x01" b"\x00\x01a"
        b"\x00\x00\x00\x01" b"\x00\x02DT" b"\x00\x00\x00\x02"
    )


def test_load_missing_file(tmp_path):
    with pytest.raises(DeserializationError):
        WordTagDictionary.load(tmp_path / "missing.tfd")


def test_load_truncated_file(tmp_path, small_dictionary):
    path = tmp_path / "lexicon.tfd"
    small_dictionary.save(path)
    path.write_bytes(path.read_bytes()[:-3])
    with pytest.raises(DeserializationError):
        WordTagDictionary.load(path)


def test_load_trailing_bytes(tmp_path, small_dictionary):
    path = tmp_path / "lexicon.tfd"
    small_dictionary.save(path)
    path.write_bytes(path.read_bytes() + b"\x00")
    with pytest.raises(DeserializationError, match="Trailing"):
        WordTagDictionary.load(path)


def test_read_duplicate_word():
    record = b"\x00\x01a" b"\x00\x00\x00\x01" b"\x00\x02DT" b"\x00\x00\x00\x02"
    with pytest.raises(DeserializationError, match="Duplicate"):
        WordTagDictionary.read(io.BytesIO(b"\x00\x00\x00\x02" + record + record))


def test_read_negative_word_count():
    with pytest.raises(DeserializationError):
        WordTagDictionary.read(io.BytesIO(b"\xff\xff\xff\xfe"))


def test_failed_save_keeps_existing_model(tmp_path, small_dictionary):
    path = tmp_path / "lexicon.tfd"
    small_dictionary.save(path)
    before = path.read_bytes()

    oversized = WordTagDictionary()
    oversized.add("ok", "NN")
    oversized.add("x" * 70000, "NN")
    oversized.build()
    with pytest.raises(SerializationError):
        oversized.save(path)

    assert path.read_bytes() == before
    assert not (tmp_path / "lexicon.tfd.tmp").exists()
    assert WordTagDictionary.load(path).words() == small_dictionary.words()


def test_save_into_file_parent_raises_serialization_error(tmp_path, small_dictionary):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(SerializationError):
        small_dictionary.save(blocker / "lexicon.tfd")


def test_save_leaves_no_temporary_file(tmp_path, small_dictionary):
    small_dictionary.save(tmp_path / "lexicon.tfd")
    assert sorted(p.name for p in tmp_path.iterdir()) == ["lexicon.tfd"]
