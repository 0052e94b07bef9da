from verbtree.parser import ParseResult


def test_set_get_has_delete():
    result = ParseResult()
    result.set("a", 1)
    assert result.get("a") == 1
    assert result.get("missing", "fallback") == "fallback"
    assert result.has("a")
    assert result.delete("a")
    assert not result.delete("a")
    assert len(result) == 0


def test_count_initializes_non_integer_slots():
    result = ParseResult({"flag": "text", "other": True})
    assert result.count("fresh") == 1
    assert result.count("fresh") == 2
    assert result.count("flag") == 1
    assert result.count("other") == 1


def test_merge_last_write_wins():
    first = ParseResult({"a": 1, "b": 2})
    first.merge(ParseResult({"b": 3, "c": 4}))
    assert first == {"a": 1, "b": 3, "c": 4}


def test_keys_entries_and_iteration_keep_insertion_order():
    result = ParseResult()
    result["z"] = 1
    result["a"] = 2
    assert result.keys() == ["z", "a"]
    assert result.entries() == [("z", 1), ("a", 2)]
    assert list(result) == [("z", 1), ("a", 2)]
    assert "z" in result


def test_to_dict_is_recursive():
    inner = ParseResult({"x": 1})
    outer = ParseResult({"sub": inner, "root": True})
    assert outer.to_dict() == {"sub": {"x": 1}, "root": True}
    assert outer == ParseResult({"sub": ParseResult({"x": 1}), "root": True})
    assert outer != {"root": True}


def test_clear():
    result = ParseResult({"a": 1})
    result.clear()
    assert result.keys() == []
    assert repr(result) == "ParseResult({})"
