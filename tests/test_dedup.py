from ohpm_dashboard.services.dedup import split_unique, unique


def test_split_unique_drops_blanks_and_repeats():
    result = split_unique(" a, b,,a ,  , c,b")
    assert result == ["a", "b", "c"]
    assert len(result) == len(set(result))
    assert "" not in result


def test_split_unique_empty_input():
    assert split_unique("") == []
    assert split_unique(None) == []
    assert split_unique(" , ,") == []


def test_unique_keeps_first_seen_order():
    assert unique(["@x/b", "@x/a", "@x/b", ""]) == ["@x/b", "@x/a"]
