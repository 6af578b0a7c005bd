from automatos.casamento import longest_match


def test_longest_symbol_wins():
    assert longest_match([("a", 1), ("ab", 2)], "abc") == ("ab", 2)


def test_tie_goes_to_first_declared():
    assert longest_match([("a", 1), ("a", 2)], "a") == ("a", 1)


def test_respects_position():
    assert longest_match([("b", 1), ("ba", 2)], "aba", 1) == ("ba", 2)


def test_no_match_and_empty_symbols():
    assert longest_match([("", 1), ("c", 2)], "ab") is None
    assert longest_match([], "ab") is None
