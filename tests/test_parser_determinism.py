from mcp_rpg_roller.parser import parse_tree, render_tree


def test_parse_is_deterministic():
    text = "(2d6 + 4)d6h3 + 5"
    a = parse_tree(text)
    b = parse_tree(text)

    assert a == b
    assert render_tree(a) == render_tree(b)


def test_whitespace_does_not_change_tree():
    assert parse_tree("2d(1d6+2)/2") == parse_tree("  2 d ( 1d6 + 2 ) / 2 ")
