from cli.ui_components import mask_token


def test_mask_token_keeps_suffix():
    assert mask_token("abcdefghijkl") == "********ijkl"


def test_mask_token_short_values_fully_hidden():
    assert mask_token("abc") == "***"
