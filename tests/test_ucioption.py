import pytest

from chesscore.ucioption import (
    Option,
    OptionsMap,
    OptionType,
    case_insensitive_less,
    default_options,
)


def test_hash_listing_format():
    options = default_options(2048)
    assert "\noption name Hash type spin default 16 min 1 max 2048" in str(options)


def test_check_listing_format():
    options = default_options(2048)
    assert "\noption name UCI_Chess960 type check default false" in str(options)


def test_lookup_is_case_insensitive():
    options = default_options(2048)
    assert float(options["hash"]) == 16.0
    assert "THREADS" in options
    assert "Nonexistent" not in options


def test_missing_option_raises_key_error():
    with pytest.raises(KeyError):
        default_options(2048)["Nonexistent"]


def test_spin_out_of_range_is_ignored():
    options = default_options(2048)
    hash_option = options["Hash"]
    assert hash_option.set("4096") is False
    assert float(hash_option) == 16.0
    assert hash_option.set("0") is False
    assert int(hash_option) == 16


def test_spin_in_range_is_applied():
    option = default_options(2048)["Move Overhead"]
    assert option.set("250") is True
    assert int(option) == 250


def test_spin_rejects_text():
    option = Option(OptionType.SPIN, 5, min_value=0, max_value=10)
    with pytest.raises(ValueError):
        option.set("abc")


def test_check_option():
    option = Option(OptionType.CHECK, False)
    assert option.set("maybe") is False
    assert float(option) == 0.0
    assert option.set("true") is True
    assert float(option) == 1.0


def test_empty_value_rules():
    string_option = Option(OptionType.STRING, "x")
    assert string_option.set("") is True
    assert str(string_option) == ""
    check_option = Option(OptionType.CHECK, True)
    assert check_option.set("") is False
    assert str(check_option) == "true"


def test_button_triggers_callback():
    seen = []
    option = Option(OptionType.BUTTON, on_change=seen.append)
    assert option.set("") is True
    assert seen == [option]


def test_callback_receives_new_value():
    seen = []
    option = Option(OptionType.STRING, "a", on_change=lambda o: seen.append(str(o)))
    option.set("path/to/tables")
    assert seen == ["path/to/tables"]


def test_combo_option():
    option = Option(OptionType.COMBO, "Both var Off var White", current="Both")
    assert option == "both"
    assert option.set("white") is True
    assert option == "WHITE"
    assert option.set("var") is False
    assert option.set("Black") is False
    assert option == "white"


def test_string_option_has_no_number():
    with pytest.raises(TypeError):
        float(Option(OptionType.STRING, "x"))


def test_listing_follows_insertion_order():
    options = OptionsMap()
    options.add("Zeta", Option(OptionType.CHECK, True))
    options.add("alpha", Option(OptionType.STRING, "v"))
    text = str(options)
    assert text.index("Zeta") < text.index("alpha")
    assert list(options) == ["alpha", "Zeta"]


def test_readding_keeps_original_spelling():
    options = OptionsMap()
    options.add("Threads", Option(OptionType.SPIN, 1, min_value=1, max_value=8))
    options.add("threads", Option(OptionType.SPIN, 4, min_value=1, max_value=8))
    assert len(options) == 1
    assert list(options) == ["Threads"]
    assert int(options["Threads"]) == 4


def test_add_stores_a_copy():
    options = OptionsMap()
    original = Option(OptionType.STRING, "a")
    options.add("Name", original)
    options["Name"].set("b")
    assert str(original) == "a"
    assert str(options["Name"]) == "b"


def test_case_insensitive_less():
    assert case_insensitive_less("Apple", "banana") is True
    assert case_insensitive_less("b", "A") is False
    assert case_insensitive_less("abc", "ABC") is False
    assert case_insensitive_less("ab", "ABC") is True


def test_button_has_no_default_in_listing():
    options = default_options(2048)
    line = [part for part in str(options).split("\n") if "Clear Hash" in part][0]
    assert line == "option name Clear Hash type button"