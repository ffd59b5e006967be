from i18n_center_api.services.templates import extract_placeholders, missing_placeholders, restore_placeholders


def test_extract_placeholders_in_order() -> None:
    assert extract_placeholders("Hi [name], you have [count] items") == ["name", "count"]
    assert extract_placeholders("no tokens here") == []
    assert extract_placeholders("empty [] brackets") == []


def test_brackets_do_not_nest() -> None:
    assert extract_placeholders("[outer[inner]]") == ["outer[inner"]


def test_restore_leaves_verbatim_placeholders_alone() -> None:
    assert restore_placeholders("Hi [name]!", "Hola [name]!") == "Hola [name]!"


def test_restore_replaces_altered_placeholder_by_position() -> None:
    original = "Hello [name], you have [count] items"
    translated = "Hola [nombre], tienes [count] artículos"
    assert restore_placeholders(original, translated) == "Hola [name], tienes [count] artículos"


def test_restore_drops_placeholders_without_counterpart() -> None:
    original = "[a] and [b]"
    restored = restore_placeholders(original, "x [z] y")
    assert restored == "x [a] y"
    assert missing_placeholders(original, restored) == ["b"]


def test_restore_without_placeholders_returns_translation() -> None:
    assert restore_placeholders("Good morning", "Buenos días") == "Buenos días"
