from services.text_utils import (
    add_spacing_to_mixed_text,
    chinese_ratio,
    display_width,
    extract_chinese_keywords,
    generate_slug,
    is_chinese_char,
    is_primarily_chinese,
    optimize_text_for_display,
    truncate_text,
)


def test_chinese_detection():
    assert is_chinese_char("城")
    assert not is_chinese_char("a")
    assert chinese_ratio("城市ab") == 0.5
    assert is_primarily_chinese("城市建模 ABM")
    assert not is_primarily_chinese("agent based")


def test_spacing_between_scripts():
    assert add_spacing_to_mixed_text("使用Python建模") == "使用 Python 建模"
    assert optimize_text_for_display("你好， 世界") == "你好，世界"


def test_truncate_prefers_break_points():
    assert truncate_text("short", 10) == "short"
    assert truncate_text("hello world again", 13) == "hello world ..."


def test_display_width_counts_cjk_double():
    assert display_width("ab城") == 4


def test_slug():
    assert generate_slug("Hello, World!") == "hello-world"


def test_extract_chinese_keywords():
    text = "城市建模 城市建模 交通仿真"
    assert extract_chinese_keywords(text, 1) == ["城市建模"]
