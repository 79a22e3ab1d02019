from newsbot import headlines
from newsbot.headlines import (
    HeadlineSet,
    extract_embed_headings,
    extract_from_html,
    extract_from_tree,
    extract_headlines,
)


def test_title_whitespace_is_collapsed():
    assert extract_from_tree({"title": "  Foo   Bar "}) == ["Foo Bar"]


def test_repeated_embed_heading_is_kept_once():
    tree = {"items": [{"embed": "<h2>A</h2><p>x</p><h2>A</h2>"}]}
    assert extract_from_tree(tree) == ["A"]


def test_plain_strings_are_never_headlines():
    tree = ["Hello world", {"heading": "Real heading"}, "Another string"]
    assert extract_from_tree(tree) == ["Real heading"]


def test_wrong_types_are_ignored():
    tree = {"title": 5, "_memoq": "oops", "items": "nope", "heading": None}
    assert extract_from_tree(tree) == []


def test_html_block_offers_headings_and_bold_text():
    tree = {
        "_template": "HTMLElement",
        "_memoq": {
            "content": (
                "<h3>Intro</h3>"
                "<p><strong>Bonus GTA$ this week</strong> and more</p>"
                "<b>short</b>"
                "<h5>Too small</h5>"
            )
        },
    }
    assert extract_from_tree(tree) == ["Intro", "Bonus GTA$ this week"]


def test_memoq_content_ignored_without_html_template():
    tree = {"_template": "Text", "_memoq": {"content": "<h2>Hidden</h2>", "title": "Shown"}}
    assert extract_from_tree(tree) == ["Shown"]


def test_items_offer_caption_then_title():
    tree = {"items": [{"caption": "Cap One", "title": "Title One"}, "junk", {"title": "Title Two"}]}
    assert extract_from_tree(tree) == ["Cap One", "Title One", "Title Two"]


def test_nested_containers_under_other_keys_are_walked():
    tree = {"blocks": {"inner": [{"title": "Deep"}]}, "images": [{"heading": "Pictured"}]}
    assert extract_from_tree(tree) == ["Pictured", "Deep"]


def test_post_meta_then_body_then_preview():
    post = {
        "preview": "<h2>Preview Head</h2>",
        "tina": {
            "payload": {
                "meta": {"title": "Main", "subtitle": "Sub"},
                "content": [
                    {"_memoq": {"title": "Main"}},
                    {"items": [{"caption": "Cap"}], "children": [{"title": "Child"}]},
                ],
            }
        },
    }
    assert extract_headlines(post) == ["Sub", "Main", "Cap", "Child", "Preview Head"]


def test_preview_is_used_without_payload():
    post = {"title": "ignored", "preview": "<p><b>A bolded headline here</b></p>"}
    assert extract_headlines(post) == ["A bolded headline here"]


def test_max_count_truncates_in_order():
    tree = [{"title": f"Headline {i}"} for i in range(10)]
    assert extract_from_tree(tree, 3) == ["Headline 0", "Headline 1", "Headline 2"]
    assert extract_from_tree(tree, 0) == []
    post = {"tina": {"payload": {"content": tree}}}
    assert len(extract_headlines(post)) == headlines.DEFAULT_MAX_HEADLINES


def test_results_never_contain_duplicates():
    tree = {
        "title": "Same  Title",
        "children": [{"title": "Same Title"}, {"heading": " Same Title "}],
        "items": [{"caption": "Same\nTitle"}],
    }
    assert extract_from_tree(tree, 10) == ["Same Title"]


def test_non_mapping_post_yields_nothing():
    assert extract_headlines(None) == []
    assert extract_headlines(["x"]) == []


def test_errors_keep_partial_results(capsys):
    deep: dict = {}
    node = deep
    for _ in range(5000):
        node["child"] = {}
        node = node["child"]
    post = {"tina": {"payload": {"meta": {"title": "Kept"}, "content": deep}}}
    assert extract_headlines(post) == ["Kept"]
    assert "[WARN]" in capsys.readouterr().out


def test_html_extractor_is_case_insensitive_and_strips_tags():
    html = '<H2 class="x">Big <em>News</em></H2><h4>Fourth</h4>'
    assert extract_from_html(html) == ["Big News", "Fourth"]


def test_html_extractor_lists_headings_before_bold_text():
    html = "<strong>Bold comes first in the page</strong><h1>Heading</h1>"
    assert extract_from_html(html) == ["Heading", "Bold comes first in the page"]


def test_html_extractor_bold_length_bounds():
    too_long = "y" * 250
    html = f"<b>123456789</b><b>1234567890</b><strong>{too_long}</strong>"
    assert extract_from_html(html) == ["1234567890"]


def test_line_breaks_are_not_bold_elements():
    assert extract_from_html("<br>some long enough text</b>") == []


def test_html_extractor_rejects_non_strings():
    assert extract_from_html(None) == []
    assert extract_from_html({"html": "<h1>x</h1>"}) == []


def test_embed_headings_cover_all_levels():
    html = "<h1>One</h1><h6 id='six'>Six</h6><strong>not a heading here</strong>"
    assert extract_embed_headings(html) == ["One", "Six"]


def test_headline_set_offer():
    found = HeadlineSet()
    assert found.offer("  A  b ")
    assert not found.offer("A b")
    assert not found.offer("   ")
    assert not found.offer(None)
    assert found.offer("a b")
    assert "A b" in found
    assert list(found) == ["A b", "a b"]
    assert len(found) == 2
    assert found.to_list(1) == ["A b"]


def test_preview_survives_payload_failure():
    deep: dict = {}
    node = deep
    for _ in range(5000):
        node["child"] = {}
        node = node["child"]
    post = {
        "preview": "<h3>Still here</h3>",
        "tina": {"payload": {"meta": {"title": "Kept"}, "content": deep}},
    }
    assert extract_headlines(post) == ["Kept", "Still here"]
