from daily_taho.processing.normalizer import to_raw_item, verify_and_fix_link


def test_valid_link_is_kept_verbatim() -> None:
    assert verify_and_fix_link("https://www.rappler.com/a", "RAPPLER") == "https://www.rappler.com/a"
    assert verify_and_fix_link("  http://x.ph/a", "GMA") == "  http://x.ph/a"


def test_broken_link_falls_back_to_publisher_home() -> None:
    assert verify_and_fix_link(None, "GMA") == "https://www.gmanetwork.com/news/"
    assert verify_and_fix_link("", "INQUIRER") == "https://newsinfo.inquirer.net"
    assert verify_and_fix_link("/news/123", "Philstar.com") == "https://www.philstar.com"


def test_unknown_source_or_non_string_uses_generic_fallback() -> None:
    assert verify_and_fix_link(42, "Some Blog") == "https://www.google.com"
    assert verify_and_fix_link(["https://x"], "Nobody") == "https://www.google.com"


def test_every_result_starts_with_http() -> None:
    for link in [None, "", "ftp://x", "javascript:void(0)", 0, "https://ok.ph"]:
        for source in ["GMA", "NEWS5", "unknown"]:
            assert verify_and_fix_link(link, source).strip().startswith("http")


def test_to_raw_item_prefers_content_and_resolves_image() -> None:
    entry = {
        "title": "  Title here ",
        "link": "not-a-url",
        "pubDate": "2025-01-06 10:00:00",
        "description": "<p>short</p>",
        "content": "<p>Full body <img src='//cdn.ph/a.jpg'></p>",
    }
    item = to_raw_item(entry, "MANILA TIMES")
    assert item.title == "Title here"
    assert item.link == "https://www.manilatimes.net"
    assert item.description_html.startswith("<p>Full body")
    assert item.image_url == "https://cdn.ph/a.jpg"
    assert item.source_name == "MANILA TIMES"
