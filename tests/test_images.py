from daily_taho.processing.images import extract_image_url, resolve_item_image


def test_og_image_wins_regardless_of_attribute_order() -> None:
    html = (
        '<meta name="facebook:image:src" content="https://img.ph/fb.jpg">'
        '<meta content="https://img.ph/og.jpg" property="og:image">'
        '<img src="https://img.ph/inline.jpg">'
    )
    assert extract_image_url(html) == "https://img.ph/og.jpg"


def test_facebook_image_then_first_img() -> None:
    assert extract_image_url('<meta content="https://img.ph/fb.jpg" name="facebook:image:src">') == "https://img.ph/fb.jpg"
    assert extract_image_url('<p>x</p><img src="//cdn.ph/a.png"><img src="https://b.png">') == "https://cdn.ph/a.png"


def test_tracker_images_and_missing_images_yield_empty() -> None:
    assert extract_image_url('<img src="https://feeds.feedburner.com/pixel.gif">') == ""
    assert extract_image_url('<img src="https://ad.doubleclick.net/x.gif">') == ""
    assert extract_image_url("<p>no images</p>") == ""
    assert extract_image_url("") == ""


def test_resolve_item_image_uses_bridge_metadata_first() -> None:
    entry = {
        "enclosure": {"link": "https://img.ph/enc.jpg"},
        "thumbnail": "https://img.ph/thumb.jpg",
        "description": '<img src="https://img.ph/desc.jpg">',
    }
    assert resolve_item_image(entry) == "https://img.ph/enc.jpg"


def test_resolve_item_image_skips_tracker_candidates() -> None:
    entry = {
        "enclosure": {"link": "https://feedburner.com/x.jpg"},
        "thumbnail": "",
        "content": '<img src="https://img.ph/body.jpg">',
    }
    assert resolve_item_image(entry) == "https://img.ph/body.jpg"
