"""
Unit tests for image reference extraction.
"""

from app.services.extraction import (
    extract_image_reference,
    extract_text_content,
    from_content_list,
    from_content_string,
    from_images_list,
    from_message_image_url,
    describe_structure,
)

DATA_URI = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUg=="


def wrap(message: dict) -> dict:
    return {"choices": [{"message": message}]}


def test_images_list():
    message = {"images": [{"image_url": {"url": "https://x/img.png"}}]}
    assert from_images_list(message) == "https://x/img.png"


def test_images_list_only_reads_first_entry():
    message = {"images": [{"type": "image_url"}, {"image_url": {"url": "https://x/second.png"}}]}
    assert from_images_list(message) is None


def test_images_list_empty():
    assert from_images_list({"images": []}) is None
    assert from_images_list({}) is None


def test_message_image_url():
    assert from_message_image_url({"image_url": {"url": "https://x/direct.png"}}) == "https://x/direct.png"
    assert from_message_image_url({"image_url": "https://x/not-a-dict.png"}) is None


def test_content_list_nested_url():
    message = {
        "content": [
            {"type": "text", "text": "Here you go"},
            {"type": "image_url", "image_url": {"url": "https://x/nested.png"}},
        ]
    }
    assert from_content_list(message) == "https://x/nested.png"


def test_content_list_direct_url():
    message = {"content": [{"type": "image", "url": "https://x/flat.png"}]}
    assert from_content_list(message) == "https://x/flat.png"


def test_content_list_uses_first_image_entry_only():
    message = {
        "content": [
            {"type": "image"},
            {"type": "image", "url": "https://x/later.png"},
        ]
    }
    assert from_content_list(message) is None


def test_content_list_ignores_string_content():
    assert from_content_list({"content": "just text"}) is None


def test_content_string_returns_data_uri_verbatim():
    message = {"content": f"Sure! Here it is: {DATA_URI} enjoy"}
    assert from_content_string(message) == DATA_URI


def test_content_string_without_data_uri():
    assert from_content_string({"content": "I cannot draw that"}) is None


def test_images_list_takes_precedence_over_base64_content():
    response = wrap({
        "content": f"inline {DATA_URI}",
        "images": [{"image_url": {"url": "https://x/first.png"}}],
    })
    assert extract_image_reference(response) == "https://x/first.png"


def test_direct_image_url_takes_precedence_over_content_list():
    response = wrap({
        "image_url": {"url": "https://x/direct.png"},
        "content": [{"type": "image_url", "image_url": {"url": "https://x/list.png"}}],
    })
    assert extract_image_reference(response) == "https://x/direct.png"


def test_falls_through_empty_strategies():
    response = wrap({
        "images": [{"image_url": {"url": ""}}],
        "content": f"{DATA_URI}",
    })
    assert extract_image_reference(response) == DATA_URI


def test_no_image_anywhere():
    assert extract_image_reference(wrap({"content": "Only text, sorry"})) is None
    assert extract_image_reference({"choices": []}) is None
    assert extract_image_reference({}) is None
    assert extract_image_reference(["not", "a", "dict"]) is None


def test_text_content_only_from_string_content():
    assert extract_text_content(wrap({"content": "hello"})) == "hello"
    assert extract_text_content(wrap({"content": [{"type": "text", "text": "hello"}]})) == ""
    assert extract_text_content({}) == ""


def test_describe_structure():
    summary = describe_structure(wrap({"content": "x"}))
    assert summary["response_keys"] == ["choices"]
    assert summary["choice_keys"] == ["message"]
    assert summary["message_keys"] == ["content"]

    summary = describe_structure({"id": "abc"})
    assert summary["choice_keys"] == "no choices"
    assert summary["message_keys"] == "no message"
