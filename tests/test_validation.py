import pytest

from kalima.exceptions import ValidationError
from kalima.services.validation import (
    validate_article_submission,
    validate_category_submission,
    validate_static_page_submission,
)


def _fields(exc_info):
    return [e["field"] for e in exc_info.value.errors]


def test_valid_article_is_returned_unchanged(article_payload):
    payload = article_payload()

    assert validate_article_submission(payload) is payload


def test_missing_fields_are_all_reported():
    with pytest.raises(ValidationError) as exc_info:
        validate_article_submission({})

    assert set(_fields(exc_info)) == {"availableLanguages", "translations"}
    assert exc_info.value.status_code == 400
    assert exc_info.value.message.startswith("Validation error: ")


def test_invalid_slug_is_rejected(article_payload):
    with pytest.raises(ValidationError) as exc_info:
        validate_article_submission(article_payload(slug="My Slug"))

    assert exc_info.value.errors == [{
        "field": "slug",
        "message": "Slug must contain only lowercase letters, numbers, and hyphens",
    }]


def test_short_slug_is_accepted(article_payload):
    validate_article_submission(article_payload(slug="hi"))


def test_blank_translation_title_is_rejected(article_payload):
    payload = article_payload(title="   ")

    with pytest.raises(ValidationError) as exc_info:
        validate_article_submission(payload)

    assert _fields(exc_info) == ["translations.en.title"]


def test_empty_content_is_rejected(article_payload):
    payload = article_payload()
    payload["translations"]["en"]["content"] = []

    with pytest.raises(ValidationError) as exc_info:
        validate_article_submission(payload)

    assert _fields(exc_info) == ["translations.en.content"]


def test_bare_string_content_is_accepted(article_payload):
    payload = article_payload()
    payload["translations"]["en"]["content"] = ["Hello world"]

    validate_article_submission(payload)


def test_unsupported_language_is_rejected(article_payload):
    with pytest.raises(ValidationError) as exc_info:
        validate_article_submission(article_payload(availableLanguages=["xx"]))

    assert _fields(exc_info) == ["availableLanguages.0"]


def test_draft_must_be_boolean(article_payload):
    with pytest.raises(ValidationError) as exc_info:
        validate_article_submission(article_payload(draft="yes"))

    assert _fields(exc_info) == ["draft"]


def test_non_object_payload():
    with pytest.raises(ValidationError) as exc_info:
        validate_article_submission(["not", "a", "dict"])

    assert _fields(exc_info) == ["body"]


def test_category_requires_english_title():
    with pytest.raises(ValidationError) as exc_info:
        validate_category_submission({"slug": "education", "titles": {"fr": "Éducation"}})

    assert exc_info.value.errors == [
        {"field": "titles", "message": "English title is required"}]


def test_duplicate_subcategory_slugs_are_rejected():
    payload = {
        "slug": "education",
        "titles": {"en": "Education"},
        "subcategories": [{"slug": "online"}, {"slug": "online"}],
    }

    with pytest.raises(ValidationError) as exc_info:
        validate_category_submission(payload)

    assert _fields(exc_info) == ["subcategories.1.slug"]


def test_static_page_needs_a_translation():
    with pytest.raises(ValidationError) as exc_info:
        validate_static_page_submission({"slug": "about", "translations": {}})

    assert _fields(exc_info) == ["translations"]


def test_more_descriptions_than_images_is_rejected(article_payload):
    payload = article_payload(
        imageUrls=["https://e.com/1.jpg"], imageDescriptions=["a", "b", "c"])

    with pytest.raises(ValidationError) as exc_info:
        validate_article_submission(payload)

    assert exc_info.value.errors == [{
        "field": "imageDescriptions",
        "message": "Cannot have more image descriptions than images",
    }]


def test_descriptions_count_against_legacy_image(article_payload):
    with pytest.raises(ValidationError):
        validate_article_submission(article_payload(
            imageUrl="https://e.com/1.jpg", imageDescriptions=["a", "b"]))


def test_one_description_for_placeholder_image(article_payload):
    validate_article_submission(article_payload(imageDescriptions=["Cover"]))
