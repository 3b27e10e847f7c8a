import copy
from datetime import datetime, timezone
from types import MappingProxyType

import pytest

from sitecraft.errors import ContentValidationError
from sitecraft.models import ContentState, Locale, SemanticVersion
from sitecraft.schema import SiteContentModel, is_valid_site_content, validate_site_content
from sitecraft.starters import create_empty_site_content


def sample_content() -> dict:
    return {
        "id": "site-1",
        "createdAt": "2024-01-01T00:00:00.000Z",
        "updatedAt": "2024-01-02T10:30:00+00:00",
        "version": {"major": 1, "minor": 0, "patch": 0},
        "locale": "en",
        "pages": [
            {"slug": "home", "title": "Home", "body": "<p>Hi</p>"},
            {"slug": "about", "title": "About", "body": ""},
        ],
        "seo": {"title": "My site", "description": "A site", "noindex": False},
        "state": "draft",
    }


def test_validate_returns_typed_aggregate():
    content = validate_site_content(sample_content())
    assert content.id == "site-1"
    assert content.version == SemanticVersion(1, 0, 0)
    assert content.locale is Locale.EN
    assert content.state is ContentState.DRAFT
    assert [p.slug for p in content.pages] == ["home", "about"]
    assert content.seo.noindex is False
    assert content.created_at == "2024-01-01T00:00:00.000Z"


def test_validate_does_not_mutate_input():
    data = sample_content()
    snapshot = copy.deepcopy(data)
    validate_site_content(data)
    assert data == snapshot


def test_to_dict_round_trips_through_validator():
    data = sample_content()
    assert validate_site_content(data).to_dict() == data


@pytest.mark.parametrize("value", [None, "text", 42, ["a"]])
def test_root_must_be_mapping(value):
    with pytest.raises(ContentValidationError, match="must be an object"):
        validate_site_content(value)


def test_empty_id_rejected():
    with pytest.raises(ContentValidationError, match="id must be a non-empty string"):
        validate_site_content({"id": ""})


def test_blank_id_rejected():
    data = sample_content()
    data["id"] = "   "
    with pytest.raises(ContentValidationError, match="^id"):
        validate_site_content(data)


def test_invalid_created_at_rejected():
    data = sample_content()
    data["createdAt"] = "invalid-date"
    with pytest.raises(ContentValidationError, match="createdAt"):
        validate_site_content(data)


def test_invalid_updated_at_rejected():
    data = sample_content()
    data["updatedAt"] = 12
    with pytest.raises(ContentValidationError, match="updatedAt"):
        validate_site_content(data)


def test_datetime_objects_accepted_and_normalised():
    data = sample_content()
    data["createdAt"] = datetime(2024, 1, 1, tzinfo=timezone.utc)
    content = validate_site_content(data)
    assert content.created_at == "2024-01-01T00:00:00+00:00"


@pytest.mark.parametrize(
    "version",
    [
        None,
        "1.0.0",
        {"major": 1, "minor": 0},
        {"major": -1, "minor": 0, "patch": 0},
        {"major": 1.5, "minor": 0, "patch": 0},
        {"major": True, "minor": 0, "patch": 0},
    ],
)
def test_malformed_version_rejected(version):
    data = sample_content()
    data["version"] = version
    with pytest.raises(ContentValidationError, match="Version"):
        validate_site_content(data)


def test_unknown_locale_rejected():
    data = sample_content()
    data["locale"] = "fr"
    with pytest.raises(ContentValidationError, match="Locale must be 'pt-BR' or 'en'"):
        validate_site_content(data)


@pytest.mark.parametrize("pages", [[], None, "home"])
def test_pages_must_be_non_empty_list(pages):
    data = sample_content()
    data["pages"] = pages
    with pytest.raises(ContentValidationError, match="At least one page is required"):
        validate_site_content(data)


def test_page_errors_report_position():
    data = sample_content()
    data["pages"][1]["title"] = ""
    with pytest.raises(ContentValidationError, match="Page 2: title"):
        validate_site_content(data)


def test_page_body_must_be_string():
    data = sample_content()
    data["pages"][0]["body"] = None
    with pytest.raises(ContentValidationError, match="Page 1: body must be a string"):
        validate_site_content(data)


def test_first_page_error_wins():
    data = sample_content()
    data["pages"][0]["slug"] = ""
    data["pages"][1]["title"] = ""
    with pytest.raises(ContentValidationError, match="Page 1: slug"):
        validate_site_content(data)


def test_seo_noindex_must_be_boolean():
    data = sample_content()
    data["seo"]["noindex"] = "yes"
    with pytest.raises(ContentValidationError, match="noindex"):
        validate_site_content(data)


def test_seo_description_required():
    data = sample_content()
    del data["seo"]["description"]
    with pytest.raises(ContentValidationError, match="SEO description"):
        validate_site_content(data)


def test_unknown_state_rejected():
    data = sample_content()
    data["state"] = "deleted"
    with pytest.raises(ContentValidationError, match="Invalid content state: deleted"):
        validate_site_content(data)


def test_check_order_is_fail_fast():
    data = sample_content()
    data["locale"] = "fr"
    data["state"] = "deleted"
    data["seo"] = None
    with pytest.raises(ContentValidationError, match="Locale"):
        validate_site_content(data)


def test_is_valid_never_raises():
    assert is_valid_site_content(sample_content()) is True
    assert is_valid_site_content(None) is False
    assert is_valid_site_content({"id": "x"}) is False


@pytest.mark.parametrize("locale", list(Locale))
def test_empty_site_content_is_valid(locale):
    content = create_empty_site_content("abc", locale, "2024-05-01T12:00:00Z")
    validated = validate_site_content(content.to_dict())
    assert validated == content
    assert content.version == SemanticVersion(1, 0, 0)
    assert content.state is ContentState.DRAFT
    assert content.updated_at == content.created_at
    assert [p.slug for p in content.pages] == ["home"]


def test_missing_fields_report_their_own_message():
    data = sample_content()
    del data["updatedAt"]
    with pytest.raises(ContentValidationError, match="^updatedAt must be a valid ISO date string$"):
        validate_site_content(data)


def test_missing_page_field_reports_position():
    data = sample_content()
    del data["pages"][1]["body"]
    with pytest.raises(ContentValidationError, match="^Page 2: body must be a string$"):
        validate_site_content(data)


def test_non_object_page_reports_position():
    data = sample_content()
    data["pages"][0] = "home"
    with pytest.raises(ContentValidationError, match="^Page 1: page must be an object$"):
        validate_site_content(data)


def test_read_only_mappings_are_accepted():
    data = sample_content()
    frozen = MappingProxyType({**data, "seo": MappingProxyType(data["seo"])})
    assert validate_site_content(frozen).seo.title == "My site"


def test_wire_model_uses_camel_case_keys():
    model = SiteContentModel.model_validate(sample_content())
    assert model.created_at == "2024-01-01T00:00:00.000Z"
    assert model.to_content() == validate_site_content(sample_content())
