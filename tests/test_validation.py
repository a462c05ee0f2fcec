"""Tests des champs requis par section."""

import pytest

from portfolio_cms.domain.defaults import default_content
from portfolio_cms.domain.errors import ValidationError
from portfolio_cms.domain.validation import validate_document


@pytest.mark.parametrize(
    "section,document,missing",
    [
        ("home", {"title": "x"}, ["name"]),
        ("profile", {"bio": ""}, ["bio"]),
        ("contact", {"email": None}, ["email"]),
        ("projects", [{"id": 1, "title": "ok"}, {"id": 2}], ["[1].title"]),
        ("interests", [{"id": 1, "title": " "}], ["[0].title"]),
        ("education", {"education": [{"degree": "BSc"}]}, ["[0].institution"]),
        ("experience", {"experience": [{"company": "ACME"}]}, ["[0].title"]),
    ],
)
def test_missing_required_fields(section, document, missing):
    with pytest.raises(ValidationError) as exc:
        validate_document(section, document)
    assert exc.value.missing == missing
    assert exc.value.kind == "validation"


@pytest.mark.parametrize(
    "section", ["home", "profile", "education", "experience", "contact", "projects", "interests"]
)
@pytest.mark.parametrize("language", ["zh", "en"])
def test_defaults_are_valid(section, language):
    validate_document(section, default_content(section, language))


def test_free_form_sections_are_not_validated():
    validate_document("theme", {})
    validate_document("settings/site", {"anything": True})
