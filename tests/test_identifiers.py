import pytest

from agridirect.core.errors import InvalidIdentifierError, NotFoundError, ValidationError
from agridirect.services import identifiers


def test_generated_identifiers_are_valid_and_distinct():
    ids = {identifiers.generate() for _ in range(500)}
    assert len(ids) == 500
    assert all(identifiers.validate(i) for i in ids)


@pytest.mark.parametrize("candidate", [
    "",
    "not-a-real-id",
    "507f1f77bcf86cd799439011",
    "6F9619FF-8B86-D011-B42D-00C04FC964FF",
    "6f9619ff-8b86-d011-b42d-00c04fc964ff ",
    None,
    42,
])
def test_validate_rejects_malformed(candidate):
    assert identifiers.validate(candidate) is False


def test_require_valid_raises_invalid_identifier():
    with pytest.raises(InvalidIdentifierError) as exc:
        identifiers.require_valid("nope", "product identifier")
    assert "product identifier" in exc.value.message
    assert exc.value.status_code == 400


def test_invalid_identifier_is_not_a_not_found():
    assert issubclass(InvalidIdentifierError, ValidationError)
    assert not issubclass(InvalidIdentifierError, NotFoundError)
    assert InvalidIdentifierError.code != NotFoundError.code
