import dataclasses
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
from spgateway.credentials import Credential, credential_from_options
from spgateway.errors import InvalidCredentialError, InvalidModeError, MissingOptionError

OPTIONS = {
    "merchant_id": "MS12345",
    "hash_key": "0123456789abcdef0123456789abcdef",
    "hash_iv": "0123456789abcdef",
}


def test_defaults_to_production():
    cred = credential_from_options(OPTIONS)
    assert cred.mode == "production"
    assert cred.hash_key == b"0123456789abcdef0123456789abcdef"
    assert cred.iv_text == "0123456789abcdef"


def test_keyword_overrides():
    assert credential_from_options(OPTIONS, mode="test").mode == "test"


@pytest.mark.parametrize("option", ["merchant_id", "hash_key", "hash_iv"])
def test_missing_option(option):
    options = dict(OPTIONS)
    options[option] = None
    with pytest.raises(MissingOptionError) as exc:
        credential_from_options(options)
    assert exc.value.option == option


def test_invalid_mode():
    with pytest.raises(InvalidModeError):
        credential_from_options(OPTIONS, mode="staging")


def test_key_and_iv_sizes():
    with pytest.raises(InvalidCredentialError):
        credential_from_options(OPTIONS, hash_key="short")
    with pytest.raises(InvalidCredentialError):
        credential_from_options(OPTIONS, hash_iv="0123456789abcdef0")


def test_credential_is_frozen_and_hides_secrets():
    cred = Credential(**OPTIONS)
    with pytest.raises(dataclasses.FrozenInstanceError):
        cred.merchant_id = "other"
    assert "0123456789abcdef" not in repr(cred)
