"""Transaction codec and API clients for the spgateway / NewebPay / ezPay family."""

from .aes_codec import decode_aes_data, decode_json_data, encode_post_data
from .canonical import render_for_signing, render_payload
from .check_value import (
    PROFILES,
    WireProfile,
    compute_check_value,
    compute_legacy_check_code,
    get_profile,
    verify_check_code,
    verify_check_value,
)
from .client import Client
from .client_v2 import ClientV2
from .credentials import Credential, credential_from_options
from .errors import (
    CodecError,
    ConfigurationError,
    DecodeError,
    InvalidCredentialError,
    InvalidModeError,
    MissingFieldError,
    MissingOptionError,
    SpgatewayError,
    UnsupportedProfileError,
    UnsupportedTypeError,
)
from .invoice_client import InvoiceClient
from .line_pay_client import LinePayClient
from .response_decoder import DecodedResponse, SignatureMismatch, decode_response

__version__ = "0.1.0"
