"""JWT Inspect: decode, validate, analyze, sign and verify JWT tokens."""

from .analysis import AnalysisPolicy, analyze, summarize
from .claims import validate
from .codec import assemble, decode, encode, split
from .errors import (
    DecodeError,
    KeyMaterialError,
    MalformedTokenError,
    ParseError,
    TokenError,
    UnsupportedAlgorithmError,
)
from .models import DecodedToken, SecurityIssue, ValidationReport
from .signer import compute_signature, check_signature, sign, verify

__version__ = "1.0.0"

__all__ = [
    "AnalysisPolicy",
    "DecodeError",
    "DecodedToken",
    "KeyMaterialError",
    "MalformedTokenError",
    "ParseError",
    "SecurityIssue",
    "TokenError",
    "UnsupportedAlgorithmError",
    "ValidationReport",
    "analyze",
    "assemble",
    "check_signature",
    "compute_signature",
    "decode",
    "encode",
    "sign",
    "split",
    "summarize",
    "validate",
    "verify",
]
