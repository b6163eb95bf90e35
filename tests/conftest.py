"""Shared fixtures: small lexicon documents."""

import copy
import json

import pytest

from lexgen.codegen.languages.rust import RustGenerator
from lexgen.codegen.core.config import load_config

PROFILE_LEXICON = {
    "lexicon": 1,
    "id": "com.example.profile",
    "description": "Profiles for the example service.",
    "defs": {
        "Profile": {
            "type": "object",
            "description": "A user profile.",
            "required": ["name", "tags"],
            "nullable": ["avatar"],
            "properties": {
                "name": {"type": "string", "description": "Display name."},
                "tags": {"type": "array", "items": {"type": "string"}},
                "created-at": {"type": "string", "format": "datetime"},
                "address": {
                    "type": "object",
                    "required": ["city"],
                    "properties": {
                        "city": {"type": "string"},
                        "zip": {"type": "integer"},
                    },
                },
                "avatar": {"type": "ref", "ref": "#Image"},
            },
        },
        "Image": {
            "type": "object",
            "required": ["alt"],
            "properties": {
                "alt": {"type": "string"},
                "size": {"type": "integer", "minimum": 0},
            },
        },
        "Embed": {
            "type": "union",
            "refs": ["#Image", "com.example.external#main"],
        },
        "getProfile": {
            "type": "query",
            "parameters": {
                "type": "params",
                "required": ["actor"],
                "properties": {"actor": {"type": "string", "format": "at-identifier"}},
            },
            "output": {
                "encoding": "application/json",
                "schema": {"type": "ref", "ref": "#Profile"},
            },
            "errors": [{"name": "NotFound"}],
        },
        "Status": {"type": "token", "description": "Status marker."},
    },
}

RECORD_LEXICON = {
    "lexicon": 1,
    "id": "com.example.post",
    "defs": {
        "main": {
            "type": "record",
            "key": "tid",
            "description": "A post record.",
            "record": {
                "type": "object",
                "required": ["text", "createdAt"],
                "properties": {
                    "text": {"type": "string", "maxGraphemes": 300},
                    "createdAt": {"type": "string", "format": "datetime"},
                    "embed": {"type": "ref", "ref": "com.example.profile#Embed"},
                },
            },
        },
    },
}


def _make_document(defs, doc_id="com.example.test"):
    return {"lexicon": 1, "id": doc_id, "defs": defs}


@pytest.fixture
def make_document():
    """Wrap definitions in a minimal lexicon document."""
    return _make_document


@pytest.fixture
def profile_lexicon():
    return copy.deepcopy(PROFILE_LEXICON)


@pytest.fixture
def profile_lexicon_text():
    return json.dumps(PROFILE_LEXICON)


@pytest.fixture
def record_lexicon():
    return copy.deepcopy(RECORD_LEXICON)


@pytest.fixture
def rust_generator():
    """Rust generator with default configuration."""
    return RustGenerator(load_config("rust"))


@pytest.fixture
def lexicon_file(tmp_path):
    """Profile lexicon written to disk."""
    path = tmp_path / "com.example.profile.json"
    path.write_text(json.dumps(PROFILE_LEXICON), encoding="utf-8")
    return path
