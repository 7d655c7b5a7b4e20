import json, os
from dataclasses import dataclass
from typing import Any
from .config import VALID_TYPES

class FatalError(Exception):
    """Configuration-level failure; the CLI reports it and exits 1."""

class LoadError(FatalError): pass

class InvalidTypeError(FatalError): pass

@dataclass(frozen=True)
class Credentials:
    sub_id:str
    token:str
    url:str

@dataclass(frozen=True)
class SyncTarget:
    data:list
    creds:Credentials
    url:str
    @property
    def token(self)->str: return self.creds.token

def load_json_file(filename:str)->Any:
    if not str(filename).endswith(".json"):
        raise LoadError(f"Invalid filename: '{filename}'. Must end in '.json'.")
    path=filename if os.path.isabs(filename) else os.path.join(os.getcwd(), filename)
    try:
        with open(path, "r", encoding="utf-8-sig") as fh:
            return json.load(fh)
    except FileNotFoundError as exc:
        raise LoadError(f"File not found: '{filename}'") from exc
    except json.JSONDecodeError as exc:
        raise LoadError(f"Malformed JSON in '{filename}': {exc}") from exc
    except OSError as exc:
        raise LoadError(f"Cannot read '{filename}': {exc}") from exc

def load_credentials(filename:str)->Credentials:
    raw=load_json_file(filename)
    if not isinstance(raw, dict):
        raise LoadError(f"Credentials file '{filename}' must contain a JSON object.")
    missing=[k for k in ("subId","token","url") if not raw.get(k)]
    if missing:
        raise LoadError(f"Credentials file '{filename}' is missing: {', '.join(missing)}")
    return Credentials(sub_id=str(raw["subId"]), token=str(raw["token"]), url=str(raw["url"]).rstrip("/"))

def load_dataset(filename:str)->list:
    data=load_json_file(filename)
    if not isinstance(data, list):
        raise LoadError(f"Data file '{filename}' must contain a JSON array.")
    return data

def normalize_type(record_type:str)->str:
    t=(record_type or "").strip().lower()
    if t not in VALID_TYPES:
        raise InvalidTypeError(f"Invalid type: '{record_type}'. Must be one of: {', '.join(VALID_TYPES)}")
    return t

def collection_url(creds:Credentials, record_type:str)->str:
    return f"{creds.url}/api/subscriptions/{creds.sub_id}/{normalize_type(record_type)}s"

def load_files(creds_file:str, data_file:str, record_type:str)->SyncTarget:
    """Load credentials and data, and resolve the collection endpoint for ``record_type``."""
    creds=load_credentials(creds_file)
    url=collection_url(creds, record_type)
    return SyncTarget(data=load_dataset(data_file), creds=creds, url=url)
