from .config import AUTH_USER, TIMEOUT
import httpx
from typing import Any
from urllib.parse import quote
from tqdm import tqdm

class SubmitError(Exception):
    def __init__(self, status_code:int, body:str):
        super().__init__(body or f"HTTP {status_code}")
        self.status_code=status_code; self.body=body

def make_client(timeout:float=TIMEOUT, transport:httpx.BaseTransport|None=None)->httpx.Client:
    return httpx.Client(timeout=timeout, transport=transport)

def record_url(url:str, record_id:Any)->str: return f"{url.rstrip('/')}/{quote(str(record_id), safe='')}"

def progress(total:int, desc:str)->tqdm: return tqdm(total=total, desc=desc, unit="req", leave=False)

def _body(r:httpx.Response)->Any:
    if not r.content: return ""
    try: return r.json()
    except ValueError: return r.text

def submit(client:httpx.Client, url:str, data:Any, token:str)->Any:
    """POST ``data`` as JSON and return the decoded response body; non-2xx raises SubmitError."""
    r=client.post(url, json=data, auth=(AUTH_USER, token), headers={"Accept":"application/json"})
    if not r.is_success: raise SubmitError(r.status_code, r.text)
    return _body(r)
