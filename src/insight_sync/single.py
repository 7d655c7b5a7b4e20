import json, re
from typing import Any, Mapping
import httpx, typer
from .api_client import progress, record_url, submit
from .loader import Credentials, collection_url

_WS=re.compile(r"\s+")

class RecordError(Exception):
    def __init__(self, index:int, record:Any, cause:BaseException):
        super().__init__(f"Record {index} failed ({cause}): {json.dumps(record, indent=2)}")
        self.index=index; self.record=record; self.cause=cause

def clean_record(record:Mapping[str,Any])->dict[str,Any]:
    # source exports pad dates with spaces, e.g. "2019 - 08 - 01"
    return {k:(_WS.sub("", v) if k.endswith("_date") and isinstance(v,str) else v) for k,v in record.items()}

def process_data(creds:Credentials, record_type:str, data:list, single_mode:bool, client:httpx.Client)->Any:
    """Upload ``data`` one record at a time (``single_mode``) or as one bulk POST.

    The record type is validated before anything is sent.
    """
    url=collection_url(creds, record_type)
    if not single_mode:
        body=submit(client, url, data, creds.token)
        typer.echo(json.dumps(body) if not isinstance(body,str) else body)
        return body
    count=0
    bar=progress(len(data), f"POST {record_type.lower()}s")
    try:
        for i,record in enumerate(data):
            payload=record
            try:
                payload=clean_record(record)
                submit(client, record_url(url, payload.get("id")), payload, creds.token)
            except Exception as exc:
                raise RecordError(i, payload, exc) from exc
            bar.update(); count+=1
        return count
    finally:
        bar.close()
        typer.echo(f"\nProcessed {count} records.")
