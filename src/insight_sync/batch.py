import json, math
from typing import Any, Mapping
import httpx, typer
from .api_client import make_client, progress, record_url, submit
from .loader import SyncTarget, load_files

class BatchError(Exception):
    def __init__(self, index:int, batch:Any, tally:Mapping[str,int], cause:BaseException):
        super().__init__(f"failed at index {index}, data: {json.dumps(batch, indent=2)}")
        self.index=index; self.batch=batch; self.tally=dict(tally); self.cause=cause

def _counts(result:Any)->dict[str,int]:
    if not isinstance(result, Mapping): return {}
    return {k:v for k,v in result.items() if isinstance(v,(int,float)) and not isinstance(v,bool)}

def merge_tally(tally:Mapping[str,int], result:Any)->dict[str,int]:
    merged=dict(tally)
    for k,v in _counts(result).items(): merged[k]=merged.get(k,0)+v
    return merged

def submit_batches(target:SyncTarget, batch_size:int, client:httpx.Client)->dict[str,int]|str:
    """Send ``target.data`` in slices of ``batch_size``; 1 posts each record to its own URL.

    Returns the merged outcome counts, or "" when records were posted individually.
    The summary line is printed whether or not a batch fails.
    """
    data=target.data; total=len(data)
    index=0; num_batches=0; processed=0; results:dict[str,int]={}; batch:Any=None
    typer.echo(f"Total objects: {total} sending in batches of: {batch_size}")
    bar=progress(total if batch_size==1 else math.ceil(total/batch_size), "POST batches")
    try:
        if batch_size==1:
            for obj in data:
                batch=obj
                submit(client, record_url(target.url, obj.get("id")), obj, target.token)
                bar.update(); index+=1; num_batches+=1; processed+=1
            return ""
        while (batch:=data[index:index+batch_size]):
            batch_result=submit(client, target.url, batch, target.token)
            results=merge_tally(results, batch_result)
            bar.update(); index+=batch_size; num_batches+=1
            processed+=sum(_counts(batch_result).values())
        return results
    except Exception as exc:
        typer.echo(f"\n\nERROR: {exc}", err=True)
        if batch_size!=1: typer.echo(results)
        raise BatchError(index, batch, results, exc) from exc
    finally:
        bar.close()
        typer.echo(f"\nProcessed {processed}/{total} in {num_batches} batches.")

def submit_data(target:SyncTarget, client:httpx.Client)->Any:
    typer.echo(f"Submitting {len(target.data)} objects all at once.")
    return submit(client, target.url, target.data, target.token)

def sync_data(target:SyncTarget, batch_size:int, client:httpx.Client)->Any:
    if not batch_size: return submit_data(target, client)
    return submit_batches(target, batch_size, client)

def sync_files(data_file:str, creds_file:str, record_type:str, batch_size:int, client:httpx.Client|None=None)->Any:
    target=load_files(creds_file, data_file, record_type)
    if client is not None: return sync_data(target, batch_size, client)
    with make_client() as c:
        return sync_data(target, batch_size, c)
