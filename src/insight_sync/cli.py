import typer, time, httpx
from typing import Optional
from pathlib import Path
from .config import DEFAULT_BATCH_SIZE, VALID_TYPES
from .loader import FatalError, load_credentials, load_dataset, normalize_type
from .api_client import SubmitError, make_client
from .batch import BatchError, sync_files
from .single import RecordError, process_data
from .combine import combine_files

app=typer.Typer(help="Upload roster JSON data to an Insight subscription")

ERRORS=(FatalError, SubmitError, BatchError, RecordError, httpx.HTTPError)
TYPES="|".join(VALID_TYPES)

def _elapsed(start:float)->str: return f"elapsed: {time.monotonic()-start:.3f}s"

def _fail(msg:str):
    typer.echo(msg, err=True); raise typer.Exit(code=1)

def _require(ctx:typer.Context, **params):
    # missing arguments are fatal (exit 1), not click usage errors (exit 2)
    missing=[name for name,value in params.items() if value is None]
    if missing:
        typer.echo(ctx.get_usage(), err=True)
        _fail(f"Missing required argument(s): {', '.join(missing)}")

@app.command("sync")
def sync(ctx:typer.Context,
         batch_size:int=typer.Option(DEFAULT_BATCH_SIZE,"--batch-size","-b",min=0,help="batch size (0: entire file)"),
         creds:Optional[str]=typer.Option(None,"--creds","-c",help="credentials file"),
         file:Optional[str]=typer.Option(None,"--file","-f",help="data file"),
         type:Optional[str]=typer.Option(None,"--type","-t",help=f"object type ({TYPES})")):
    _require(ctx, creds=creds, file=file, type=type)
    start=time.monotonic()
    try:
        results=sync_files(file, creds, normalize_type(type), batch_size)
    except ERRORS as exc:
        typer.echo(_elapsed(start)); _fail(str(exc))
    if results!="": typer.echo(results)
    typer.echo(_elapsed(start))

@app.command("submit")
def submit(ctx:typer.Context,
           credential_file:Optional[str]=typer.Argument(None,help="credentials file"),
           record_type:Optional[str]=typer.Argument(None,help=TYPES),
           filename:Optional[str]=typer.Argument(None,help="data file"),
           single:bool=typer.Option(False,"--single","-s",help="POST records one at a time")):
    _require(ctx, credential_file=credential_file, record_type=record_type, filename=filename)
    start=time.monotonic()
    try:
        creds=load_credentials(credential_file); data=load_dataset(filename)
        with make_client() as client:
            process_data(creds, record_type, data, single, client)
    except ERRORS as exc:
        typer.echo(_elapsed(start)); _fail(str(exc))
    typer.echo(_elapsed(start))

@app.command("combine")
def combine(in_dir:Path=typer.Argument(...,help="directory of JSON fragments"),
            out_dir:Path=typer.Argument(...,help="output directory")):
    try:
        written=combine_files(in_dir, out_dir)
    except FatalError as exc:
        _fail(str(exc))
    for path in written: typer.echo(f"Wrote {path}")

if __name__=="__main__": app()
