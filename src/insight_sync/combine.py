import json, os
from pathlib import Path
from typing import Iterator
from .config import COMBINE_TYPES
from .loader import LoadError

def infer_type(filename:str)->str|None:
    return next((t for t in COMBINE_TYPES if filename.startswith(t)), None)

def _json_files(in_dir:Path)->list[str]:
    if not in_dir.is_dir(): raise LoadError(f"Input directory not found: '{in_dir}'")
    return [f for f in sorted(os.listdir(in_dir)) if os.path.splitext(f)[1].lower()==".json"]

def _read_items(path:Path)->list:
    try:
        items=json.loads(path.read_text(encoding="utf-8-sig"))
    except (OSError, json.JSONDecodeError) as exc:
        raise LoadError(f"Cannot load '{path}': {exc}") from exc
    if not isinstance(items, list): raise LoadError(f"'{path}' must contain a JSON array.")
    return items

def _groups(in_dir:Path, filenames:list[str])->Iterator[tuple[str|None,list]]:
    """Yield (type, records) per run of same-prefix files; unknown-prefix files yield type None and are dropped."""
    current:str|None=None; data:list=[]
    for name in filenames:
        if not current or not name.startswith(current):
            yield current, data
            current=infer_type(name); data=[]
        data.extend(_read_items(in_dir/name))
    yield current, data

def combine_files(in_dir:str|Path, out_dir:str|Path)->list[Path]:
    """Merge per-record JSON fragments into one ``{type}s.json`` per type.

    Files are taken in name order and grouped by runs sharing a type prefix;
    files with no known prefix are skipped.
    """
    in_dir=Path(in_dir); out_dir=Path(out_dir)
    written=[]
    for data_type, data in _groups(in_dir, _json_files(in_dir)):
        if not (data_type and data): continue
        out_dir.mkdir(parents=True, exist_ok=True)
        out_file=out_dir/f"{data_type}s.json"
        out_file.write_text(json.dumps(data, indent=2), encoding="utf-8")
        written.append(out_file)
    return written
