import secrets
from typing import Any, Dict, List
from fastapi import Depends, FastAPI, HTTPException
from fastapi.security import HTTPBasic, HTTPBasicCredentials
import uvicorn

from insight_sync.config import AUTH_USER, MOCK_TOKEN, VALID_TYPES

app = FastAPI(title="Insight Mock API")
security = HTTPBasic()

# --- In-memory store: subscription -> type -> id -> record ---
DB: Dict[str, Dict[str, Dict[str, dict]]] = {}

def check_auth(creds: HTTPBasicCredentials = Depends(security)):
    ok = secrets.compare_digest(creds.username, AUTH_USER) and secrets.compare_digest(creds.password, MOCK_TOKEN)
    if not ok:
        raise HTTPException(status_code=401, detail="bad credentials", headers={"WWW-Authenticate": "Basic"})

def _collection(sub_id: str, type_plural: str) -> Dict[str, dict]:
    record_type = type_plural[:-1] if type_plural.endswith("s") else type_plural
    if record_type not in VALID_TYPES:
        raise HTTPException(status_code=404, detail=f"unknown type {type_plural}")
    return DB.setdefault(sub_id, {}).setdefault(record_type, {})

def _upsert(store: Dict[str, dict], record: Any) -> str:
    if not isinstance(record, dict) or record.get("id") in (None, ""):
        raise HTTPException(status_code=422, detail={"error": "record without id", "record": record})
    key = str(record["id"])
    outcome = "updated" if key in store else "created"
    store[key] = record
    return outcome

@app.post("/api/subscriptions/{sub_id}/{type_plural}", dependencies=[Depends(check_auth)])
def bulk_upsert(sub_id: str, type_plural: str, records: List[Any]):
    store = _collection(sub_id, type_plural)
    result: Dict[str, int] = {}
    for record in records:
        outcome = _upsert(store, record)
        result[outcome] = result.get(outcome, 0) + 1
    return result

@app.post("/api/subscriptions/{sub_id}/{type_plural}/{record_id}", dependencies=[Depends(check_auth)])
def upsert_one(sub_id: str, type_plural: str, record_id: str, record: Dict[str, Any]):
    if str(record.get("id")) != record_id:
        raise HTTPException(status_code=400, detail="id in URL does not match body")
    return {"ok": True, "outcome": _upsert(_collection(sub_id, type_plural), record)}

@app.get("/stats")
def stats():
    return {sub: {t: len(v) for t, v in types.items()} for sub, types in DB.items()}

@app.post("/reset")
def reset():
    DB.clear()
    return {"ok": True}

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
